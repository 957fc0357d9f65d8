# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the licenser commands."""

from __future__ import annotations

import typer

from .apply import apply_command
from .check import check_command

app = typer.Typer(
    help="Enforce license headers whose year follows the git history.",
    no_args_is_help=True,
    add_completion=False,
)
app.command(name="apply", help="Insert or repair license headers.")(apply_command)
app.command(name="check", help="Verify license headers without modifying files.")(check_command)

__all__ = ["app"]

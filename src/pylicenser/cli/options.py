# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option declarations shared by the licenser commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..license import LicenseYearSelectionMode

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        help="Repository root; history is always read from here.",
        file_okay=False,
        dir_okay=True,
        exists=True,
    ),
]
ProjectOption = Annotated[
    Path | None,
    typer.Option(
        "--project",
        help="Project whose sources are licensed (defaults to the root).",
        file_okay=False,
        dir_okay=True,
        exists=True,
    ),
]
JobsOption = Annotated[
    int | None,
    typer.Option("--jobs", "-j", min=1, help="Number of parallel workers."),
]
YearSelectionOption = Annotated[
    LicenseYearSelectionMode | None,
    typer.Option(
        "--year-selection",
        case_sensitive=False,
        help="Default year selection for rules without their own year_selection directive.",
    ),
]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Show engine debug logs on stderr.")]


__all__ = [
    "DebugOption",
    "EmojiOption",
    "JobsOption",
    "ProjectOption",
    "RootOption",
    "YearSelectionOption",
]

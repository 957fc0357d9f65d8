# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command verifying license headers without touching files."""

from __future__ import annotations

from pathlib import Path

import typer

from ..runner import check_licenses
from .options import DebugOption, EmojiOption, JobsOption, ProjectOption, RootOption
from .shared import CLIError, LicenserOptions, build_cli_logger, load_project


def check_command(
    root: RootOption = Path("."),
    project: ProjectOption = None,
    jobs: JobsOption = None,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Report source files whose license header is missing or wrong.

    Raises:
        typer.Exit: Exit status 1 when any file fails validation.
    """

    options = LicenserOptions(root=root, project=project, jobs=jobs, year_selection=None, emoji=emoji, debug=debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        loaded = load_project(options)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if not loaded.header.is_valid():
        logger.warn("No license rules configured; nothing to check.")
        raise typer.Exit(code=0)

    result = check_licenses(
        loaded.files,
        loaded.header,
        project_path=options.project_path,
        jobs=loaded.config.jobs,
        use_emoji=options.emoji,
    )
    raise typer.Exit(code=0 if result else 1)


__all__ = ["check_command"]

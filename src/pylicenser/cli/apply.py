# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command inserting or repairing license headers."""

from __future__ import annotations

from pathlib import Path

import typer

from ..errors import RepositoryError
from ..git import RepositoryCache
from ..runner import apply_licenses
from .options import DebugOption, EmojiOption, JobsOption, ProjectOption, RootOption, YearSelectionOption
from .shared import CLIError, LicenserOptions, build_cli_logger, load_project


def apply_command(
    root: RootOption = Path("."),
    project: ProjectOption = None,
    jobs: JobsOption = None,
    year_selection: YearSelectionOption = None,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Apply the configured license headers to the project's source files.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    options = LicenserOptions(
        root=root,
        project=project,
        jobs=jobs,
        year_selection=year_selection,
        emoji=emoji,
        debug=debug,
    )
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        loaded = load_project(options)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if not loaded.header.is_valid():
        logger.warn("No license rules configured; nothing to apply.")
        raise typer.Exit(code=0)

    with RepositoryCache() as repositories:
        try:
            result = apply_licenses(
                loaded.files,
                loaded.header,
                root_path=options.root_path,
                project_path=options.project_path,
                backup_folder=loaded.backup_folder,
                jobs=loaded.config.jobs,
                repositories=repositories,
                use_emoji=options.emoji,
            )
        except RepositoryError as exc:
            logger.fail(str(exc))
            raise typer.Exit(code=1) from exc

    raise typer.Exit(code=1 if result.failed else 0)


__all__ = ["apply_command"]

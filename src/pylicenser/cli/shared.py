# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, project loading)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from ..config import ConfigError, LicenserConfig, load_config
from ..constants import PYPROJECT_FILENAME
from ..discovery import discover_source_files
from ..license import LicenseHeader, LicenseYearSelectionMode
from ..logging import fail as core_fail
from ..logging import warn as core_warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    use_emoji: bool

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji)


def build_cli_logger(*, emoji: bool, debug: bool = False) -> CLILogger:
    """Return a ``CLILogger`` and route engine debug logs to stderr when asked.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether ``logging`` debug records should be shown.

    Returns:
        CLILogger: Logger honouring the emoji preference.
    """

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )
    return CLILogger(use_emoji=emoji)


@dataclass(slots=True)
class LicenserOptions:
    """Options shared by the ``apply`` and ``check`` commands."""

    root: Path
    project: Path | None
    jobs: int | None
    year_selection: LicenseYearSelectionMode | None
    emoji: bool
    debug: bool

    @property
    def project_path(self) -> Path:
        """Return the project directory, defaulting to the repository root."""

        return (self.project or self.root).resolve()

    @property
    def root_path(self) -> Path:
        """Return the resolved repository root."""

        return self.root.resolve()


@dataclass(slots=True)
class LoadedProject:
    """Configuration, rule set and candidate files for one invocation."""

    config: LicenserConfig
    header: LicenseHeader
    files: list[Path]
    backup_folder: Path


def load_project(options: LicenserOptions) -> LoadedProject:
    """Resolve configuration, rules and files for ``options``.

    The project's own ``pyproject.toml`` wins over the repository root's.

    Args:
        options: Parsed command line options.

    Returns:
        LoadedProject: Everything the command needs to run.

    Raises:
        CLIError: If the configuration or a rule template is invalid.
    """

    project_path = options.project_path
    config_dir = project_path if (project_path / PYPROJECT_FILENAME).exists() else options.root_path
    overrides = {"jobs": options.jobs, "year_selection": options.year_selection}
    try:
        config = load_config(config_dir, overrides=overrides)
        header = config.build_header(config_dir)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc

    backup_folder = config.resolve_backup_dir(project_path)
    files = discover_source_files(
        project_path,
        include=config.include,
        exclude=config.exclude,
        skip_dirs=(backup_folder,),
    )
    return LoadedProject(config=config, header=header, files=files, backup_folder=backup_folder)


__all__ = [
    "CLIError",
    "CLILogger",
    "LicenserOptions",
    "LoadedProject",
    "build_cli_logger",
    "load_project",
]

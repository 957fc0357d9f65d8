# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models loaded from ``[tool.pylicenser]`` in ``pyproject.toml``."""

from __future__ import annotations

import math
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_BACKUP_DIR,
    DEFAULT_INCLUDE_GLOBS,
    PYPROJECT_FILENAME,
    PYPROJECT_SECTION_KEY,
    PYPROJECT_TOOL_KEY,
)
from .errors import LicenseRuleError
from .license import LicenseHeader, LicenseYearSelectionMode


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class LicenserConfig(BaseModel):
    """Header enforcement settings for one project."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    rules: list[Path] = Field(default_factory=list)
    year_selection: LicenseYearSelectionMode = LicenseYearSelectionMode.SUBPROJECT
    include: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_GLOBS))
    exclude: list[str] = Field(default_factory=list)
    backup_dir: Path = Path(DEFAULT_BACKUP_DIR)
    jobs: int = Field(default_factory=default_parallel_jobs, ge=1)

    @field_validator("include", "exclude")
    @classmethod
    def _strip_globs(cls, value: list[str]) -> list[str]:
        return [pattern.strip() for pattern in value if pattern.strip()]

    def resolve_rules(self, base_dir: Path) -> list[Path]:
        """Return rule template paths resolved against ``base_dir``."""

        return [path if path.is_absolute() else base_dir / path for path in self.rules]

    def resolve_backup_dir(self, project_path: Path) -> Path:
        """Return the backup folder for ``project_path``."""

        return self.backup_dir if self.backup_dir.is_absolute() else project_path / self.backup_dir

    def build_header(self, base_dir: Path) -> LicenseHeader:
        """Return the rule set described by this configuration.

        Args:
            base_dir: Directory relative rule paths are resolved from.

        Returns:
            LicenseHeader: Ordered rules; empty when none are configured.

        Raises:
            ConfigError: If a rule template is missing or malformed.
        """

        try:
            return LicenseHeader.from_templates(
                self.resolve_rules(base_dir),
                default_year_selection=self.year_selection,
            )
        except LicenseRuleError as exc:
            raise ConfigError(str(exc)) from exc


def load_pyproject_section(path: Path) -> Mapping[str, Any]:
    """Return the ``[tool.pylicenser]`` table of the TOML document at ``path``.

    Args:
        path: ``pyproject.toml`` to read.

    Returns:
        Mapping[str, Any]: Section payload, empty when absent.

    Raises:
        ConfigError: If the document cannot be read or parsed.
    """

    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return dict(section)


def load_config(root: Path, *, overrides: Mapping[str, Any] | None = None) -> LicenserConfig:
    """Return the configuration declared for the project at ``root``.

    Args:
        root: Directory holding ``pyproject.toml``.
        overrides: Values taking precedence over the file (for CLI flags).

    Returns:
        LicenserConfig: Validated configuration.

    Raises:
        ConfigError: If the file or the merged values are invalid.
    """

    payload: dict[str, Any] = dict(load_pyproject_section(root / PYPROJECT_FILENAME))
    payload.update({key: value for key, value in (overrides or {}).items() if value is not None})
    try:
        return LicenserConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid licenser configuration in {root / PYPROJECT_FILENAME}:\n{exc}") from exc


__all__ = [
    "ConfigError",
    "LicenserConfig",
    "default_parallel_jobs",
    "load_config",
    "load_pyproject_section",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for ``[tool.pylicenser]`` configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from pylicenser.config import ConfigError, LicenserConfig, load_config, load_pyproject_section
from pylicenser.constants import DEFAULT_INCLUDE_GLOBS
from pylicenser.license import LicenseYearSelectionMode


def _write_pyproject(root: Path, body: str) -> Path:
    path = root / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_pyproject(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.rules == []
    assert config.year_selection is LicenseYearSelectionMode.SUBPROJECT
    assert config.include == list(DEFAULT_INCLUDE_GLOBS)
    assert config.jobs >= 1
    assert config.resolve_backup_dir(tmp_path) == tmp_path / "build" / "licenser-backup"


def test_section_values_are_loaded(tmp_path: Path) -> None:
    _write_pyproject(
        tmp_path,
        """
[tool.pylicenser]
rules = ["license/java.txt", "/abs/other.txt"]
year_selection = "file"
include = ["**/*.kt", "  "]
exclude = ["generated/*"]
backup_dir = "out/backup"
jobs = 2
""",
    )

    config = load_config(tmp_path)

    assert config.year_selection is LicenseYearSelectionMode.FILE
    assert config.include == ["**/*.kt"]
    assert config.exclude == ["generated/*"]
    assert config.jobs == 2
    assert config.resolve_rules(tmp_path) == [tmp_path / "license" / "java.txt", Path("/abs/other.txt")]
    assert config.resolve_backup_dir(tmp_path / "mod") == tmp_path / "mod" / "out" / "backup"


def test_overrides_take_precedence(tmp_path: Path) -> None:
    _write_pyproject(tmp_path, '[tool.pylicenser]\njobs = 2\nyear_selection = "file"\n')

    config = load_config(tmp_path, overrides={"jobs": 5, "year_selection": None})

    assert config.jobs == 5
    assert config.year_selection is LicenseYearSelectionMode.FILE


def test_missing_section_is_empty(tmp_path: Path) -> None:
    path = _write_pyproject(tmp_path, "[tool.other]\nvalue = 1\n")

    assert load_pyproject_section(path) == {}


@pytest.mark.parametrize(
    "body",
    [
        "[tool.pylicenser]\nunknown = true\n",
        "[tool.pylicenser]\njobs = 0\n",
        '[tool.pylicenser]\nyear_selection = "weekly"\n',
        "[tool]\npylicenser = 3\n",
        "[tool.pylicenser\n",
    ],
)
def test_invalid_configuration_raises(tmp_path: Path, body: str) -> None:
    _write_pyproject(tmp_path, body)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_build_header_reads_rules(tmp_path: Path) -> None:
    (tmp_path / "java.txt").write_text(";;match_from: ^package\\s\nCopyright YEAR Org\n", encoding="utf-8")
    config = LicenserConfig(rules=[Path("java.txt")], year_selection=LicenseYearSelectionMode.PROJECT)

    header = config.build_header(tmp_path)

    assert [rule.name for rule in header] == ["java.txt"]
    assert header.rules[0].year_selection is LicenseYearSelectionMode.PROJECT


def test_build_header_reports_missing_template(tmp_path: Path) -> None:
    config = LicenserConfig(rules=[Path("missing.txt")])

    with pytest.raises(ConfigError, match="Unable to read rule template"):
        config.build_header(tmp_path)

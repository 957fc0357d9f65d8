# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants for template directives, discovery and configuration."""

from __future__ import annotations

from typing import Final

YEAR_KEY: Final[str] = "YEAR"
METADATA_MARKER: Final[str] = ";;"
COMMENT_MARKER: Final[str] = METADATA_MARKER + "#"
MATCH_FROM_KEY: Final[str] = "match_from"
YEAR_SELECTION_KEY: Final[str] = "year_selection"
COMMENT_STYLE_KEY: Final[str] = "comment_style"
RESERVED_DIRECTIVES: Final[frozenset[str]] = frozenset({MATCH_FROM_KEY, YEAR_SELECTION_KEY, COMMENT_STYLE_KEY})

BACKUP_DIR_NAME: Final[str] = "licenser-backup"
DEFAULT_BACKUP_DIR: Final[str] = f"build/{BACKUP_DIR_NAME}"
DEFAULT_INCLUDE_GLOBS: Final[tuple[str, ...]] = ("**/*.java",)

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".gradle",
        ".idea",
        ".venv",
        "__pycache__",
        "node_modules",
    },
)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pylicenser"

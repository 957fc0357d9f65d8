# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for reading, rewriting and displaying source files."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Final

SOURCE_ENCODING: Final[str] = "utf-8"


def read_file(path: Path) -> str:
    """Return the text of ``path`` with line endings preserved.

    Args:
        path: Source file to read.

    Returns:
        str: Decoded file content.
    """

    with path.open(encoding=SOURCE_ENCODING, newline="") as handle:
        return handle.read()


def write_file(path: Path, content: str) -> None:
    """Overwrite ``path`` with ``content`` without translating line endings."""

    with path.open("w", encoding=SOURCE_ENCODING, newline="") as handle:
        handle.write(content)


def backup_path(source_file: Path, project_path: Path, backup_folder: Path) -> Path:
    """Return where the backup of ``source_file`` is stored.

    The layout mirrors the location of ``source_file`` relative to its project.
    Files living outside the project fall back to their bare name.

    Args:
        source_file: File about to be rewritten.
        project_path: Root of the project owning ``source_file``.
        backup_folder: Root of the backup tree.

    Returns:
        Path: Destination of the backup copy.
    """

    try:
        relative = source_file.resolve().relative_to(project_path.resolve())
    except ValueError:
        relative = Path(source_file.name)
    return backup_folder / relative


def write_backup(source_file: Path, project_path: Path, backup_folder: Path) -> Path:
    """Copy ``source_file`` byte-for-byte into the backup tree.

    Returns:
        Path: Location of the written backup.
    """

    destination = backup_path(source_file, project_path, backup_folder)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source_file, destination)
    return destination


def display_relative_path(path: Path, root: Path) -> str:
    """Return a display-friendly representation of ``path`` relative to ``root``.

    Args:
        path: Path to present to the user.
        root: Base directory used for relativisation.

    Returns:
        str: Relative POSIX path when ``path`` lives below ``root``, otherwise
        the absolute path.
    """

    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return os.fspath(path.resolve())


__all__ = [
    "backup_path",
    "display_relative_path",
    "read_file",
    "write_backup",
    "write_file",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Enumerate the source files of a project that should carry a header."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from fnmatch import fnmatch
from pathlib import Path

from .constants import ALWAYS_EXCLUDE_DIRS


def is_within(path: Path, directory: Path) -> bool:
    """Return ``True`` when ``path`` lives below ``directory``."""

    try:
        path.relative_to(directory)
    except ValueError:
        return False
    return True


def discover_source_files(
    project_path: Path,
    *,
    include: Sequence[str],
    exclude: Sequence[str] = (),
    skip_dirs: Iterable[Path] = (),
) -> list[Path]:
    """Return files below ``project_path`` matching the include globs.

    Args:
        project_path: Project directory to scan.
        include: Glob patterns relative to ``project_path`` (``**`` allowed).
        exclude: ``fnmatch`` patterns tested against the relative POSIX path.
        skip_dirs: Directories whose content is never returned, such as the
            backup folder.

    Returns:
        list[Path]: Sorted, resolved, de-duplicated file paths.
    """

    root = project_path.resolve()
    skipped = tuple(path.resolve() for path in skip_dirs)
    found: set[Path] = set()
    for pattern in include:
        for candidate in root.glob(pattern):
            if not candidate.is_file():
                continue
            resolved = candidate.resolve()
            relative = resolved.relative_to(root) if is_within(resolved, root) else None
            if relative is None:
                continue
            if any(part in ALWAYS_EXCLUDE_DIRS for part in relative.parts):
                continue
            if any(is_within(resolved, directory) for directory in skipped):
                continue
            relative_str = relative.as_posix()
            if any(fnmatch(relative_str, excluded) for excluded in exclude):
                continue
            found.add(resolved)
    return sorted(found)


__all__ = ["discover_source_files", "is_within"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Selection of the path whose history decides a header's year."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from ..git import RepositoryCache, get_modification_year


class LicenseYearSelectionMode(str, Enum):
    """Enumerate which path's last change provides the copyright year."""

    SUBPROJECT = "subproject"
    PROJECT = "project"
    FILE = "file"

    def commit_path(self, root_path: Path, project_path: Path, path: Path) -> Path:
        """Return the path passed to the year resolver under this mode.

        Args:
            root_path: Root project (repository root) the file is in.
            project_path: Project directly containing the file.
            path: File being licensed.

        Returns:
            Path: ``project_path``, ``root_path`` or ``path`` respectively.
        """

        if self is LicenseYearSelectionMode.SUBPROJECT:
            return project_path
        if self is LicenseYearSelectionMode.PROJECT:
            return root_path
        return path

    def get_year(
        self,
        root_path: Path,
        project_path: Path,
        path: Path,
        *,
        repositories: RepositoryCache,
    ) -> int:
        """Return the last modification year for ``path`` under this mode.

        With :attr:`SUBPROJECT` and :attr:`PROJECT` the year does not depend on
        the file itself.

        Args:
            root_path: Repository root; history is always queried from here.
            project_path: Project directly containing the file.
            path: File being licensed.
            repositories: Cache of open repository handles.

        Returns:
            int: Year of the most recent commit touching the selected path.
        """

        commit_path = self.commit_path(root_path, project_path, path)
        return get_modification_year(root_path, commit_path, repositories=repositories)


__all__ = ["LicenseYearSelectionMode"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocol definitions shared by the header dispatcher and its rules."""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .git import RepositoryCache


@runtime_checkable
class HeaderRule(Protocol):
    """Expose the operations the dispatcher needs from a single rule."""

    name: str

    @abstractmethod
    def match(self, source: str) -> bool:
        """Return ``True`` when the rule governs a file with content ``source``.

        Args:
            source: Full current content of the file.

        Returns:
            bool: ``True`` when the rule applies, independent of path or year.
        """

    @abstractmethod
    def validate(self, source: str) -> bool:
        """Return ``True`` when the header of ``source`` conforms to the rule.

        Args:
            source: Content already known to match the rule.

        Returns:
            bool: ``True`` when the header is valid.
        """

    @abstractmethod
    def format_file(
        self,
        root_path: Path,
        project_path: Path,
        source_file: Path,
        backup_folder: Path,
        source: str,
        *,
        repositories: RepositoryCache,
    ) -> bool:
        """Rewrite ``source_file`` with the rule's header when it differs.

        Args:
            root_path: Repository root.
            project_path: Project directly containing ``source_file``.
            source_file: File to format.
            backup_folder: Root of the backup tree.
            source: Current content of ``source_file``.
            repositories: Cache of open repository handles.

        Returns:
            bool: ``True`` when the file changed.
        """


__all__ = ["HeaderRule"]

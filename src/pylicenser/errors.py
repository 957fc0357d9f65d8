# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the licensing engine."""

from __future__ import annotations

from pathlib import Path


class LicenseError(RuntimeError):
    """Base class for failures raised while validating or formatting headers."""


class LicenseRuleError(LicenseError):
    """Raised when a rule template carries malformed directives."""


class RepositoryError(LicenseError):
    """Raised when a repository handle cannot be opened or queried."""

    def __init__(self, root: Path, reason: str) -> None:
        """Initialise the error with the offending repository root.

        Args:
            root: Repository root the handle was requested for.
            reason: Human-readable description of the failure.
        """

        super().__init__(f"Git repository at {root}: {reason}")
        self.root = root
        self.reason = reason


class HistoryNotFoundError(LicenseError):
    """Raised when no commit touches the requested path."""

    def __init__(self, root: Path, target: Path) -> None:
        """Initialise the error with the repository and target paths.

        Args:
            root: Repository root that was queried.
            target: Path whose history turned out to be empty.
        """

        super().__init__(f"No commit history for {target} in repository {root}")
        self.root = root
        self.target = target


__all__ = [
    "HistoryNotFoundError",
    "LicenseError",
    "LicenseRuleError",
    "RepositoryError",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""License header enforcement with copyright years taken from git history."""

from __future__ import annotations

from .errors import HistoryNotFoundError, LicenseError, LicenseRuleError, RepositoryError
from .git import GitRepository, RepositoryCache, get_modification_year
from .license import CommentStyle, LicenseHeader, LicenseRule, LicenseYearSelectionMode
from .runner import ApplyResult, CheckResult, apply_licenses, check_licenses

__all__ = [
    "ApplyResult",
    "CheckResult",
    "CommentStyle",
    "GitRepository",
    "HistoryNotFoundError",
    "LicenseError",
    "LicenseHeader",
    "LicenseRule",
    "LicenseRuleError",
    "LicenseYearSelectionMode",
    "RepositoryCache",
    "RepositoryError",
    "apply_licenses",
    "check_licenses",
    "get_modification_year",
]

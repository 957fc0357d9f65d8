# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""License header rules, dispatch and year selection."""

from __future__ import annotations

from .comments import CommentStyle
from .header import LicenseHeader
from .rule import LicenseRule, RuleTemplate, parse_template
from .years import LicenseYearSelectionMode

__all__ = [
    "CommentStyle",
    "LicenseHeader",
    "LicenseRule",
    "LicenseYearSelectionMode",
    "RuleTemplate",
    "parse_template",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered rule set deciding which header a file must carry."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from ..errors import LicenseRuleError
from ..filesystem import read_file
from ..git import RepositoryCache
from ..interfaces import HeaderRule
from .rule import LicenseRule
from .years import LicenseYearSelectionMode

LOGGER = logging.getLogger(__name__)


class LicenseHeader:
    """Ordered list of rules; the first rule matching a file wins.

    Rules are appended while the configuration is loaded. Afterwards the
    header is only read, so one instance can be shared by concurrent file
    operations.
    """

    def __init__(self, rules: Iterable[HeaderRule] = ()) -> None:
        self._rules: list[HeaderRule] = list(rules)

    @classmethod
    def from_texts(
        cls,
        texts: Iterable[tuple[str, str]],
        *,
        default_year_selection: LicenseYearSelectionMode = LicenseYearSelectionMode.SUBPROJECT,
    ) -> LicenseHeader:
        """Build a header from ``(name, template)`` pairs, preserving order."""

        return cls(
            LicenseRule.parse(text, name=name, default_year_selection=default_year_selection) for name, text in texts
        )

    @classmethod
    def from_templates(
        cls,
        paths: Sequence[Path],
        *,
        default_year_selection: LicenseYearSelectionMode = LicenseYearSelectionMode.SUBPROJECT,
    ) -> LicenseHeader:
        """Build a header from template files, preserving their order.

        Args:
            paths: Rule template files, highest priority first.
            default_year_selection: Mode for templates without a
                ``year_selection`` directive.

        Returns:
            LicenseHeader: Header holding one rule per template.

        Raises:
            LicenseRuleError: If a template cannot be read or parsed.
        """

        texts: list[tuple[str, str]] = []
        for path in paths:
            try:
                texts.append((path.name, read_file(path)))
            except OSError as exc:
                raise LicenseRuleError(f"Unable to read rule template {path}: {exc}") from exc
        return cls.from_texts(texts, default_year_selection=default_year_selection)

    @property
    def rules(self) -> tuple[HeaderRule, ...]:
        """Return the rules in priority order."""

        return tuple(self._rules)

    def __iter__(self) -> Iterator[HeaderRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self._rules)

    def is_valid(self) -> bool:
        """Return ``True`` when the header holds rules and can be used at all."""

        return bool(self._rules)

    def add_rule(self, rule: HeaderRule) -> None:
        """Append ``rule`` with the lowest priority so far."""

        self._rules.append(rule)

    def find_rule(self, source: str) -> HeaderRule | None:
        """Return the first rule matching ``source``, or ``None``."""

        for rule in self._rules:
            if rule.match(source):
                return rule
        return None

    def validate(self, path: Path) -> bool:
        """Return whether ``path`` carries the header its rule requires.

        Files no rule applies to are reported invalid.

        Args:
            path: File to validate.

        Returns:
            bool: ``True`` when the matching rule accepts the header.
        """

        source = read_file(path)
        rule = self.find_rule(source)
        if rule is None:
            LOGGER.debug("No license rule matches %s", path)
            return False
        return rule.validate(source)

    def format(
        self,
        source_file: Path,
        root_path: Path,
        project_path: Path,
        backup_folder: Path,
        *,
        repositories: RepositoryCache,
    ) -> bool:
        """Rewrite ``source_file`` so it carries the correct header.

        Args:
            source_file: File to format.
            root_path: Repository root.
            project_path: Project directly containing ``source_file``.
            backup_folder: Root of the backup tree.
            repositories: Cache of open repository handles.

        Returns:
            bool: ``True`` when the file changed; ``False`` when it was already
            correct or no rule applies.
        """

        source = read_file(source_file)
        rule = self.find_rule(source)
        if rule is None:
            LOGGER.debug("No license rule matches %s", source_file)
            return False
        LOGGER.debug("Matched rule %s for %s", rule.name, source_file)
        return rule.format_file(
            root_path,
            project_path,
            source_file,
            backup_folder,
            source,
            repositories=repositories,
        )

    def __repr__(self) -> str:
        names = ", ".join(rule.name for rule in self._rules)
        return f"LicenseHeader([{names}])"


__all__ = ["LicenseHeader"]

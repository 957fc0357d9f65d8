# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""License rules: a header template plus the directives that govern it.

A rule template is plain text. Lines starting with ``;;`` are directives of
the form ``;;key: value`` and lines starting with ``;;#`` are authoring
comments; neither ever reaches a source file. Every other line is header
text, where ``YEAR`` is replaced with the resolved year and ``${key}`` with
the value of a non-reserved directive::

    ;;# Header for the Java sources of the project.
    ;;match_from: ^package\\s
    ;;year_selection: file
    ;;owner: Example Org
    Copyright YEAR ${owner}

    Licensed under the Apache License, Version 2.0.

``match_from`` is a multiline regular expression. A rule only applies to
files where it matches, and the existing header region ends where its first
match begins. Rules without ``match_from`` apply to every file and treat the
leading comment block as the header region; for line comment styles that
block must open with the first template line, otherwise the header is
inserted above it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Final, TypeVar

from ..constants import (
    COMMENT_MARKER,
    COMMENT_STYLE_KEY,
    MATCH_FROM_KEY,
    METADATA_MARKER,
    RESERVED_DIRECTIVES,
    YEAR_KEY,
    YEAR_SELECTION_KEY,
)
from ..errors import HistoryNotFoundError, LicenseRuleError
from ..filesystem import write_backup, write_file
from ..git import RepositoryCache
from .comments import CommentStyle
from .years import LicenseYearSelectionMode

LOGGER = logging.getLogger(__name__)

EnumT = TypeVar("EnumT", LicenseYearSelectionMode, CommentStyle)

_YEAR_TOKEN: Final[re.Pattern[str]] = re.compile(rf"\b{YEAR_KEY}\b")
_VARIABLE_TOKEN: Final[re.Pattern[str]] = re.compile(r"\$\{(?P<name>[A-Za-z_][\w-]*)\}")
_YEAR_VALUE_PATTERN: Final[str] = r"\d{4}(?:\s*[-–]\s*\d{4})?"
_LEADING_BLANK_LINES: Final[re.Pattern[str]] = re.compile(r"\A(?:[ \t]*\r?\n)+")
_YEAR_PLACEHOLDER: Final[str] = "\0"


@dataclass(frozen=True, slots=True)
class RuleTemplate:
    """Header text and directives extracted from a rule definition."""

    lines: tuple[str, ...]
    directives: Mapping[str, str]


def parse_template(text: str) -> RuleTemplate:
    """Split a rule definition into header lines and directives.

    Args:
        text: Raw rule definition.

    Returns:
        RuleTemplate: Header lines with comment-metadata removed, and the
        directives keyed by name.

    Raises:
        LicenseRuleError: If a directive line has no ``key: value`` shape or a
            directive is declared twice.
    """

    lines: list[str] = []
    directives: dict[str, str] = {}
    for raw_line in text.splitlines():
        if raw_line.startswith(COMMENT_MARKER):
            continue
        if raw_line.startswith(METADATA_MARKER):
            key, value = _parse_directive(raw_line[len(METADATA_MARKER) :])
            if key in directives:
                raise LicenseRuleError(f"Directive '{key}' is declared more than once")
            directives[key] = value
            continue
        lines.append(raw_line.rstrip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return RuleTemplate(lines=tuple(lines), directives=MappingProxyType(directives))


def _parse_directive(body: str) -> tuple[str, str]:
    key, separator, value = body.partition(":")
    key = key.strip()
    if not separator or not key:
        raise LicenseRuleError(f"Malformed directive '{METADATA_MARKER}{body}'; expected 'key: value'")
    # Only the separator space is dropped; patterns may rely on trailing blanks.
    if value.startswith(" "):
        value = value[1:]
    return key, value


@dataclass(frozen=True, slots=True)
class LicenseRule:
    """Template and matching predicate for one family of source files.

    Instances are immutable and hold no per-call state, so a single rule can
    serve concurrent file operations.
    """

    name: str
    lines: tuple[str, ...]
    year_selection: LicenseYearSelectionMode = LicenseYearSelectionMode.SUBPROJECT
    comment_style: CommentStyle = CommentStyle.BLOCK
    match_from: re.Pattern[str] | None = None
    variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    _header_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _anchor_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for match in _VARIABLE_TOKEN.finditer("\n".join(self.lines)):
            if match.group("name") not in self.variables:
                raise LicenseRuleError(f"Rule '{self.name}' references undefined variable '{match.group(0)}'")
        object.__setattr__(self, "_header_pattern", self._compile_header_pattern())
        object.__setattr__(self, "_anchor_pattern", self._compile_anchor_pattern())

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        name: str = "<rule>",
        default_year_selection: LicenseYearSelectionMode = LicenseYearSelectionMode.SUBPROJECT,
    ) -> LicenseRule:
        """Build a rule from its template definition.

        Args:
            text: Rule template including directives.
            name: Label used in logs and error messages.
            default_year_selection: Mode used when the template has no
                ``year_selection`` directive.

        Returns:
            LicenseRule: Parsed rule.

        Raises:
            LicenseRuleError: If a directive is malformed or holds an
                unsupported value.
        """

        template = parse_template(text)
        if not template.lines:
            raise LicenseRuleError(f"Rule '{name}' has no header text")
        directives = template.directives

        match_from: re.Pattern[str] | None = None
        if MATCH_FROM_KEY in directives:
            try:
                match_from = re.compile(directives[MATCH_FROM_KEY], re.MULTILINE)
            except re.error as exc:
                raise LicenseRuleError(f"Rule '{name}' has an invalid {MATCH_FROM_KEY} pattern: {exc}") from exc

        year_selection = default_year_selection
        if YEAR_SELECTION_KEY in directives:
            year_selection = _coerce_choice(LicenseYearSelectionMode, directives[YEAR_SELECTION_KEY], name)

        comment_style = CommentStyle.BLOCK
        if COMMENT_STYLE_KEY in directives:
            comment_style = _coerce_choice(CommentStyle, directives[COMMENT_STYLE_KEY], name)

        variables = {key: value.strip() for key, value in directives.items() if key not in RESERVED_DIRECTIVES}
        return cls(
            name=name,
            lines=template.lines,
            year_selection=year_selection,
            comment_style=comment_style,
            match_from=match_from,
            variables=MappingProxyType(variables),
        )

    def match(self, source: str) -> bool:
        """Return whether this rule governs a file with content ``source``."""

        if self.match_from is None:
            return True
        return self.match_from.search(source) is not None

    def validate(self, source: str) -> bool:
        """Return whether the header of ``source`` conforms to this rule.

        The year is accepted as any four-digit year or year range; it is not
        compared with the repository history.

        Args:
            source: Content of a file this rule matches.

        Returns:
            bool: ``True`` when the existing header region equals the template.
        """

        start, end = self.header_region(source)
        return self._header_pattern.fullmatch(source[start:end].strip()) is not None

    def render(self, year: int) -> str:
        """Return the commented header for ``year``, ending with a newline."""

        return self.render_with(str(year))

    def header_region(self, source: str) -> tuple[int, int]:
        """Return the ``(start, end)`` offsets of the existing header region.

        ``start`` skips lines that must stay first in the file (such as a
        shebang); ``start == end`` means there is no header.
        """

        start = self.comment_style.prelude_end(source)
        if self.match_from is not None:
            found = self.match_from.search(source, start)
            if found is not None:
                return start, found.start()
        end = self.comment_style.leading_block_end(source, start)
        # Line comments only form a header when they open with the template's first line.
        if self.comment_style is not CommentStyle.BLOCK and not self._anchor_pattern.match(source, start, end):
            return start, start
        return start, end

    def apply(self, source: str, year: int) -> str:
        """Return ``source`` with its header region replaced by the rendered header.

        Args:
            source: Current file content.
            year: Year substituted for ``YEAR``.

        Returns:
            str: Content with exactly one blank line between header and body.
        """

        start, end = self.header_region(source)
        header = self.render(year)
        body = _LEADING_BLANK_LINES.sub("", source[end:], count=1)
        if not body:
            return source[:start] + header
        return f"{source[:start]}{header}\n{body}"

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
        """Rewrite ``source_file`` with the correct header when it differs.

        The original content is copied under ``backup_folder`` before the file
        is overwritten. Nothing is written when the content is already correct.

        Args:
            root_path: Repository root.
            project_path: Project directly containing ``source_file``.
            source_file: File to format.
            backup_folder: Root of the backup tree.
            source: Current content of ``source_file``.
            repositories: Cache of open repository handles.

        Returns:
            bool: ``True`` when the file was rewritten.
        """

        year = self.resolve_year(root_path, project_path, source_file, repositories=repositories)
        updated = self.apply(source, year)
        if updated == source:
            return False

        backup = write_backup(source_file, project_path, backup_folder)
        write_file(source_file, updated)
        LOGGER.debug("Rule %s rewrote %s (backup at %s)", self.name, source_file, backup)
        return True

    def resolve_year(
        self,
        root_path: Path,
        project_path: Path,
        source_file: Path,
        *,
        repositories: RepositoryCache,
    ) -> int:
        """Return the header year for ``source_file``.

        Paths without any commit history (new files, for instance) get the
        current calendar year. Repository failures propagate.
        """

        try:
            return self.year_selection.get_year(root_path, project_path, source_file, repositories=repositories)
        except HistoryNotFoundError as exc:
            year = datetime.now().year
            LOGGER.debug("%s; using current year %s", exc, year)
            return year

    def _substitute(self, line: str, year: str) -> str:
        line = _VARIABLE_TOKEN.sub(lambda match: self.variables[match.group("name")], line)
        return _YEAR_TOKEN.sub(year, line)

    def render_with(self, year: str) -> str:
        """Return the commented header with ``year`` inserted verbatim."""

        return self.comment_style.render([self._substitute(line, year) for line in self.lines])

    def _compile_header_pattern(self) -> re.Pattern[str]:
        return re.compile(_year_pattern(self.render_with(_YEAR_PLACEHOLDER).strip()))

    def _compile_anchor_pattern(self) -> re.Pattern[str]:
        first_line = self._substitute(self.lines[0], _YEAR_PLACEHOLDER) if self.lines else ""
        rendered = self.comment_style.render([first_line]).strip()
        return re.compile(rf"^[ \t]*{_year_pattern(rendered)}", re.MULTILINE)


def _year_pattern(rendered: str) -> str:
    return re.escape(rendered).replace(re.escape(_YEAR_PLACEHOLDER), _YEAR_VALUE_PATTERN)


def _coerce_choice(
    enum_type: type[EnumT],
    raw: str,
    rule_name: str,
) -> EnumT:
    value = raw.strip().lower()
    try:
        return enum_type(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise LicenseRuleError(f"Rule '{rule_name}' has unsupported value '{raw}' (expected one of {choices})") from exc


__all__ = ["LicenseRule", "RuleTemplate", "parse_template"]

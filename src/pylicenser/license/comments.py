# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Comment styles used to render header templates and locate existing headers."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

_ENCODING_PATTERN: Final[re.Pattern[str]] = re.compile(r"#.*coding[:=]")


@dataclass(frozen=True, slots=True)
class RenderTemplate:
    """Describes the tokens required to render header comment lines."""

    opener: str | None
    prefix: str
    empty_line: str
    closer: str | None


class CommentStyle(str, Enum):
    """Enumerate supported comment styles for license headers."""

    BLOCK = "block"
    SLASH = "slash"
    HASH = "hash"

    def render(self, lines: Sequence[str]) -> str:
        """Return ``lines`` wrapped in this comment style.

        Args:
            lines: Header payload lines, without comment syntax.

        Returns:
            str: Comment block terminated by a newline.
        """

        template = RENDER_TOKENS[self]
        rendered: list[str] = []
        if template.opener is not None:
            rendered.append(template.opener)
        rendered.extend(f"{template.prefix}{line}".rstrip() if line else template.empty_line for line in lines)
        if template.closer is not None:
            rendered.append(template.closer)
        return "\n".join(rendered) + "\n"

    def prelude_end(self, source: str) -> int:
        """Return the offset after lines that must stay above the header.

        Hash-commented files keep a shebang and an encoding declaration first.

        Args:
            source: Full file content.

        Returns:
            int: Offset where the header region starts.
        """

        if self is not CommentStyle.HASH:
            return 0
        offset = 0
        for line in source.splitlines(keepends=True):
            stripped = line.lstrip()
            if offset == 0 and stripped.startswith("#!"):
                offset += len(line)
                continue
            if _ENCODING_PATTERN.match(stripped):
                offset += len(line)
                continue
            break
        return offset

    def leading_block_end(self, source: str, start: int) -> int:
        """Return the offset where the comment block beginning at ``start`` ends.

        Args:
            source: Full file content.
            start: Offset where the header region starts.

        Returns:
            int: End offset of the leading comment block, or ``start`` when the
            region does not open with a comment of this style.
        """

        if self is CommentStyle.BLOCK:
            return _block_comment_end(source, start)
        prefix = RENDER_TOKENS[self].empty_line
        offset = start
        for line in source[start:].splitlines(keepends=True):
            if not line.lstrip().startswith(prefix):
                break
            offset += len(line)
        return offset


def _block_comment_end(source: str, start: int) -> int:
    """Return the offset after a leading ``/* ... */`` comment.

    Javadoc comments (``/**``) document the code that follows them and are
    never treated as a license header.
    """

    stripped = source[start:].lstrip()
    opening = len(source) - len(stripped)
    if not stripped.startswith("/*") or stripped.startswith("/**"):
        return start
    closing = source.find("*/", opening + 2)
    if closing == -1:
        return start
    return closing + 2


RENDER_TOKENS: Final[dict[CommentStyle, RenderTemplate]] = {
    CommentStyle.BLOCK: RenderTemplate(opener="/*", prefix=" * ", empty_line=" *", closer=" */"),
    CommentStyle.SLASH: RenderTemplate(opener=None, prefix="// ", empty_line="//", closer=None),
    CommentStyle.HASH: RenderTemplate(opener=None, prefix="# ", empty_line="#", closer=None),
}


__all__ = ["CommentStyle", "RENDER_TOKENS", "RenderTemplate"]

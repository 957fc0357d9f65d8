# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for rule template parsing, matching, validation and rewriting."""

from __future__ import annotations

import pytest

from pylicenser.errors import LicenseRuleError
from pylicenser.license import CommentStyle, LicenseRule, LicenseYearSelectionMode, parse_template

JAVA_RULE = """\
;;# Header for Java sources, this line never reaches a file.
;;match_from: ^package\\s
Copyright YEAR Org

Licensed under the Example License.
"""

JAVA_HEADER_2021 = "/*\n * Copyright 2021 Org\n *\n * Licensed under the Example License.\n */\n"


def test_parse_template_separates_directives_and_comments() -> None:
    template = parse_template(";;# note\n;;match_from: ^package \n\nCopyright YEAR Org\n\n")

    assert template.lines == ("Copyright YEAR Org",)
    assert dict(template.directives) == {"match_from": "^package "}


def test_parse_template_rejects_malformed_directive() -> None:
    with pytest.raises(LicenseRuleError, match="expected 'key: value'"):
        parse_template(";;match_from\nCopyright YEAR Org\n")


def test_parse_template_rejects_duplicate_directive() -> None:
    with pytest.raises(LicenseRuleError, match="more than once"):
        parse_template(";;owner: A\n;;owner: B\nCopyright YEAR ${owner}\n")


def test_parse_reads_directives() -> None:
    rule = LicenseRule.parse(
        ";;year_selection: FILE\n;;comment_style: slash\n;;owner: Example Org\nCopyright YEAR ${owner}\n",
        name="custom",
    )

    assert rule.name == "custom"
    assert rule.year_selection is LicenseYearSelectionMode.FILE
    assert rule.comment_style is CommentStyle.SLASH
    assert rule.match_from is None
    assert rule.render(2020) == "// Copyright 2020 Example Org\n"


def test_parse_uses_default_year_selection() -> None:
    rule = LicenseRule.parse("Copyright YEAR Org\n", default_year_selection=LicenseYearSelectionMode.PROJECT)

    assert rule.year_selection is LicenseYearSelectionMode.PROJECT


@pytest.mark.parametrize(
    ("text", "message"),
    [
        (";;year_selection: weekly\nCopyright YEAR Org\n", "unsupported value 'weekly'"),
        (";;comment_style: pascal\nCopyright YEAR Org\n", "unsupported value 'pascal'"),
        (";;match_from: (unclosed\nCopyright YEAR Org\n", "invalid match_from pattern"),
        ("Copyright YEAR ${owner}\n", "undefined variable"),
        (";;# only a comment\n", "no header text"),
    ],
)
def test_parse_rejects_invalid_rules(text: str, message: str) -> None:
    with pytest.raises(LicenseRuleError, match=message):
        LicenseRule.parse(text)


def test_render_strips_comment_metadata_and_substitutes_year() -> None:
    rule = LicenseRule.parse(JAVA_RULE)

    rendered = rule.render(2021)

    assert rendered == JAVA_HEADER_2021
    assert ";;" not in rendered
    assert "YEAR" not in rendered


def test_match_uses_match_from_pattern() -> None:
    rule = LicenseRule.parse(JAVA_RULE)

    assert rule.match("package org.example;\n")
    assert not rule.match("module org.example {}\n")


def test_rule_without_match_from_matches_everything() -> None:
    rule = LicenseRule.parse("Copyright YEAR Org\n")

    assert rule.match("")
    assert rule.match("anything at all")


def test_validate_accepts_any_well_formed_year() -> None:
    rule = LicenseRule.parse(JAVA_RULE)
    header_2015 = JAVA_HEADER_2021.replace("2021", "2015")
    header_range = JAVA_HEADER_2021.replace("2021", "2015-2021")

    assert rule.validate(f"{header_2015}\npackage org.example;\n")
    assert rule.validate(f"{header_range}\npackage org.example;\n")


def test_validate_rejects_missing_or_drifted_header() -> None:
    rule = LicenseRule.parse(JAVA_RULE)
    drifted = JAVA_HEADER_2021.replace("Org", "Other Org")

    assert not rule.validate("package org.example;\n")
    assert not rule.validate(f"{drifted}\npackage org.example;\n")
    assert not rule.validate(JAVA_HEADER_2021.replace("2021", "YEAR") + "\npackage org.example;\n")


def test_apply_prepends_header_when_absent() -> None:
    rule = LicenseRule.parse(JAVA_RULE)

    updated = rule.apply("package org.example;\n\nclass A {}\n", 2021)

    assert updated == f"{JAVA_HEADER_2021}\npackage org.example;\n\nclass A {{}}\n"


def test_apply_replaces_drifted_header() -> None:
    rule = LicenseRule.parse(JAVA_RULE)
    source = "/*\n * Copyright 2019 Someone Else\n */\n\n\npackage org.example;\n"

    updated = rule.apply(source, 2021)

    assert updated == f"{JAVA_HEADER_2021}\npackage org.example;\n"
    assert rule.validate(updated)


def test_apply_is_idempotent() -> None:
    rule = LicenseRule.parse(JAVA_RULE)
    once = rule.apply("package org.example;\n", 2021)

    assert rule.apply(once, 2021) == once


def test_apply_without_match_from_replaces_leading_block_only() -> None:
    rule = LicenseRule.parse("Copyright YEAR Org\n")
    source = "/* old header */\n/** Class documentation. */\nclass A {}\n"

    updated = rule.apply(source, 2022)

    assert updated == "/*\n * Copyright 2022 Org\n */\n\n/** Class documentation. */\nclass A {}\n"
    assert rule.apply(updated, 2022) == updated


def test_apply_keeps_javadoc_and_prepends() -> None:
    rule = LicenseRule.parse("Copyright YEAR Org\n")
    source = "/** Class documentation. */\nclass A {}\n"

    updated = rule.apply(source, 2022)

    assert updated.endswith(source)
    assert updated.startswith("/*\n * Copyright 2022 Org\n */\n\n")


def test_hash_style_keeps_shebang_first() -> None:
    rule = LicenseRule.parse(";;comment_style: hash\nCopyright YEAR Org\n")
    source = "#!/usr/bin/env python\nprint('hi')\n"

    updated = rule.apply(source, 2023)

    assert updated == "#!/usr/bin/env python\n# Copyright 2023 Org\n\nprint('hi')\n"
    assert rule.validate(updated)
    assert rule.apply(updated, 2023) == updated


def test_apply_to_empty_file_writes_header_only() -> None:
    rule = LicenseRule.parse("Copyright YEAR Org\n")

    assert rule.apply("", 2021) == "/*\n * Copyright 2021 Org\n */\n"


@pytest.mark.parametrize("style", ["hash", "slash"])
def test_line_comment_rule_keeps_unrelated_leading_comment(style: str) -> None:
    rule = LicenseRule.parse(f";;comment_style: {style}\nCopyright YEAR Org\n")
    marker = "#" if style == "hash" else "//"
    source = f"{marker} helper module\ncode()\n"

    updated = rule.apply(source, 2023)

    assert updated == f"{marker} Copyright 2023 Org\n\n{source}"
    assert not rule.validate(source)
    assert rule.apply(updated, 2023) == updated


def test_line_comment_rule_replaces_stale_year() -> None:
    rule = LicenseRule.parse(";;comment_style: hash\nCopyright YEAR Org\n\nAll rights reserved.\n")
    source = "# Copyright 2011 Org\n#\n# All rights reserved.\n\nimport os\n"

    assert rule.validate(source)
    assert rule.apply(source, 2023) == "# Copyright 2023 Org\n#\n# All rights reserved.\n\nimport os\n"

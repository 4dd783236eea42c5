from __future__ import annotations

import pytest

from mdstyle.models import Document
from mdstyle.rules import find_rule
from mdstyle.tokens import parse_document


def _check(name: str, content: str, **options: object) -> list[int]:
    document = parse_document(content)
    return list(find_rule(name).run(document, options or None).line_numbers)


def test_heading_level_skip_flags_only_the_skipping_heading():
    assert _check("heading-level-skip", "# A\n\n## B\n\n#### C\n") == [5]


def test_heading_level_skip_accepts_single_steps():
    assert _check("heading-level-skip", "# A\n\n## B\n\n### C\n\n# D\n") == []


def test_heading_level_skip_does_not_check_first_heading():
    assert _check("MD001", "### A\n\n#### B\n") == []


def test_first_heading_h1_flags_non_h1():
    assert _check("first-heading-h1", "## A\n\n# B\n") == [1]


def test_first_heading_h1_checks_only_first_heading():
    assert _check("first-heading-h1", "text\n\n# A\n\n### B\n") == []


@pytest.mark.parametrize("name", ["first-heading-h1", "heading-duplicate-content"])
def test_documents_without_headings_pass(name: str):
    assert _check(name, "Some text\n\n- item\n") == []
    assert _check(name, "") == []


def test_heading_style_consistent_uses_first_heading():
    content = "# A\n\nB\n===\n\n## C ##\n"

    assert _check("heading-style", content) == [3, 6]


def test_heading_style_explicit():
    content = "A\n===\n\n# B\n"

    assert _check("heading-style", content, style="setext") == [4]
    assert _check("heading-style", content, style="atx") == [1]


def test_heading_no_space_atx():
    assert _check("heading-no-space-atx", "#Heading\n\n## Fine\n") == [1]


def test_heading_no_space_atx_skips_closed_and_code():
    content = "#Closed#\n\n```\n#comment\n```\n"

    assert _check("heading-no-space-atx", content) == []


def test_heading_multi_space_atx():
    assert _check("heading-multi-space-atx", "#  A\n\n# B\n\n#  C  #\n") == [1]


def test_heading_space_closed_atx():
    content = "#A#\n\n# B#\n\n#C #\n\n# D #\n"

    assert _check("heading-space-closed-atx", content) == [1, 3, 5]


def test_heading_space_closed_atx_ignores_escaped_hash():
    assert _check("heading-space-closed-atx", "# Issue \\#\n") == []


def test_heading_multi_space_closed_atx():
    content = "#  A #\n\n# B  #\n\n# C #\n"

    assert _check("heading-multi-space-closed-atx", content) == [1, 3]


def test_heading_blank_lines_flags_text_below():
    assert _check("heading-blank-lines", "# A\ntext\n") == [1]


def test_heading_blank_lines_flags_text_above():
    assert _check("heading-blank-lines", "text\n# A\n") == [2]


def test_heading_blank_lines_adjacent_headings():
    assert _check("heading-blank-lines", "# A\n## B\n") == [1, 2]


def test_heading_blank_lines_setext():
    assert _check("heading-blank-lines", "A\n===\ntext\n") == [1]


def test_heading_blank_lines_flags_setext_underline_in_paragraph():
    assert _check("heading-blank-lines", "> text\n===\n") == [1]


def test_heading_blank_lines_surrounded():
    assert _check("heading-blank-lines", "text\n\n# A\n\ntext\n") == []


def test_heading_indented():
    assert _check("heading-indented", "  # A\n\n# B\n") == [1]


def test_heading_duplicate_content():
    assert _check("heading-duplicate-content", "# A\n\n## B\n\n## A\n\n### A\n") == [5, 7]


def test_heading_duplicate_content_is_case_sensitive():
    assert _check("heading-duplicate-content", "# A\n\n## a\n") == []


def test_heading_single_h1():
    assert _check("heading-single-h1", "# A\n\n# B\n\n## C\n\n# D\n") == [3, 7]


def test_heading_single_h1_requires_title_on_first_line():
    assert _check("heading-single-h1", "Intro\n\n# A\n\n# B\n") == []


def test_heading_trailing_punctuation():
    assert _check("heading-trailing-punctuation", "# Hello!\n\n## World\n\n## Why?\n") == [1, 5]


def test_heading_trailing_punctuation_empty_set_disables_check():
    assert _check("heading-trailing-punctuation", "# A!\n", punctuation="") == []


def test_heading_trailing_punctuation_custom():
    content = "# Hello.\n\n## World!\n"

    assert _check("heading-trailing-punctuation", content, punctuation="!") == [3]


def test_heading_rules_on_empty_document():
    document = Document()

    for name in ("MD001", "MD002", "MD003", "MD018", "MD022", "MD024", "MD025", "MD026"):
        assert find_rule(name).run(document).line_numbers == ()

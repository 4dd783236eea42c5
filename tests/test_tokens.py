from __future__ import annotations

from mdstyle.models import TokenKind
from mdstyle.tokens import parse_document, split_lines


def test_split_lines_handles_all_terminators():
    assert split_lines("a\r\nb\rc\n") == ["a", "b", "c", ""]


def test_split_lines_without_trailing_newline():
    assert split_lines("a\nb") == ["a", "b"]


def test_parse_document_keeps_raw_lines():
    document = parse_document("# Title  \n\n\ttabbed\n")

    assert document.lines == ("# Title  ", "", "\ttabbed", "")


def test_parse_document_converts_heading_tokens():
    document = parse_document("# Title\n\n### Deep\n")
    headings = [token for token in document.tokens if token.kind is TokenKind.HEADING_OPEN]

    assert [token.level for token in headings] == [1, 3]
    assert [token.line_range for token in headings] == [(0, 1), (2, 3)]
    assert [token.line for token in headings] == ["# Title", "### Deep"]
    assert [token.line_number for token in headings] == [1, 3]


def test_parse_document_converts_inline_children():
    document = parse_document("Some *text*\n")
    inline = next(token for token in document.tokens if token.kind is TokenKind.INLINE)

    assert inline.content == "Some *text*"
    assert inline.children[0].kind is TokenKind.TEXT
    assert inline.children[0].content == "Some "


def test_parse_document_close_tokens_have_no_lines():
    document = parse_document("# Title\n")
    close = next(token for token in document.tokens if token.kind is TokenKind.HEADING_CLOSE)

    assert close.line_range is None
    assert close.line == ""


def test_parse_document_list_and_code_tokens():
    document = parse_document("- a\n- b\n\n```\ncode\n```\n")
    kinds = [token.kind for token in document.tokens]

    assert kinds.count(TokenKind.LIST_ITEM_OPEN) == 2
    assert TokenKind.BULLET_LIST_OPEN in kinds
    fence = next(token for token in document.tokens if token.kind is TokenKind.FENCE)
    assert fence.line_range == (3, 6)
    assert fence.content == "code\n"


def test_parse_document_empty_content():
    document = parse_document("")

    assert document.lines == ("",)
    assert document.tokens == ()

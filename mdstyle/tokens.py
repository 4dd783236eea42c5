"""Conversion of markdown-it-py output into mdstyle tokens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token as MarkdownItToken

from .constants import NEWLINE_PATTERN
from .models import Document, InlineChild, Token, TokenKind


def split_lines(content: str) -> list[str]:
    """Split Markdown content into lines without terminators.

    Any of ``\\r\\n``, ``\\r`` or ``\\n`` ends a line. Content that ends with a
    line terminator yields a trailing empty line.

    Args:
        content: Raw document text.

    Returns:
        list[str]: Lines in document order.

    Examples:
        split_lines("# Title\\r\\ntext\\n")  # ["# Title", "text", ""]
    """
    return NEWLINE_PATTERN.split(content)


def _heading_level(token: MarkdownItToken) -> int:
    tag = token.tag
    if len(tag) == 2 and tag[0] == "h" and tag[1].isdigit():
        return int(tag[1])
    return 0


def _convert_children(children: Iterable[MarkdownItToken] | None) -> tuple[InlineChild, ...]:
    if not children:
        return ()
    return tuple(
        InlineChild(kind=TokenKind.from_type(child.type), content=child.content)
        for child in children
    )


def convert_token(token: MarkdownItToken, lines: Sequence[str]) -> Token:
    """Convert a single markdown-it-py block token.

    Args:
        token: Token produced by `MarkdownIt.parse`.
        lines: Raw document lines used to resolve the token's source line.

    Returns:
        Token: Immutable token carrying the kind, line range, source line,
            heading level, inline children and content.
    """
    kind = TokenKind.from_type(token.type)
    line_range: tuple[int, int] | None = None
    line = ""
    if token.map is not None:
        start, end = token.map
        line_range = (start, end)
        if 0 <= start < len(lines):
            line = lines[start]

    level = 0
    if kind in (TokenKind.HEADING_OPEN, TokenKind.HEADING_CLOSE):
        level = _heading_level(token)

    return Token(
        kind=kind,
        line_range=line_range,
        line=line,
        level=level,
        children=_convert_children(token.children),
        content=token.content,
    )


def parse_document(content: str, parser: MarkdownIt | None = None) -> Document:
    """Tokenize Markdown content into a `Document`.

    Args:
        content: Raw document text.
        parser: Optional preconfigured parser. Defaults to a CommonMark
            `MarkdownIt` instance.

    Returns:
        Document: Raw lines and converted tokens.

    Examples:
        document = parse_document("# Title\\n\\n- item\\n")
        [token.kind for token in document.tokens][:3]
    """
    parser = parser or MarkdownIt("commonmark")
    lines = split_lines(content)
    tokens = tuple(convert_token(token, lines) for token in parser.parse(content))
    return Document(lines=tuple(lines), tokens=tokens)

"""Derived views over a tokenized document.

Rules never walk raw tokens for structure they share; instead they consume
the classified views built here: per-line code classification, heading text
pairs and flattened lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import cached_property

from .constants import CLOSED_ATX_SUFFIX_PATTERN, FENCE_PATTERN
from .models import (
    LIST_CLOSE_KINDS,
    LIST_OPEN_KINDS,
    Document,
    LineInfo,
    ListDescriptor,
    ListFilter,
    Token,
    TokenKind,
)

HEADING_STYLES = ("atx", "atx_closed", "setext")
UNORDERED_LIST_STYLES = ("dash", "plus", "asterisk")


def filter_tokens(tokens: Iterable[Token], *kinds: TokenKind) -> Iterator[Token]:
    """Yield tokens whose kind is one of `kinds`, preserving order."""
    wanted = frozenset(kinds)
    return (token for token in tokens if token.kind in wanted)


def indent_for(token: Token) -> int:
    """Count leading whitespace characters on the token's source line.

    Examples:
        indent_for(Token(TokenKind.LIST_ITEM_OPEN, (0, 1), "   - item"))  # 3
    """
    return len(token.line) - len(token.line.lstrip())


def heading_style_for(token: Token) -> str:
    """Classify a heading-open token as ``atx``, ``atx_closed`` or ``setext``.

    Single-line headings are ATX; they are closed when the line ends with a
    hash followed only by whitespace. Headings spanning two lines are setext.

    Args:
        token: Heading-open token.

    Returns:
        str: One of `HEADING_STYLES`.
    """
    if token.line_range is not None and token.line_range[1] - token.line_range[0] == 1:
        if CLOSED_ATX_SUFFIX_PATTERN.search(token.line):
            return "atx_closed"
        return "atx"
    return "setext"


def unordered_list_style_for(token: Token) -> str:
    """Name the bullet marker that starts a list item's line.

    ``-`` is ``dash``, ``+`` is ``plus``; anything else counts as
    ``asterisk``.
    """
    marker = token.line.lstrip()[:1]
    if marker == "-":
        return "dash"
    if marker == "+":
        return "plus"
    return "asterisk"


def _code_block_lines(tokens: Iterable[Token]) -> frozenset[int]:
    indices: set[int] = set()
    for token in filter_tokens(tokens, TokenKind.CODE_BLOCK):
        if token.line_range is not None:
            indices.update(range(*token.line_range))
    return frozenset(indices)


def classify_lines(document: Document) -> tuple[LineInfo, ...]:
    """Classify every line as code or not, and as fence delimiter or not.

    Lines covered by indented code-block tokens are code. A fence flag flips on
    every line starting with three backticks or three tildes, and each line is
    classified with the flag *after* its own toggle: an opening fence is
    inside code while a closing fence is not. The scan is a single left to
    right pass without lookahead.

    Args:
        document: Document whose lines and tokens are classified.

    Returns:
        tuple[LineInfo, ...]: One entry per line, in order.

    Examples:
        document = Document(lines=("```", "code", "```"))
        [info.in_code for info in classify_lines(document)]  # [True, True, False]
    """
    code_lines = _code_block_lines(document.tokens)
    in_fence = False
    classified: list[LineInfo] = []
    for index, text in enumerate(document.lines):
        is_fence = FENCE_PATTERN.match(text) is not None
        if is_fence:
            in_fence = not in_fence
        classified.append(
            LineInfo(
                index=index,
                text=text,
                in_code=in_fence or index in code_lines,
                is_fence=is_fence,
            )
        )
    return tuple(classified)


def iter_headings(tokens: Iterable[Token]) -> Iterator[tuple[Token, str]]:
    """Pair each heading-open token with the text of its inline content.

    Args:
        tokens: Tokens in document order.

    Yields:
        tuple[Token, str]: Heading-open token and the rendered heading text,
            once per inline token found before the matching heading-close.
    """
    heading: Token | None = None
    for token in tokens:
        if token.kind is TokenKind.HEADING_OPEN:
            heading = token
        elif token.kind is TokenKind.HEADING_CLOSE:
            heading = None
        elif token.kind is TokenKind.INLINE and heading is not None:
            yield heading, token.content


def flatten_lists(
    tokens: Iterable[Token], list_filter: ListFilter = ListFilter.BOTH
) -> list[ListDescriptor]:
    """Reduce nested lists to a flat, ordered sequence of descriptors.

    Uses an explicit stack of in-progress lists. Each list remembers the
    output position that was current when it opened and is inserted there
    when it closes, so a list always precedes the lists nested inside it while
    siblings keep document order. Filtering skips the insertion only, which
    leaves the relative order of the remaining lists intact.

    Args:
        tokens: Tokens in document order.
        list_filter: Restricts the output to ordered or unordered lists.

    Returns:
        list[ListDescriptor]: Lists in the order described above.

    Examples:
        flatten_lists(parse_document("- a\\n  1. b\\n").tokens, ListFilter.ORDERED)
    """
    lists: list[ListDescriptor] = []
    stack: list[tuple[ListDescriptor, int]] = []
    last_with_lines: Token | None = None

    for token in tokens:
        if token.kind in LIST_OPEN_KINDS:
            descriptor = ListDescriptor(
                ordered=token.kind is TokenKind.ORDERED_LIST_OPEN,
                open=token,
                nesting=len(stack),
            )
            stack.append((descriptor, len(lists)))
        elif token.kind in LIST_CLOSE_KINDS:
            if not stack:
                continue
            descriptor, insert_at = stack.pop()
            source = last_with_lines or descriptor.open
            if source.line_range is not None:
                descriptor.last_line_index = source.line_range[1]
            if list_filter.accepts(descriptor.ordered):
                lists.insert(insert_at, descriptor)
        elif token.kind is TokenKind.LIST_ITEM_OPEN:
            if stack:
                stack[-1][0].items.append(token)
        elif token.line_range is not None:
            last_with_lines = token

    return lists


class DocumentViews:
    """Lazily computed, read-only views shared by all rules for one document.

    Attributes:
        document: The underlying document.
    """

    def __init__(self, document: Document):
        self.document = document
        self._lists: dict[ListFilter, tuple[ListDescriptor, ...]] = {}

    @property
    def lines(self) -> tuple[str, ...]:
        return self.document.lines

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self.document.tokens

    @cached_property
    def line_map(self) -> tuple[LineInfo, ...]:
        return classify_lines(self.document)

    @cached_property
    def headings(self) -> tuple[tuple[Token, str], ...]:
        return tuple(iter_headings(self.document.tokens))

    def lists(self, list_filter: ListFilter = ListFilter.BOTH) -> tuple[ListDescriptor, ...]:
        if list_filter not in self._lists:
            self._lists[list_filter] = tuple(flatten_lists(self.document.tokens, list_filter))
        return self._lists[list_filter]

"""Data models for mdstyle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .rules import Rule


class TokenKind(Enum):
    """Block and inline token types emitted by the Markdown tokenizer.

    Values match the tokenizer's type strings. Types without a dedicated
    member are mapped to `OTHER` and never inspected by rules.
    """

    HEADING_OPEN = "heading_open"
    HEADING_CLOSE = "heading_close"
    INLINE = "inline"
    LIST_ITEM_OPEN = "list_item_open"
    LIST_ITEM_CLOSE = "list_item_close"
    BULLET_LIST_OPEN = "bullet_list_open"
    BULLET_LIST_CLOSE = "bullet_list_close"
    ORDERED_LIST_OPEN = "ordered_list_open"
    ORDERED_LIST_CLOSE = "ordered_list_close"
    CODE_BLOCK = "code_block"
    FENCE = "fence"
    BLOCKQUOTE_OPEN = "blockquote_open"
    BLOCKQUOTE_CLOSE = "blockquote_close"
    PARAGRAPH_OPEN = "paragraph_open"
    PARAGRAPH_CLOSE = "paragraph_close"
    TEXT = "text"
    OTHER = "other"

    @classmethod
    def from_type(cls, type_name: str) -> TokenKind:
        """Map a tokenizer type string to a kind, falling back to `OTHER`."""
        try:
            return cls(type_name)
        except ValueError:
            return cls.OTHER


LIST_OPEN_KINDS = frozenset({TokenKind.BULLET_LIST_OPEN, TokenKind.ORDERED_LIST_OPEN})
LIST_CLOSE_KINDS = frozenset({TokenKind.BULLET_LIST_CLOSE, TokenKind.ORDERED_LIST_CLOSE})


@dataclass(frozen=True)
class InlineChild:
    """Inline span nested in an inline token.

    Attributes:
        kind: Span type; only `TokenKind.TEXT` spans are inspected by rules.
        content: Literal text of the span.
    """

    kind: TokenKind
    content: str = ""


@dataclass(frozen=True)
class Token:
    """Immutable token from the parse tree.

    Attributes:
        kind: Token type.
        line_range: Half-open ``(start, end)`` range of zero-based line
            indices, or None for tokens that carry no lines (close tokens).
        line: Verbatim text of the line the token starts on; empty when the
            token has no line range.
        level: Heading depth for heading tokens, otherwise 0.
        children: Inline spans for inline tokens.
        content: Rendered text for inline tokens, code text for code blocks
            and fences.
    """

    kind: TokenKind
    line_range: tuple[int, int] | None = None
    line: str = ""
    level: int = 0
    children: tuple[InlineChild, ...] = ()
    content: str = ""

    @property
    def line_number(self) -> int | None:
        """One-based line number of the first line, or None."""
        if self.line_range is None:
            return None
        return self.line_range[0] + 1


@dataclass(frozen=True)
class Document:
    """Raw lines and tokens for one Markdown document.

    Attributes:
        lines: Source lines without line terminators.
        tokens: Tokens in document order.
    """

    lines: tuple[str, ...] = ()
    tokens: tuple[Token, ...] = ()


@dataclass(frozen=True)
class LineInfo:
    """Classification of one physical line.

    Attributes:
        index: Zero-based line index.
        text: Line text.
        in_code: True inside an indented code block or a fenced region,
            including the opening fence but not the closing one.
        is_fence: True when the line itself is a fence delimiter.
    """

    index: int
    text: str
    in_code: bool
    is_fence: bool


class ListFilter(Enum):
    """Selects which lists `flatten_lists` returns.

    Attributes:
        BOTH: Ordered and unordered lists.
        ORDERED: Ordered lists only.
        UNORDERED: Bullet lists only.
    """

    BOTH = auto()
    ORDERED = auto()
    UNORDERED = auto()

    def accepts(self, ordered: bool) -> bool:
        if self is ListFilter.BOTH:
            return True
        return ordered is (self is ListFilter.ORDERED)


@dataclass
class ListDescriptor:
    """One list from a flattened list tree.

    Attributes:
        ordered: True for ordered lists.
        open: The list-open token.
        items: List-item-open tokens in order.
        nesting: Nesting depth; 0 for top-level lists.
        last_line_index: End of the line range of the last token with lines
            seen before the list closed; -1 until the list closes.
    """

    ordered: bool
    open: Token
    items: list[Token] = field(default_factory=list)
    nesting: int = 0
    last_line_index: int = -1


@dataclass(frozen=True)
class RuleResult:
    """Violations reported by a single rule.

    Attributes:
        rule: Rule that produced the result.
        line_numbers: One-based line numbers, in the order the rule found them.
    """

    rule: Rule
    line_numbers: tuple[int, ...]

    @property
    def passed(self) -> bool:
        return not self.line_numbers

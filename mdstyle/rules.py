"""Rule catalog for mdstyle.

Each rule is a plain function taking the shared `DocumentViews` for a
document and the rule's resolved options, and returning the one-based line
numbers it flags. Rules are registered in catalog order with `_rule`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from .constants import (
    ATX_MULTI_SPACE_PATTERN,
    ATX_NO_SPACE_PATTERN,
    BLOCKQUOTE_MULTI_SPACE_PATTERN,
    CLOSED_ATX_MULTI_SPACE_END_PATTERN,
    CLOSED_ATX_NO_SPACE_END_PATTERN,
    CLOSED_ATX_PATTERN,
    DEFAULT_LINE_LENGTH,
    DEFAULT_LIST_INDENT,
    DEFAULT_PUNCTUATION,
    DOLLAR_PROMPT_PATTERN,
    LIST_MARKER_PATTERN,
    LIST_MARKER_SPACING_PATTERN,
    NEWLINE_PATTERN,
    REVERSED_LINK_PATTERN,
    SETEXT_UNDERLINE_PATTERN,
)
from .models import Document, ListFilter, RuleResult, Token, TokenKind
from .views import (
    HEADING_STYLES,
    UNORDERED_LIST_STYLES,
    DocumentViews,
    filter_tokens,
    heading_style_for,
    indent_for,
    unordered_list_style_for,
)

CONSISTENT = "consistent"

RuleCheck = Callable[[DocumentViews, Any], list[int]]


# Options


@dataclass(frozen=True)
class HeadingStyleOptions:
    """Options for `heading-style`.

    Attributes:
        style: ``consistent`` or one of ``atx``, ``atx_closed``, ``setext``.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {"style": (CONSISTENT, *HEADING_STYLES)}

    style: str = CONSISTENT


@dataclass(frozen=True)
class UnorderedListStyleOptions:
    """Options for `list-style-unordered`.

    Attributes:
        style: ``consistent`` or one of ``dash``, ``plus``, ``asterisk``.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {
        "style": (CONSISTENT, *UNORDERED_LIST_STYLES)
    }

    style: str = CONSISTENT


@dataclass(frozen=True)
class ListIndentOptions:
    """Options for `list-nesting-indent`.

    Attributes:
        indent: Spaces each nested list is expected to add.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {}

    indent: int = DEFAULT_LIST_INDENT


@dataclass(frozen=True)
class LineLengthOptions:
    """Options for `line-length`.

    Attributes:
        line_length: Number of characters allowed before a line may break.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {}

    line_length: int = DEFAULT_LINE_LENGTH


@dataclass(frozen=True)
class TrailingPunctuationOptions:
    """Options for `heading-trailing-punctuation`.

    Attributes:
        punctuation: Characters a heading must not end with. An empty string
            disables the check.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {}

    punctuation: str = DEFAULT_PUNCTUATION


@dataclass(frozen=True)
class OrderedListPrefixOptions:
    """Options for `ordered-list-prefix`.

    Attributes:
        style: ``one`` to number every item ``1.``, ``ordered`` to number
            items incrementally from ``1.``.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {"style": ("one", "ordered")}

    style: str = "one"


@dataclass(frozen=True)
class ListMarkerSpacingOptions:
    """Options for `list-marker-spacing`.

    Attributes:
        ul_single: Spaces after an unordered marker when every item is one line.
        ol_single: Spaces after an ordered marker when every item is one line.
        ul_multi: Spaces after an unordered marker otherwise.
        ol_multi: Spaces after an ordered marker otherwise.
    """

    choices: ClassVar[dict[str, tuple[str, ...]]] = {}

    ul_single: int = 1
    ol_single: int = 1
    ul_multi: int = 1
    ol_multi: int = 1


# Registry


@dataclass(frozen=True)
class Rule:
    """A registered check.

    Attributes:
        code: Stable short identifier such as ``MD001``.
        alias: Descriptive kebab-case name.
        description: Human-readable summary shown in reports.
        tags: Category tags.
        check: Detection function.
        options_class: Dataclass holding the rule's options, or None.
    """

    code: str
    alias: str
    description: str
    tags: tuple[str, ...]
    check: RuleCheck
    options_class: type | None = None

    @property
    def option_names(self) -> tuple[str, ...]:
        if self.options_class is None:
            return ()
        return tuple(option.name for option in fields(self.options_class))

    def options(self, raw: Mapping[str, object] | None = None) -> Any:
        """Build the options record for this rule with defaults applied.

        Raises:
            TypeError: If `raw` names an option the rule does not define.
        """
        if self.options_class is None:
            if raw:
                raise TypeError(f"{self.code} takes no options")
            return None
        return self.options_class(**(raw or {}))

    def run(
        self,
        document: Document | DocumentViews,
        options: Mapping[str, object] | object | None = None,
    ) -> RuleResult:
        """Run the rule on a document.

        Args:
            document: Document or prebuilt views for the document.
            options: Options record, raw option mapping, or None for defaults.

        Returns:
            RuleResult: Line numbers flagged by the rule.

        Examples:
            RULES_BY_NAME["line-length"].run(document, {"line_length": 100})
        """
        views = document if isinstance(document, DocumentViews) else DocumentViews(document)
        if options is None or isinstance(options, Mapping):
            options = self.options(options)
        return RuleResult(rule=self, line_numbers=tuple(self.check(views, options)))


_REGISTRY: list[Rule] = []


def _rule(
    code: str,
    alias: str,
    description: str,
    tags: tuple[str, ...],
    options_class: type | None = None,
) -> Callable[[RuleCheck], RuleCheck]:
    def register(check: RuleCheck) -> RuleCheck:
        _REGISTRY.append(Rule(code, alias, description, tags, check, options_class))
        return check

    return register


def _flag(violations: list[int], token: Token, offset: int = 0) -> None:
    if token.line_number is not None:
        violations.append(token.line_number + offset)


def _starts_block(line: str) -> bool:
    return bool(line) and not line[0].isspace()


# Headings


@_rule(
    "MD001",
    "heading-level-skip",
    "Header levels should only increment by one level at a time",
    ("headers",),
)
def heading_level_skip(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    previous_level = 0
    for token in filter_tokens(views.tokens, TokenKind.HEADING_OPEN):
        if previous_level and token.level > previous_level + 1:
            _flag(violations, token)
        previous_level = token.level
    return violations


@_rule("MD002", "first-heading-h1", "First header should be a h1 header", ("headers",))
def first_heading_h1(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    first = next(filter_tokens(views.tokens, TokenKind.HEADING_OPEN), None)
    if first is not None and first.level != 1:
        _flag(violations, first)
    return violations


@_rule("MD003", "heading-style", "Header style", ("headers",), HeadingStyleOptions)
def heading_style(views: DocumentViews, options: HeadingStyleOptions) -> list[int]:
    headings = list(filter_tokens(views.tokens, TokenKind.HEADING_OPEN))
    style = options.style
    if style == CONSISTENT and headings:
        style = heading_style_for(headings[0])
    violations: list[int] = []
    for token in headings:
        if heading_style_for(token) != style:
            _flag(violations, token)
    return violations


@_rule(
    "MD018",
    "heading-no-space-atx",
    "No space after hash on atx style header",
    ("headers", "atx", "spaces"),
)
def heading_no_space_atx(views: DocumentViews, options: None) -> list[int]:
    return [
        info.index + 1
        for info in views.line_map
        if not info.in_code
        and ATX_NO_SPACE_PATTERN.match(info.text)
        and not info.text.endswith("#")
    ]


@_rule(
    "MD019",
    "heading-multi-space-atx",
    "Multiple spaces after hash on atx style header",
    ("headers", "atx", "spaces"),
)
def heading_multi_space_atx(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for token in filter_tokens(views.tokens, TokenKind.HEADING_OPEN):
        if heading_style_for(token) == "atx" and ATX_MULTI_SPACE_PATTERN.match(token.line):
            _flag(violations, token)
    return violations


@_rule(
    "MD020",
    "heading-space-closed-atx",
    "No space inside hashes on closed atx style header",
    ("headers", "atx_closed", "spaces"),
)
def heading_space_closed_atx(views: DocumentViews, options: None) -> list[int]:
    """Flag closed ATX lines with a hash run touching the heading text.

    A trailing hash escaped with a backslash is literal text, not a closing
    sequence.
    """
    violations: list[int] = []
    for info in views.line_map:
        if info.in_code or not CLOSED_ATX_PATTERN.match(info.text):
            continue
        if ATX_NO_SPACE_PATTERN.match(info.text) or CLOSED_ATX_NO_SPACE_END_PATTERN.search(
            info.text
        ):
            violations.append(info.index + 1)
    return violations


@_rule(
    "MD021",
    "heading-multi-space-closed-atx",
    "Multiple spaces inside hashes on closed atx style header",
    ("headers", "atx_closed", "spaces"),
)
def heading_multi_space_closed_atx(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for token in filter_tokens(views.tokens, TokenKind.HEADING_OPEN):
        if heading_style_for(token) != "atx_closed":
            continue
        if ATX_MULTI_SPACE_PATTERN.match(token.line) or CLOSED_ATX_MULTI_SPACE_END_PATTERN.search(
            token.line
        ):
            _flag(violations, token)
    return violations


@_rule(
    "MD022",
    "heading-blank-lines",
    "Headers should be surrounded by blank lines",
    ("headers", "blank_lines"),
)
def heading_blank_lines(views: DocumentViews, options: None) -> list[int]:
    """Flag headings that touch the block before or after them.

    Tracks the furthest line reached by any token so far. A heading starting
    exactly there has no blank line above it; the first token with lines after
    a heading-close starting there means no blank line below the heading,
    which is then reported against that heading. Adjacent headings are both
    flagged. A setext underline swallowed into an inline token is reported
    against the line above it.
    """
    violations: list[int] = []
    previous_heading_line = 0
    previous_max_line_index = -1
    need_blank_line = False

    for token in views.tokens:
        if token.line_range is not None and need_blank_line:
            if token.line_range[0] == previous_max_line_index:
                violations.append(previous_heading_line)
            need_blank_line = False

        if token.kind is TokenKind.HEADING_OPEN:
            if token.line_range is not None and token.line_range[0] == previous_max_line_index:
                _flag(violations, token)
            previous_heading_line = token.line_number or 0
        elif token.kind is TokenKind.HEADING_CLOSE:
            need_blank_line = True
        elif token.kind is TokenKind.INLINE and token.line_range is not None:
            for offset, line in enumerate(NEWLINE_PATTERN.split(token.content)):
                if SETEXT_UNDERLINE_PATTERN.match(line):
                    violations.append(token.line_range[0] + offset)

        if token.line_range is not None:
            previous_max_line_index = max(previous_max_line_index, token.line_range[1])

    return violations


@_rule(
    "MD023",
    "heading-indented",
    "Headers must start at the beginning of the line",
    ("headers", "spaces"),
)
def heading_indented(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for token in filter_tokens(views.tokens, TokenKind.HEADING_OPEN):
        if token.line[:1].isspace():
            _flag(violations, token)
    return violations


@_rule(
    "MD024",
    "heading-duplicate-content",
    "Multiple headers with the same content",
    ("headers",),
)
def heading_duplicate_content(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    known_content: set[str] = set()
    for heading, content in views.headings:
        if content in known_content:
            _flag(violations, heading)
        else:
            known_content.add(content)
    return violations


@_rule(
    "MD025",
    "heading-single-h1",
    "Multiple top level headers in the same document",
    ("headers",),
)
def heading_single_h1(views: DocumentViews, options: None) -> list[int]:
    """Flag extra level-1 headings once the document opens with one on line 1."""
    violations: list[int] = []
    has_top_level_heading = False
    for token in filter_tokens(views.tokens, TokenKind.HEADING_OPEN):
        if token.level != 1:
            continue
        if has_top_level_heading:
            _flag(violations, token)
        elif token.line_number == 1:
            has_top_level_heading = True
    return violations


@_rule(
    "MD026",
    "heading-trailing-punctuation",
    "Trailing punctuation in header",
    ("headers",),
    TrailingPunctuationOptions,
)
def heading_trailing_punctuation(
    views: DocumentViews, options: TrailingPunctuationOptions
) -> list[int]:
    violations: list[int] = []
    endings = tuple(options.punctuation)
    for heading, content in views.headings:
        if content.endswith(endings):
            _flag(violations, heading)
    return violations


# Lists


@_rule(
    "MD004",
    "list-style-unordered",
    "Unordered list style",
    ("bullet", "ul"),
    UnorderedListStyleOptions,
)
def list_style_unordered(views: DocumentViews, options: UnorderedListStyleOptions) -> list[int]:
    violations: list[int] = []
    style = options.style
    for descriptor in views.lists(ListFilter.UNORDERED):
        if not descriptor.items:
            continue
        if style == CONSISTENT:
            style = unordered_list_style_for(descriptor.items[0])
        for item in descriptor.items:
            if unordered_list_style_for(item) != style:
                _flag(violations, item)
    return violations


@_rule(
    "MD005",
    "list-indent-consistency",
    "Inconsistent indentation for list items at the same level",
    ("bullet", "ul", "indentation"),
)
def list_indent_consistency(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for descriptor in views.lists():
        if not descriptor.items:
            continue
        indent = indent_for(descriptor.items[0])
        for item in descriptor.items:
            if indent_for(item) != indent:
                _flag(violations, item)
    return violations


@_rule(
    "MD006",
    "list-start-indent",
    "Consider starting bulleted lists at the beginning of the line",
    ("bullet", "ul", "indentation"),
)
def list_start_indent(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for descriptor in views.lists(ListFilter.UNORDERED):
        if not descriptor.nesting and indent_for(descriptor.open):
            _flag(violations, descriptor.open)
    return violations


@_rule(
    "MD007",
    "list-nesting-indent",
    "Unordered list indentation",
    ("bullet", "ul", "indentation"),
    ListIndentOptions,
)
def list_nesting_indent(views: DocumentViews, options: ListIndentOptions) -> list[int]:
    """Flag bullet lists indented by something other than the configured step.

    Lists are compared in flattened order with the list before them; only an
    increase in indentation is checked.
    """
    violations: list[int] = []
    previous_indent = 0
    for descriptor in views.lists(ListFilter.UNORDERED):
        indent = indent_for(descriptor.open)
        if indent > previous_indent and indent - previous_indent != options.indent:
            _flag(violations, descriptor.open)
        previous_indent = indent
    return violations


@_rule(
    "MD029",
    "ordered-list-prefix",
    "Ordered list item prefix",
    ("ol",),
    OrderedListPrefixOptions,
)
def ordered_list_prefix(views: DocumentViews, options: OrderedListPrefixOptions) -> list[int]:
    violations: list[int] = []
    for descriptor in views.lists(ListFilter.ORDERED):
        number = 1
        for item in descriptor.items:
            if not re.match(rf"^\s*{number}\. ", item.line):
                _flag(violations, item)
            if options.style == "ordered":
                number += 1
    return violations


@_rule(
    "MD030",
    "list-marker-spacing",
    "Spaces after list markers",
    ("ol", "ul", "whitespace"),
    ListMarkerSpacingOptions,
)
def list_marker_spacing(views: DocumentViews, options: ListMarkerSpacingOptions) -> list[int]:
    """Flag list items whose marker is followed by the wrong number of spaces.

    A list counts as single-line when its line span equals its item count.
    Nested lists widen the span of their parent, so the parent is then
    treated as multi-line.
    """
    violations: list[int] = []
    for descriptor in views.lists():
        if descriptor.open.line_range is None:
            continue
        line_count = descriptor.last_line_index - descriptor.open.line_range[0]
        all_single = line_count == len(descriptor.items)
        if descriptor.ordered:
            expected_spaces = options.ol_single if all_single else options.ol_multi
        else:
            expected_spaces = options.ul_single if all_single else options.ul_multi
        for item in descriptor.items:
            match = LIST_MARKER_SPACING_PATTERN.match(item.line)
            if match and len(match.group(1)) != expected_spaces:
                _flag(violations, item)
    return violations


@_rule(
    "MD032",
    "list-surrounded-by-blank-lines",
    "Lists should be surrounded by blank lines",
    ("bullet", "ul", "ol", "blank_lines"),
)
def list_surrounded_by_blank_lines(views: DocumentViews, options: None) -> list[int]:
    """Flag list boundaries that are not separated from text by a blank line.

    Entering a list reports the first list line; leaving a list reports the
    last list line. Code lines are skipped, except fences, which also end any
    list in progress.
    """
    violations: list[int] = []
    in_list = False
    previous_line = ""
    for info in views.line_map:
        if not info.in_code or info.is_fence:
            list_marker = LIST_MARKER_PATTERN.match(info.text.strip()) is not None
            if list_marker and not in_list and _starts_block(previous_line):
                violations.append(info.index + 1)
            elif not list_marker and in_list and _starts_block(info.text):
                violations.append(info.index)
            in_list = list_marker
        in_list = in_list and not info.is_fence
        previous_line = info.text
    return violations


# Blockquotes


@_rule(
    "MD027",
    "blockquote-space-after-symbol",
    "Multiple spaces after blockquote symbol",
    ("blockquote", "whitespace", "indentation"),
)
def blockquote_space_after_symbol(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    in_blockquote = False
    for token in views.tokens:
        if token.kind is TokenKind.BLOCKQUOTE_OPEN:
            in_blockquote = True
        elif token.kind is TokenKind.BLOCKQUOTE_CLOSE:
            in_blockquote = False
        elif token.kind is TokenKind.INLINE and in_blockquote:
            for offset, line in enumerate(NEWLINE_PATTERN.split(token.content)):
                if line[:1].isspace() or (
                    not offset and BLOCKQUOTE_MULTI_SPACE_PATTERN.match(token.line)
                ):
                    _flag(violations, token, offset)
    return violations


@_rule(
    "MD028",
    "blockquote-blank-line-inside",
    "Blank line inside blockquote",
    ("blockquote", "whitespace"),
)
def blockquote_blank_line_inside(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    previous: Token | None = None
    for token in views.tokens:
        if (
            token.kind is TokenKind.BLOCKQUOTE_OPEN
            and previous is not None
            and previous.kind is TokenKind.BLOCKQUOTE_CLOSE
        ):
            _flag(violations, token, -1)
        previous = token
    return violations


# Whitespace


@_rule("MD009", "trailing-whitespace", "Trailing spaces", ("whitespace",))
def trailing_whitespace(views: DocumentViews, options: None) -> list[int]:
    return [index + 1 for index, line in enumerate(views.lines) if line[-1:].isspace()]


@_rule("MD010", "hard-tabs", "Hard tabs", ("whitespace", "hard_tab"))
def hard_tabs(views: DocumentViews, options: None) -> list[int]:
    return [index + 1 for index, line in enumerate(views.lines) if "\t" in line]


@_rule(
    "MD012",
    "multiple-blank-lines",
    "Multiple consecutive blank lines",
    ("whitespace", "blank_lines"),
)
def multiple_blank_lines(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    # Non-empty sentinel so a leading blank line is never flagged.
    previous_line = "-"
    for info in views.line_map:
        line = info.text.strip()
        if not info.in_code and not line and not previous_line:
            violations.append(info.index + 1)
        previous_line = line
    return violations


# Code


@_rule(
    "MD014",
    "code-dollar-without-output",
    "Dollar signs used before commands without showing output",
    ("code",),
)
def code_dollar_without_output(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for token in filter_tokens(views.tokens, TokenKind.CODE_BLOCK, TokenKind.FENCE):
        if not token.content:
            continue
        lines = [line for line in NEWLINE_PATTERN.split(token.content) if line]
        if all(DOLLAR_PROMPT_PATTERN.match(line) for line in lines):
            _flag(violations, token)
    return violations


@_rule(
    "MD031",
    "code-fence-blank-lines",
    "Fenced code blocks should be surrounded by blank lines",
    ("code", "blank_lines"),
)
def code_fence_blank_lines(views: DocumentViews, options: None) -> list[int]:
    """Flag fences that touch surrounding text.

    An opening fence is classified as code, so its previous line is checked;
    a closing fence is not, so its next line is checked.
    """
    violations: list[int] = []
    lines = views.lines
    for info in views.line_map:
        if not info.is_fence:
            continue
        if info.in_code:
            touches = info.index - 1 >= 0 and bool(lines[info.index - 1])
        else:
            touches = info.index + 1 < len(lines) and bool(lines[info.index + 1])
        if touches:
            violations.append(info.index + 1)
    return violations


# Links and line length


@_rule("MD011", "reversed-link-syntax", "Reversed link syntax", ("links",))
def reversed_link_syntax(views: DocumentViews, options: None) -> list[int]:
    violations: list[int] = []
    for token in filter_tokens(views.tokens, TokenKind.INLINE):
        for child in token.children:
            if child.kind is TokenKind.TEXT and REVERSED_LINK_PATTERN.search(child.content):
                _flag(violations, token)
    return violations


@_rule("MD013", "line-length", "Line length", ("line_length",), LineLengthOptions)
def line_length(views: DocumentViews, options: LineLengthOptions) -> list[int]:
    """Flag lines that still contain whitespace past the configured length.

    A long line made of a single unbreakable run after the limit (such as a
    URL) is not flagged.
    """
    pattern = re.compile(rf"^.{{{options.line_length}}}.*\s")
    return [index + 1 for index, line in enumerate(views.lines) if pattern.match(line)]


RULES: tuple[Rule, ...] = tuple(sorted(_REGISTRY, key=lambda rule: rule.code))
RULES_BY_NAME: dict[str, Rule] = {
    **{rule.code: rule for rule in RULES},
    **{rule.alias: rule for rule in RULES},
}


def find_rule(name: str) -> Rule | None:
    """Look up a rule by code (case-insensitive) or alias."""
    return RULES_BY_NAME.get(name) or RULES_BY_NAME.get(name.upper())

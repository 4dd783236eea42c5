from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st
from mdstyle.models import Document, ListFilter, Token, TokenKind
from mdstyle.rules import find_rule
from mdstyle.views import classify_lines, flatten_lists

line_strategy = st.text(alphabet="ab \t", max_size=8)
fence_doc_strategy = st.lists(st.sampled_from(["```", "~~~", "text", ""]), max_size=20)
blank_doc_strategy = st.lists(st.sampled_from(["", " ", "text"]), max_size=20)

list_tree_strategy = st.recursive(
    st.tuples(st.booleans(), st.just([])),
    lambda children: st.tuples(st.booleans(), st.lists(children, max_size=3)),
    max_leaves=10,
)


def _emit_lists(forest, tokens, expected, depth=0, parent=None):
    for ordered, children in forest:
        line = len(tokens)
        open_kind = TokenKind.ORDERED_LIST_OPEN if ordered else TokenKind.BULLET_LIST_OPEN
        close_kind = TokenKind.ORDERED_LIST_CLOSE if ordered else TokenKind.BULLET_LIST_CLOSE
        open_token = Token(open_kind, (line, line + 1), f"item {line}")
        tokens.append(open_token)
        tokens.append(Token(TokenKind.LIST_ITEM_OPEN, (line, line + 1), f"item {line}"))
        expected.append((open_token, depth, parent))
        _emit_lists(children, tokens, expected, depth + 1, open_token)
        tokens.append(Token(TokenKind.LIST_ITEM_CLOSE))
        tokens.append(Token(close_kind))


@given(st.lists(line_strategy, max_size=20))
def test_trailing_whitespace_flags_exactly_padded_lines(lines):
    document = Document(lines=tuple(lines))
    result = find_rule("MD009").run(document)

    expected = [index + 1 for index, line in enumerate(lines) if line != line.rstrip()]
    assert list(result.line_numbers) == expected


@given(fence_doc_strategy)
def test_classify_lines_follows_fence_parity(lines):
    classified = classify_lines(Document(lines=tuple(lines)))

    fences_seen = 0
    for info, text in zip(classified, lines, strict=True):
        if text in ("```", "~~~"):
            fences_seen += 1
        assert info.is_fence == (text in ("```", "~~~"))
        assert info.in_code == (fences_seen % 2 == 1)


@given(fence_doc_strategy)
def test_classify_lines_is_deterministic(lines):
    document = Document(lines=tuple(lines))
    assert classify_lines(document) == classify_lines(document)


@given(blank_doc_strategy)
def test_multiple_blank_lines_only_flags_repeated_blanks(lines):
    result = find_rule("MD012").run(Document(lines=tuple(lines)))

    expected = [
        index + 1
        for index in range(1, len(lines))
        if not lines[index].strip() and not lines[index - 1].strip()
    ]
    assert list(result.line_numbers) == expected


@given(st.lists(list_tree_strategy, min_size=1, max_size=3))
def test_flatten_lists_places_parents_before_children(forest):
    tokens: list[Token] = []
    expected: list[tuple[Token, int, Token | None]] = []
    _emit_lists(forest, tokens, expected)

    flattened = flatten_lists(tokens)
    positions = {id(descriptor.open): index for index, descriptor in enumerate(flattened)}

    assert len(flattened) == len(expected)
    for open_token, depth, parent in expected:
        descriptor = flattened[positions[id(open_token)]]
        assert descriptor.nesting == depth
        assert len(descriptor.items) == 1
        if parent is not None:
            assert positions[id(parent)] < positions[id(open_token)]


@given(st.lists(list_tree_strategy, min_size=1, max_size=3))
def test_flatten_lists_filters_preserve_relative_order(forest):
    tokens: list[Token] = []
    _emit_lists(forest, tokens, [])

    everything = [id(descriptor.open) for descriptor in flatten_lists(tokens)]
    for list_filter in (ListFilter.ORDERED, ListFilter.UNORDERED):
        subset = [id(descriptor.open) for descriptor in flatten_lists(tokens, list_filter)]
        assert subset == [key for key in everything if key in subset]
        ordered = list_filter is ListFilter.ORDERED
        assert all(
            descriptor.ordered == ordered for descriptor in flatten_lists(tokens, list_filter)
        )

from __future__ import annotations

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st
from regex_visualiser.syntax import (
    Empty,
    Group,
    GroupSpan,
    Literal,
    RegexError,
    capture_groups,
    compile,
    dump,
    parse,
)


def test_no_groups():
    assert capture_groups(parse("abc")) == []
    assert capture_groups(parse("")) == []


def test_single_group_is_whole_pattern():
    assert capture_groups(parse("(abc)")) == [GroupSpan(0, range(0, 5))]


def test_depth_counts_every_container():
    # Concat -> Group 1 -> Concat -> Group 2
    assert capture_groups(parse("a(b(c)d)")) == [
        GroupSpan(1, range(1, 8)),
        GroupSpan(3, range(3, 6)),
    ]


def test_non_capturing_groups_are_transparent():
    # Concat -> non-capturing Group -> Alternation -> Group 1
    assert capture_groups(parse("x(?:(a)|b)")) == [GroupSpan(3, range(4, 7))]


def test_repetition_adds_depth_but_keeps_group_span():
    assert capture_groups(parse("(ab)+c")) == [GroupSpan(2, range(0, 4))]


def test_conditional_branches():
    assert capture_groups(parse("(a)(?(1)(b)|(c))")) == [
        GroupSpan(1, range(0, 3)),
        GroupSpan(2, range(8, 11)),
        GroupSpan(2, range(12, 15)),
    ]


def test_walker_rejects_out_of_order_indices():
    ast = Group(range(0, 3), Empty(range(1, 1)), "capture", capture_index=2)
    with pytest.raises(AssertionError):
        capture_groups(ast)


def test_dump():
    assert dump(parse("a(?P<n>b)*")) == "\n".join(
        [
            "Concat(0..10)",
            "    items[0]: Literal(0..1, char='a')",
            "    items[1]: Repetition(1..10, min=0, greedy=True, possessive=False)",
            "        child: Group(1..9, kind='named', capture_index=1, name='n')",
            "            child: Literal(7..8, char='b')",
        ]
    )


def test_dump_leaf():
    assert dump(Literal(range(0, 1), "x")) == "Literal(0..1, char='x')"


@given(st.lists(st.sampled_from(["(", ")", "a", "(?:", "|", "*", "(?P<g{}>"]), max_size=30))
def test_indices_are_consecutive(parts: list[str]):
    pattern = "".join(part.format(i) for i, part in enumerate(parts))
    try:
        ast, matcher = compile(pattern)
    except RegexError:
        return

    groups = capture_groups(ast)
    assert len(groups) == matcher.groups == re.compile(pattern).groups
    for depth, span in groups:
        assert depth >= 0
        assert 0 <= span.start < span.stop <= len(pattern)
        assert pattern[span.start] == "("
        assert pattern[span.stop - 1] == ")"

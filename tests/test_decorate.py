from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from regex_visualiser import syntax
from regex_visualiser.colors import (
    ALT_BACKGROUND_COLORS,
    BACKGROUND_COLORS,
    BG_RED,
    DARK_GRAY,
    FG_RED,
    TRANSPARENT,
    WHITE,
    Color,
)
from regex_visualiser.decorate import (
    build_error_decoration,
    build_input_decoration,
    build_plain_decoration,
    build_regex_decoration,
)
from regex_visualiser.decoration import (
    Decoration,
    FormatRun,
    GroupGlyphs,
    InputDecoration,
    RegexDecoration,
    TextStyle,
)
from regex_visualiser.syntax import CompileError, ParseError

FONT = "monospace"
PLAIN = TextStyle(FONT)


def regex_decoration(pattern: str, **kwargs) -> RegexDecoration:
    ast, _ = syntax.compile(pattern)
    return build_regex_decoration(pattern, ast, FONT, **kwargs)


def input_decoration(pattern: str, text: str) -> InputDecoration:
    ast, matcher = syntax.compile(pattern)
    colors = build_regex_decoration(pattern, ast, FONT).capture_group_colors
    return build_input_decoration(text, matcher, colors, FONT)


def group_style(color: Color) -> TextStyle:
    return TextStyle(FONT, WHITE, color)


def test_regex_decoration_single_group():
    a = BACKGROUND_COLORS[0]
    decoration = regex_decoration("a(b)c")
    assert decoration.text == "a(b)c"
    assert decoration.runs == (
        FormatRun(range(0, 1), PLAIN),
        FormatRun(range(1, 4), group_style(a)),
        FormatRun(range(4, 5), PLAIN),
    )
    assert decoration.capture_group_table == (GroupGlyphs(0, range(1, 4)),)
    assert decoration.capture_group_colors == (TRANSPARENT, a)


def test_regex_decoration_whole_pattern_group():
    decoration = regex_decoration("(ab)")
    assert decoration.runs == (FormatRun(range(0, 4), group_style(BACKGROUND_COLORS[0])),)
    assert decoration.capture_group_table == (GroupGlyphs(0, range(0, 4)),)


def test_regex_decoration_inner_group_wins():
    a, b, _ = BACKGROUND_COLORS
    decoration = regex_decoration("((a)b)")
    assert decoration.runs == (
        FormatRun(range(0, 1), group_style(a)),
        FormatRun(range(1, 4), group_style(b)),
        FormatRun(range(4, 6), group_style(a)),
    )


def test_regex_decoration_depth_inversion():
    # raw depths are 0 for the outer group and 2 for the inner one
    inverted = regex_decoration("((a)b)")
    assert [entry.depth for entry in inverted.capture_group_table] == [2, 0]

    raw = regex_decoration("((a)b)", invert_depth=False)
    assert [entry.depth for entry in raw.capture_group_table] == [0, 2]


def test_regex_decoration_palette():
    decoration = regex_decoration("(a)(b)", palette=ALT_BACKGROUND_COLORS)
    assert decoration.capture_group_colors == (TRANSPARENT, *ALT_BACKGROUND_COLORS[:2])


def test_regex_decoration_newlines():
    decoration = regex_decoration("a\n(b)")
    assert decoration.capture_group_table == (GroupGlyphs(0, range(1, 4)),)


def test_regex_decoration_empty_pattern():
    assert regex_decoration("") == RegexDecoration()
    assert regex_decoration("").runs == ()


def test_regex_decoration_color_carry_over():
    a, b, c = BACKGROUND_COLORS
    previous = RegexDecoration("(x)(y)", capture_group_colors=(TRANSPARENT, c, b))
    decoration = regex_decoration("(x)(y)(z)", previous=previous)
    assert decoration.capture_group_colors == (TRANSPARENT, c, b, c)


def test_input_decoration_s1():
    decoration = input_decoration("a(b)c", "abcabc")
    assert decoration.matches == ((range(1, 2),), (range(4, 5),))
    styled = group_style(BACKGROUND_COLORS[0])
    assert decoration.runs == (
        FormatRun(range(0, 1), PLAIN),
        FormatRun(range(1, 2), styled),
        FormatRun(range(2, 4), PLAIN),
        FormatRun(range(4, 5), styled),
        FormatRun(range(5, 6), PLAIN),
    )


def test_input_decoration_s3_overlap():
    a, b, _ = BACKGROUND_COLORS
    decoration = input_decoration("((a)b)", "ab")
    assert decoration.matches == ((range(0, 2), range(0, 1)),)
    assert decoration.style_at(0) == group_style(b)
    assert decoration.style_at(1) == group_style(a)


def test_input_decoration_s6_newline():
    decoration = input_decoration("(a\nb)", "a\nb")
    assert decoration.matches == ((range(0, 2),),)
    assert decoration.runs == (FormatRun(range(0, 3), group_style(BACKGROUND_COLORS[0])),)


def test_input_decoration_non_participating_group():
    decoration = input_decoration("(a)|(b)", "ab")
    assert decoration.matches == ((range(0, 1), None), (None, range(1, 2)))


def test_input_decoration_empty_text():
    decoration = input_decoration("(a)", "")
    assert decoration == InputDecoration("", (FormatRun(range(0, 0), PLAIN),))
    assert decoration.is_tiling()


def test_input_decoration_empty_pattern():
    decoration = input_decoration("", "hello")
    assert decoration == InputDecoration("hello", (FormatRun(range(0, 5), PLAIN),))
    assert decoration.matches == ()


def test_input_decoration_color_count_mismatch():
    _, matcher = syntax.compile("(a)")
    with pytest.raises(AssertionError):
        build_input_decoration("a", matcher, [TRANSPARENT], FONT)


def test_plain_decoration():
    assert build_plain_decoration("ab", FONT) == InputDecoration(
        "ab", (FormatRun(range(0, 2), PLAIN),)
    )


ERROR_PLAIN = TextStyle(FONT, FG_RED)
ERROR_HIGHLIGHT = TextStyle(FONT, WHITE, BG_RED)


def test_error_decoration_s4():
    with pytest.raises(ParseError) as exc_info:
        syntax.compile("[")
    decoration = build_error_decoration("[", exc_info.value, FONT)
    assert decoration.runs == (
        FormatRun(range(0, 0), ERROR_PLAIN),
        FormatRun(range(0, 1), ERROR_HIGHLIGHT),
        FormatRun(range(1, 1), ERROR_PLAIN),
    )
    assert decoration.capture_group_table == ()
    assert decoration.capture_group_colors == ()
    assert decoration.is_tiling()


def test_error_decoration_auxiliary_span():
    error = ParseError("(a\\1)", "cannot refer to an open group", range(2, 4), range(0, 1))
    decoration = build_error_decoration("(a\\1)", error, FONT)
    assert decoration.runs == (
        FormatRun(range(0, 0), ERROR_PLAIN),
        FormatRun(range(0, 1), ERROR_HIGHLIGHT),
        FormatRun(range(1, 2), ERROR_PLAIN),
        FormatRun(range(2, 4), ERROR_HIGHLIGHT),
        FormatRun(range(4, 5), ERROR_PLAIN),
    )


def test_error_decoration_overlapping_spans_still_tile():
    error = ParseError("abcdef", "overlap", range(1, 4), range(2, 5))
    decoration = build_error_decoration("abcdef", error, FONT)
    assert len(decoration.runs) == 5
    assert decoration.is_tiling()


def test_error_decoration_compile_error():
    decoration = build_error_decoration("a", CompileError("a", "rejected"), FONT)
    assert decoration.runs == (FormatRun(range(0, 1), ERROR_HIGHLIGHT),)


def test_substring_and_replace():
    decoration = input_decoration("(a\nb)", "xa\nby")
    preview = decoration.substring(range(1, 4))
    assert preview.text == "a\nb"
    assert preview.runs == (FormatRun(range(0, 3), group_style(BACKGROUND_COLORS[0])),)

    shown = preview.replace("\n", "\\n", TextStyle(FONT, DARK_GRAY))
    assert shown.text == "a\\nb"
    assert shown.runs == (
        FormatRun(range(0, 1), group_style(BACKGROUND_COLORS[0])),
        FormatRun(range(1, 3), TextStyle(FONT, DARK_GRAY)),
        FormatRun(range(3, 4), group_style(BACKGROUND_COLORS[0])),
    )
    assert shown.is_tiling()


def test_is_tiling():
    assert Decoration().is_tiling()
    assert not Decoration("a").is_tiling()
    assert not Decoration("ab", (FormatRun(range(0, 1), PLAIN),)).is_tiling()
    assert not Decoration(
        "ab", (FormatRun(range(0, 2), PLAIN), FormatRun(range(1, 2), PLAIN))
    ).is_tiling()


patterns = st.lists(
    st.sampled_from(["(", ")", "a", "b", "\n", "(?:", "|", "*", "."]), max_size=20
).map("".join)


@given(patterns, st.text(alphabet="ab\nc", max_size=30))
def test_decorations_tile(pattern: str, text: str):
    try:
        ast, matcher = syntax.compile(pattern)
    except syntax.RegexError as error:
        assert build_error_decoration(pattern, error, FONT).is_tiling()
        return

    regex = build_regex_decoration(pattern, ast, FONT)
    assert regex.is_tiling()
    assert len(regex.capture_group_table) == matcher.groups

    decoration = build_input_decoration(text, matcher, regex.capture_group_colors, FONT)
    assert decoration.is_tiling()
    for row in decoration.matches:
        assert len(row) == matcher.groups

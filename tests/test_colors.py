from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from regex_visualiser.colors import (
    ALT_BACKGROUND_COLORS,
    BACKGROUND_COLORS,
    BG_RED,
    FG_RED,
    FOREGROUND_COLORS,
    PALETTES,
    TRANSPARENT,
    Color,
    assign_colors,
)
from regex_visualiser.decoration import RegexDecoration


def test_hex():
    assert Color.from_hex("#179FFF") == Color(0x17, 0x9F, 0xFF)
    assert Color.from_hex("68292F").hex == "#68292F"
    assert Color(1, 2, 3, 4).hex == "#01020304"
    with pytest.raises(ValueError):
        Color.from_hex("#12345")


def test_palette_constants():
    assert [color.hex for color in FOREGROUND_COLORS] == ["#179FFF", "#FFD700", "#DA70D6"]
    assert [color.hex for color in BACKGROUND_COLORS] == ["#264D6D", "#6C5E20", "#613F61"]
    assert [color.hex for color in ALT_BACKGROUND_COLORS] == ["#137ABF", "#BF9C00", "#995097"]
    assert PALETTES == {"standard": BACKGROUND_COLORS, "alternate": ALT_BACKGROUND_COLORS}
    assert FG_RED.hex == "#FF0000"
    assert BG_RED.hex == "#68292F"
    assert TRANSPARENT.a == 0


def test_cycles_through_palette():
    colors = assign_colors(4)
    assert colors == [TRANSPARENT, *BACKGROUND_COLORS, BACKGROUND_COLORS[0]]


def test_no_groups():
    assert assign_colors(0) == [TRANSPARENT]


def test_empty_palette_is_rejected():
    with pytest.raises(AssertionError):
        assign_colors(1, ())


def test_single_color_palette():
    red = Color(255, 0, 0)
    assert assign_colors(3, [red]) == [TRANSPARENT, red, red, red]


def test_previous_colors_are_kept():
    a, b, c = BACKGROUND_COLORS
    previous = RegexDecoration("(x)(y)", capture_group_colors=(TRANSPARENT, c, a))
    assert assign_colors(3, previous=previous) == [TRANSPARENT, c, a, c]


def test_previous_colors_outside_palette_are_replaced():
    previous = RegexDecoration("(x)", capture_group_colors=(TRANSPARENT, ALT_BACKGROUND_COLORS[1]))
    assert assign_colors(1, BACKGROUND_COLORS, previous) == [TRANSPARENT, BACKGROUND_COLORS[0]]


def test_avoids_preceding_color():
    a, b, c = BACKGROUND_COLORS
    previous = RegexDecoration("(x)", capture_group_colors=(TRANSPARENT, b))
    # group 2 would cycle to b, the color group 1 kept
    assert assign_colors(2, previous=previous) == [TRANSPARENT, b, c]


palettes = st.lists(
    st.builds(Color, st.integers(0, 255), st.integers(0, 255), st.integers(0, 255)),
    min_size=2,
    max_size=6,
    unique=True,
)


@given(palettes, st.integers(0, 20), st.integers(0, 20))
def test_stability(palette: list[Color], before: int, after: int):
    previous_colors = assign_colors(before, palette)
    previous = RegexDecoration("", capture_group_colors=tuple(previous_colors))

    colors = assign_colors(after, palette, previous)

    assert len(colors) == after + 1
    assert colors[0] == TRANSPARENT
    for i in range(1, min(before, after) + 1):
        assert colors[i] == previous_colors[i]
    for color in colors[1:]:
        assert color in palette


@given(palettes, st.integers(1, 20))
def test_neighbours_differ_without_previous(palette: list[Color], count: int):
    colors = assign_colors(count, palette)
    for i in range(2, count + 1):
        assert colors[i] != colors[i - 1]

"""Builders for the decorated pattern and the decorated input text."""

from __future__ import annotations

from typing import Sequence

from .colors import BACKGROUND_COLORS, BG_RED, FG_RED, WHITE, Color, assign_colors
from .decoration import (
    FormatRun,
    GroupGlyphs,
    InputDecoration,
    RegexDecoration,
    TextStyle,
)
from .glyphs import GlyphMap, glyph_range
from .matcher import Matcher
from .syntax import Ast, ParseError, RegexError, capture_groups

__all__ = [
    "build_regex_decoration",
    "build_input_decoration",
    "build_error_decoration",
    "build_plain_decoration",
]


def _fill(markers: list[int], span: range, value: int) -> None:
    markers[span.start : span.stop] = [value] * len(span)


def _encode_runs(markers: Sequence[int], colors: Sequence[Color], font: str) -> list[FormatRun]:
    """Turn a marker per character into maximal runs of equal markers."""
    runs: list[FormatRun] = []
    if not markers:
        return runs

    def style(marker: int) -> TextStyle:
        if marker:
            return TextStyle(font, WHITE, colors[marker])
        return TextStyle(font, None, colors[0])

    start = 0
    for pos in range(1, len(markers)):
        if markers[pos] != markers[pos - 1]:
            runs.append(FormatRun(range(start, pos), style(markers[start])))
            start = pos
    runs.append(FormatRun(range(start, len(markers)), style(markers[start])))

    return runs


def build_plain_decoration(text: str, font: str) -> InputDecoration:
    """A decoration with a single unstyled run over the whole text and no matches."""
    return InputDecoration(text, (FormatRun(range(0, len(text)), TextStyle(font)),))


def build_regex_decoration(
    pattern: str,
    ast: Ast,
    font: str,
    previous: RegexDecoration | None = None,
    palette: Sequence[Color] = BACKGROUND_COLORS,
    invert_depth: bool = True,
) -> RegexDecoration:
    """Decorate a pattern, coloring each capture group.

    Groups are painted in capture index order, so a nested group paints over its enclosing group.

    :param previous: The decoration of the previously edited pattern, used to keep group colors.
    :param invert_depth: Store ``max_depth - depth`` in the table, so that shallower groups get
        larger values.
    """
    if not pattern:
        return RegexDecoration()

    groups = capture_groups(ast)
    colors = assign_colors(len(groups), palette, previous)

    markers = [0] * len(pattern)
    for index, group in enumerate(groups, 1):
        _fill(markers, group.span, index)

    runs = _encode_runs(markers, colors, font)

    max_depth = max((group.depth for group in groups), default=0)
    table = tuple(
        GroupGlyphs(
            max_depth - group.depth if invert_depth else group.depth,
            glyph_range(group.span, pattern),
        )
        for group in groups
    )

    return RegexDecoration(pattern, tuple(runs), table, tuple(colors))


def build_input_decoration(
    text: str, matcher: Matcher, colors: Sequence[Color], font: str
) -> InputDecoration:
    """Decorate the input text with the groups of every match.

    :param colors: The group colors of the pattern decoration, entry 0 being the placeholder.
    """
    if not text or not matcher.pattern:
        return build_plain_decoration(text, font)

    assert len(colors) == matcher.groups + 1, "color table does not match the group count"

    glyph_map = GlyphMap(text)
    markers = [0] * len(text)
    matches: list[tuple[range | None, ...]] = []

    for captures in matcher.captures_iter(text):
        spans = captures.spans()
        for index, span in enumerate(spans, 1):
            if span is not None:
                _fill(markers, span, index)
        matches.append(
            tuple(None if span is None else glyph_map.glyph_range(span) for span in spans)
        )

    return InputDecoration(text, tuple(_encode_runs(markers, colors, font)), tuple(matches))


def build_error_decoration(pattern: str, error: RegexError, font: str) -> RegexDecoration:
    """Decorate a malformed pattern, highlighting the spans reported by ``error``."""
    plain = TextStyle(font, FG_RED)
    highlight = TextStyle(font, WHITE, BG_RED)

    if not isinstance(error, ParseError):
        return RegexDecoration(pattern, (FormatRun(range(0, len(pattern)), highlight),))

    highlighted = [error.span]
    if error.auxiliary_span is not None:
        highlighted.append(error.auxiliary_span)
        highlighted.sort(key=lambda span: span.start)

    runs: list[FormatRun] = []
    pos = 0
    for span in highlighted:
        start = min(max(span.start, pos), len(pattern))
        stop = min(max(span.stop, start), len(pattern))
        runs.append(FormatRun(range(pos, start), plain))
        runs.append(FormatRun(range(start, stop), highlight))
        pos = stop
    runs.append(FormatRun(range(pos, len(pattern)), plain))

    return RegexDecoration(pattern, tuple(runs))


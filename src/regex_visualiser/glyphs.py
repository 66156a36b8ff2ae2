"""Conversion from text offsets to glyph offsets.

A renderer lays out one glyph per character, except for newlines which only move the cursor. Glyph
offsets are therefore text offsets minus the number of preceding newlines.
"""

from __future__ import annotations

import bisect

__all__ = ["glyph_count", "glyph_range", "GlyphMap"]


def glyph_count(text: str) -> int:
    """The number of glyphs in ``text``."""
    return len(text) - text.count("\n")


def _check_span(span: range, text: str) -> None:
    assert span.step == 1, "span with a step"
    assert 0 <= span.start <= len(text), "span start out of bounds"
    assert span.start <= span.stop <= len(text), "span end out of bounds"


def glyph_range(span: range, text: str) -> range:
    """Convert a span of ``text`` to the corresponding range of glyphs."""
    _check_span(span, text)
    start = glyph_count(text[: span.start])
    return range(start, start + glyph_count(text[span.start : span.stop]))


class GlyphMap:
    """Converts many spans of the same text, without rescanning the text for each span."""

    def __init__(self, text: str):
        self.text = text
        self.newlines = [pos for pos, char in enumerate(text) if char == "\n"]

    def glyph_offset(self, pos: int) -> int:
        """The glyph offset of the text offset ``pos``."""
        assert 0 <= pos <= len(self.text), "offset out of bounds"
        return pos - bisect.bisect_left(self.newlines, pos)

    def glyph_range(self, span: range) -> range:
        _check_span(span, self.text)
        return range(self.glyph_offset(span.start), self.glyph_offset(span.stop))

"""Decorated text: a text together with style runs covering it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .colors import TRANSPARENT, Color

__all__ = [
    "TextStyle",
    "FormatRun",
    "Decoration",
    "GroupGlyphs",
    "RegexDecoration",
    "InputDecoration",
]


@dataclass(frozen=True)
class TextStyle:
    font: str
    foreground: Color | None = None
    """Text color, ``None`` for the renderer's default."""
    background: Color = TRANSPARENT


@dataclass(frozen=True)
class FormatRun:
    byte_range: range
    """Offsets into the decorated text that use ``style``."""
    style: TextStyle


@dataclass(frozen=True)
class Decoration:
    """A text with format runs.

    Runs are ordered and, for every decoration built by this package, tile the text without gaps or
    overlaps. Only an empty text may have no runs at all.
    """

    text: str = ""
    runs: tuple[FormatRun, ...] = ()

    def is_tiling(self) -> bool:
        """Whether the runs cover the text exactly once, in order."""
        if not self.runs:
            return not self.text
        pos = 0
        for run in self.runs:
            if run.byte_range.start != pos or run.byte_range.stop < pos:
                return False
            pos = run.byte_range.stop
        return pos == len(self.text)

    def style_at(self, pos: int) -> TextStyle | None:
        """The style of the character at offset ``pos``."""
        for run in self.runs:
            if pos in run.byte_range:
                return run.style
        return None

    def substring(self, span: range) -> Decoration:
        """The decoration of ``text[span]``, with runs clipped to the span and rebased to 0."""
        assert 0 <= span.start <= span.stop <= len(self.text), "span out of bounds"
        runs: list[FormatRun] = []
        for run in self.runs:
            start = max(run.byte_range.start, span.start)
            stop = min(run.byte_range.stop, span.stop)
            if start < stop:
                runs.append(FormatRun(range(start - span.start, stop - span.start), run.style))
        return Decoration(self.text[span.start : span.stop], tuple(runs))

    def replace(self, char: str, replacement: str, style: TextStyle) -> Decoration:
        """Replace every occurrence of ``char``, styling each replacement with ``style``.

        Runs are split around the replaced characters so the result still tiles its text.
        """
        assert len(char) == 1
        if char not in self.text:
            return self

        text: list[str] = []
        runs: list[FormatRun] = []
        pos = 0

        def emit(part: str, part_style: TextStyle):
            nonlocal pos
            if not part:
                return
            if runs and runs[-1].style == part_style:
                last = runs.pop()
                runs.append(FormatRun(range(last.byte_range.start, pos + len(part)), part_style))
            else:
                runs.append(FormatRun(range(pos, pos + len(part)), part_style))
            text.append(part)
            pos += len(part)

        for run in self.runs:
            chunk = self.text[run.byte_range.start : run.byte_range.stop]
            pieces = chunk.split(char)
            for i, piece in enumerate(pieces):
                if i:
                    emit(replacement, style)
                emit(piece, run.style)

        return Decoration("".join(text), tuple(runs))


class GroupGlyphs(NamedTuple):
    depth: int
    glyph_range: range


@dataclass(frozen=True)
class RegexDecoration(Decoration):
    """The decorated pattern.

    ``capture_group_table[i - 1]`` holds the depth and glyph range of capture group ``i``.
    ``capture_group_colors[i]`` holds its color, entry 0 is a transparent placeholder.
    """

    capture_group_table: tuple[GroupGlyphs, ...] = ()
    capture_group_colors: tuple[Color, ...] = ()

    @property
    def group_count(self) -> int:
        return len(self.capture_group_table)


@dataclass(frozen=True)
class InputDecoration(Decoration):
    """The decorated input text.

    ``matches`` has one row per match. Each row has the glyph range of every capture group, or
    ``None`` for groups that did not participate in the match.
    """

    matches: tuple[tuple[range | None, ...], ...] = ()

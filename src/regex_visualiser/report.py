"""Diagnostic reporting for patterns and option files.

Diagnostics point at spans of a text, usually the regex pattern the user is editing, and are
rendered with the affected lines and caret markers underneath.
"""

from __future__ import annotations

import bisect
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Sequence

_RE_NEWLINE = re.compile(r"\n")


@dataclass
class InputError(Exception):
    """An error in user input, such as an invalid option value."""

    where: str | None
    message: str

    def __str__(self) -> str:
        if not self.where:
            return self.message
        return f"{self.message} (at {self.where!r})"

    def fallback_span(self, where_else: str):
        if not self.where:
            self.where = where_else


def text_position(newlines: Sequence[int], offset: int) -> tuple[int, int]:
    """Converts an offset into a text to a line and column number.

    :param newlines: The sorted offsets of all newlines in the text.
    :param offset: The offset in the text.
    :returns: A tuple of the line and column number, both starting at 1.
    """
    line = bisect.bisect_left(newlines, offset)
    preceding_newline = newlines[line - 1] if line > 0 else -1
    return line + 1, offset - preceding_newline


@dataclass(eq=False)
class Report:
    """Collects diagnostic information associated to spans of a text."""

    text: str

    spans: Sequence[range]
    """Highlighted spans. An empty span is shown as a single caret at its position."""

    message: str

    def __str__(self) -> str:
        out = [f"{self.message}\n"]

        if not self.spans:
            return "".join(out)

        newlines = tuple(match.start() for match in _RE_NEWLINE.finditer(self.text))
        lines = self.text.split("\n")

        highlights: dict[int, list[str]] = defaultdict(list)

        for span in self.spans:
            positions = span if span else range(span.start, span.start + 1)
            for pos in positions:
                span_line, span_col = text_position(newlines, pos)
                line_highlights = highlights[span_line]
                line_highlights.extend([" "] * (span_col - len(line_highlights)))
                line_highlights[span_col - 1] = "^"

        shown: set[int] = set()
        for line_nr in highlights:
            shown.update(range(max(1, line_nr - 1), min(len(lines), line_nr + 1) + 1))

        line_digits = max(len(str(max(shown))), 2)

        previous: int | None = None
        for line_nr in sorted(shown):
            if previous is not None and line_nr > previous + 1:
                out.append(f"{' ':{line_digits}} :\n")
            previous = line_nr

            out.append(f"{line_nr:{line_digits}} | {lines[line_nr - 1]}\n")
            if line_nr in highlights:
                out.append(f"{' ':{line_digits}} | {''.join(highlights[line_nr])}\n")

        return "".join(out)

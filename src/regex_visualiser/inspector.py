"""Stepping through matches and their capture groups one at a time."""

from __future__ import annotations

from typing import NamedTuple

from .colors import DARK_GRAY
from .decoration import Decoration, TextStyle
from .loop_list import LoopList
from .matcher import Matcher

__all__ = ["GroupOccurrence", "MatchSelector"]


class GroupOccurrence(NamedTuple):
    index: int
    """Group index, 0 for the whole match."""
    name: str | None
    span: range
    """Offsets of the captured text in the input."""


class MatchSelector:
    """Selection of a current match and a current group within that match.

    Each match lists the whole match first, followed by the capture groups that participated in the
    match, in group index order.
    """

    def __init__(self, text: str, matcher: Matcher | None = None):
        self.text = text
        self.matches: LoopList[LoopList[GroupOccurrence]] = LoopList()

        if matcher is None:
            return

        names = matcher.group_names
        occurrences: list[LoopList[GroupOccurrence]] = []
        for captures in matcher.captures_iter(text):
            groups: list[GroupOccurrence] = []
            for index in range(len(captures)):
                span = captures.span(index)
                if span is not None:
                    groups.append(GroupOccurrence(index, names[index], span))
            occurrences.append(LoopList(groups))
        self.matches = LoopList(occurrences)

    def current_match(self) -> LoopList[GroupOccurrence] | None:
        return self.matches.current()

    def current_group(self) -> GroupOccurrence | None:
        groups = self.current_match()
        if groups is None:
            return None
        return groups.current()

    def current_range(self) -> range | None:
        group = self.current_group()
        return None if group is None else group.span

    def current_str(self) -> str | None:
        span = self.current_range()
        return None if span is None else self.text[span.start : span.stop]

    def named_groups(self) -> list[tuple[int, str]]:
        """Position within the current match and name of every named group in it."""
        groups = self.current_match()
        if groups is None:
            return []
        return [(pos, group.name) for pos, group in enumerate(groups) if group.name is not None]

    def select_name(self, name: str) -> bool:
        """Make the named group of the current match current.

        :returns: Whether the group participated in the current match.
        """
        groups = self.current_match()
        if groups is None:
            return False
        for pos, group_name in self.named_groups():
            if group_name == name:
                return groups.try_set_index(pos)
        return False

    def preview(self, input_decoration: Decoration, font: str) -> Decoration | None:
        """The current occurrence cut out of the decorated input, with visible newlines."""
        span = self.current_range()
        if span is None:
            return None
        return input_decoration.substring(span).replace("\n", "\\n", TextStyle(font, DARK_GRAY))

    def position(self) -> tuple[str, str]:
        """Counters for the current match and the current group, as shown next to the arrows."""

        def counter(items: LoopList[object] | None) -> str:
            if not items:
                return "-/-"
            return f"{items.index + 1}/{len(items)}"

        return counter(self.matches), counter(self.current_match())  # type: ignore

from __future__ import annotations

from typing import NamedTuple

from .colors import Color
from .state import ErrorState, State

__all__ = ["Connector", "connectors"]


class Connector(NamedTuple):
    """A link from a capture group in the pattern to one text it captured in the input.

    Both ranges are glyph ranges, ready to be turned into screen positions by a renderer.
    """

    match_index: int
    group_index: int
    """1-based capture group index."""
    regex_range: range
    input_range: range
    depth: int
    """The depth stored in the capture group table."""
    color: Color
    thickness: int


def connectors(state: State) -> list[Connector]:
    """All connectors for a state, ordered by match and then by group.

    A state for a malformed pattern, or for a pattern without capture groups, has no connectors.
    """
    if isinstance(state, ErrorState):
        return []

    table = state.regex_decoration.capture_group_table
    colors = state.regex_decoration.capture_group_colors
    if not table:
        return []

    assert len(colors) == len(table) + 1, "color table does not match the group table"

    result: list[Connector] = []

    for match_index, row in enumerate(state.input_decoration.matches):
        assert len(row) == len(table), "match row does not match the group table"
        for group_index, (group, input_range) in enumerate(zip(table, row), 1):
            if input_range is None:
                continue
            result.append(
                Connector(
                    match_index,
                    group_index,
                    group.glyph_range,
                    input_range,
                    group.depth,
                    colors[group_index],
                    (group.depth + 1) * 2,
                )
            )

    return result

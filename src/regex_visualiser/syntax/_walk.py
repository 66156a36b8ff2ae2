from __future__ import annotations

from typing import NamedTuple

from ._ast import Ast, Group

__all__ = ["GroupSpan", "capture_groups"]


class GroupSpan(NamedTuple):
    depth: int
    """Structural nesting depth of the group, 0 when the group is the whole pattern."""
    span: range


def capture_groups(ast: Ast) -> list[GroupSpan]:
    """Collect all capture groups of an AST in capture index order.

    The walk is pre-order and left-to-right, so enclosing groups come before the groups nested in
    them. Every container node adds one level of depth, whether or not it captures.
    """
    groups: list[GroupSpan] = []
    stack: list[tuple[int, Ast]] = [(0, ast)]

    while stack:
        depth, node = stack.pop()

        if isinstance(node, Group) and node.is_capturing:
            assert node.capture_index == len(groups) + 1, "capture groups out of order"
            groups.append(GroupSpan(depth, node.span))

        for child in reversed(node.children):
            stack.append((depth + 1, child))

    return groups

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Literal as TypingLiteral
from typing import Union

__all__ = [
    "Ast",
    "Empty",
    "Literal",
    "Dot",
    "Assertion",
    "PerlClass",
    "ClassRange",
    "BracketedClass",
    "Backreference",
    "Flags",
    "Repetition",
    "Group",
    "Conditional",
    "Concat",
    "Alternation",
    "dump",
]

GroupKind = TypingLiteral[
    "capture",
    "named",
    "non-capturing",
    "atomic",
    "flags",
    "lookahead",
    "negative-lookahead",
    "lookbehind",
    "negative-lookbehind",
]


@dataclass(frozen=True)
class Ast:
    """Base class of all AST nodes."""

    span: range
    """Offsets of the node within the pattern, as a half-open range."""

    @property
    def children(self) -> tuple[Ast, ...]:
        """Direct child nodes in left-to-right order. Leaves have none."""
        return ()


@dataclass(frozen=True)
class Empty(Ast):
    """The empty regex, e.g. an empty pattern or an empty alternative."""


@dataclass(frozen=True)
class Literal(Ast):
    """A single character, possibly written as an escape sequence."""

    char: str


@dataclass(frozen=True)
class Dot(Ast):
    pass


@dataclass(frozen=True)
class Assertion(Ast):
    """A zero-width assertion: ``^``, ``$``, ``\\A``, ``\\Z``, ``\\z``, ``\\b`` or ``\\B``."""

    kind: str


@dataclass(frozen=True)
class PerlClass(Ast):
    """One of ``\\d``, ``\\s`` or ``\\w`` (``negated`` for the upper case variants)."""

    kind: str
    negated: bool = False


@dataclass(frozen=True)
class ClassRange(Ast):
    start: Literal
    end: Literal


ClassItem = Union[Literal, ClassRange, PerlClass]


@dataclass(frozen=True)
class BracketedClass(Ast):
    negated: bool
    items: tuple[ClassItem, ...]


@dataclass(frozen=True)
class Backreference(Ast):
    """A reference to an earlier capture group, by number or by name."""

    group: int | str


@dataclass(frozen=True)
class Flags(Ast):
    """Global inline flags, e.g. ``(?i)``."""

    flags: str


@dataclass(frozen=True)
class Repetition(Ast):
    child: Ast
    min: int
    max: int | None
    greedy: bool = True
    possessive: bool = False

    @property
    def children(self) -> tuple[Ast, ...]:
        return (self.child,)


@dataclass(frozen=True)
class Group(Ast):
    child: Ast
    kind: GroupKind
    capture_index: int | None = None
    """1-based capture index, set for capturing (``capture`` and ``named``) groups only."""
    name: str | None = None
    name_span: range | None = field(default=None, compare=False)
    flags: str = ""
    """Flags set by a scoped flag group, in the form ``on-off``."""

    @property
    def is_capturing(self) -> bool:
        return self.capture_index is not None

    @property
    def children(self) -> tuple[Ast, ...]:
        return (self.child,)


@dataclass(frozen=True)
class Conditional(Ast):
    """``(?(id)yes|no)``, matching ``yes`` if the referenced group participated."""

    condition: int | str
    yes: Ast
    no: Ast | None = None

    @property
    def children(self) -> tuple[Ast, ...]:
        if self.no is None:
            return (self.yes,)
        return (self.yes, self.no)


@dataclass(frozen=True)
class Concat(Ast):
    items: tuple[Ast, ...]

    @property
    def children(self) -> tuple[Ast, ...]:
        return self.items


@dataclass(frozen=True)
class Alternation(Ast):
    alternatives: tuple[Ast, ...]

    @property
    def children(self) -> tuple[Ast, ...]:
        return self.alternatives


_NODE_FIELDS = ("child", "items", "alternatives", "yes", "no", "start", "end")


def dump(ast: Ast, indent: str = "    ") -> str:
    """Render an AST as an indented tree, one node per line.

    Each line names the node type, its span and any scalar attributes. Child nodes follow on the
    next lines, indented by one more level.
    """
    lines: list[str] = []
    stack: list[tuple[int, str, Ast]] = [(0, "", ast)]

    while stack:
        level, label, node = stack.pop()

        attributes = [f"{node.span.start}..{node.span.stop}"]
        nested: list[tuple[str, Ast]] = []

        for node_field in fields(node):
            if node_field.name in ("span", "name_span"):
                continue
            value = getattr(node, node_field.name)
            if node_field.name in _NODE_FIELDS:
                if isinstance(value, tuple):
                    nested.extend((f"{node_field.name}[{i}]", item) for i, item in enumerate(value))
                elif value is not None:
                    nested.append((node_field.name, value))
            elif value is not None and value != "":
                attributes.append(f"{node_field.name}={value!r}")

        prefix = f"{label}: " if label else ""
        lines.append(f"{indent * level}{prefix}{type(node).__name__}({', '.join(attributes)})")

        for child_label, child in reversed(nested):
            stack.append((level + 1, child_label, child))

    return "\n".join(lines)

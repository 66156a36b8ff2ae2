"""Compiled pattern wrapper used for matching and replacement.

This wraps :external:mod:`re` ``Pattern`` and ``Match`` objects so that the rest of the package
sees group spans as ``range`` objects and gets the replacement template syntax selected by the
``template_syntax`` option.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Literal, Mapping

__all__ = ["Matcher", "Captures", "ReplacementError", "TemplateSyntax"]

TemplateSyntax = Literal["dollar", "backslash"]

_TEMPLATE_PART_RE = re.compile(
    r"""
        (?P<escape_free> [^$]+) |
        \$ (
            (?P<dollar> \$ ) |
            \{ (?P<braced_name> [^}]* ) \} |
            (?P<group_name> [_0-9A-Za-z]+ )
        ) |
        (?P<stray> \$ )
    """,
    re.VERBOSE | re.DOTALL,
)


class ReplacementError(Exception):
    """A replacement template that is not valid for the matcher it is used with."""


@dataclass(frozen=True)
class Matcher:
    """Wrapper for a compiled :external:mod:`re` ``Pattern`` object."""

    wrapped: re.Pattern[str]
    """The wrapped plain :external:mod:`re` ``Pattern`` object."""

    def captures_iter(self, text: str) -> Iterator[Captures]:
        """Iterate over all non-overlapping matches in ``text``."""
        return map(Captures, self.wrapped.finditer(text))

    def replace_all(self, text: str, template: str, syntax: TemplateSyntax = "dollar") -> str:
        """Replace every non-overlapping match in ``text`` with the expanded ``template``.

        :raises ReplacementError: When ``syntax`` is ``"backslash"`` and the template refers to a
            group that does not exist or is otherwise malformed.
        """
        return self.wrapped.sub(lambda match: Captures(match).expand(template, syntax), text)

    @property
    def groups(self) -> int:
        """Forwards to :external:attr:`re.Pattern.groups`."""
        return self.wrapped.groups

    @property
    def groupindex(self) -> Mapping[str, int]:
        """Forwards to :external:attr:`re.Pattern.groupindex`."""
        return self.wrapped.groupindex

    @property
    def pattern(self) -> str:
        """Forwards to :external:attr:`re.Pattern.pattern`."""
        return self.wrapped.pattern

    @property
    def group_names(self) -> tuple[str | None, ...]:
        """The name of every group, indexed by group index. Index 0 is the whole match."""
        names: list[str | None] = [None] * (self.groups + 1)
        for name, index in self.groupindex.items():
            names[index] = name
        return tuple(names)


@dataclass(frozen=True)
class Captures:
    """Wrapper for a :external:mod:`re` ``Match`` object."""

    wrapped: re.Match[str]
    """The wrapped plain :external:mod:`re` ``Match`` object."""

    def span(self, group: int | str = 0) -> range | None:
        """The offsets of ``group`` in the text, or ``None`` if the group did not participate."""
        start, end = self.wrapped.span(group)
        if start == -1:
            return None
        return range(start, end)

    def spans(self) -> tuple[range | None, ...]:
        """The spans of all capture groups, starting with group 1."""
        return tuple(self.span(group) for group in range(1, 1 + self.wrapped.re.groups))

    def group(self, group: int | str = 0) -> str | None:
        """Forwards to :external:meth:`re.Match.group`."""
        return self.wrapped.group(group)

    def __len__(self) -> int:
        """The number of groups including the whole match."""
        return 1 + self.wrapped.re.groups

    def expand(self, template: str, syntax: TemplateSyntax = "dollar") -> str:
        """Expand a replacement template for this match.

        With the ``"dollar"`` syntax, ``$N``, ``$name`` and ``${name}`` refer to groups and ``$$`` is
        a literal dollar sign. References are as long as possible and unknown or non-participating
        groups expand to the empty string. A ``$`` that does not start a reference is kept as is.

        With the ``"backslash"`` syntax this forwards to :external:meth:`re.Match.expand`.

        :raises ReplacementError: When the ``"backslash"`` template is invalid.
        """
        if syntax == "backslash":
            try:
                return self.wrapped.expand(template)
            except (re.error, IndexError) as exc:
                raise ReplacementError(str(exc)) from exc

        if "$" not in template:
            return template

        output: list[str] = []

        for match in _TEMPLATE_PART_RE.finditer(template):
            escape_free = match["escape_free"]
            if escape_free is not None:
                output.append(escape_free)
                continue
            if match["dollar"] is not None or match["stray"] is not None:
                output.append("$")
                continue
            name = match["braced_name"]
            if name is None:
                name = match["group_name"]
            output.append(self._lookup(name))

        return "".join(output)

    def _lookup(self, name: str) -> str:
        group: int | str
        if name.isdecimal() and name.isascii():
            group = int(name)
            if group > self.wrapped.re.groups:
                return ""
        else:
            if name not in self.wrapped.re.groupindex:
                return ""
            group = name
        return self.wrapped.group(group) or ""

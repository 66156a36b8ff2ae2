from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from ..report import InputError

__all__ = [
    "split_into_commands",
    "ConfigCommand",
]


@dataclass(frozen=True)
class ConfigCommand:
    """A single option line within an options file."""

    index: int
    """Sequential index of the command within the file."""

    name: str

    arguments: str
    """Everything following the name up to the end of the line or a comment, without surrounding
    whitespace. Can contain spaces."""

    line: int
    """1-based line number of the command."""

    @property
    def arg_list(self) -> list[str]:
        return self.arguments.split()


_COMMAND_RE = re.compile(
    r"""
        ([ \t]*([#].*)?(\n|\Z))*
        [ \t]* (?P<command>
            (?P<name>[^[#\s][^#\s]*?)
            ([ \t]+ (?P<arguments>.*?))?
            [ \t]* ([#].*)?
            (\n|\Z)
        |(?P<section_header>\[)
        |\Z)
    """,
    re.VERBOSE | re.MULTILINE,
)


def split_into_commands(contents: str) -> Iterable[ConfigCommand]:
    """Split the contents of an options file into individual commands.

    Every non-empty line holds one command, a name followed by optional arguments. Empty lines and
    comments starting with ``#`` are skipped.
    """

    pos = 0
    index = 0

    while pos < len(contents):
        match = _COMMAND_RE.match(contents, pos)
        assert match is not None
        name = match["name"]
        if name is None:
            if match["section_header"] is not None:
                line = contents.count("\n", 0, match.start("section_header")) + 1
                raise InputError(
                    f"line {line}", "unexpected `[`, options files do not have sections"
                )
            break
        pos = match.end()
        yield ConfigCommand(
            index=index,
            name=name,
            arguments=(match["arguments"] or ""),
            line=contents.count("\n", 0, match.start("name")) + 1,
        )
        index += 1

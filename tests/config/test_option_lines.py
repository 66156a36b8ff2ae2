from __future__ import annotations

from textwrap import dedent

import pytest
from hypothesis import given
from hypothesis import strategies as st
from regex_visualiser.config import ConfigCommand, split_into_commands
from regex_visualiser.report import InputError


def test_simple():
    contents = """\
        no_argument
        single_argument on
        multiple_arguments 1 2 3
    """

    commands = list(split_into_commands(dedent(contents)))
    assert commands == [
        ConfigCommand(index=0, name="no_argument", arguments="", line=1),
        ConfigCommand(index=1, name="single_argument", arguments="on", line=2),
        ConfigCommand(index=2, name="multiple_arguments", arguments="1 2 3", line=3),
    ]
    assert commands[0].arg_list == []
    assert commands[1].arg_list == ["on"]
    assert commands[2].arg_list == ["1", "2", "3"]


def test_comments_and_whitespace():
    contents = """\
        # use the brighter group colors
           palette    alternate   # trailing comment

        font Fira Code
        # done
    """

    assert list(split_into_commands(dedent(contents))) == [
        ConfigCommand(index=0, name="palette", arguments="alternate", line=2),
        ConfigCommand(index=1, name="font", arguments="Fira Code", line=4),
    ]


@pytest.mark.parametrize("contents", ["", "\n\n", "# only a comment", "  \t\n# a\n\n"])
def test_no_commands(contents: str):
    assert list(split_into_commands(contents)) == []


def test_no_trailing_newline():
    assert list(split_into_commands("a 1\nb 2")) == [
        ConfigCommand(index=0, name="a", arguments="1", line=1),
        ConfigCommand(index=1, name="b", arguments="2", line=2),
    ]


def test_sections_are_rejected():
    with pytest.raises(InputError) as exc_info:
        list(split_into_commands("palette standard\n\n[options]\n"))

    assert exc_info.value.where == "line 3"
    assert "sections" in exc_info.value.message


names = st.from_regex(r"[a-z_][a-z0-9_]{0,10}", fullmatch=True)
arguments = st.lists(st.from_regex(r"[a-z0-9$\\{}<>]{1,5}", fullmatch=True), max_size=3)


@given(st.lists(st.tuples(names, arguments), max_size=5))
def test_lines_round_trip(lines: list[tuple[str, list[str]]]):
    contents = "".join(f"{name} {' '.join(args)}\n" for name, args in lines)

    commands = list(split_into_commands(contents))
    assert [(command.name, command.arg_list) for command in commands] == lines
    assert [command.line for command in commands] == list(range(1, len(lines) + 1))

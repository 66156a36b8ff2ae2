from __future__ import annotations

import pytest
from regex_visualiser.report import InputError, Report, text_position


@pytest.mark.parametrize(
    "offset, position", [(0, (1, 1)), (1, (1, 2)), (2, (1, 3)), (3, (2, 1)), (6, (3, 1))]
)
def test_text_position(offset: int, position: tuple[int, int]):
    assert text_position((2, 5), offset) == position


def test_report_without_spans():
    assert str(Report("abc", [], "message")) == "message\n"


def test_report_single_line():
    assert str(Report("abcdef", [range(1, 3), range(4, 4)], "message")).splitlines() == [
        "message",
        " 1 | abcdef",
        "   |  ^^ ^",
    ]


def test_report_context_lines():
    text = "\n".join(f"l{i}" for i in range(1, 7))
    assert str(Report(text, [range(3, 5), range(15, 15)], "message")).splitlines() == [
        "message",
        " 1 | l1",
        " 2 | l2",
        "   | ^^",
        " 3 | l3",
        "   :",
        " 5 | l5",
        " 6 | l6",
        "   | ^",
    ]


def test_report_wide_line_numbers():
    text = "\n" * 11 + "x"
    assert str(Report(text, [range(11, 12)], "message")).splitlines()[-2:] == [
        "12 | x",
        "   | ^",
    ]


def test_input_error():
    assert str(InputError(None, "message")) == "message"
    assert str(InputError("line 3", "message")) == "message (at 'line 3')"


def test_input_error_fallback_span():
    error = InputError(None, "message")
    error.fallback_span("line 1")
    assert error.where == "line 1"
    error.fallback_span("line 2")
    assert error.where == "line 1"

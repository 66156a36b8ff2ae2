"""Derived state of the visualiser and its recomputation.

Everything shown to the user is derived from the `Inputs`. `recompute` rebuilds the derived state
from scratch, only taking the group colors of the previous state into account so that colors stay
put while the user edits the pattern.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from . import syntax
from .colors import Color
from .decorate import (
    build_error_decoration,
    build_input_decoration,
    build_plain_decoration,
    build_regex_decoration,
)
from .decoration import InputDecoration, RegexDecoration
from .inspector import MatchSelector
from .logging import log_debug, log_warning
from .matcher import Matcher, ReplacementError
from .options import VisualiserOptions, default_options
from .syntax import Ast, RegexError

__all__ = ["Style", "Inputs", "StateBundle", "ErrorState", "State", "recompute", "Session"]


@dataclass(frozen=True)
class Style:
    font: str = "monospace"


@dataclass(frozen=True)
class Inputs:
    pattern: str
    text: str
    replacement_template: str = "$0"
    style: Style = Style()


@dataclass(frozen=True)
class StateBundle:
    """State for a pattern that parsed and compiled."""

    inputs: Inputs
    ast: Ast
    matcher: Matcher
    regex_decoration: RegexDecoration
    input_decoration: InputDecoration
    replacement_output: str
    selector: MatchSelector = field(compare=False, repr=False)

    @property
    def capture_group_colors(self) -> tuple[Color, ...]:
        return self.regex_decoration.capture_group_colors


@dataclass(frozen=True)
class ErrorState:
    """State for a malformed pattern."""

    inputs: Inputs
    error: RegexError
    regex_decoration: RegexDecoration
    """The pattern with the location of the error highlighted."""
    input_decoration: InputDecoration
    """The undecorated input text."""
    replacement_output: str
    """The replacement output of the last state that had one."""
    carry_over: RegexDecoration | None = None
    """The decoration of the last valid pattern, used to seed the group colors once the pattern is
    valid again."""

    @property
    def capture_group_colors(self) -> tuple[Color, ...]:
        return ()


State = Union[StateBundle, ErrorState]


def _carry_over(previous: State | None) -> RegexDecoration | None:
    if previous is None:
        return None
    if isinstance(previous, ErrorState):
        return previous.carry_over
    return previous.regex_decoration


def recompute(
    inputs: Inputs, previous: State | None = None, options: VisualiserOptions | None = None
) -> State:
    """Derive all state from the inputs.

    A malformed pattern does not raise, but results in an `ErrorState`.

    :param previous: The previous state. Its group colors are reused and its replacement output is
        kept when no new one can be produced.
    """
    if options is None:
        options = default_options()

    font = inputs.style.font
    carry_over = _carry_over(previous)
    previous_output = "" if previous is None else previous.replacement_output

    try:
        ast, matcher = syntax.compile(inputs.pattern)
    except RegexError as error:
        log_debug(f"pattern {inputs.pattern!r} rejected: {error.message}")
        return ErrorState(
            inputs,
            error,
            build_error_decoration(inputs.pattern, error, font),
            build_plain_decoration(inputs.text, font),
            previous_output,
            carry_over,
        )

    regex_decoration = build_regex_decoration(
        inputs.pattern,
        ast,
        font,
        carry_over,
        palette=options.palette_colors,
        invert_depth=options.invert_depth,
    )
    input_decoration = build_input_decoration(
        inputs.text, matcher, regex_decoration.capture_group_colors, font
    )

    if not inputs.pattern:
        replacement_output = inputs.text
    else:
        try:
            replacement_output = matcher.replace_all(
                inputs.text, inputs.replacement_template, options.syntax
            )
        except ReplacementError as error:
            log_warning(f"invalid replacement template {inputs.replacement_template!r}: {error}")
            replacement_output = previous_output

    log_debug(
        f"pattern {inputs.pattern!r}: {regex_decoration.group_count} groups,"
        f" {len(input_decoration.matches)} matches"
    )

    return StateBundle(
        inputs,
        ast,
        matcher,
        regex_decoration,
        input_decoration,
        replacement_output,
        MatchSelector(inputs.text, matcher),
    )


class Session:
    """The current inputs and derived state of an editing session.

    The setters only recompute the state when the value actually changes.
    """

    def __init__(
        self,
        pattern: str = "",
        text: str = "",
        replacement_template: str | None = None,
        style: Style | None = None,
        options: VisualiserOptions | None = None,
    ):
        if options is None:
            options = default_options()
        if replacement_template is None:
            replacement_template = options.replacement_template
        if style is None:
            style = Style(options.font)

        self.__options = options
        self.__inputs = Inputs(pattern, text, replacement_template, style)
        self.__state = recompute(self.__inputs, None, options)

    @property
    def inputs(self) -> Inputs:
        return self.__inputs

    @property
    def state(self) -> State:
        return self.__state

    @property
    def options(self) -> VisualiserOptions:
        return self.__options

    def set_pattern(self, pattern: str) -> bool:
        return self.__update(replace(self.__inputs, pattern=pattern))

    def set_text(self, text: str) -> bool:
        return self.__update(replace(self.__inputs, text=text))

    def set_replacement_template(self, replacement_template: str) -> bool:
        return self.__update(replace(self.__inputs, replacement_template=replacement_template))

    def set_style(self, style: Style) -> bool:
        return self.__update(replace(self.__inputs, style=style))

    def set_options(self, options: VisualiserOptions) -> bool:
        if _option_values(options) == _option_values(self.__options):
            return False
        self.__options = options
        self.__state = recompute(self.__inputs, self.__state, options)
        return True

    def __update(self, inputs: Inputs) -> bool:
        if inputs == self.__inputs:
            return False
        self.__inputs = inputs
        self.__state = recompute(inputs, self.__state, self.__options)
        return True


def _option_values(options: VisualiserOptions) -> tuple[object, ...]:
    return (options.palette, options.invert_depth, options.template_syntax)

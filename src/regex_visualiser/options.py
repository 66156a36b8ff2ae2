"""User options of the visualiser.

Options are read from a plain text file with one ``name value`` pair per line::

    # use the brighter group colors
    palette alternate
    invert_depth off
"""

from __future__ import annotations

from pathlib import Path

from .colors import PALETTES, Color
from .config import BoolValue, ConfigOptions, EnumValue, Option, StrValue
from .matcher import TemplateSyntax
from .report import InputError

__all__ = ["VisualiserOptions", "load_options", "default_options"]


class VisualiserOptions(ConfigOptions):
    palette = Option(EnumValue(*PALETTES), default="standard")
    """Background colors used for capture groups, ``standard`` or ``alternate``."""

    invert_depth = Option(BoolValue(), default=True)
    """Whether the capture group table stores ``max_depth - depth`` instead of the depth."""

    template_syntax = Option(EnumValue("dollar", "backslash"), default="dollar")
    """Syntax of replacement templates, see `regex_visualiser.matcher.Captures.expand`."""

    font = Option(StrValue(), default="monospace")

    replacement_template = Option(StrValue(allow_empty=True), default="$0")
    """Template used for a new session."""

    @property
    def palette_colors(self) -> tuple[Color, ...]:
        return PALETTES[self.palette]

    @property
    def syntax(self) -> TemplateSyntax:
        return "backslash" if self.template_syntax == "backslash" else "dollar"


def default_options() -> VisualiserOptions:
    return VisualiserOptions("").validate_options()


def load_options(path: str | Path) -> VisualiserOptions:
    """Read and validate an options file.

    :raises InputError: When the file contains unknown, duplicated or invalid options. The error
        names the file.
    """
    path = Path(path)
    contents = path.read_text(encoding="utf-8")
    try:
        return VisualiserOptions(contents).validate_options()
    except InputError as error:
        where = f"{path}: {error.where}" if error.where else str(path)
        raise InputError(where, error.message) from error

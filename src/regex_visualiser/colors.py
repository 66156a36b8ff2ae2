"""Colors and the assignment of colors to capture groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

if TYPE_CHECKING:
    from .decoration import RegexDecoration

__all__ = [
    "Color",
    "TRANSPARENT",
    "WHITE",
    "DARK_GRAY",
    "FG_RED",
    "BG_RED",
    "FOREGROUND_COLORS",
    "BACKGROUND_COLORS",
    "ALT_BACKGROUND_COLORS",
    "PALETTES",
    "assign_colors",
]


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for component in (self.r, self.g, self.b, self.a):
            assert 0 <= component <= 255, "color component out of range"

    @classmethod
    def from_hex(cls, hex: str) -> Color:
        """Parse ``#RRGGBB`` or ``#RRGGBBAA``."""
        digits = hex.lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"invalid hex color {hex!r}")
        components = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        return cls(*components)

    @property
    def hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02X}{self.g:02X}{self.b:02X}"
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"

    def __repr__(self) -> str:
        return f"Color({self.hex!r})"


TRANSPARENT = Color(0, 0, 0, 0)
WHITE = Color(255, 255, 255)
DARK_GRAY = Color(96, 96, 96)

FG_RED = Color(255, 0, 0)
BG_RED = Color.from_hex("#68292F")

FOREGROUND_COLORS = tuple(map(Color.from_hex, ["#179FFF", "#FFD700", "#DA70D6"]))
BACKGROUND_COLORS = tuple(map(Color.from_hex, ["#264D6D", "#6C5E20", "#613F61"]))
ALT_BACKGROUND_COLORS = tuple(map(Color.from_hex, ["#137ABF", "#BF9C00", "#995097"]))

PALETTES: Mapping[str, tuple[Color, ...]] = {
    "standard": BACKGROUND_COLORS,
    "alternate": ALT_BACKGROUND_COLORS,
}


def assign_colors(
    group_count: int,
    palette: Sequence[Color] = BACKGROUND_COLORS,
    previous: RegexDecoration | None = None,
) -> list[Color]:
    """Pick a background color for every capture group.

    The result has ``group_count + 1`` entries. Entry 0 is `TRANSPARENT` and stands for text outside
    of any group, entry ``i`` is the color of group ``i``.

    Groups keep the color they had in ``previous`` as long as that color is still part of the
    palette. Other groups cycle through the palette, skipping a color that equals the color of the
    preceding group.
    """
    assert palette, "empty palette"

    previous_colors: Sequence[Color] = ()
    if previous is not None:
        previous_colors = previous.capture_group_colors

    colors = [TRANSPARENT]

    for i in range(1, group_count + 1):
        if i < len(previous_colors) and previous_colors[i] in palette:
            colors.append(previous_colors[i])
            continue

        color = palette[(i - 1) % len(palette)]
        if color == colors[-1] and len(palette) > 1:
            color = palette[i % len(palette)]
        colors.append(color)

    return colors

# Options File Parsing
from __future__ import annotations

from ._low_level import ConfigCommand, split_into_commands
from ._options import (
    ConfigOptions,
    Option,
    OptionParser,
)
from ._values import (
    BoolValue,
    EnumValue,
    StrValue,
    ValueParser,
)

__all__ = [
    "split_into_commands",
    "ConfigCommand",
    # from ._options
    "ConfigOptions",
    "OptionParser",
    "Option",
    # from ._values
    "ValueParser",
    "StrValue",
    "BoolValue",
    "EnumValue",
]

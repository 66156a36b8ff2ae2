from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..report import InputError

T = TypeVar("T")


class ValueParser(Generic[T], metaclass=ABCMeta):
    """A parser for the arguments of a single option."""

    @abstractmethod
    def parse(self, input: str) -> T:
        """Parse a value.

        :raises InputError: When the input is not a valid value.
        """
        ...


@dataclass(frozen=True)
class StrValue(ValueParser[str]):
    """The arguments as a single string."""

    allow_empty: bool = False

    def parse(self, input: str) -> str:
        if not input and not self.allow_empty:
            raise InputError(None, "expected a non-empty string")
        return input


class BoolValue(ValueParser[bool]):
    """``on`` for ``True`` and ``off`` for ``False``."""

    def parse(self, input: str) -> bool:
        values = {"on": True, "off": False}
        try:
            return values[input]
        except KeyError:
            raise InputError(None, "expected `on` or `off`") from None


class EnumValue(ValueParser[str]):
    """One of a fixed set of words."""

    def __init__(self, *values: str) -> None:
        self.values = tuple(dict.fromkeys(values))

    def parse(self, input: str) -> str:
        if input in self.values:
            return input
        alternatives = [f"`{value}`" for value in self.values]
        if len(alternatives) > 1:
            last = alternatives.pop()
            alternatives[-1] += f" or {last}"
        raise InputError(None, f"expected one of {', '.join(alternatives)}")

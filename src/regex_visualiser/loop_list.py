from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar, overload

T = TypeVar("T")


class LoopList(Generic[T]):
    """A read-only list with a current index that wraps around at both ends."""

    def __init__(self, items: Iterable[T] = ()):
        self.__items = list(items)
        self.__index = 0

    @property
    def index(self) -> int:
        return self.__index

    def current(self) -> T | None:
        """The item at the current index, or ``None`` if the list is empty."""
        if not self.__items:
            return None
        return self.__items[self.__index]

    def inc(self) -> None:
        if self.__items:
            self.__index = (self.__index + 1) % len(self.__items)

    def dec(self) -> None:
        if self.__items:
            self.__index = (self.__index - 1) % len(self.__items)

    def try_set_index(self, index: int) -> bool:
        """Make ``index`` current if it is within bounds.

        :returns: Whether the index was changed.
        """
        if not 0 <= index < len(self.__items):
            return False
        self.__index = index
        return True

    def __len__(self) -> int:
        return len(self.__items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.__items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self.__items[index]

    def __repr__(self) -> str:
        return f"LoopList({self.__items!r}, index={self.__index})"

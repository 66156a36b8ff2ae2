from __future__ import annotations

import contextvars
import itertools
import types
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

_counter = itertools.count()


class _MISSING_TYPE:
    pass


MISSING = _MISSING_TYPE()


class ContextDescriptor(Generic[T]):
    """A descriptor that stores its value in a `contextvars.ContextVar`.

    Assigning or deleting the attribute only affects the current context. Code run with
    `run_in_context` sees the values of its caller, but its own assignments stay local.

    When no value was assigned in the current context, the default value is returned.
    """

    __var: contextvars.ContextVar[Any]
    __default: T
    __owner: Any
    __name: str | None

    def __init__(self, default: T | _MISSING_TYPE = MISSING) -> None:
        self.__var = contextvars.ContextVar(f"context_var_{next(_counter)}", default=MISSING)
        if default is not MISSING:
            self.default = default  # type: ignore
        self.__owner = None
        self.__name = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.__owner = owner
        self.__name = name

    def __attr_name(self) -> str:
        if self.__name is None:
            return repr(self)
        else:
            return f"{self.__owner.__qualname__}.{self.__name}"

    def __get__(self, instance: Any, owner: type) -> T:
        value = self.__var.get()
        if value is not MISSING:
            return value
        try:
            return self.default
        except AttributeError:
            raise AttributeError(f"Context variable {self.__attr_name()} not set") from None

    def __set__(self, instance: Any, value: T) -> None:
        self.__var.set(value)

    def __delete__(self, instance: Any) -> None:
        if self.__var.get() is MISSING:
            raise AttributeError(
                f"Context variable {self.__attr_name()} not set in the current context"
            )
        self.__var.set(MISSING)

    @property
    def default(self) -> T:
        """The value used when no value was assigned in the current context."""
        return self.__default

    @default.setter
    def default(self, value: T) -> None:
        self.__default = value

    @default.deleter
    def default(self) -> None:
        del self.__default


def context_group_class(cls: type[T]) -> type[T]:
    for name in getattr(cls, "__annotations__", ()):
        descriptor: ContextDescriptor[Any]
        try:
            default_or_descriptor = cls.__dict__[name]
        except KeyError:
            descriptor = ContextDescriptor()
        else:
            if not isinstance(default_or_descriptor, types.FunctionType) and hasattr(
                default_or_descriptor, "__get__"
            ):
                continue
            descriptor = ContextDescriptor(default_or_descriptor)
        descriptor.__set_name__(cls, name)
        setattr(cls, name, descriptor)
    return cls


def context_group(cls: type[T]) -> T:
    """Decorator for a class defining a group of context variables.

    Note that this decorator replaces the class with a singleton instance of the class with all
    annotated non-descriptor attributes wrapped in a `ContextDescriptor`. Existing non-descriptor
    attribute values are used as default values for the new descriptor.
    """

    cls = context_group_class(cls)

    # Lets the descriptors work on attribute access of the returned singleton.
    class AsMetaclass(cls, type):  # type: ignore
        pass

    class AsInstance(metaclass=AsMetaclass):
        pass

    if hasattr(cls, "__module__"):
        AsInstance.__module__ = cls.__module__
    if hasattr(cls, "__name__"):
        AsInstance.__name__ = cls.__name__
    if hasattr(cls, "__qualname__"):
        AsInstance.__qualname__ = cls.__qualname__
    if hasattr(cls, "__doc__"):
        AsInstance.__doc__ = cls.__doc__

    return AsInstance  # type: ignore


def run_in_context(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call ``fn`` in a copy of the current context.

    Context variables assigned by ``fn`` are reset when it returns.
    """
    return contextvars.copy_context().run(fn, *args, **kwargs)

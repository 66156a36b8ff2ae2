from __future__ import annotations

import copy
import typing
from abc import ABCMeta, abstractmethod
from dataclasses import MISSING, dataclass, field
from typing import Any, Generic, Iterable, Literal, TypeVar

from typing_extensions import Self

from ..report import InputError
from ._low_level import ConfigCommand, split_into_commands
from ._values import ValueParser

T = TypeVar("T")


class ConfigOptions:
    """Base class for options files.

    Derive from this class and assign `Option` objects to class attributes to declare the options
    that can be present. After construction and `validate_options`, reading such an attribute from
    an instance returns the parsed value.
    """

    # NOTE as this class is intended to be subclassed, make sure to use private attributes
    # (`__foo`) to avoid any accidental name clashes

    __tmp_option_parser_protos: list[OptionParser[Any]]
    __option_parser_protos: list[OptionParser[Any]] = []

    __options: list[ConfigCommand]
    __options_by_name: dict[str, list[ConfigCommand]]
    __processed: dict[ConfigCommand, bool]
    __parsers: dict[OptionParser[Any], OptionParser[Any]]
    __contents: str

    def __init__(self, contents: str):
        """Split the contents into commands and run every registered option parser on them.

        Unknown options are only reported by `validate_options`, so that a subclass can still
        claim additional commands in `setup`.

        :param contents: The contents of the options file.
        """
        options = list(split_into_commands(contents))

        options_by_name: dict[str, list[ConfigCommand]] = {}

        for option in options:
            options_by_name.setdefault(option.name, []).append(option)

        self.__contents = contents

        self.__options = options
        self.__options_by_name = options_by_name
        self.__processed = {option: False for option in options}

        self.__parsers = {
            proto: proto.instantiate_for(self) for proto in self.__option_parser_protos
        }

        self.setup()

        for parser in self.__parsers.values():
            parser.parse()

    def validate_options(self) -> Self:
        """Validate the parsed options and report unknown options.

        :raises InputError: For the first invalid or unknown option.
        :returns: This instance, for chaining.
        """
        for parser in self.__parsers.values():
            parser.validate()

        for option in self.__options:
            if not self.__processed[option]:
                raise InputError(f"line {option.line}", f"unknown option `{option.name}`")

        self.validate()
        return self

    def setup(self):
        """Invoked before any options are parsed."""
        pass

    def validate(self):
        """Invoked after all options are parsed and validated."""
        pass

    def options(
        self, name: str | None = None, unprocessed_only: bool = False
    ) -> list[ConfigCommand]:
        """Returns all options or all options with a given name.

        :param name: The name of the option to return or `None` to return all options.
        :param unprocessed_only: If `True` only unprocessed options are returned.
        """
        if name is None:
            options = self.__options
        else:
            options = self.__options_by_name.get(name, [])

        if unprocessed_only:
            return [option for option in options if not self.__processed[option]]
        return list(options)

    @property
    def contents(self) -> str:
        """The complete unprocessed contents of the options file."""
        return self.__contents

    def mark_as_processed(self, option: ConfigCommand | Iterable[ConfigCommand]) -> None:
        """Marks a given option as processed.

        Options that are still unprocessed when validating generate an error.
        """
        if isinstance(option, ConfigCommand):
            self.__processed[option] = True
        else:
            for single in option:
                self.mark_as_processed(single)

    @classmethod
    def __register_option_parser__(cls, parser_proto: OptionParser[Any]) -> None:
        """Register an option parser for a subclass.

        This is called by `OptionParser.__set_name__` when it is assigned to a class attribute.
        """
        try:
            registry = cls.__tmp_option_parser_protos
        except AttributeError:
            registry = cls.__tmp_option_parser_protos = list(cls.__option_parser_protos)

        registry.append(parser_proto)

    def __init_subclass__(cls) -> None:
        registry = cls.__dict__.get("_ConfigOptions__tmp_option_parser_protos")
        if registry is not None:
            cls.__option_parser_protos = registry
            del cls.__tmp_option_parser_protos

    def __option_parser_result__(self, proto: OptionParser[T]) -> T:
        return self.__parsers[proto].result

    def __option_parser_set_result__(self, proto: OptionParser[T], value: T) -> None:
        self.__parsers[proto].result = value

    def __repr__(self):  # pragma: no cover (debug only)
        contents = [repr(parser) for parser in self.__parsers.values()]
        return f"<{type(self).__name__} {', '.join(contents)}>"


@dataclass(eq=False)
class OptionParser(Generic[T], metaclass=ABCMeta):
    """Base class for option parsers."""

    config_options: ConfigOptions = field(init=False)
    """The options file instance this parser is bound to."""

    attr_name: str = field(init=False)
    """The name of the attribute this option parser is assigned to, which is also the name of the
    option."""

    _result: T = field(init=False)

    @property
    def result(self) -> T:
        return self._result

    @result.setter
    def result(self, value: T) -> None:
        self._result = value

    @abstractmethod
    def parse(self) -> None:
        """Parses all options that this option parser is responsible for.

        The parser collects its options with `matching_options`, which also marks them as
        processed, and sets `result`.
        """
        ...

    def validate(self) -> None:
        """Validates this parser's options after all options have been parsed."""
        pass

    def __repr__(self):  # pragma: no cover (debug only)
        if hasattr(self, "config_options"):
            return f"{self.attr_name}={self.result!r}"
        else:
            return f"{self.attr_name}"

    def matching_options(
        self, *, required: bool = False, unique: bool = True
    ) -> list[ConfigCommand]:
        """Returns a list of matching unprocessed options and marks them as processed."""
        options = self.config_options.options(self.attr_name, unprocessed_only=True)
        if not options and required:
            raise InputError(None, f"missing option `{self.attr_name}`")

        if unique and len(options) > 1:
            lines = ", ".join(str(option.line) for option in options)
            raise InputError(
                f"lines {lines}", f"option `{self.attr_name}` defined multiple times"
            )

        self.config_options.mark_as_processed(options)

        return options

    def instantiate_for(self, config_options: ConfigOptions) -> Self:
        """Returns a copy of this option parser bound to a given config options instance."""
        if hasattr(self, "config_options"):
            raise RuntimeError("option parser already bound to a config options instance")
        if not hasattr(self, "attr_name"):
            raise RuntimeError("option parser not assigned to a config options attribute")
        instance = copy.copy(self)
        instance.config_options = config_options
        return instance

    def __set_name__(self, owner: object, name: str) -> None:
        if not hasattr(self, "attr_name"):
            self.attr_name = name
        if isinstance(owner, type) and issubclass(owner, ConfigOptions):
            owner.__register_option_parser__(self)

    @typing.overload
    def __get__(self, instance: ConfigOptions, owner: type[ConfigOptions]) -> T: ...

    @typing.overload
    def __get__(self, instance: object, owner: object = None) -> Self: ...

    def __get__(self, instance: object, owner: object = None) -> T | Self:
        if isinstance(instance, ConfigOptions):
            return instance.__option_parser_result__(self)
        return self

    def __set__(self, instance: Any, value: T) -> None:
        if isinstance(instance, ConfigOptions):
            instance.__option_parser_set_result__(self, value)
        else:
            raise RuntimeError


@dataclass(repr=False, eq=False)
class Option(OptionParser[T]):
    """An option that can be specified at most once.

    This uses a `ValueParser` to parse the option's arguments and directly sets the result to the
    parsed value.
    """

    value_parser: ValueParser[T]
    """The parser for the option's arguments."""

    default: T | Literal[MISSING] = field(default_factory=lambda: MISSING)
    """The value used when the option is absent. Without a default the option is required."""

    def parse(self) -> None:
        options = self.matching_options(required=self.default is MISSING, unique=True)

        if self.default is not MISSING and not options:
            self.result = self.default
        else:
            try:
                self.result = self.value_parser.parse(options[0].arguments)
            except InputError as error:
                error.fallback_span(f"line {options[0].line}")
                raise error

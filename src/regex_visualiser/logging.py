from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import IO, Any, Callable, Literal, NoReturn, overload

import click

from .context import context_group

Level = Literal["debug", "info", "warning", "error"]

levels = ["debug", "info", "warning", "error"]

_level_order = {level: i for i, level in enumerate(levels)}


@dataclass
class LogEvent:
    msg: str
    level: Level

    scope: str | None = None

    time: float = field(init=False)

    def __post_init__(self):
        self.time = time.time()


class LoggedError(Exception):
    event: LogEvent

    def __init__(self, event: LogEvent):
        self.event = event

    def __str__(self) -> str:
        return self.event.msg


def default_time_formatter(t: float) -> str:
    tm = time.localtime(t)
    return f"{tm.tm_hour:02d}:{tm.tm_min:02d}:{tm.tm_sec:02d}"


def default_formatter(event: LogEvent):
    time_str = LogContext.time_format(event.time)
    parts: list[str] = []
    if LogContext.app_name:
        parts.append(f"{click.style(LogContext.app_name, fg='blue')} ")
    if time_str:
        parts.append(f"{click.style(time_str, fg='green')} ")
    if event.scope:
        parts.append(f"{click.style(event.scope, fg='magenta')}: ")

    prefix = "".join(parts)

    formatted_lines: list[str] = []

    for line in event.msg.splitlines():
        if event.level == "debug":
            formatted_lines.append(prefix + click.style(f"DEBUG: {line}", fg="cyan"))
        elif event.level == "warning":
            formatted_lines.append(prefix + click.style(f"WARNING: {line}", fg="yellow"))
        elif event.level == "error":
            formatted_lines.append(prefix + click.style(f"ERROR: {line}", fg="red"))
        else:
            formatted_lines.append(prefix + line)
    return "\n".join(formatted_lines)


@context_group
class LogContext:
    """Context variables to customize logging behavior.

    The values are looked up in the context that emits a log message, so a caller can change for
    example the `scope` for everything logged by a piece of code run with
    `regex_visualiser.context.run_in_context`.
    """

    app_name: str | None = None
    """The default formatter will prefix all log messages with this if set."""

    scope: str | None = None
    """Scope prefix to display as part of log messages."""

    quiet: bool = False
    """Downgrade all info level messages to debug level messages."""

    level: Level = "info"
    """The minimum log level to display/log."""

    log_format: Callable[[LogEvent], str] = default_formatter
    """The formatter used to format log messages."""

    time_format: Callable[[float], str] = default_time_formatter
    """The formatter used by the default formatter to format the time of log messages.

    This is provided so it can be overridden with a fixed timestamp when running tests that check
    the log output.
    """


def log(*args: Any, level: Level = "info", cls: type[LogEvent] = LogEvent) -> LogEvent:
    """Produce log output.

    The message is written to every destination registered with `start_logging`, unless its level
    is below the level of the destination.

    :param args: The message to log, will be converted to strings and joined with spaces.
    :param level: The log level, one of "debug", "info", "warning" or "error". Defaults to "info".
        To log at a different level you can also use `log_debug`, `log_warning` or `log_error`. Note
        that `log_error` will, by default, also raise an exception.
    :param cls: Customize the event class used.
    :return: The logged event.
    """
    msg = " ".join(str(arg) for arg in args)

    if LogContext.quiet and level == "info":
        level = "debug"

    event = cls(msg=msg, level=level, scope=LogContext.scope)

    for destination in list(_log_destinations):
        file, err, color, destination_level = destination
        if file is not None and file.closed:
            _log_destinations.remove(destination)
            continue
        if _level_order[event.level] < _level_order[destination_level or LogContext.level]:
            continue
        formatted = LogContext.log_format(event)
        click.echo(formatted, file=file, err=err, color=color)

    return event


def log_debug(*args: Any, cls: type[LogEvent] = LogEvent) -> LogEvent:
    """Produce debug log output.

    This calls `log` with ``level="debug"``.
    """
    return log(*args, level="debug", cls=cls)


def log_warning(*args: Any, cls: type[LogEvent] = LogEvent) -> LogEvent:
    """Produce warning log output.

    This calls `log` with ``level="warning"``.
    """
    return log(*args, level="warning", cls=cls)


@overload
def log_error(
    *args: Any, cls: type[LogEvent] = LogEvent, raise_error: Literal[True] = True
) -> NoReturn: ...


@overload
def log_error(
    *args: Any, cls: type[LogEvent] = LogEvent, raise_error: Literal[False]
) -> LogEvent: ...


def log_error(*args: Any, cls: type[LogEvent] = LogEvent, raise_error: bool = True) -> LogEvent:
    """Produce error log output and optionally raise a `LoggedError`.

    This calls `log` with ``level="error"`` to produce the log output.

    :param raise_error: Whether to raise a `LoggedError` exception. Defaults to ``True``.
    """
    event = log(*args, level="error", cls=cls)

    if raise_error:
        raise LoggedError(event)

    return event


_log_destinations: list[tuple[IO[Any] | None, bool, bool | None, Level | None]] = []


def start_logging(
    file: IO[Any] | None = None,
    err: bool = False,
    color: bool | None = None,
    level: Level | None = None,
) -> None:
    """Start writing log messages to a destination.

    Can be called multiple times to log to multiple destinations.

    It is possible to stop logging to a destination by closing the file object passed to this
    function.

    :param file: The file to log to. Defaults to `sys.stdout` or `sys.stderr` depending on ``err``.
    :param err: Whether to log to `sys.stderr` instead of `sys.stdout`. Defaults to ``False``.
    :param color: Whether to use colors. Defaults to ``True`` for terminals and ``False`` otherwise.
        When the ``NO_COLOR`` environment variable is set, this will be ignored and no colors will
        be used.
    :param level: The minimum level written to this destination. Defaults to `LogContext.level`
        of the code emitting the message.
    """
    if os.getenv("NO_COLOR", ""):
        color = False

    _log_destinations.append((file, err, color, level))


def stop_logging() -> None:
    """Remove all destinations registered with `start_logging`."""
    _log_destinations.clear()

from __future__ import annotations

from dataclasses import dataclass, field

from ..report import Report

__all__ = ["RegexError", "ParseError", "CompileError"]


@dataclass
class RegexError(Exception):
    """A pattern that could not be turned into an AST and a matcher."""

    pattern: str
    message: str

    def __str__(self) -> str:
        return str(Report(self.pattern, [], f"regex error: {self.message}"))


@dataclass
class ParseError(RegexError):
    """The pattern is syntactically invalid.

    ``span`` locates the problem. ``auxiliary_span`` optionally points at a related position, for
    example the first definition of a duplicated group name.
    """

    span: range = field(default=range(0, 0))
    auxiliary_span: range | None = None

    def __str__(self) -> str:
        spans = [self.span]
        if self.auxiliary_span is not None:
            spans.append(self.auxiliary_span)
        return str(Report(self.pattern, spans, f"regex parse error: {self.message}"))


@dataclass
class CompileError(RegexError):
    """The pattern is syntactically valid but was rejected by the matcher."""

    def __str__(self) -> str:
        return str(Report(self.pattern, [], f"regex compile error: {self.message}"))

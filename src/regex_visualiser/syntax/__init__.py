"""Parsing and compiling of regex patterns.

`compile` turns a pattern into an AST that keeps the source span of every node, together with a
`Matcher` for the same pattern. Errors are raised as `ParseError` when the pattern is malformed and
as `CompileError` when :external:mod:`re` rejects a well-formed pattern.
"""

from __future__ import annotations

import re

from ..matcher import Matcher
from ._ast import (
    Alternation,
    Assertion,
    Ast,
    Backreference,
    BracketedClass,
    ClassRange,
    Concat,
    Conditional,
    Dot,
    Empty,
    Flags,
    Group,
    Literal,
    PerlClass,
    Repetition,
    dump,
)
from ._errors import CompileError, ParseError, RegexError
from ._parser import parse
from ._walk import GroupSpan, capture_groups

__all__ = [
    "compile",
    "parse",
    "capture_groups",
    "GroupSpan",
    "RegexError",
    "ParseError",
    "CompileError",
    "Ast",
    "Empty",
    "Literal",
    "Dot",
    "Assertion",
    "PerlClass",
    "ClassRange",
    "BracketedClass",
    "Backreference",
    "Flags",
    "Repetition",
    "Group",
    "Conditional",
    "Concat",
    "Alternation",
    "dump",
]


def compile(pattern: str, flags: int | re.RegexFlag = 0) -> tuple[Ast, Matcher]:
    """Parse and compile a pattern.

    :param pattern: The pattern in :external:mod:`re` syntax.
    :param flags: Flags passed on to :external:func:`re.compile`. Only `re.VERBOSE` changes how
        the pattern is parsed.
    :raises ParseError: When the pattern is syntactically invalid.
    :raises CompileError: When :external:mod:`re` rejects the pattern.
    """
    ast = parse(pattern, verbose=bool(flags & re.VERBOSE))

    try:
        wrapped = re.compile(pattern, flags)
    except re.error as exc:
        raise CompileError(pattern, exc.msg) from exc
    except (OverflowError, RecursionError) as exc:
        raise CompileError(pattern, str(exc)) from exc

    matcher = Matcher(wrapped)
    assert len(capture_groups(ast)) == matcher.groups, "capture group count mismatch"
    return ast, matcher

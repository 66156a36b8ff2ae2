"""Span tracking parser for the pattern syntax of the :mod:`re` module.

The parser follows the grammar (and the error messages) of the standard library's own parser,
but keeps the offset range of every node, which the standard library throws away. Capture groups
are numbered in order of their opening parenthesis, exactly as :mod:`re` numbers them.
"""

from __future__ import annotations

import string
import unicodedata
from dataclasses import dataclass, field

from ._ast import (
    Alternation,
    Assertion,
    Ast,
    Backreference,
    BracketedClass,
    ClassItem,
    ClassRange,
    Concat,
    Conditional,
    Dot,
    Empty,
    Flags,
    Group,
    GroupKind,
    Literal,
    PerlClass,
    Repetition,
)
from ._errors import ParseError

__all__ = ["parse"]

_WHITESPACE = frozenset(" \t\n\r\v\f")
_DIGITS = frozenset(string.digits)
_OCTDIGITS = frozenset(string.octdigits)
_HEXDIGITS = frozenset(string.hexdigits)
_ASCIILETTERS = frozenset(string.ascii_letters)

_ESCAPES = {"a": "\a", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "\\": "\\"}
_CLASS_ESCAPES = {**_ESCAPES, "b": "\b"}
_ASSERTION_ESCAPES = frozenset("AZzbB")
_PERL_ESCAPES = frozenset("dDsSwW")
_HEX_ESCAPE_LENGTHS = {"x": 2, "u": 4, "U": 8}

_FLAGS = frozenset("aiLmsux")
_TYPE_FLAGS = frozenset("aLu")

_UNREPEATABLE = (Assertion, Flags)


@dataclass
class _Frame:
    """An open group, or the pattern as a whole for the bottom-most frame."""

    start: int
    """Offset of the opening parenthesis."""
    content_start: int
    kind: GroupKind | str
    verbose: bool
    branch_start: int
    items: list[Ast] = field(default_factory=list)
    alternatives: list[Ast] = field(default_factory=list)
    bars: list[int] = field(default_factory=list)
    capture_index: int | None = None
    name: str | None = None
    name_span: range | None = None
    flags: str = ""
    condition: int | str | None = None


def parse(pattern: str, verbose: bool = False) -> Ast:
    """Parse a pattern into an AST.

    :param pattern: The pattern to parse.
    :param verbose: Whether the pattern is parsed in verbose mode from the start, as with
        :external:data:`re.VERBOSE`.
    :raises ParseError: When the pattern is syntactically invalid.
    """
    return _Parser(pattern, verbose).parse()


class _Parser:
    def __init__(self, pattern: str, verbose: bool):
        self.pattern = pattern
        self.pos = 0
        self.capture_count = 0
        self.names: dict[str, tuple[int, range]] = {}
        self.open_groups: dict[int, int] = {}
        self.frames = [_Frame(0, 0, "root", verbose, 0)]

    def error(self, message: str, span: range, auxiliary_span: range | None = None) -> ParseError:
        return ParseError(self.pattern, message, span, auxiliary_span)

    @property
    def frame(self) -> _Frame:
        return self.frames[-1]

    def peek(self, offset: int = 0) -> str | None:
        pos = self.pos + offset
        if pos < len(self.pattern):
            return self.pattern[pos]
        return None

    def take_while(self, limit: int, chars: frozenset[str]) -> str:
        result = ""
        while len(result) < limit and self.peek() in chars:
            result += self.pattern[self.pos]
            self.pos += 1
        return result

    def parse(self) -> Ast:
        pattern = self.pattern

        while self.pos < len(pattern):
            char = pattern[self.pos]

            if self.frame.verbose:
                if char in _WHITESPACE:
                    self.pos += 1
                    continue
                if char == "#":
                    end = pattern.find("\n", self.pos)
                    self.pos = len(pattern) if end < 0 else end
                    continue

            if char == "(":
                self.open_group()
            elif char == "|":
                frame = self.frame
                frame.alternatives.append(_concat(frame.items, frame.branch_start, self.pos))
                frame.bars.append(self.pos)
                frame.items = []
                self.pos += 1
                frame.branch_start = self.pos
            elif char == ")":
                self.close_group()
            elif char in "*+?":
                start = self.pos
                self.pos += 1
                self.repeat(start, 0 if char != "+" else 1, None if char != "?" else 1)
            elif char == "{":
                self.counted_repeat_or_literal()
            elif char == "[":
                self.frame.items.append(self.bracketed_class())
            elif char == "\\":
                self.frame.items.append(self.escape())
            elif char == ".":
                self.frame.items.append(Dot(range(self.pos, self.pos + 1)))
                self.pos += 1
            elif char in "^$":
                self.frame.items.append(Assertion(range(self.pos, self.pos + 1), char))
                self.pos += 1
            else:
                self.frame.items.append(Literal(range(self.pos, self.pos + 1), char))
                self.pos += 1

        if len(self.frames) > 1:
            start = self.frame.start
            raise self.error("missing ), unterminated subpattern", range(start, start + 1))

        root = self.frame
        root.alternatives.append(_concat(root.items, root.branch_start, len(pattern)))
        return _alternation(root.alternatives, 0, len(pattern))

    # Groups

    def open_group(self) -> None:
        pattern = self.pattern
        start = self.pos
        self.pos += 1

        if self.peek() != "?":
            self.push_capture(start, None, None)
            return

        self.pos += 1
        char = self.peek()
        if char is None:
            raise self.error("unexpected end of pattern", range(start, self.pos))
        self.pos += 1

        if char == "P":
            kind = self.peek()
            if kind == "<":
                self.pos += 1
                name, name_span = self.group_name(">")
                self.push_capture(start, name, name_span)
            elif kind == "=":
                self.pos += 1
                name, name_span = self.group_name(")")
                try:
                    group, _ = self.names[name]
                except KeyError:
                    raise self.error(f"unknown group name {name!r}", name_span) from None
                self.check_not_open(group, name_span)
                self.frame.items.append(Backreference(range(start, self.pos), name))
            elif kind is None:
                raise self.error("unexpected end of pattern", range(start, self.pos))
            else:
                self.pos += 1
                raise self.error(f"unknown extension ?P{kind}", range(start, self.pos))
        elif char == ":":
            self.push(start, "non-capturing")
        elif char == ">":
            self.push(start, "atomic")
        elif char == "#":
            end = pattern.find(")", self.pos)
            if end < 0:
                raise self.error("missing ), unterminated comment", range(start, start + 1))
            self.pos = end + 1
        elif char == "=":
            self.push(start, "lookahead")
        elif char == "!":
            self.push(start, "negative-lookahead")
        elif char == "<":
            direction = self.peek()
            if direction is None:
                raise self.error("unexpected end of pattern", range(start, self.pos))
            self.pos += 1
            if direction == "=":
                self.push(start, "lookbehind")
            elif direction == "!":
                self.push(start, "negative-lookbehind")
            else:
                raise self.error(f"unknown extension ?<{direction}", range(start, self.pos))
        elif char == "(":
            self.push_conditional(start)
        elif char in _FLAGS or char == "-":
            self.pos -= 1
            self.inline_flags(start)
        else:
            raise self.error(f"unknown extension ?{char}", range(start, self.pos))

    def push(self, start: int, kind: GroupKind, verbose: bool | None = None) -> _Frame:
        if verbose is None:
            verbose = self.frame.verbose
        frame = _Frame(start, self.pos, kind, verbose, self.pos)
        self.frames.append(frame)
        return frame

    def push_capture(self, start: int, name: str | None, name_span: range | None) -> None:
        self.capture_count += 1
        index = self.capture_count

        if name is not None:
            assert name_span is not None
            if name in self.names:
                original, original_span = self.names[name]
                raise self.error(
                    f"redefinition of group name {name!r} as group {index}; was group {original}",
                    name_span,
                    original_span,
                )
            self.names[name] = (index, name_span)

        frame = self.push(start, "capture" if name is None else "named")
        frame.capture_index = index
        frame.name = name
        frame.name_span = name_span
        self.open_groups[index] = start

    def push_conditional(self, start: int) -> None:
        name_start = self.pos
        name_end = self.pattern.find(")", name_start)
        if name_end < 0:
            if name_start >= len(self.pattern):
                raise self.error("missing group name", range(name_start, name_start))
            raise self.error(
                "missing ), unterminated name", range(name_start, len(self.pattern))
            )
        name = self.pattern[name_start:name_end]
        name_span = range(name_start, name_end)
        if not name:
            raise self.error("missing group name", range(name_start, name_start + 1))
        self.pos = name_end + 1

        condition: int | str
        if name.isidentifier():
            if name not in self.names:
                raise self.error(f"unknown group name {name!r}", name_span)
            condition = name
        else:
            if not (name.isdecimal() and name.isascii()):
                raise self.error(f"bad character in group name {name!r}", name_span)
            condition = int(name)
            if not condition:
                raise self.error("bad group number", name_span)

        frame = self.push(start, "conditional")
        frame.condition = condition

    def group_name(self, terminator: str) -> tuple[str, range]:
        name_start = self.pos
        name_end = self.pattern.find(terminator, name_start)
        if name_end < 0:
            if name_start >= len(self.pattern):
                raise self.error("missing group name", range(name_start, name_start))
            raise self.error(
                f"missing {terminator}, unterminated name", range(name_start, len(self.pattern))
            )
        name = self.pattern[name_start:name_end]
        name_span = range(name_start, name_end)
        if not name:
            raise self.error("missing group name", range(name_start, name_start + 1))
        if not name.isidentifier():
            raise self.error(f"bad character in group name {name!r}", name_span)
        self.pos = name_end + 1
        return name, name_span

    def inline_flags(self, start: int) -> None:
        pattern = self.pattern
        add = ""
        remove = ""
        added_at: dict[str, int] = {}

        char = pattern[self.pos]

        if char != "-":
            while True:
                if char == "L":
                    raise self.error(
                        "bad inline flags: cannot use 'L' flag with a str pattern",
                        range(self.pos, self.pos + 1),
                    )
                if char in _TYPE_FLAGS and any(flag in _TYPE_FLAGS for flag in add if flag != char):
                    raise self.error(
                        "bad inline flags: flags 'a', 'u' and 'L' are incompatible",
                        range(self.pos, self.pos + 1),
                    )
                if char not in add:
                    add += char
                    added_at[char] = self.pos
                self.pos += 1
                char = self.peek()
                if char is None:
                    raise self.error("missing -, : or )", range(self.pos, self.pos))
                if char in ")-:":
                    break
                if char not in _FLAGS:
                    message = "unknown flag" if char.isalpha() else "missing -, : or )"
                    raise self.error(message, range(self.pos, self.pos + 1))

        if char == ")":
            self.pos += 1
            self.frame.items.append(Flags(range(start, self.pos), add))
            if "x" in add:
                self.frame.verbose = True
                self.frames[0].verbose = True
            return

        if char == "-":
            self.pos += 1
            char = self.peek()
            if char is None:
                raise self.error("missing flag", range(self.pos, self.pos))
            if char not in _FLAGS:
                message = "unknown flag" if char.isalpha() else "missing flag"
                raise self.error(message, range(self.pos, self.pos + 1))
            while True:
                if char in _TYPE_FLAGS:
                    raise self.error(
                        "bad inline flags: cannot turn off flags 'a', 'u' and 'L'",
                        range(self.pos, self.pos + 1),
                    )
                if char in add:
                    first = added_at[char]
                    raise self.error(
                        "bad inline flags: flag turned on and off",
                        range(self.pos, self.pos + 1),
                        range(first, first + 1),
                    )
                if char not in remove:
                    remove += char
                self.pos += 1
                char = self.peek()
                if char is None:
                    raise self.error("missing :", range(self.pos, self.pos))
                if char == ":":
                    break
                if char not in _FLAGS:
                    message = "unknown flag" if char.isalpha() else "missing :"
                    raise self.error(message, range(self.pos, self.pos + 1))

        assert char == ":"
        self.pos += 1

        verbose = (self.frame.verbose or "x" in add) and "x" not in remove
        frame = self.push(start, "flags", verbose)
        frame.flags = f"{add}-{remove}" if remove else add

    def close_group(self) -> None:
        end = self.pos
        if len(self.frames) == 1:
            raise self.error("unbalanced parenthesis", range(end, end + 1))

        frame = self.frames.pop()
        self.pos += 1
        frame.alternatives.append(_concat(frame.items, frame.branch_start, end))
        span = range(frame.start, self.pos)

        node: Ast
        if frame.kind == "conditional":
            if len(frame.alternatives) > 2:
                bar = frame.bars[1]
                raise self.error(
                    "conditional backref with more than two branches", range(bar, bar + 1)
                )
            assert frame.condition is not None
            no = frame.alternatives[1] if len(frame.alternatives) == 2 else None
            node = Conditional(span, frame.condition, frame.alternatives[0], no)
        else:
            body = _alternation(frame.alternatives, frame.content_start, end)
            node = Group(
                span,
                body,
                frame.kind,  # type: ignore
                capture_index=frame.capture_index,
                name=frame.name,
                name_span=frame.name_span,
                flags=frame.flags,
            )
            if frame.capture_index is not None:
                del self.open_groups[frame.capture_index]

        self.frame.items.append(node)

    def check_not_open(self, group: int, span: range) -> None:
        if group in self.open_groups:
            paren = self.open_groups[group]
            raise self.error("cannot refer to an open group", span, range(paren, paren + 1))

    # Repetitions

    def counted_repeat_or_literal(self) -> None:
        pattern = self.pattern
        start = self.pos
        self.pos += 1

        if self.peek() == "}":
            self.frame.items.append(Literal(range(start, start + 1), "{"))
            return

        low = self.take_while(len(pattern), _DIGITS)
        if self.peek() == ",":
            self.pos += 1
            high = self.take_while(len(pattern), _DIGITS)
        else:
            high = low

        if self.peek() != "}":
            self.pos = start + 1
            self.frame.items.append(Literal(range(start, start + 1), "{"))
            return
        self.pos += 1

        minimum = int(low) if low else 0
        maximum = int(high) if high else None
        if maximum is not None and maximum < minimum:
            raise self.error("min repeat greater than max repeat", range(start, self.pos))

        self.repeat(start, minimum, maximum)

    def repeat(self, start: int, minimum: int, maximum: int | None) -> None:
        greedy = True
        possessive = False
        if self.peek() == "?":
            greedy = False
            self.pos += 1
        elif self.peek() == "+":
            possessive = True
            self.pos += 1

        items = self.frame.items
        if not items or isinstance(items[-1], _UNREPEATABLE):
            raise self.error("nothing to repeat", range(start, self.pos))

        child = items[-1]
        if isinstance(child, Repetition):
            raise self.error(
                "multiple repeat",
                range(start, self.pos),
                range(child.child.span.stop, child.span.stop),
            )

        items[-1] = Repetition(
            range(child.span.start, self.pos), child, minimum, maximum, greedy, possessive
        )

    # Escapes and classes

    def escape(self) -> Ast:
        start = self.pos
        self.pos += 1
        char = self.peek()
        if char is None:
            raise self.error("bad escape (end of pattern)", range(start, start + 1))
        self.pos += 1

        if char in _ASSERTION_ESCAPES:
            return Assertion(range(start, self.pos), f"\\{char}")
        if char in _PERL_ESCAPES:
            return PerlClass(range(start, self.pos), char.lower(), char.isupper())
        if char in _ESCAPES:
            return Literal(range(start, self.pos), _ESCAPES[char])
        if char in _HEX_ESCAPE_LENGTHS or char == "N":
            return self.char_escape(start, char)
        if char == "0":
            digits = char + self.take_while(2, _OCTDIGITS)
            return Literal(range(start, self.pos), chr(int(digits, 8)))
        if char in _DIGITS:
            digits = char
            if self.peek() in _DIGITS:
                digits += self.pattern[self.pos]
                self.pos += 1
                if digits[0] in _OCTDIGITS and digits[1] in _OCTDIGITS:
                    if self.peek() in _OCTDIGITS:
                        digits += self.pattern[self.pos]
                        self.pos += 1
                        return self.octal(start, digits)
            group = int(digits)
            span = range(start, self.pos)
            if group > self.capture_count:
                raise self.error(f"invalid group reference {group}", span)
            self.check_not_open(group, span)
            return Backreference(span, group)
        if char in _ASCIILETTERS:
            raise self.error(f"bad escape \\{char}", range(start, self.pos))
        return Literal(range(start, self.pos), char)

    def class_atom(self) -> Literal | PerlClass:
        start = self.pos
        char = self.pattern[start]
        self.pos += 1
        if char != "\\":
            return Literal(range(start, self.pos), char)

        char = self.peek()
        if char is None:
            raise self.error("bad escape (end of pattern)", range(start, start + 1))
        self.pos += 1

        if char in _CLASS_ESCAPES:
            return Literal(range(start, self.pos), _CLASS_ESCAPES[char])
        if char in _PERL_ESCAPES:
            return PerlClass(range(start, self.pos), char.lower(), char.isupper())
        if char in _HEX_ESCAPE_LENGTHS or char == "N":
            return self.char_escape(start, char)
        if char in _OCTDIGITS:
            return self.octal(start, char + self.take_while(2, _OCTDIGITS))
        if char in _DIGITS or char in _ASCIILETTERS:
            raise self.error(f"bad escape \\{char}", range(start, self.pos))
        return Literal(range(start, self.pos), char)

    def octal(self, start: int, digits: str) -> Literal:
        value = int(digits, 8)
        if value > 0o377:
            raise self.error(
                f"octal escape value \\{digits} outside of range 0-0o377", range(start, self.pos)
            )
        return Literal(range(start, self.pos), chr(value))

    def char_escape(self, start: int, char: str) -> Literal:
        if char == "N":
            if self.peek() != "{":
                raise self.error("missing {", range(start, self.pos))
            self.pos += 1
            name_start = self.pos
            name_end = self.pattern.find("}", name_start)
            if name_end < 0:
                raise self.error(
                    "missing }, unterminated name", range(name_start, len(self.pattern))
                )
            if name_end == name_start:
                raise self.error("missing character name", range(name_start, name_start + 1))
            name = self.pattern[name_start:name_end]
            self.pos = name_end + 1
            try:
                return Literal(range(start, self.pos), unicodedata.lookup(name))
            except KeyError:
                raise self.error(
                    f"undefined character name {name!r}", range(start, self.pos)
                ) from None

        length = _HEX_ESCAPE_LENGTHS[char]
        digits = self.take_while(length, _HEXDIGITS)
        span = range(start, self.pos)
        if len(digits) != length:
            raise self.error(f"incomplete escape \\{char}{digits}", span)
        value = int(digits, 16)
        if value > 0x10FFFF:
            raise self.error(f"bad escape \\{char}{digits}", span)
        return Literal(span, chr(value))

    def bracketed_class(self) -> BracketedClass:
        pattern = self.pattern
        start = self.pos
        self.pos += 1

        def unterminated() -> ParseError:
            return self.error("unterminated character set", range(start, start + 1))

        negated = False
        if self.peek() == "^":
            negated = True
            self.pos += 1

        items: list[ClassItem] = []

        while True:
            char = self.peek()
            if char is None:
                raise unterminated()
            if char == "]" and items:
                self.pos += 1
                break

            item_start = self.pos
            first = self.class_atom()

            if self.peek() != "-":
                items.append(first)
                continue

            self.pos += 1
            char = self.peek()
            if char is None:
                raise unterminated()
            if char == "]":
                items.append(first)
                items.append(Literal(range(self.pos - 1, self.pos), "-"))
                self.pos += 1
                break

            last = self.class_atom()
            span = range(item_start, self.pos)
            if (
                not isinstance(first, Literal)
                or not isinstance(last, Literal)
                or ord(last.char) < ord(first.char)
            ):
                raise self.error(f"bad character range {pattern[item_start : self.pos]}", span)
            items.append(ClassRange(span, first, last))

        return BracketedClass(range(start, self.pos), negated, tuple(items))


def _concat(items: list[Ast], start: int, end: int) -> Ast:
    if not items:
        return Empty(range(start, end))
    if len(items) == 1:
        return items[0]
    return Concat(range(start, end), tuple(items))


def _alternation(alternatives: list[Ast], start: int, end: int) -> Ast:
    if len(alternatives) == 1:
        return alternatives[0]
    return Alternation(range(start, end), tuple(alternatives))

"""Error taxonomy for Stacc.

Two independent domains exist: parse errors, which carry the source span
of the offending token, and runtime errors, which carry the names of the
types and operations involved. Both are exceptions so they unwind through
the recursive parser and evaluator without any explicit plumbing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Span, TokenKind


class StaccError(Exception):
    """Base class for every error raised by Stacc."""


###############################################################################
# Parse errors
###############################################################################


class ParseError(StaccError):
    """A syntax error tied to a span of the source text."""
    def __init__(self, span: 'Span'):
        super().__init__(self.message)
        self.span = span

    @property
    def message(self) -> str:
        return 'Parse error'

    def describe(self, source: str) -> str:
        line, column = self.span.line_and_column(source)
        return f"Parse error at {line + 1}:{column + 1} - {self.message}"

    def __str__(self) -> str:
        return f"Parse error - {self.message}"


class UnexpectedToken(ParseError):
    def __init__(self, expected: str, found: 'TokenKind', span: 'Span'):
        self.expected = expected
        self.found = found
        super().__init__(span)

    @property
    def message(self) -> str:
        return f"Expected {self.expected}, got {self.found}"


class InvalidLiteral(ParseError):
    def __init__(self, kind: 'TokenKind', text: str, span: 'Span'):
        self.kind = kind
        self.text = text
        super().__init__(span)

    @property
    def message(self) -> str:
        return f"'{self.text}' is not a valid {self.kind}"


class UnexpectedEof(ParseError):
    @property
    def message(self) -> str:
        return 'Unexpected EOF'


###############################################################################
# Runtime errors
###############################################################################


class StaccRuntimeError(StaccError):
    """Raised while evaluating a program; halts the current statement sequence."""
    def __str__(self) -> str:
        return self.message

    @property
    def message(self) -> str:
        return 'Runtime error'


class WrongType(StaccRuntimeError):
    def __init__(self, expected: str, got: str):
        super().__init__(expected, got)
        self.expected = expected
        self.got = got

    @property
    def message(self) -> str:
        return f"Type error - expected {self.expected}, got {self.got}"


class UndefinedValue(StaccRuntimeError):
    def __init__(self, ident: str):
        super().__init__(ident)
        self.ident = ident

    @property
    def message(self) -> str:
        return f"Value error - {self.ident} is undefined"


class CannotPerformOnType(StaccRuntimeError):
    def __init__(self, op: str, typ: str):
        super().__init__(op, typ)
        self.op = op
        self.typ = typ

    @property
    def message(self) -> str:
        return f"Type error - Cannot perform {self.op} on {self.typ}"


class CannotPerformOnTypeWith(StaccRuntimeError):
    def __init__(self, op: str, typ: str, with_: str):
        super().__init__(op, typ, with_)
        self.op = op
        self.typ = typ
        self.with_ = with_

    @property
    def message(self) -> str:
        return f"Type error - Cannot perform {self.op} on {self.typ} with {self.with_} value"


class CannotCompare(StaccRuntimeError):
    def __init__(self, typ: str):
        super().__init__(typ)
        self.typ = typ

    @property
    def message(self) -> str:
        return f"Type error - Cannot perform comparison on {self.typ}"


class StringTooLong(StaccRuntimeError):
    def __init__(self, length: int, limit: int):
        super().__init__(length, limit)
        self.length = length
        self.limit = limit

    @property
    def message(self) -> str:
        return f"Value error - string of length {self.length} exceeds the limit of {self.limit}"


class EmptyStack(StaccRuntimeError):
    @property
    def message(self) -> str:
        return 'Stack error - Stack is empty'

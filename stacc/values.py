"""Runtime values and their semantics.

Stacc has four kinds of runtime value, represented by plain Python
objects wherever possible:

* numbers are always ``float`` (integer literals are widened on evaluation),
* strings are ``str``,
* booleans are ``bool``,
* functions are `Function` records carrying their definition by value.

This module implements the type-directed behaviour of every operator. The
left operand's type decides which rules apply; unsupported combinations
raise one of the data-carrying errors from `stacc.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Tuple, Union
import math

from .errors import (
    WrongType, CannotPerformOnType, CannotPerformOnTypeWith, CannotCompare, StringTooLong,
)

# Longest string a repetition may build
MAX_STRING_LENGTH = 2 ** 28


@dataclass(frozen=True)
class Function:
    """A user-defined function. Calling it is an interpreter operation."""
    name: str
    params: Tuple[str, ...]
    body: Tuple[Any, ...]

    def __str__(self) -> str:
        return f"<function {self.name}({', '.join(self.params)})>"


Value = Union[Function, str, float, bool]


def type_name(value: Value) -> str:
    """Return the Stacc type name of a runtime value."""
    if isinstance(value, Function):
        return 'function'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    raise TypeError(f"not a Stacc value: {value!r}")


def format_number(number: Union[int, float]) -> str:
    """Render a number in its natural decimal form, never in exponent notation."""
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return 'NaN'
    if math.isinf(number):
        return 'inf' if number > 0 else '-inf'
    if number.is_integer():
        if number == 0 and math.copysign(1.0, number) < 0:
            return '-0'
        return str(int(number))
    text = repr(number)
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
    return text


def to_string(value: Value) -> str:
    """Display form used by `print` and the REPL state table."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def is_truthy(value: Value) -> bool:
    """Coerce a value to a boolean for `and`, `or` and `not`.

    Note the numeric rule: a number is truthy only when it is exactly 0.
    """
    if isinstance(value, Function):
        return len(value.body) > 0
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, bool):
        return value
    return value == 0.0


def expect_function(value: Value) -> Function:
    if isinstance(value, Function):
        return value
    raise WrongType('function', type_name(value))


def expect_number(value: Value) -> float:
    if isinstance(value, float):
        return value
    raise WrongType('number', type_name(value))


###############################################################################
# Arithmetic
###############################################################################


def add(a: Value, b: Value) -> Value:
    if isinstance(a, str):
        if isinstance(b, str):
            return a + b
        raise CannotPerformOnTypeWith('addition', 'string', type_name(b))
    if isinstance(a, float):
        if isinstance(b, float):
            return a + b
        raise CannotPerformOnTypeWith('addition', 'number', type_name(b))
    raise CannotPerformOnType('addition', type_name(a))


def sub(a: Value, b: Value) -> Value:
    if isinstance(a, float):
        if isinstance(b, float):
            return a - b
        raise CannotPerformOnTypeWith('subtraction', 'number', type_name(b))
    raise CannotPerformOnType('subtraction', type_name(a))


def repeat(text: str, count: float) -> str:
    # Negative, NaN and infinite counts clamp to an empty string.
    if not text or not math.isfinite(count) or count <= 0:
        return ''
    times = math.floor(count)
    length = len(text) * times
    if length > MAX_STRING_LENGTH:
        raise StringTooLong(length, MAX_STRING_LENGTH)
    return text * times


def mul(a: Value, b: Value) -> Value:
    if isinstance(a, str):
        if isinstance(b, float):
            return repeat(a, b)
        raise CannotPerformOnTypeWith('multiplication', 'string', type_name(b))
    if isinstance(a, float):
        if isinstance(b, float):
            return a * b
        raise CannotPerformOnTypeWith('multiplication', 'number', type_name(b))
    raise CannotPerformOnType('multiplication', type_name(a))


def div(a: Value, b: Value) -> Value:
    if isinstance(a, float):
        if not isinstance(b, float):
            raise CannotPerformOnTypeWith('division', 'number', type_name(b))
        if b == 0.0:
            # IEEE-754 semantics rather than ZeroDivisionError
            if a == 0.0 or math.isnan(a):
                return math.nan
            return math.copysign(math.inf, a) * math.copysign(1.0, b)
        return a / b
    raise CannotPerformOnType('division', type_name(a))


###############################################################################
# Comparison
###############################################################################


COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    '<': lambda a, b: a < b,
    '>': lambda a, b: a > b,
    '<=': lambda a, b: a <= b,
    '>=': lambda a, b: a >= b,
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
}


def compare(op: str, a: Value, b: Value) -> bool:
    """Compare two numbers or two strings (lexicographically)."""
    if isinstance(a, (Function, bool)):
        raise CannotCompare(type_name(a))
    if type_name(a) != type_name(b):
        raise CannotCompare(type_name(b))
    return COMPARATORS[op](a, b)


ARITHMETIC: Dict[str, Callable[[Value, Value], Value]] = {
    '+': add,
    '-': sub,
    '*': mul,
    '/': div,
}


def apply_binary_op(op: str, a: Value, b: Value) -> Value:
    """Apply an arithmetic or relational operator to two evaluated operands."""
    if op in ARITHMETIC:
        return ARITHMETIC[op](a, b)
    if op in COMPARATORS:
        return compare(op, a, b)
    raise ValueError(f"unknown operator {op}")

"""Abstract Syntax Tree (AST) definitions for the Stacc language.

Statements produce no value; expressions evaluate to a value. Every node
renders as an s-expression via ``str()``, which is what the parser tests
compare against, e.g. ``1 + 2 * 3`` becomes ``(+ 1 (* 2 3))``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .values import format_number


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################


@dataclass
class Ident(Node):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class Literal(Node):
    value: Union[str, float, int, bool]

    @property
    def literal_type(self) -> str:
        if isinstance(self.value, bool):
            return 'Bool'
        if isinstance(self.value, int):
            return 'Integer'
        if isinstance(self.value, float):
            return 'Float'
        return 'String'

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return 'true' if self.value else 'false'
        if isinstance(self.value, (int, float)):
            return format_number(self.value)
        return self.value


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"({self.op} {self.left} {self.right})"


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node

    def __str__(self) -> str:
        return f"({self.op} {self.operand})"


@dataclass
class Pop(Node):
    """Pop a value off the current stack for use as an expression."""

    def __str__(self) -> str:
        return 'pop'


###############################################################################
# Statements
###############################################################################


@dataclass
class FunctionDef(Node):
    name: str
    params: List[str] = field(default_factory=list)
    body: List[Node] = field(default_factory=list)

    def __str__(self) -> str:
        params = ' '.join(self.params)
        body = ' '.join(str(stmt) for stmt in self.body)
        return f"(define {self.name} ({params}) {body})"


@dataclass
class Assign(Node):
    name: str
    expr: Node

    def __str__(self) -> str:
        return f"(set {self.name} {self.expr})"


@dataclass
class Push(Node):
    expr: Node

    def __str__(self) -> str:
        return f"(push {self.expr})"


@dataclass
class Print(Node):
    expr: Node

    def __str__(self) -> str:
        return f"(print {self.expr})"


@dataclass
class Call(Node):
    name: str

    def __str__(self) -> str:
        return f"(call {self.name})"


@dataclass
class PopStatement(Node):
    """Pop a value off the current stack and discard it."""

    def __str__(self) -> str:
        return 'pop'

"""Interpreter for the Stacc language.

The interpreter walks statement and expression nodes against an
`Environment` of frames. Each frame owns its variables and an operand
stack; the stacks are how arguments enter a function and how a result
leaves it:

1. `call f` looks `f` up and enters a new frame;
2. each parameter, in declaration order, is popped off the caller's stack;
3. the body runs inside the new frame;
4. whatever is left on top of the callee's stack (if anything) is pushed
   onto the caller's stack once the frame is gone.

The first error raised aborts the rest of the statement sequence. Frames
are released by a context manager, so a failed call never leaves the
environment at the wrong depth and an interactive session can carry on.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from .ast import (
    Node, Ident, Literal, BinaryOp, UnaryOp, Pop,
    FunctionDef, Assign, Push, Print, Call, PopStatement,
)
from .environment import Environment
from .parser import parse_program
from .values import (
    Function, Value, apply_binary_op, expect_function, expect_number,
    is_truthy, to_string, type_name,
)


class Interpreter:
    """Executes Stacc statements; owns all of the program state."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.env = Environment()
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            indent = '  ' * self.env.depth
            if self.debug_fp:
                self.debug_fp.write(indent + msg + '\n')
                self.debug_fp.flush()
            else:
                print(indent + msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, statements: Sequence[Node]):
        self.execute_block(statements)

    def run_one(self, statement: Node):
        self.execute(statement)

    def snapshot(self) -> Tuple[Dict[str, Value], List[Value]]:
        """Global variables and global stack, for display by a front end."""
        return self.env.dump()

    @property
    def depth(self) -> int:
        return self.env.depth

    def execute_block(self, statements: Sequence[Node]):
        for stmt in statements:
            self.execute(stmt)

    def execute(self, node: Node):
        if self.debug_level >= 1:
            self.debug(f"exec {node}")
        if isinstance(node, Assign):
            value = self.evaluate(node.expr)
            self.env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"set {node.name}: {type_name(value)} = {to_string(value)}")
            return
        if isinstance(node, Push):
            self.push(self.evaluate(node.expr))
            return
        if isinstance(node, PopStatement):
            self.pop()
            return
        if isinstance(node, Print):
            value = self.evaluate(node.expr)
            print(to_string(value), file=self.out)
            return
        if isinstance(node, FunctionDef):
            func = Function(node.name, tuple(node.params), tuple(node.body))
            self.env.set(node.name, func)
            if self.debug_level >= 2:
                self.debug(f"define function {func}")
            return
        if isinstance(node, Call):
            self.call_function(node.name)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def call_function(self, name: str):
        func = expect_function(self.env.get(name))
        if self.debug_level >= 3:
            self.debug(f"enter {func}")
        with self.env.scope() as frame:
            for param in func.params:
                value = self.env.parent_pop()
                frame.variables[param] = value
                if self.debug_level >= 2:
                    self.debug(f"bind {param} = {to_string(value)}")
            self.execute_block(func.body)
            return_value = frame.stack.pop() if frame.stack else None
        if self.debug_level >= 3:
            self.debug(f"leave {func.name}")
        if return_value is not None:
            self.push(return_value)

    def push(self, value: Value):
        self.env.push(value)
        if self.debug_level >= 3:
            self.debug(f"push {to_string(value)}")

    def pop(self) -> Value:
        value = self.env.pop()
        if self.debug_level >= 3:
            self.debug(f"pop {to_string(value)}")
        return value

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, Literal):
            value = node.value
            if isinstance(value, bool) or isinstance(value, str):
                return value
            return float(value)
        if isinstance(node, Ident):
            return self.env.get(node.name)
        if isinstance(node, Pop):
            return self.pop()
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            if node.op == '-':
                return -expect_number(operand)
            if node.op == 'not':
                return not is_truthy(operand)
            raise ValueError(f"unknown unary operator {node.op}")
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            # Short-circuit for and / or
            if node.op == 'and':
                return is_truthy(left) and is_truthy(self.evaluate(node.right))
            if node.op == 'or':
                return is_truthy(left) or is_truthy(self.evaluate(node.right))
            right = self.evaluate(node.right)
            return apply_binary_op(node.op, left, right)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Parse and run a Stacc program, returning the interpreter for inspection."""
    statements = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(statements)
    finally:
        interpreter.close()
    return interpreter

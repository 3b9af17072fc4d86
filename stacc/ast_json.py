"""JSON serialization/deserialization for the Stacc AST.

This module converts between Stacc AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Literal values keep their
Python type, so integer and float literals survive a round trip distinctly.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Ident,
    Literal,
    BinaryOp,
    UnaryOp,
    Pop,
    FunctionDef,
    Assign,
    Push,
    Print,
    Call,
    PopStatement,
)


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    # Statements
    if isinstance(node, FunctionDef):
        return {
            "type": "FunctionDef",
            "name": node.name,
            "params": list(node.params),
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Push):
        return {"type": "Push", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Print):
        return {"type": "Print", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name}
    if isinstance(node, PopStatement):
        return {"type": "PopStatement"}

    # Expressions
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value, "literal_type": node.literal_type}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Pop):
        return {"type": "Pop"}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def literal_from_obj(obj: dict) -> Literal:
    value = obj["value"]
    literal_type = obj.get("literal_type")
    # JSON has a single number type; restore the literal's own
    if literal_type == 'Integer':
        value = int(value)
    elif literal_type == 'Float':
        value = float(value)
    return Literal(value)


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "FunctionDef":
        return FunctionDef(
            name=obj["name"],
            params=list(obj["params"]),
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "Assign":
        return Assign(name=obj["name"], expr=ast_from_obj(obj["expr"]))
    if t == "Push":
        return Push(expr=ast_from_obj(obj["expr"]))
    if t == "Print":
        return Print(expr=ast_from_obj(obj["expr"]))
    if t == "Call":
        return Call(name=obj["name"])
    if t == "PopStatement":
        return PopStatement()
    if t == "Ident":
        return Ident(name=obj["name"])
    if t == "Literal":
        return literal_from_obj(obj)
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "Pop":
        return Pop()

    raise ValueError(f"Unknown AST node type: {t}")

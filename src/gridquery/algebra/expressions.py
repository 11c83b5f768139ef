"""
Expression nodes for WHERE conditions.

Conditions are parsed into a small AST: Literal values, UnaryOp for logical NOT
and numeric negation, and BinaryOp for comparison and logical operators. There
are no name or call nodes; by the time a condition is parsed every column
reference has already been replaced by a literal cell value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

COMPARISON_OPS = frozenset({"==", "===", "!=", "!==", ">", "<", ">=", "<="})
LOGICAL_OPS = frozenset({"&&", "||"})
UNARY_OPS = frozenset({"!", "-"})


def _format_literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return repr(value)


@dataclass(eq=False)
class Expression:
    """Base class for all condition expression nodes."""

    def __str__(self) -> str:
        raise NotImplementedError(f"__str__ not implemented for {self.__class__.__name__}")


@dataclass(eq=False)
class Literal(Expression):
    """A constant: number, string, boolean or null (None)."""

    value: Any = None

    def __str__(self) -> str:
        return _format_literal(self.value)


@dataclass(eq=False)
class BinaryOp(Expression):
    """Binary operation (comparison or logical)."""

    op: str = ""
    left: Expression = field(default_factory=Literal)
    right: Expression = field(default_factory=Literal)

    def __post_init__(self):
        if self.op not in COMPARISON_OPS | LOGICAL_OPS:
            raise ValueError(f"Unknown binary operator: {self.op!r}")

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(eq=False)
class UnaryOp(Expression):
    """Unary operation: logical NOT (``!``) or numeric negation (``-``)."""

    op: str = ""
    operand: Expression = field(default_factory=Literal)

    def __post_init__(self):
        if self.op not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator: {self.op!r}")

    def __str__(self) -> str:
        return f"({self.op}{self.operand})"

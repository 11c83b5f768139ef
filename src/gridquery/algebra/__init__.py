"""
Condition algebra and column references.

This module defines the pieces used to filter and address rows:
- Expression AST: Literal, BinaryOp, UnaryOp
- parse_condition: tokenizer + recursive-descent parser for WHERE strings
- evaluate_expression: evaluator for parsed conditions
- Column references: ByIndex, ByLetter, ByName and resolve_column
"""

from .expressions import BinaryOp, Expression, Literal, UnaryOp
from .parser import parse_condition, tokenize
from .eager import evaluate_expression, is_truthy
from .columns import ByIndex, ByLetter, ByName, ColumnRef, as_column_ref, resolve_column

__all__ = [
    "Expression",
    "Literal",
    "BinaryOp",
    "UnaryOp",
    "parse_condition",
    "tokenize",
    "evaluate_expression",
    "is_truthy",
    "ByIndex",
    "ByLetter",
    "ByName",
    "ColumnRef",
    "as_column_ref",
    "resolve_column",
]

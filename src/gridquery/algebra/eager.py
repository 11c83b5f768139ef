"""Evaluator for parsed WHERE conditions.

Walks an expression tree built by ``gridquery.algebra.parser`` and produces a
plain Python value. Comparison follows spreadsheet-style loose typing: numeric
strings compare equal to the numbers they spell, and relational operators
compare two strings lexicographically and anything else numerically.
"""

from __future__ import annotations

import math
import operator
from typing import Any

from gridquery.algebra.expressions import BinaryOp, Expression, Literal, UnaryOp
from gridquery.exceptions import InvalidCondition
from gridquery.spreadsheet.model import coerce_numeric_or_keep_raw, is_numeric

_RELATIONAL_OPS: dict[str, Any] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def is_truthy(value: Any) -> bool:
    """Spreadsheet truthiness: null, false, 0, NaN and "" are false."""
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _to_number(value: Any) -> Any:
    """Return value as an int/float, or None if it has no numeric reading."""
    if isinstance(value, bool):
        return int(value)
    coerced = coerce_numeric_or_keep_raw(value)
    return coerced if is_numeric(coerced) else None


def loose_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    lnum, rnum = _to_number(left), _to_number(right)
    if lnum is None or rnum is None:
        return False
    return lnum == rnum


def strict_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    return is_numeric(left) and is_numeric(right) and left == right


def compare(op: str, left: Any, right: Any) -> bool:
    func = _RELATIONAL_OPS[op]
    if isinstance(left, str) and isinstance(right, str):
        return func(left, right)
    lnum, rnum = _to_number(left), _to_number(right)
    if lnum is None or rnum is None:
        return False
    return func(lnum, rnum)


def evaluate_expression(expr: Expression) -> Any:
    """Evaluate a condition expression tree to a plain value."""
    match expr:
        case Literal(value=value):
            return value

        case BinaryOp(op="&&", left=left, right=right):
            lval = evaluate_expression(left)
            return evaluate_expression(right) if is_truthy(lval) else lval

        case BinaryOp(op="||", left=left, right=right):
            lval = evaluate_expression(left)
            return lval if is_truthy(lval) else evaluate_expression(right)

        case BinaryOp(op=op, left=left, right=right):
            lval = evaluate_expression(left)
            rval = evaluate_expression(right)
            if op == "==":
                return loose_equal(lval, rval)
            if op == "!=":
                return not loose_equal(lval, rval)
            if op == "===":
                return strict_equal(lval, rval)
            if op == "!==":
                return not strict_equal(lval, rval)
            if op in _RELATIONAL_OPS:
                return compare(op, lval, rval)
            raise InvalidCondition(f"Unknown binary operator: {op!r}")

        case UnaryOp(op="!", operand=operand):
            return not is_truthy(evaluate_expression(operand))

        case UnaryOp(op="-", operand=operand):
            value = _to_number(evaluate_expression(operand))
            if value is None:
                raise InvalidCondition(f"Cannot negate non-numeric value in {expr}")
            return -value

        case _:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

"""
WHERE condition evaluation.

A string condition is turned into a per-row test in three steps:

1. ``column_<ref>`` / ``col_<ref>`` (case-insensitive) is replaced by the row's
   value in that column, resolved with the shared column rule.
2. If headers are known, every occurrence of a header that is not joined to
   other word characters is replaced by the row's value in that column.
3. The substituted text is parsed with the restricted condition grammar and
   evaluated; the row passes if the result is truthy.

String values are substituted wrapped in double quotes without escaping, so a
value containing ``"`` makes the condition unparseable and raises
InvalidCondition. Substituted text is only ever parsed as a literal, never run.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Optional, Sequence

from gridquery.algebra.eager import evaluate_expression, is_truthy
from gridquery.algebra.parser import parse_condition
from gridquery.exceptions import InvalidCondition

RowPredicate = Callable[[Sequence[Any]], bool]

_COLUMN_PATTERNS = (
    re.compile(r"column_([A-Z]+|\w+)", re.IGNORECASE),
    re.compile(r"col_([A-Z]+|\w+)", re.IGNORECASE),
)


def render_value(value: Any) -> str:
    """Render a cell value as condition text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, float):
        if math.isnan(value):
            return "null"
        if value.is_integer():
            return str(int(value))
    return repr(value)


class ConditionEvaluator:
    """Builds row tests for WHERE.

    Args:
        column_index: Callable resolving a raw column reference to a 0-based
            offset (raises UnknownColumnReference)
        headers: Known headers, or None
    """

    def __init__(
        self,
        column_index: Callable[[Any], int],
        headers: Optional[Sequence[Any]] = None,
    ) -> None:
        self.column_index = column_index
        self.headers = list(headers) if headers else None
        self._header_patterns = [
            (re.compile(rf"(?<!\w){re.escape(str(header))}(?!\w)"), index)
            for index, header in enumerate(self.headers or [])
            if str(header)
        ]

    def compile(self, condition: Any) -> RowPredicate:
        """Return a predicate for ``condition`` (a string or a callable).

        Raises:
            InvalidCondition: If condition is neither a string nor callable
        """
        if callable(condition):
            return lambda row: is_truthy(condition(list(row)))
        if isinstance(condition, str):
            return lambda row: self.evaluate(row, condition)
        raise InvalidCondition(
            f"WHERE condition must be a string or function, got: {type(condition).__name__}"
        )

    def substitute(self, row: Sequence[Any], condition: str) -> str:
        """Replace column references in ``condition`` with the row's values."""
        expr = condition

        def _column_value(match: re.Match[str]) -> str:
            return render_value(row[self.column_index(match.group(1))])

        for pattern in _COLUMN_PATTERNS:
            expr = pattern.sub(_column_value, expr)

        for pattern, index in self._header_patterns:
            expr = pattern.sub(lambda _m, i=index: render_value(row[i]), expr)

        return expr

    def evaluate(self, row: Sequence[Any], condition: str) -> bool:
        """Evaluate a string condition against one row.

        Raises:
            InvalidCondition: If the substituted condition cannot be parsed or evaluated
            UnknownColumnReference: If a ``column_<ref>`` does not resolve
        """
        expr = self.substitute(row, condition)
        try:
            return is_truthy(evaluate_expression(parse_condition(expr)))
        except InvalidCondition as e:
            raise InvalidCondition(f"Invalid WHERE condition: {condition} - {e}") from e

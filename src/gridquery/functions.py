"""
Stand-alone range aggregate functions.

Each function reads a range through the store's ``get_cell_range`` (a named
range is resolved first), coerces every value with
``coerce_numeric_or_keep_raw`` and reduces the numeric ones:

  SUM_RANGE        sum of numbers
  AVERAGE_RANGE    mean of numbers (0 when there are none)
  COUNT_RANGE      count of non-empty values of any kind
  MIN_RANGE        smallest number (0 when there are none)
  MAX_RANGE        largest number (0 when there are none)
  MEDIAN_RANGE     median of numbers (0 when there are none)
  STDEV_RANGE      sample standard deviation (0 below two numbers)
  STDEVP_RANGE     population standard deviation
  VAR_RANGE        sample variance (0 below two numbers)
  VARP_RANGE       population variance
  PRODUCT_RANGE    product of numbers (0, not 1, when there are none)
  SUMIF_RANGE      sum of numbers matching a ``">15"``-style condition
  COUNTIF_RANGE    count of numbers matching a ``">15"``-style condition
  CELL             single coerced cell value

The lower-case names are the implementations; the upper-case names are the
spreadsheet-facing aliases collected in ``SPREADSHEET_FUNCTIONS``.
"""

from __future__ import annotations

import logging
import operator
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from gridquery import stats
from gridquery.core.materializer import resolve_range_ref
from gridquery.core.query import range_query, table_query
from gridquery.exceptions import AdapterUnavailable, InvalidCondition
from gridquery.spreadsheet.model import coerce_numeric_or_keep_raw, is_numeric
from gridquery.store.base import CellStore

logger = logging.getLogger(__name__)

_CONDITION_RE = re.compile(r"^([><=!]+)(.+)$")

_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
}


def _read_range(range_ref: str, store: Optional[CellStore], function: str) -> List[Any]:
    """Resolve, read and coerce a range for one of the aggregate functions."""
    if store is None:
        raise AdapterUnavailable(f"{function} requires a cell store")
    resolved = resolve_range_ref(range_ref, store)
    values = [coerce_numeric_or_keep_raw(v) for v in store.get_cell_range(resolved)]
    logger.debug("%s(%s) read %d values", function, resolved, len(values))
    return values


def _parse_condition(condition: str) -> Tuple[Callable[[Any, Any], bool], float]:
    """Split a ``">15"``-style condition into a comparator and a threshold.

    Raises:
        InvalidCondition: If the condition is malformed, the operator is
            unknown or the threshold is not a number
    """
    match = _CONDITION_RE.match(condition.strip()) if isinstance(condition, str) else None
    if not match:
        raise InvalidCondition(
            f'Invalid condition format: {condition!r}. Use: ">5", "=10", "<100", etc.'
        )
    op, raw_threshold = match.groups()
    comparator = _COMPARATORS.get(op)
    if comparator is None:
        raise InvalidCondition(f"Unknown operator: {op}")
    threshold = coerce_numeric_or_keep_raw(raw_threshold)
    if not is_numeric(threshold):
        raise InvalidCondition(f"Condition value must be a number, got: {raw_threshold!r}")
    return comparator, threshold


def _matching(range_ref: str, condition: str, store: Optional[CellStore], function: str) -> List[Any]:
    comparator, threshold = _parse_condition(condition)
    numbers = stats.numeric_values(_read_range(range_ref, store, function))
    return [n for n in numbers if comparator(n, threshold)]


def sum_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.total(_read_range(range_ref, store, "SUM_RANGE"))


def average_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.mean(_read_range(range_ref, store, "AVERAGE_RANGE"))


def count_range(range_ref: str, store: Optional[CellStore] = None) -> int:
    """Number of non-empty cells, numeric or not."""
    values = _read_range(range_ref, store, "COUNT_RANGE")
    return sum(1 for v in values if v is not None and v != "")


def min_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.minimum(_read_range(range_ref, store, "MIN_RANGE"))


def max_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.maximum(_read_range(range_ref, store, "MAX_RANGE"))


def median_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.median(_read_range(range_ref, store, "MEDIAN_RANGE"))


def stdev_range(range_ref: str, store: Optional[CellStore] = None) -> float:
    return stats.std(_read_range(range_ref, store, "STDEV_RANGE"), ddof=1)


def stdevp_range(range_ref: str, store: Optional[CellStore] = None) -> float:
    return stats.std(_read_range(range_ref, store, "STDEVP_RANGE"), ddof=0)


def var_range(range_ref: str, store: Optional[CellStore] = None) -> float:
    return stats.var(_read_range(range_ref, store, "VAR_RANGE"), ddof=1)


def varp_range(range_ref: str, store: Optional[CellStore] = None) -> float:
    return stats.var(_read_range(range_ref, store, "VARP_RANGE"), ddof=0)


def product_range(range_ref: str, store: Optional[CellStore] = None):
    return stats.product(_read_range(range_ref, store, "PRODUCT_RANGE"))


def sumif_range(range_ref: str, condition: str, store: Optional[CellStore] = None):
    """Sum of the numbers in a range that satisfy ``condition``.

    Args:
        range_ref: A1 range or named range
        condition: Operator followed by a number, e.g. ``">15"``, ``"<>20"``
        store: Cell store to read from

    Raises:
        InvalidCondition: If the condition cannot be parsed
        AdapterUnavailable: If store is None
    """
    return stats.total(_matching(range_ref, condition, store, "SUMIF_RANGE"))


def countif_range(range_ref: str, condition: str, store: Optional[CellStore] = None) -> int:
    """Count of the numbers in a range that satisfy ``condition`` (see sumif_range)."""
    return len(_matching(range_ref, condition, store, "COUNTIF_RANGE"))


def cell(ref: str, store: Optional[CellStore] = None) -> Any:
    """The coerced value of a single cell."""
    if store is None:
        raise AdapterUnavailable("CELL requires a cell store")
    return coerce_numeric_or_keep_raw(store.get_cell_value(ref))


SUM_RANGE = sum_range
AVERAGE_RANGE = average_range
COUNT_RANGE = count_range
MIN_RANGE = min_range
MAX_RANGE = max_range
MEDIAN_RANGE = median_range
STDEV_RANGE = stdev_range
STDEVP_RANGE = stdevp_range
VAR_RANGE = var_range
VARP_RANGE = varp_range
PRODUCT_RANGE = product_range
SUMIF_RANGE = sumif_range
COUNTIF_RANGE = countif_range
CELL = cell

SPREADSHEET_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "RANGE": range_query,
    "TABLE": table_query,
    "SUM_RANGE": sum_range,
    "AVERAGE_RANGE": average_range,
    "COUNT_RANGE": count_range,
    "MIN_RANGE": min_range,
    "MAX_RANGE": max_range,
    "MEDIAN_RANGE": median_range,
    "STDEV_RANGE": stdev_range,
    "STDEVP_RANGE": stdevp_range,
    "PRODUCT_RANGE": product_range,
    "VAR_RANGE": var_range,
    "VARP_RANGE": varp_range,
    "SUMIF_RANGE": sumif_range,
    "COUNTIF_RANGE": countif_range,
    "CELL": cell,
}

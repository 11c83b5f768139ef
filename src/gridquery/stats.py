"""Numeric reductions shared by the query pipeline and the range functions.

Every reducer takes an iterable of raw cell values, keeps only the values that
``coerce_numeric_or_keep_raw`` turns into numbers, and reduces them with
pandas (``product`` uses ``math.prod``). Empty inputs reduce to 0 rather than
NaN.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np
import pandas as pd

from gridquery.spreadsheet.model import coerce_numeric_or_keep_raw, is_numeric

_INT64_MIN = np.iinfo(np.int64).min
_INT64_MAX = np.iinfo(np.int64).max


def numeric_values(values: Iterable[Any]) -> list[int | float]:
    """The numeric readings of values, in order; everything else is dropped."""
    coerced = (coerce_numeric_or_keep_raw(v) for v in values)
    return [v for v in coerced if is_numeric(v)]


def numeric_series(values: Iterable[Any], exact: bool = False) -> pd.Series:
    """A Series of the numeric readings.

    All-integer input gives an object Series of Python ints when ``exact`` is
    set, otherwise int64 if every value fits. Anything else is float64.
    """
    numbers = numeric_values(values)
    if numbers and all(isinstance(n, int) for n in numbers):
        if exact:
            return pd.Series(numbers, dtype=object)
        if all(_INT64_MIN <= n <= _INT64_MAX for n in numbers):
            return pd.Series(numbers, dtype="int64")
    return pd.Series(numbers, dtype="float64")


def _py(value: Any) -> Any:
    """Unwrap numpy scalars to plain Python numbers."""
    return value.item() if isinstance(value, np.generic) else value


def total(values: Iterable[Any]) -> int | float:
    """Sum of the numbers; integer sums are exact Python ints."""
    series = numeric_series(values, exact=True)
    return _py(series.sum()) if len(series) else 0


def mean(values: Iterable[Any]) -> float:
    series = numeric_series(values)
    return float(series.mean()) if len(series) else 0


def median(values: Iterable[Any]) -> float:
    series = numeric_series(values)
    return float(series.median()) if len(series) else 0


def minimum(values: Iterable[Any]) -> int | float:
    series = numeric_series(values)
    return _py(series.min()) if len(series) else 0


def maximum(values: Iterable[Any]) -> int | float:
    series = numeric_series(values)
    return _py(series.max()) if len(series) else 0


def std(values: Iterable[Any], ddof: int = 1) -> float:
    """Standard deviation; 0 when there are not more than ``ddof`` numbers."""
    series = numeric_series(values)
    return float(series.std(ddof=ddof)) if len(series) > ddof else 0


def var(values: Iterable[Any], ddof: int = 1) -> float:
    """Variance; 0 when there are not more than ``ddof`` numbers."""
    series = numeric_series(values)
    return float(series.var(ddof=ddof)) if len(series) > ddof else 0


def product(values: Iterable[Any]) -> int | float:
    """Product of the numbers, or 0 (not 1) when there are none."""
    numbers = numeric_values(values)
    return math.prod(numbers) if numbers else 0

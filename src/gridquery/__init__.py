"""
gridquery - chainable queries and aggregates over spreadsheet ranges.

A range is read once from a cell store, its header row is detected (or taken
from table metadata), and the resulting snapshot can be filtered, plucked,
grouped and aggregated through an immutable chain.

Usage:
    >>> from gridquery import RANGE, InMemoryCellStore
    >>> store = InMemoryCellStore()
    >>> store.set_values("A1", [["Region", "Amount"], ["West", 1000], ["East", 1500]])
    >>> RANGE("A1:B3", store).WHERE("Amount > 1000").PLUCK("Region")
    ['East']

Key components:
- RANGE / TABLE: entry points returning a RangeQuery
- RangeQuery: WHERE, PLUCK, GROUP_BY, SUM, COUNT, AVG, RESULT
- Range functions: SUM_RANGE, AVERAGE_RANGE, ..., SUMIF_RANGE, CELL
- Cell stores: InMemoryCellStore, LocalCellStore (formualizer),
  SheetsCellStore (gspread)
"""

from .algebra import ByIndex, ByLetter, ByName, resolve_column
from .core import RANGE, TABLE, QueryState, RangeQuery
from .exceptions import *
from .functions import (
    AVERAGE_RANGE,
    CELL,
    COUNT_RANGE,
    COUNTIF_RANGE,
    MAX_RANGE,
    MEDIAN_RANGE,
    MIN_RANGE,
    PRODUCT_RANGE,
    SPREADSHEET_FUNCTIONS,
    STDEV_RANGE,
    STDEVP_RANGE,
    SUM_RANGE,
    SUMIF_RANGE,
    VAR_RANGE,
    VARP_RANGE,
)
from .logging_config import configure_logging
from .spreadsheet import (
    CellAddress,
    RangeAddress,
    TableMetadata,
    coerce_numeric_or_keep_raw,
    format_address,
    index_to_letter,
    letter_to_index,
    parse_address,
)
from .store import BaseCellStore, CellStore, InMemoryCellStore, LocalCellStore, SheetsCellStore

__version__ = "0.1.0"

__all__ = [
    "RANGE",
    "TABLE",
    "RangeQuery",
    "QueryState",
    "SUM_RANGE",
    "AVERAGE_RANGE",
    "COUNT_RANGE",
    "MIN_RANGE",
    "MAX_RANGE",
    "MEDIAN_RANGE",
    "STDEV_RANGE",
    "STDEVP_RANGE",
    "PRODUCT_RANGE",
    "VAR_RANGE",
    "VARP_RANGE",
    "SUMIF_RANGE",
    "COUNTIF_RANGE",
    "CELL",
    "SPREADSHEET_FUNCTIONS",
    "ByIndex",
    "ByLetter",
    "ByName",
    "resolve_column",
    "CellAddress",
    "RangeAddress",
    "TableMetadata",
    "coerce_numeric_or_keep_raw",
    "format_address",
    "index_to_letter",
    "letter_to_index",
    "parse_address",
    "CellStore",
    "BaseCellStore",
    "InMemoryCellStore",
    "LocalCellStore",
    "SheetsCellStore",
    "configure_logging",
    "GridQueryError",
    "AdapterUnavailable",
    "InvalidReference",
    "InvalidRangeReference",
    "UnknownColumnReference",
    "InvalidCondition",
    "ConditionSyntaxError",
    "TableNotFound",
    "InvalidOperation",
    "CellStoreError",
]

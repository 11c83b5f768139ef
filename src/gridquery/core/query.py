"""
Chainable range queries.

``RANGE`` and ``TABLE`` materialize a range once and wrap the snapshot in a
``RangeQuery``. Each chain step returns a new RangeQuery around a new
``QueryState``; nothing is modified in place::

    RANGE("A1:D6", store).WHERE("Amount > 1000").GROUP_BY("Region").SUM("Amount")
    # {'West': 3200, 'East': 1500}

States: loaded/filtered (rows present) -> grouped (after GROUP_BY, rows empty,
groups present). SUM/COUNT/AVG return plain values; RESULT returns the groups
when grouped, the rows otherwise.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from gridquery import stats
from gridquery.algebra.columns import resolve_column
from gridquery.core.conditions import ConditionEvaluator
from gridquery.core.headers import Headers, resolve_headers
from gridquery.core.materializer import (
    RawGrid,
    materialize,
    materialize_matrix,
    parse_range,
    resolve_range_ref,
)
from gridquery.exceptions import (
    AdapterUnavailable,
    InvalidOperation,
    InvalidRangeReference,
    TableNotFound,
)
from gridquery.spreadsheet.model import TableMetadata
from gridquery.store.base import CellStore

logger = logging.getLogger(__name__)


def group_key(value: Any) -> str:
    """Stringify a cell value for use as a GROUP_BY key."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class QueryState:
    """Immutable snapshot carried from one chain step to the next.

    Attributes:
        rows: Current data rows (empty once grouped)
        headers: Column labels, or None
        column_map: Logical name -> column letter, from table metadata
        groups: Group key -> rows, after GROUP_BY
        group_column_index: 0-based column the groups were built from
        range_ref: Resolved range reference, or None for a raw matrix
        start_column: 1-based sheet column of the range's first column
        width: Number of columns in each row, when known
        table: Table metadata the query was built from, if any
    """

    rows: RawGrid = ()
    headers: Headers = None
    column_map: Optional[Mapping[str, str]] = None
    groups: Optional[Mapping[str, RawGrid]] = None
    group_column_index: Optional[int] = None
    range_ref: Optional[str] = None
    start_column: Optional[int] = None
    width: Optional[int] = None
    table: Optional[TableMetadata] = None

    def __post_init__(self):
        if (self.groups is None) != (self.group_column_index is None):
            raise InvalidOperation("groups and group_column_index must be set together")
        if self.headers is not None:
            expected = len(self.headers)
            all_rows = list(self.rows)
            for group_rows in (self.groups or {}).values():
                all_rows.extend(group_rows)
            for row in all_rows:
                if len(row) != expected:
                    raise InvalidOperation(
                        f"Row has {len(row)} cells but there are {expected} headers"
                    )

    @property
    def is_grouped(self) -> bool:
        return self.groups is not None


class RangeQuery:
    """A chainable query over a materialized range.

    Methods have Python-style names with the spreadsheet function names as
    aliases (``where``/``WHERE``, ``group_by``/``GROUP_BY``, ...).
    """

    def __init__(self, state: QueryState) -> None:
        self._state = state

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def headers(self) -> Optional[List[Any]]:
        return list(self._state.headers) if self._state.headers is not None else None

    @property
    def rows(self) -> List[List[Any]]:
        return [list(row) for row in self._state.rows]

    @property
    def groups(self) -> Optional[Dict[str, List[List[Any]]]]:
        if self._state.groups is None:
            return None
        return {key: [list(row) for row in rows] for key, rows in self._state.groups.items()}

    @property
    def table(self) -> Optional[TableMetadata]:
        return self._state.table

    @property
    def range_ref(self) -> Optional[str]:
        return self._state.range_ref

    @property
    def is_grouped(self) -> bool:
        return self._state.is_grouped

    def _column(self, ref: Any) -> int:
        state = self._state
        return resolve_column(ref, state.headers, state.start_column, state.width)

    def _require_rows(self, operation: str) -> None:
        if self._state.is_grouped:
            raise InvalidOperation(f"{operation} is not available after GROUP_BY")

    def where(self, condition: Any) -> "RangeQuery":
        """Keep the rows for which ``condition`` holds.

        Args:
            condition: Condition string (``"Amount > 1000"``,
                ``'column_A == "West"'``) or a callable taking the row as a list

        Raises:
            InvalidOperation: After GROUP_BY
            InvalidCondition: If the condition is malformed
        """
        self._require_rows("WHERE")
        test = ConditionEvaluator(self._column, self._state.headers).compile(condition)
        rows = tuple(row for row in self._state.rows if test(row))
        logger.debug("WHERE %r kept %d of %d rows", condition, len(rows), len(self._state.rows))
        return RangeQuery(dataclasses.replace(self._state, rows=rows))

    def pluck(self, column: Any) -> List[Any]:
        """Values of one column across the current rows."""
        self._require_rows("PLUCK")
        index = self._column(column)
        return [row[index] for row in self._state.rows]

    def group_by(self, column: Any) -> "RangeQuery":
        """Partition the current rows by the stringified value of a column.

        Keys keep first-seen order and each group keeps the input row order.
        """
        self._require_rows("GROUP_BY")
        index = self._column(column)
        groups: Dict[str, List[Any]] = {}
        for row in self._state.rows:
            groups.setdefault(group_key(row[index]), []).append(row)
        frozen = MappingProxyType({key: tuple(rows) for key, rows in groups.items()})
        logger.debug("GROUP_BY column %d produced %d groups", index, len(frozen))
        return RangeQuery(
            dataclasses.replace(self._state, rows=(), groups=frozen, group_column_index=index)
        )

    def _aggregate(self, column: Any, reducer) -> Union[int, float, Dict[str, Union[int, float]]]:
        index = self._column(column)
        if self._state.is_grouped:
            return {
                key: reducer(row[index] for row in rows)
                for key, rows in self._state.groups.items()
            }
        return reducer(row[index] for row in self._state.rows)

    def sum(self, column: Any) -> Union[int, float, Dict[str, Union[int, float]]]:
        """Sum of a column's numeric values (per group when grouped)."""
        return self._aggregate(column, stats.total)

    def avg(self, column: Any) -> Union[float, Dict[str, float]]:
        """Mean of a column's numeric values (per group when grouped); 0 if none."""
        return self._aggregate(column, stats.mean)

    def count(self) -> Union[int, Dict[str, int]]:
        """Row count (per group when grouped)."""
        if self._state.is_grouped:
            return {key: len(rows) for key, rows in self._state.groups.items()}
        return len(self._state.rows)

    def result(self) -> Union[List[List[Any]], Dict[str, List[List[Any]]]]:
        """The groups if grouped, otherwise the rows (as fresh lists)."""
        if self._state.is_grouped:
            return self.groups
        return self.rows

    def to_dataframe(self) -> pd.DataFrame:
        """The current rows as a pandas DataFrame, labelled with the headers when known.

        Raises:
            InvalidOperation: After GROUP_BY
        """
        self._require_rows("to_dataframe")
        return pd.DataFrame(self.rows, columns=self.headers)

    WHERE = where
    PLUCK = pluck
    GROUP_BY = group_by
    SUM = sum
    AVG = avg
    COUNT = count
    RESULT = result

    def __len__(self) -> int:
        return len(self._state.rows)

    def __repr__(self) -> str:
        state = self._state
        if state.is_grouped:
            return f"RangeQuery(grouped, groups={list(state.groups)})"
        return f"RangeQuery(rows={len(state.rows)}, headers={self.headers!r})"


def _build_query(
    grid: RawGrid,
    range_ref: Optional[str],
    table: Optional[TableMetadata] = None,
) -> RangeQuery:
    headers, rows = resolve_headers(grid, table)
    if range_ref is not None:
        bounds = parse_range(range_ref)
        start_column, width = bounds.start.column, bounds.width
    else:
        start_column = None
        width = len(headers) if headers is not None else (len(grid[0]) if grid else None)
    state = QueryState(
        rows=rows,
        headers=headers,
        column_map=MappingProxyType(dict(table.columns)) if table and table.columns else None,
        range_ref=range_ref,
        start_column=start_column,
        width=width,
        table=table,
    )
    return RangeQuery(state)


def range_query(
    range_ref: Union[str, Sequence[Sequence[Any]]],
    store: Optional[CellStore] = None,
) -> RangeQuery:
    """Create a query over a range.

    Args:
        range_ref: ``"A1:D100"``, a named range, or an already-resolved 2D
            matrix of values
        store: Cell store to read from (not needed for a matrix)

    Returns:
        RangeQuery over the materialized range, with headers auto-detected

    Raises:
        AdapterUnavailable: If range_ref is a string and store is None
        InvalidRangeReference: If range_ref is malformed
    """
    if isinstance(range_ref, str):
        if store is None:
            raise AdapterUnavailable("RANGE requires a cell store")
        resolved = resolve_range_ref(range_ref.strip(), store)
        return _build_query(materialize(store, resolved), resolved)
    if isinstance(range_ref, Sequence):
        return _build_query(materialize_matrix(range_ref), None)
    raise InvalidRangeReference(f"Invalid range reference: {range_ref!r}")


def table_query(table_name: str, store: Optional[CellStore] = None) -> RangeQuery:
    """Create a query over a table registered in the store's metadata.

    Headers come from the metadata's column map rather than auto-detection.

    Raises:
        AdapterUnavailable: If store is None
        TableNotFound: If no metadata is registered under table_name
        InvalidOperation: If the column map does not cover the table's range
    """
    if store is None:
        raise AdapterUnavailable("TABLE requires a cell store")

    table = store.get_table_metadata(table_name)
    if table is None:
        raise TableNotFound(
            f"Table '{table_name}' not found. Use set_table_metadata() to define table metadata."
        )
    logger.debug("TABLE %r -> %s", table_name, table.range)

    resolved = resolve_range_ref(table.range, store)
    if table.columns and len(table.columns) != parse_range(resolved).width:
        raise InvalidOperation(
            f"Table '{table_name}' maps {len(table.columns)} columns "
            f"but its range {resolved} is {parse_range(resolved).width} wide"
        )
    return _build_query(materialize(store, resolved), resolved, table)


RANGE = range_query
TABLE = table_query

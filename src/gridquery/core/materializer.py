"""Range materialization: turn a range reference into an immutable grid of coerced values."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Tuple

from gridquery.config import settings
from gridquery.exceptions import AdapterUnavailable, InvalidRangeReference
from gridquery.spreadsheet.model import RangeAddress, coerce_numeric_or_keep_raw
from gridquery.store.base import CellStore

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]
RawGrid = Tuple[Row, ...]


def parse_range(range_ref: str) -> RangeAddress:
    """Parse ``START:END`` (or a single cell) into a RangeAddress.

    Raises:
        InvalidRangeReference: If the reference is malformed or end precedes start
    """
    return RangeAddress.parse(range_ref)


def resolve_range_ref(range_ref: str, store: CellStore) -> str:
    """Replace a named range with the reference it aliases; other refs pass through."""
    resolved = store.resolve_named_range(range_ref)
    if resolved:
        logger.debug("Resolved named range %r -> %s", range_ref, resolved)
        return resolved
    return range_ref


def materialize(
    store: Optional[CellStore],
    range_ref: str,
    max_cells: Optional[int] = None,
) -> RawGrid:
    """Read every cell of a range through ``store.get_cell_value``.

    Args:
        store: Cell store to read from
        range_ref: Explicit ``START:END`` reference (named ranges must already
            be resolved)
        max_cells: Upper bound on the number of cells read; defaults to
            ``settings.max_range_cells``

    Returns:
        Row-major tuple of row tuples, each value passed through
        ``coerce_numeric_or_keep_raw``

    Raises:
        AdapterUnavailable: If store is None
        InvalidRangeReference: If the reference is invalid or too large
    """
    if store is None:
        raise AdapterUnavailable("No cell store supplied")

    bounds = parse_range(range_ref)
    limit = max_cells if max_cells is not None else settings.max_range_cells
    if bounds.size > limit:
        raise InvalidRangeReference(
            f"Range {bounds.to_a1()} has {bounds.size} cells, more than the limit of {limit}"
        )

    grid = tuple(
        tuple(coerce_numeric_or_keep_raw(store.get_cell_value(cell.to_a1())) for cell in row)
        for row in bounds.cells()
    )
    logger.debug("Materialized %s: %d rows x %d columns", bounds.to_a1(), bounds.height, bounds.width)
    return grid


def materialize_matrix(matrix: Sequence[Sequence[Any]]) -> RawGrid:
    """Freeze an already-resolved 2D matrix into a grid, coercing each value."""
    if isinstance(matrix, (str, bytes)):
        raise InvalidRangeReference("Expected a 2D matrix, got a string")
    grid = []
    for row in matrix:
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise InvalidRangeReference(f"Matrix rows must be sequences, got: {type(row).__name__}")
        grid.append(tuple(coerce_numeric_or_keep_raw(value) for value in row))
    if len({len(row) for row in grid}) > 1:
        raise InvalidRangeReference(
            f"Matrix rows must all have the same length, got: {[len(row) for row in grid]}"
        )
    return tuple(grid)

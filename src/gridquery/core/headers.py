"""
Header resolution for materialized grids.

Two mutually exclusive paths:
- Table metadata with a ``columns`` map: headers are the logical names ordered
  by column letter; the first row is dropped when ``has_header`` is set.
- No metadata: the first row is taken as headers when every cell in it is a
  non-empty string and some later row holds a number.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from gridquery.core.materializer import RawGrid
from gridquery.spreadsheet.model import TableMetadata, is_numeric, letter_to_index

logger = logging.getLogger(__name__)

Headers = Optional[Tuple[Any, ...]]


def headers_from_table(table: TableMetadata) -> Tuple[str, ...]:
    """Logical column names sorted by their column index."""
    entries = sorted(table.columns.items(), key=lambda item: letter_to_index(item[1]))
    return tuple(name for name, _letter in entries)


def detect_header_row(grid: RawGrid) -> bool:
    """True if the grid's first row looks like column labels."""
    if not grid:
        return False
    first_row = grid[0]
    all_labels = all(isinstance(cell, str) and cell != "" for cell in first_row)
    has_numbers = any(is_numeric(cell) for row in grid[1:] for cell in row)
    return all_labels and has_numbers


def resolve_headers(grid: RawGrid, table: Optional[TableMetadata] = None) -> Tuple[Headers, RawGrid]:
    """Determine headers and strip the header row from the working grid.

    Args:
        grid: Materialized grid
        table: Table metadata, when the grid came from TABLE()

    Returns:
        (headers or None, data rows)
    """
    if table is not None and table.columns:
        headers = headers_from_table(table)
        rows = grid[1:] if table.has_header and grid else grid
        logger.debug("Headers from table metadata: %s (header row dropped: %s)",
                     list(headers), table.has_header)
        return headers, rows

    if detect_header_row(grid):
        logger.debug("Auto-detected header row: %s", list(grid[0]))
        return tuple(grid[0]), grid[1:]

    return None, grid

"""
Spreadsheet address model.

This module provides the cell/range addressing primitives and the numeric
coercion shared by range materialization and the aggregate functions.
"""

from gridquery.spreadsheet.model import (
    CellAddress,
    RangeAddress,
    TableMetadata,
    coerce_numeric_or_keep_raw,
    format_address,
    index_to_letter,
    is_numeric,
    letter_to_index,
    parse_address,
)

__all__ = [
    "CellAddress",
    "RangeAddress",
    "TableMetadata",
    "coerce_numeric_or_keep_raw",
    "format_address",
    "index_to_letter",
    "is_numeric",
    "letter_to_index",
    "parse_address",
]

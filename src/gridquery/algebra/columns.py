"""
Column references and the single rule that resolves them.

Chain operations accept three addressing forms: a 0-based index into the row,
a column letter relative to the sheet (``"C"``), or a header / logical table
column name (``"Amount"``). Each form has its own tagged type; untagged input
is classified by ``as_column_ref`` in a fixed order (index, header name,
letters) and then resolved to a 0-based offset by ``resolve_column``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from gridquery.exceptions import InvalidReference, UnknownColumnReference
from gridquery.spreadsheet.model import letter_to_index

_LETTERS_RE = re.compile(r"^[A-Za-z]+$")


@dataclass(frozen=True)
class ByIndex:
    """0-based position within the row."""

    index: int


@dataclass(frozen=True)
class ByLetter:
    """Sheet column letter(s); resolved relative to the range's first column."""

    letters: str


@dataclass(frozen=True)
class ByName:
    """Header label or logical table column name."""

    name: str


ColumnRef = Union[ByIndex, ByLetter, ByName]


def as_column_ref(raw: Any, headers: Optional[Sequence[Any]] = None) -> ColumnRef:
    """Classify an untagged column reference.

    Order: non-negative int -> ByIndex; exact header match -> ByName;
    letters only -> ByLetter. Already-tagged references pass through.

    Raises:
        UnknownColumnReference: If raw fits none of the forms
    """
    if isinstance(raw, (ByIndex, ByLetter, ByName)):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw < 0:
            raise UnknownColumnReference(f"Unknown column reference: {raw} (negative index)")
        return ByIndex(raw)
    if isinstance(raw, str):
        if headers and raw in headers:
            return ByName(raw)
        if _LETTERS_RE.match(raw):
            return ByLetter(raw)
    raise UnknownColumnReference(f"Unknown column reference: {raw!r}")


def resolve_column(
    ref: Any,
    headers: Optional[Sequence[Any]] = None,
    start_column: Optional[int] = None,
    width: Optional[int] = None,
) -> int:
    """Resolve a column reference to a 0-based offset into each row.

    Args:
        ref: Tagged reference or raw int/str
        headers: Known headers, or None
        start_column: 1-based sheet column of the range's first column
            (1 when the grid did not come from a sheet range)
        width: Number of columns in the grid, when known

    Returns:
        0-based column offset

    Raises:
        UnknownColumnReference: If the reference does not resolve inside the grid
    """
    tagged = as_column_ref(ref, headers)

    match tagged:
        case ByIndex(index=index):
            offset = index
        case ByName(name=name):
            if not headers or name not in headers:
                raise UnknownColumnReference(f"Unknown column reference: {name!r} (no such header)")
            offset = list(headers).index(name)
        case ByLetter(letters=letters):
            try:
                absolute = letter_to_index(letters)
            except InvalidReference as e:
                raise UnknownColumnReference(f"Unknown column reference: {letters!r}") from e
            offset = absolute - (start_column or 1)

    if offset < 0 or (width is not None and offset >= width):
        raise UnknownColumnReference(
            f"Unknown column reference: {ref!r} (outside the range's {width} columns)"
        )
    return offset

"""
Spreadsheet address model and value coercion.

This module provides the primitives every other gridquery component builds on:
- Column codec: letter_to_index / index_to_letter (A=1 ... Z=26, AA=27)
- CellAddress: a 1-indexed (column, row) pair, optionally sheet-qualified
- RangeAddress: a rectangular block between two CellAddresses (e.g., A2:C100)
- TableMetadata: logical column names mapped onto a range
- coerce_numeric_or_keep_raw: the numeric coercion applied to every cell read
"""

import math
import numbers
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from gridquery.exceptions import InvalidRangeReference, InvalidReference

_LETTERS_RE = re.compile(r"^[A-Za-z]+$")
_CELL_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")
_SHEET_CELL_RE = re.compile(r"^([A-Za-z][A-Za-z0-9_]*)\.([A-Za-z]+[0-9]+)$")
_INT_LITERAL_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_LITERAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def letter_to_index(letters: str) -> int:
    """Convert column letter(s) to a 1-based column index.

    Args:
        letters: Column letter(s), case-insensitive (A, z, AA, ...)

    Returns:
        Column index (A = 1, Z = 26, AA = 27, etc.)

    Raises:
        InvalidReference: If letters is empty or contains non-letters
    """
    if not isinstance(letters, str) or not _LETTERS_RE.match(letters):
        raise InvalidReference(f"Invalid column letters: {letters!r}")
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - 64)
    return index


def index_to_letter(index: int) -> str:
    """Convert a 1-based column index to column letter(s).

    Args:
        index: Column index (1 = A, 26 = Z, 27 = AA, etc.)

    Returns:
        Upper-case column letter(s)

    Raises:
        InvalidReference: If index is not an integer >= 1
    """
    if isinstance(index, bool) or not isinstance(index, int) or index < 1:
        raise InvalidReference(f"Column index must be an integer >= 1, got: {index!r}")
    result = ""
    while index > 0:
        index -= 1
        result = chr(65 + (index % 26)) + result
        index //= 26
    return result


@dataclass(frozen=True)
class CellAddress:
    """A single cell position in 1-indexed spreadsheet coordinates.

    Attributes:
        column: Column index (A = 1)
        row: Row number (first row = 1)
        sheet: Optional sheet qualifier for cross-sheet references (Sheet2.A1)
    """

    column: int
    row: int
    sheet: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        for name in ("column", "row"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidReference(f"Cell {name} must be an integer >= 1, got: {value!r}")

    @property
    def letters(self) -> str:
        return index_to_letter(self.column)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.column, self.row)

    def to_a1(self) -> str:
        return format_address(self.column, self.row, self.sheet)

    def __str__(self) -> str:
        return self.to_a1()


def parse_address(ref: str) -> CellAddress:
    """Parse an A1-style reference into a CellAddress.

    Supports plain references (``C12``, case-insensitive) and sheet-qualified
    references (``Sheet2.C12``).

    Args:
        ref: Cell reference string

    Returns:
        CellAddress with 1-indexed column and row

    Raises:
        InvalidReference: If ref does not match ``[A-Za-z]+[0-9]+`` or the row is 0
    """
    if not isinstance(ref, str):
        raise InvalidReference(f"Cell reference must be a string, got: {type(ref).__name__}")

    text = ref.strip()
    sheet = None
    sheet_match = _SHEET_CELL_RE.match(text)
    if sheet_match:
        sheet, text = sheet_match.groups()

    match = _CELL_RE.match(text)
    if not match:
        raise InvalidReference(f"Invalid cell reference: {ref!r}")

    letters, digits = match.groups()
    row = int(digits)
    if row < 1:
        raise InvalidReference(f"Invalid cell reference: {ref!r} (rows start at 1)")
    return CellAddress(column=letter_to_index(letters), row=row, sheet=sheet)


def format_address(column: int, row: int, sheet: Optional[str] = None) -> str:
    """Format a (column, row) pair as an A1-style reference.

    Args:
        column: 1-based column index
        row: 1-based row number
        sheet: Optional sheet qualifier

    Returns:
        Reference string such as ``C12`` or ``Sheet2.C12``

    Raises:
        InvalidReference: If column or row is below 1
    """
    if isinstance(row, bool) or not isinstance(row, int) or row < 1:
        raise InvalidReference(f"Row must be an integer >= 1, got: {row!r}")
    cell_ref = f"{index_to_letter(column)}{row}"
    return f"{sheet}.{cell_ref}" if sheet else cell_ref


@dataclass(frozen=True)
class RangeAddress:
    """A rectangular cell region between two corners (inclusive).

    Attributes:
        start: Top-left corner
        end: Bottom-right corner
    """

    start: CellAddress
    end: CellAddress

    def __post_init__(self):
        if self.end.column < self.start.column or self.end.row < self.start.row:
            raise InvalidRangeReference(
                f"Range end {self.end.to_a1()} is before start {self.start.to_a1()}"
            )

    @classmethod
    def parse(cls, notation: str) -> "RangeAddress":
        """Parse ``START:END`` notation; a lone cell becomes a 1x1 range.

        Raises:
            InvalidRangeReference: If the notation is malformed or end precedes start
        """
        if not isinstance(notation, str) or not notation.strip():
            raise InvalidRangeReference(f"Empty or non-string range reference: {notation!r}")

        parts = notation.strip().split(":")
        if len(parts) > 2:
            raise InvalidRangeReference(f"Invalid range reference: {notation!r}")

        try:
            start = parse_address(parts[0])
            end = parse_address(parts[-1])
        except InvalidReference as e:
            raise InvalidRangeReference(f"Invalid range reference: {notation!r} ({e})") from e

        return cls(start=start, end=end)

    @property
    def width(self) -> int:
        return self.end.column - self.start.column + 1

    @property
    def height(self) -> int:
        return self.end.row - self.start.row + 1

    @property
    def size(self) -> int:
        return self.width * self.height

    def cells(self) -> Iterator[Iterator[CellAddress]]:
        """Yield each row of the range as an iterator of CellAddresses."""
        for row in range(self.start.row, self.end.row + 1):
            yield (
                CellAddress(column=col, row=row, sheet=self.start.sheet)
                for col in range(self.start.column, self.end.column + 1)
            )

    def to_a1(self) -> str:
        start = self.start.to_a1()
        if self.start == self.end:
            return start
        return f"{start}:{format_address(self.end.column, self.end.row)}"

    def __str__(self) -> str:
        return self.to_a1()


@dataclass(frozen=True)
class TableMetadata:
    """Explicit column layout for a named table.

    Attributes:
        range: Range reference covering the table (header row included)
        columns: Logical column name -> column letter
        has_header: True if the first row of the range holds the column names
        types: Optional logical column name -> type hint (e.g. "number")
    """

    range: str
    columns: Mapping[str, str] = field(default_factory=dict)
    has_header: bool = False
    types: Optional[Mapping[str, str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TableMetadata":
        """Build metadata from a plain dict (accepts ``hasHeader`` or ``has_header``)."""
        if "range" not in data:
            raise InvalidRangeReference("Table metadata must specify a 'range'")
        has_header = data.get("has_header", data.get("hasHeader", False))
        types = data.get("types")
        return cls(
            range=data["range"],
            columns=dict(data.get("columns") or {}),
            has_header=bool(has_header),
            types=dict(types) if types else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "range": self.range,
            "columns": dict(self.columns),
            "has_header": self.has_header,
        }
        if self.types:
            result["types"] = dict(self.types)
        return result


def coerce_numeric_or_keep_raw(value: Any) -> Any:
    """Parse a cell value as a number, keeping the raw value when that fails.

    - ``int`` / ``float`` (including numpy scalars) come back as Python numbers
    - Strings holding an integer literal become ``int``; finite decimal or
      exponent literals become ``float`` (surrounding whitespace is ignored)
    - Everything else is returned unchanged: ``""`` stays ``""``, ``None``
      stays ``None``, booleans stay booleans, text stays text

    Never raises.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if _INT_LITERAL_RE.match(text):
            return int(text)
        if _FLOAT_LITERAL_RE.match(text):
            number = float(text)
            if math.isfinite(number):
                return number
    return value


def is_numeric(value: Any) -> bool:
    """True if value is a usable (non-bool, non-NaN) number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))

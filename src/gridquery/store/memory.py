"""
Dict-backed cell store.

Holds literal cell values keyed by normalised A1 address. There is no formula
evaluation: a value is returned exactly as it was set, and unset cells read as
``""``.
"""

from typing import Any, Mapping, Optional, Sequence, Union

from gridquery.spreadsheet.model import TableMetadata, format_address, parse_address
from gridquery.store.base import BaseCellStore


class InMemoryCellStore(BaseCellStore):
    """In-process cell store backed by a plain dict.

    Usage::

        store = InMemoryCellStore()
        store.set_values("A1", [["Region", "Amount"], ["West", 1000]])
        store.set_named_range("Sales", "A1:B2")
        RANGE("Sales", store).PLUCK("Amount")   # [1000]
    """

    def __init__(
        self,
        cells: Optional[Mapping[str, Any]] = None,
        named_ranges: Optional[Mapping[str, str]] = None,
        tables: Optional[Mapping[str, Union[TableMetadata, Mapping[str, Any]]]] = None,
    ) -> None:
        super().__init__(named_ranges=named_ranges, tables=tables)
        self._cells: dict[str, Any] = {}
        for address, value in (cells or {}).items():
            self.set_cell(address, value)

    @staticmethod
    def _key(address: str) -> str:
        return parse_address(address).to_a1().upper()

    def set_cell(self, address: str, value: Any) -> None:
        self._cells[self._key(address)] = value

    def set_values(self, top_left: str, values: Sequence[Sequence[Any]]) -> None:
        """Write a 2D block of values with its top-left corner at ``top_left``."""
        origin = parse_address(top_left)
        for ri, data_row in enumerate(values):
            for ci, value in enumerate(data_row):
                address = format_address(origin.column + ci, origin.row + ri, origin.sheet)
                self.set_cell(address, value)

    def clear(self) -> None:
        self._cells.clear()

    def get_cell_value(self, address: str) -> Any:
        return self._cells.get(self._key(address), "")

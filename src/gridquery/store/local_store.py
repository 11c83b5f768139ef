"""
Local cell store backed by formualizer.

Keeps an in-memory formualizer Workbook whose default sheet is ``sheet_name``.
Sheet-qualified addresses (``Sheet2.A1``) target other sheets, which are added
on first write. Values and formulas are written through the workbook, and
reads go through ``Workbook.evaluate_cell`` so a query sees formula results
rather than formula text. No network access is required.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Sequence, Union

import formualizer as fz

from gridquery.config import settings
from gridquery.exceptions import InvalidReference
from gridquery.spreadsheet.model import CellAddress, TableMetadata, parse_address
from gridquery.store.base import BaseCellStore


class LocalCellStore(BaseCellStore):
    """In-process cell store using a formualizer workbook.

    Usage::

        store = LocalCellStore()
        store.set_values("A1", [["Item", "Price"], ["Pen", 2], ["Ink", 5]])
        store.set_formula("B4", "=SUM(B2:B3)")
        CELL("B4", store)   # 7.0
    """

    def __init__(
        self,
        sheet_name: Optional[str] = None,
        named_ranges: Optional[Mapping[str, str]] = None,
        tables: Optional[Mapping[str, Union[TableMetadata, Mapping[str, Any]]]] = None,
    ) -> None:
        super().__init__(named_ranges=named_ranges, tables=tables)
        self.sheet_name = sheet_name or settings.default_sheet
        self.wb = fz.Workbook()
        self.wb.add_sheet(self.sheet_name)
        self._sheets = {self.sheet_name}

    def _target(self, cell: CellAddress, create: bool = False) -> str:
        """Sheet a parsed address refers to; unqualified addresses use ``sheet_name``.

        Raises:
            InvalidReference: If a read names a sheet that was never written
        """
        name = cell.sheet or self.sheet_name
        if name not in self._sheets:
            if not create:
                raise InvalidReference(f"Unknown sheet '{name}' in reference {cell}")
            self.wb.add_sheet(name)
            self._sheets.add(name)
        return name

    def set_value(self, address: str, value: Any) -> None:
        cell = parse_address(address)
        sheet = self.wb.sheet(self._target(cell, create=True))
        sheet.set_value(cell.row, cell.column, _to_literal(value))

    def set_values(self, top_left: str, values: Sequence[Sequence[Any]]) -> None:
        """Write a 2D block of literal values starting at ``top_left``."""
        if not values:
            return
        origin = parse_address(top_left)
        sheet = self.wb.sheet(self._target(origin, create=True))
        for ri, data_row in enumerate(values):
            for ci, value in enumerate(data_row):
                sheet.set_value(origin.row + ri, origin.column + ci, _to_literal(value))

    def set_formula(self, address: str, formula: str) -> None:
        cell = parse_address(address)
        formula = formula if formula.startswith("=") else f"={formula}"
        self.wb.set_formula(self._target(cell, create=True), cell.row, cell.column, formula)

    def get_cell_value(self, address: str) -> Any:
        cell = parse_address(address)
        return _normalize(self.wb.evaluate_cell(self._target(cell), cell.row, cell.column))


def _to_literal(value: Any) -> fz.LiteralValue:
    """Convert a Python value to a formualizer LiteralValue."""
    if value is None or value == "":
        return fz.LiteralValue.empty()
    if isinstance(value, bool):
        return fz.LiteralValue.boolean(value)
    if isinstance(value, int):
        return fz.LiteralValue.number(float(value))
    if isinstance(value, float):
        if math.isnan(value):
            return fz.LiteralValue.empty()
        return fz.LiteralValue.number(value)
    return fz.LiteralValue.text(str(value))


def _normalize(value: Any) -> Any:
    """Normalise a cell value returned by formualizer.

    * ``None`` → ``""``
    * Error dicts → ``""``
    * NaN → ``""``
    """
    if value is None:
        return ""
    if isinstance(value, dict):
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return value

"""
Google Sheets cell store.

This module adapts a single gspread Worksheet to the CellStore protocol, with
error wrapping for the API calls. Named ranges and table metadata are not read
from the spreadsheet; they are supplied by the caller.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

import gspread
from gspread.exceptions import APIError
from gspread.utils import ValueRenderOption

from gridquery.exceptions import CellStoreError
from gridquery.spreadsheet.model import RangeAddress, TableMetadata, parse_address
from gridquery.store.base import BaseCellStore

logger = logging.getLogger(__name__)


class SheetsCellStore(BaseCellStore):
    """
    Read-only cell store over a gspread worksheet.

    Cells are read unformatted, so numbers arrive as numbers rather than as
    locale-formatted strings.

    Attributes:
        worksheet: The gspread Worksheet all reads go to
    """

    def __init__(
        self,
        worksheet: gspread.Worksheet,
        named_ranges: Optional[Mapping[str, str]] = None,
        tables: Optional[Mapping[str, Union[TableMetadata, Mapping[str, Any]]]] = None,
    ) -> None:
        """
        Initialize the store around an already-opened worksheet.

        Args:
            worksheet: A gspread Worksheet, e.g. ``gc.open(title).sheet1``
            named_ranges: Optional name -> range reference aliases
            tables: Optional table name -> TableMetadata (or its dict form)
        """
        super().__init__(named_ranges=named_ranges, tables=tables)
        self.worksheet = worksheet

    def get_cell_value(self, address: str) -> Any:
        """
        Read one cell.

        Args:
            address: A1 reference (a ``Sheet.`` qualifier is ignored)

        Returns:
            The cell's unformatted value, ``""`` for an empty cell

        Raises:
            CellStoreError: If the API call fails
        """
        label = _plain_label(address)
        try:
            cell = self.worksheet.acell(label, value_render_option=ValueRenderOption.unformatted)
        except APIError as e:
            logger.warning("Sheets API error reading cell %s: %s", label, e)
            raise CellStoreError(f"Failed to read cell '{label}': {e}") from e
        return "" if cell.value is None else cell.value

    def get_cell_range(self, range_ref: str) -> List[Any]:
        """
        Read a rectangular range in one request, flattened row-major.

        The API omits trailing empty rows and cells; they are padded back with
        ``""`` so the result always has width * height values.

        Raises:
            CellStoreError: If the API call fails
        """
        bounds = RangeAddress.parse(range_ref)
        label = f"{_plain_label(bounds.start.to_a1())}:{_plain_label(bounds.end.to_a1())}"
        try:
            rows = self.worksheet.get(label, value_render_option=ValueRenderOption.unformatted)
        except APIError as e:
            logger.warning("Sheets API error reading range %s: %s", label, e)
            raise CellStoreError(f"Failed to read range '{label}': {e}") from e

        values: List[Any] = []
        rows = list(rows or [])
        for ri in range(bounds.height):
            row = list(rows[ri]) if ri < len(rows) else []
            for ci in range(bounds.width):
                value = row[ci] if ci < len(row) else ""
                values.append("" if value is None else value)
        return values


def _plain_label(address: str) -> str:
    cell = parse_address(address)
    return f"{cell.letters}{cell.row}"

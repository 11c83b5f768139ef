"""
Unit tests for the cell stores.

- InMemoryCellStore and the shared BaseCellStore registry
- LocalCellStore on a real formualizer workbook
- SheetsCellStore with gspread mocked - no real API calls are made
"""

from unittest.mock import Mock

import gspread
import pytest
from gspread.exceptions import APIError
from gspread.utils import ValueRenderOption

from gridquery import CELL, RANGE, SUM_RANGE, TABLE
from gridquery.exceptions import CellStoreError, InvalidRangeReference, InvalidReference
from gridquery.spreadsheet.model import TableMetadata
from gridquery.store import CellStore, InMemoryCellStore, LocalCellStore, SheetsCellStore


def _api_error(code: int, message: str) -> APIError:
    mock_response = Mock()
    mock_response.json.return_value = {
        "error": {"code": code, "message": message, "status": "UNAVAILABLE"}
    }
    return APIError(mock_response)


class TestInMemoryCellStore:
    """Test suite for InMemoryCellStore and the BaseCellStore registry."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryCellStore(), CellStore)

    def test_set_and_get(self):
        store = InMemoryCellStore()
        store.set_cell("b3", 7)
        assert store.get_cell_value("B3") == 7
        assert store.get_cell_value("C3") == ""

    def test_set_values_block(self):
        store = InMemoryCellStore()
        store.set_values("B2", [[1, 2], [3, 4]])
        assert store.get_cell_range("B2:C3") == [1, 2, 3, 4]

    def test_clear(self):
        store = InMemoryCellStore({"A1": 1})
        store.clear()
        assert store.get_cell_value("A1") == ""

    def test_named_range_stored_upper_case(self):
        store = InMemoryCellStore()
        store.set_named_range("Totals", "b2:c9")
        assert store.resolve_named_range("Totals") == "B2:C9"
        assert store.named_ranges == {"Totals": "B2:C9"}

    def test_delete_named_range(self):
        store = InMemoryCellStore(named_ranges={"Totals": "A1"})
        store.delete_named_range("Totals")
        assert store.resolve_named_range("Totals") is None

    @pytest.mark.parametrize("name", ["1abc", "has space", "", "bad-name"])
    def test_named_range_name_validation(self, name):
        with pytest.raises(ValueError):
            InMemoryCellStore().set_named_range(name, "A1:B2")

    @pytest.mark.parametrize("ref", ["A1:", "Sheet2.A1:B2", "B2:A1", "nope"])
    def test_named_range_reference_validation(self, ref):
        with pytest.raises(InvalidRangeReference):
            InMemoryCellStore().set_named_range("Valid", ref)

    def test_table_metadata_from_dict(self):
        store = InMemoryCellStore()
        store.set_table_metadata("T", {"range": "A1:B2", "columns": {"a": "A", "b": "B"}})
        meta = store.get_table_metadata("T")
        assert isinstance(meta, TableMetadata)
        assert meta.has_header is False
        assert store.get_table_metadata("Other") is None

    def test_cross_sheet_addresses(self):
        store = InMemoryCellStore()
        store.set_values("Sheet2.A1", [[5], [6]])
        assert store.get_cell_value("Sheet2.A2") == 6
        assert store.get_cell_value("A2") == ""
        assert SUM_RANGE("Sheet2.A1:A2", store) == 11


class TestLocalCellStore:
    """Test suite for LocalCellStore (formualizer)."""

    def test_values_round_trip(self):
        store = LocalCellStore()
        store.set_values("A1", [["Item", "Price"], ["Pen", 2], ["Ink", 5]])
        assert store.get_cell_value("A2") == "Pen"
        assert store.get_cell_value("B3") == 5

    def test_empty_cells_read_as_empty_string(self):
        store = LocalCellStore()
        store.set_value("A1", 1)
        store.set_value("A2", None)
        assert store.get_cell_value("A2") == ""

    def test_formula_results_are_read(self):
        store = LocalCellStore()
        store.set_values("A1", [[2], [3]])
        store.set_formula("A3", "SUM(A1:A2)")
        assert CELL("A3", store) == 5

    def test_default_sheet_name(self):
        assert LocalCellStore().sheet_name == "Data"
        assert LocalCellStore("Sales").sheet_name == "Sales"

    def test_default_sheet_qualifier(self):
        store = LocalCellStore()
        store.set_value("A1", 3)
        assert store.get_cell_value("Data.A1") == 3

    def test_sheet_qualified_addresses(self):
        store = LocalCellStore()
        store.set_value("A1", 1)
        store.set_values("Other.A1", [[5], [6]])
        assert store.get_cell_value("Other.A2") == 6
        assert store.get_cell_value("A2") == ""
        assert SUM_RANGE("Other.A1:A2", store) == 11

    def test_unknown_sheet(self):
        store = LocalCellStore()
        store.set_value("A1", 3)
        with pytest.raises(InvalidReference, match="Unknown sheet 'Other'"):
            store.get_cell_value("Other.A1")

    def test_query_over_formulas(self):
        store = LocalCellStore()
        store.set_values("A1", [["Region", "Amount"], ["West", 100], ["East", 50], ["West", 25]])
        store.set_formula("B5", "=B2*2")
        store.set_value("A5", "East")
        result = RANGE("A1:B5", store).GROUP_BY("Region").SUM("Amount")
        assert result == {"West": 125, "East": 250}

    def test_table_over_workbook(self):
        store = LocalCellStore(tables={"T": {"range": "A1:B3", "columns": {"k": "A", "v": "B"}, "hasHeader": True}})
        store.set_values("A1", [["K", "V"], ["a", 1], ["b", 2]])
        assert TABLE("T", store).PLUCK("v") == [1, 2]


class TestSheetsCellStore:
    """Test suite for SheetsCellStore (gspread mocked)."""

    def test_get_cell_value(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.acell.return_value = Mock(value=42)
        store = SheetsCellStore(ws)

        assert store.get_cell_value("Sheet1.C4") == 42
        ws.acell.assert_called_once_with("C4", value_render_option=ValueRenderOption.unformatted)

    def test_empty_cell(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.acell.return_value = Mock(value=None)
        assert SheetsCellStore(ws).get_cell_value("A1") == ""

    def test_get_cell_range_pads_to_rectangle(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.get.return_value = [[1, 2], [3]]
        store = SheetsCellStore(ws)

        assert store.get_cell_range("A1:B3") == [1, 2, 3, "", "", ""]
        ws.get.assert_called_once_with("A1:B3", value_render_option=ValueRenderOption.unformatted)

    def test_range_functions_use_one_request(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.get.return_value = [[10], [20], ["x"]]
        store = SheetsCellStore(ws, named_ranges={"Scores": "A1:A3"})

        assert SUM_RANGE("Scores", store) == 30
        assert ws.get.call_count == 1
        ws.acell.assert_not_called()

    def test_cell_api_error(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.acell.side_effect = _api_error(503, "Backend unavailable")
        store = SheetsCellStore(ws)

        with pytest.raises(CellStoreError) as exc_info:
            store.get_cell_value("B2")
        assert "Failed to read cell 'B2'" in str(exc_info.value)
        assert "Backend unavailable" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, APIError)

    def test_range_api_error(self):
        ws = Mock(spec=gspread.Worksheet)
        ws.get.side_effect = _api_error(429, "Quota exceeded")
        store = SheetsCellStore(ws)

        with pytest.raises(CellStoreError, match="Quota exceeded"):
            store.get_cell_range("A1:B2")

    def test_table_metadata_supplied_by_caller(self):
        ws = Mock(spec=gspread.Worksheet)
        store = SheetsCellStore(ws, tables={"T": TableMetadata(range="A1:A2", columns={"n": "A"})})
        assert store.get_table_metadata("T").columns == {"n": "A"}

"""
Cell store module for gridquery.

This module provides the CellStore protocol the query engine reads through and
three concrete stores: ``InMemoryCellStore`` (plain dict), ``LocalCellStore``
(formualizer workbook, evaluates formulas in-process) and ``SheetsCellStore``
(gspread worksheet).
"""

from gridquery.store.base import BaseCellStore, CellStore
from gridquery.store.local_store import LocalCellStore
from gridquery.store.memory import InMemoryCellStore
from gridquery.store.sheets_store import SheetsCellStore

__all__ = [
    "CellStore",
    "BaseCellStore",
    "InMemoryCellStore",
    "LocalCellStore",
    "SheetsCellStore",
]

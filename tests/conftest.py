"""Shared pytest configuration and fixtures for gridquery tests."""

import pytest

from gridquery.store.memory import InMemoryCellStore


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. large range materialization)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test - pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


SALES_GRID = [
    ["Region", "Product", "Amount", "Quantity"],
    ["West", "Widget", 1000, 10],
    ["East", "Gadget", 1500, 15],
    ["West", "Gadget", 2000, 20],
    ["East", "Widget", 500, 5],
    ["West", "Widget", 1200, 12],
]

TABLE_GRID = [
    ["ID", "Region", "Product", "Amount"],
    [1, "West", "Widget", 1500],
    [2, "East", "Gadget", 800],
    [3, "West", "Gizmo", 1700],
    [4, "East", "Widget", 900],
]

SALES_TABLE = {
    "range": "A1:D5",
    "columns": {"id": "A", "region": "B", "product": "C", "amount": "D"},
    "hasHeader": True,
}


@pytest.fixture
def sales_store() -> InMemoryCellStore:
    """Sales grid in A1:D6 (header row + 5 data rows) and 1, 2, 3 in E1:E3."""
    store = InMemoryCellStore()
    store.set_values("A1", SALES_GRID)
    store.set_values("E1", [[1], [2], [3]])
    return store


@pytest.fixture
def table_store() -> InMemoryCellStore:
    """Four-row table in A1:D5 registered as ``SalesData``."""
    store = InMemoryCellStore(tables={"SalesData": SALES_TABLE})
    store.set_values("A1", TABLE_GRID)
    return store


@pytest.fixture
def column_store():
    """Factory: a store holding ``values`` down column A starting at A1."""

    def _make(values) -> InMemoryCellStore:
        store = InMemoryCellStore()
        store.set_values("A1", [[v] for v in values])
        return store

    return _make

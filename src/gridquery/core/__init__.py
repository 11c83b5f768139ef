"""
Query engine core.

This module wires range materialization, header resolution and WHERE
condition evaluation into the chainable RangeQuery returned by RANGE and TABLE.
"""

from .query import RANGE, TABLE, QueryState, RangeQuery, group_key, range_query, table_query

__all__ = [
    "RANGE",
    "TABLE",
    "QueryState",
    "RangeQuery",
    "group_key",
    "range_query",
    "table_query",
]

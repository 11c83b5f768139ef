"""
Abstract cell store interface consumed by the query engine.

The CellStore protocol is the whole contract between gridquery and the
spreadsheet that owns the cells: single-cell reads, flattened range reads,
named-range lookup and table-metadata lookup. Concrete implementations include
InMemoryCellStore (plain dict), LocalCellStore (formualizer workbook) and
SheetsCellStore (gspread worksheet).
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

from gridquery.exceptions import InvalidRangeReference
from gridquery.spreadsheet.model import RangeAddress, TableMetadata

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_NAMED_RANGE_REF_RE = re.compile(r"^([A-Z]+)(\d+)(?::([A-Z]+)(\d+))?$", re.IGNORECASE)


@runtime_checkable
class CellStore(Protocol):
    """Protocol for read-only access to a spreadsheet's cells.

    All methods are synchronous and must not have side effects observable to
    the query engine.
    """

    def get_cell_value(self, address: str) -> Any:
        """Return the computed value of one cell (``""`` for an empty cell)."""
        ...

    def get_cell_range(self, range_ref: str) -> List[Any]:
        """Return the values of a rectangular range, flattened row-major."""
        ...

    def resolve_named_range(self, name: str) -> Optional[str]:
        """Return the range reference a name aliases, or None."""
        ...

    def get_table_metadata(self, table_name: str) -> Optional[TableMetadata]:
        """Return the metadata registered for a table, or None."""
        ...


class BaseCellStore:
    """Shared named-range / table registry and range reads for concrete stores.

    Subclasses only implement ``get_cell_value``; ``get_cell_range`` walks the
    range row-major through it.
    """

    def __init__(
        self,
        named_ranges: Optional[Mapping[str, str]] = None,
        tables: Optional[Mapping[str, Union[TableMetadata, Mapping[str, Any]]]] = None,
    ) -> None:
        self._named_ranges: Dict[str, str] = {}
        self._tables: Dict[str, TableMetadata] = {}
        for name, range_ref in (named_ranges or {}).items():
            self.set_named_range(name, range_ref)
        for name, metadata in (tables or {}).items():
            self.set_table_metadata(name, metadata)

    def get_cell_value(self, address: str) -> Any:
        raise NotImplementedError(
            f"get_cell_value not implemented for {self.__class__.__name__}"
        )

    def get_cell_range(self, range_ref: str) -> List[Any]:
        bounds = RangeAddress.parse(range_ref)
        return [self.get_cell_value(cell.to_a1()) for row in bounds.cells() for cell in row]

    def set_named_range(self, name: str, range_ref: str) -> None:
        """Register ``name`` as an alias for ``range_ref`` (stored upper-cased).

        Raises:
            ValueError: If the name is not a letter followed by letters, digits or _
            InvalidRangeReference: If range_ref is not a cell or ``START:END`` range
        """
        if not isinstance(name, str) or not _NAME_RE.match(name):
            raise ValueError(
                "Named range must start with a letter and contain only letters, "
                f"numbers, and underscores: {name!r}"
            )
        if not isinstance(range_ref, str) or not _NAMED_RANGE_REF_RE.match(range_ref.strip()):
            raise InvalidRangeReference(f"Invalid range reference: {range_ref!r}")
        RangeAddress.parse(range_ref)
        self._named_ranges[name] = range_ref.strip().upper()

    def delete_named_range(self, name: str) -> None:
        self._named_ranges.pop(name, None)

    def resolve_named_range(self, name: str) -> Optional[str]:
        return self._named_ranges.get(name)

    @property
    def named_ranges(self) -> Dict[str, str]:
        return dict(self._named_ranges)

    def set_table_metadata(
        self, table_name: str, metadata: Union[TableMetadata, Mapping[str, Any]]
    ) -> None:
        if not isinstance(metadata, TableMetadata):
            metadata = TableMetadata.from_dict(metadata)
        self._tables[table_name] = metadata

    def get_table_metadata(self, table_name: str) -> Optional[TableMetadata]:
        return self._tables.get(table_name)

"""
Exception classes for gridquery.

These exceptions are used throughout the gridquery package to signal invalid input
during range resolution, condition evaluation, and query chaining. All of them are
raised synchronously to the caller of the operation that triggered them.
"""


class GridQueryError(Exception):
    """Base class for every error raised by gridquery."""
    pass


class AdapterUnavailable(GridQueryError):
    """Raised when an entry point is called without a cell store.

    RANGE, TABLE and the range aggregate functions all read from an explicit
    store argument. Passing ``None`` (or omitting it) raises this error instead
    of falling back to any global state.
    """
    pass


class InvalidReference(GridQueryError, ValueError):
    """Raised when a single-cell address is malformed.

    Examples:
        - Empty strings or strings without letters (``"12"``)
        - Missing row digits (``"AB"``)
        - Row zero (``"A0"``)
        - Column index below 1 when converting to letters
    """
    pass


class InvalidRangeReference(GridQueryError, ValueError):
    """Raised when a ``START:END`` range reference is invalid.

    Examples:
        - More than one ``:`` separator
        - Either end failing to parse as a cell address
        - End column or end row before the start
        - A range larger than the configured cell limit
    """
    pass


class UnknownColumnReference(GridQueryError, ValueError):
    """Raised when a column reference cannot be resolved.

    A column may be addressed by 0-based index, by column letter, or by header
    name. This error is raised when none of those interpretations applies, or
    when the resolved offset falls outside the range.
    """
    pass


class InvalidCondition(GridQueryError, ValueError):
    """Raised when a filter condition cannot be used.

    Covers WHERE conditions that fail to parse or evaluate after column
    substitution, WHERE arguments that are neither strings nor callables, and
    SUMIF/COUNTIF conditions with a bad format, unknown operator, or
    non-numeric threshold.
    """
    pass


class ConditionSyntaxError(InvalidCondition):
    """Raised by the condition parser when an expression is not in the grammar.

    Attributes:
        position: Character offset in the expression where parsing failed
    """

    def __init__(self, message: str, position: int = -1) -> None:
        super().__init__(message)
        self.position = position


class TableNotFound(GridQueryError, LookupError):
    """Raised when TABLE is called with a name that has no registered metadata."""
    pass


class InvalidOperation(GridQueryError):
    """Raised when a chain operation is not valid in the query's current state.

    Examples:
        - PLUCK, WHERE or GROUP_BY after GROUP_BY
        - Building a query whose rows do not match the resolved headers
    """
    pass


class CellStoreError(GridQueryError):
    """Raised when a concrete cell store's backend fails.

    This error wraps exceptions from the storage backend (for example a gspread
    ``APIError``) and adds context about which read failed.
    """
    pass

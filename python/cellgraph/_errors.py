"""Exceptions raised by the cell store and the formula engine.

Evaluation failures are not exceptions: they are :class:`~cellgraph.calc.EvalError`
values stored as a cell's cached value.
"""

from __future__ import annotations


class SpreadsheetError(Exception):
    """Base class for every error signalled by cellgraph."""


class InvalidNameError(SpreadsheetError, ValueError):
    """A cell name is missing, malformed, or rejected by the validity predicate."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid cell name: {name!r}")
        self.name = name


class ArgumentNullError(SpreadsheetError, TypeError):
    """Raw cell content was ``None`` where text was required."""


class FormulaFormatError(SpreadsheetError, ValueError):
    """A formula is syntactically malformed or names an invalid variable."""


class CircularDependencyError(SpreadsheetError):
    """A content change would make a cell depend on itself.

    The store is fully reverted before this is raised.
    """

    def __init__(self, cell: str) -> None:
        super().__init__(f"Circular dependency involving cell {cell!r}")
        self.cell = cell


class SpreadsheetReadWriteError(SpreadsheetError, OSError):
    """Saving or loading a spreadsheet document failed."""

"""cellgraph - a formula-driven, dependency-tracked cell store.

Usage::

    from cellgraph import Spreadsheet, load_spreadsheet

    sheet = Spreadsheet(normalize=str.upper, version="v1")
    sheet["A1"] = "6"
    sheet["A2"] = "=A1 + 1"
    sheet["A3"] = "=A2 * 2"
    sheet.set_contents_of_cell("A1", "7")    # ['A1', 'A2', 'A3']
    sheet["A3"]                              # NumberValue(number=16.0)
    sheet.save("book.xml")

    sheet = load_spreadsheet("book.xml", normalize=str.upper, version="v1")
"""

from __future__ import annotations

import os
from typing import Callable

from cellgraph._cell import display_value
from cellgraph._errors import (
    ArgumentNullError,
    CircularDependencyError,
    FormulaFormatError,
    InvalidNameError,
    SpreadsheetError,
    SpreadsheetReadWriteError,
)
from cellgraph._spreadsheet import DEFAULT_VERSION, NAME_PATTERN, Spreadsheet
from cellgraph._utils import (
    a1_to_rowcol,
    always_valid,
    column_index,
    column_letter,
    grid_validator,
    identity,
    rowcol_to_a1,
)
from cellgraph.calc import (
    CellContent,
    CellStore,
    CellValue,
    DependencyGraph,
    EvalError,
    Formula,
    FormulaContent,
    NumberContent,
    NumberValue,
    TextContent,
    TextValue,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ArgumentNullError",
    "CellContent",
    "CellStore",
    "CellValue",
    "CircularDependencyError",
    "DEFAULT_VERSION",
    "DependencyGraph",
    "EvalError",
    "Formula",
    "FormulaContent",
    "FormulaFormatError",
    "InvalidNameError",
    "NAME_PATTERN",
    "NumberContent",
    "NumberValue",
    "Spreadsheet",
    "SpreadsheetError",
    "SpreadsheetReadWriteError",
    "TextContent",
    "TextValue",
    "a1_to_rowcol",
    "always_valid",
    "column_index",
    "column_letter",
    "display_value",
    "grid_validator",
    "identity",
    "load_spreadsheet",
    "rowcol_to_a1",
]


def load_spreadsheet(
    filename: str | os.PathLike[str],
    is_valid: Callable[[str], bool] = always_valid,
    normalize: Callable[[str], str] = identity,
    version: str = DEFAULT_VERSION,
) -> Spreadsheet:
    """Open a document written by :meth:`Spreadsheet.save`.

    *version* must equal the version stored in the file, and *is_valid* /
    *normalize* should match the ones the spreadsheet was built with.
    """
    return Spreadsheet.load(filename, is_valid, normalize, version)

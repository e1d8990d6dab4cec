"""Spreadsheet: a dependency-tracked cell store with inline recalculation.

Usage::

    from cellgraph import Spreadsheet

    sheet = Spreadsheet(normalize=str.upper)
    sheet.set_contents_of_cell("A1", "6")
    sheet.set_contents_of_cell("A2", "=a1 * 7")
    sheet.get_cell_value("A2")                  # NumberValue(number=42.0)
    sheet.set_contents_of_cell("A1", "1")       # ['A1', 'A2']
    sheet.save("book.xml")
"""

from __future__ import annotations

import logging
import math
import os
import re
from collections.abc import Iterator
from typing import Callable

from cellgraph._cell import Cell, content_to_text, content_variables
from cellgraph._errors import (
    ArgumentNullError,
    CircularDependencyError,
    InvalidNameError,
    SpreadsheetError,
    SpreadsheetReadWriteError,
)
from cellgraph._utils import always_valid, identity
from cellgraph._xml import read_document, read_version, write_document
from cellgraph.calc._formula import Formula
from cellgraph.calc._graph import DependencyGraph
from cellgraph.calc._parser import NUMBER_PATTERN
from cellgraph.calc._protocol import (
    CellContent,
    CellValue,
    EvalError,
    FormulaContent,
    NumberContent,
    NumberValue,
    TextContent,
    TextValue,
)

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "default"
# Letters followed by digits: A1, AB12, x7
NAME_PATTERN = r"[A-Za-z]+[0-9]+"

_NUMBER_RE = re.compile(rf"[+-]?{NUMBER_PATTERN}")


class Spreadsheet:
    """Cells holding text, numbers, or formulas over other cells.

    Parameters
    ----------
    is_valid : callable
        Extra predicate a normalized cell name must satisfy.
    normalize : callable
        Maps a cell name (and every formula variable) to its canonical form.
    version : str
        Label written on save and required to match on load.
    name_pattern : str
        Regular expression a normalized name must match in full.

    A formula cell ``B1 = A1 + 1`` is recorded in the dependency graph as
    the pair ``("A1", "B1")``. Every content change recomputes the changed
    cell and all cells that depend on it, before returning.
    """

    __slots__ = ("_cells", "_graph", "_is_valid", "_normalize", "_version", "_name_re", "_changed")

    def __init__(
        self,
        is_valid: Callable[[str], bool] = always_valid,
        normalize: Callable[[str], str] = identity,
        version: str = DEFAULT_VERSION,
        *,
        name_pattern: str = NAME_PATTERN,
    ) -> None:
        self._cells: dict[str, Cell] = {}
        self._graph = DependencyGraph()
        self._is_valid = is_valid
        self._normalize = normalize
        self._version = version
        self._name_re = re.compile(name_pattern)
        self._changed = False

    @classmethod
    def load(
        cls,
        filename: str | os.PathLike[str],
        is_valid: Callable[[str], bool] = always_valid,
        normalize: Callable[[str], str] = identity,
        version: str = DEFAULT_VERSION,
        *,
        name_pattern: str = NAME_PATTERN,
    ) -> Spreadsheet:
        """Rebuild a spreadsheet saved with :meth:`save`.

        Each stored cell is replayed through :meth:`set_contents_of_cell`, so
        dependencies and values are recomputed rather than copied. Raises
        :class:`SpreadsheetReadWriteError` on any I/O, format, version, or
        content problem.
        """
        sheet = cls(is_valid, normalize, version, name_pattern=name_pattern)
        saved_version, cells = read_document(filename)
        if saved_version != version:
            raise SpreadsheetReadWriteError(
                f"{filename!r} has version {saved_version!r}, expected {version!r}"
            )
        for name, contents in cells:
            try:
                sheet.set_contents_of_cell(name, contents)
            except SpreadsheetError as exc:
                raise SpreadsheetReadWriteError(
                    f"Cannot load cell {name!r} from {filename!r}: {exc}"
                ) from exc
        sheet._changed = False
        logger.debug("Loaded %d cells from %s", len(sheet._cells), filename)
        return sheet

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def changed(self) -> bool:
        """True iff content changed since construction, load, or the last save."""
        return self._changed

    @property
    def version(self) -> str:
        return self._version

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cell_contents(self, name: str) -> CellContent:
        """Content of *name*; ``TextContent("")`` if the cell is empty."""
        cell = self._cells.get(self._cell_name(name))
        return cell.content if cell is not None else TextContent("")

    def get_cell_value(self, name: str) -> CellValue:
        """Cached value of *name*; ``TextValue("")`` if the cell is empty."""
        cell = self._cells.get(self._cell_name(name))
        return cell.value if cell is not None else TextValue("")

    def get_names_of_all_nonempty_cells(self) -> list[str]:
        """Names of every non-empty cell, as a snapshot safe to iterate while editing."""
        return list(self._cells)

    def get_direct_dependents(self, name: str) -> set[str]:
        """Names of cells whose formulas reference *name* directly."""
        return self._graph.get_dependents(self._cell_name(name))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_contents_of_cell(self, name: str, content: str) -> list[str]:
        """Set *name* from raw text and recalculate everything that depends on it.

        ``""`` empties the cell, text that parses as a number stores a
        number, text starting with ``=`` stores a formula, anything else is
        stored verbatim. Returns *name* followed by every cell that was
        recomputed, each after all the cells it reads.

        Raises :class:`InvalidNameError`, :class:`ArgumentNullError`,
        :class:`FormulaFormatError` or :class:`CircularDependencyError`;
        the spreadsheet is unchanged whenever one is raised.
        """
        cell_name = self._cell_name(name)
        if content is None:
            raise ArgumentNullError("Cell content must not be None")
        if not isinstance(content, str):
            raise TypeError(f"Cell content must be a string, got {type(content).__name__}")
        new_content = self._parse_content(content)

        previous = self._cells.get(cell_name)
        old_content = previous.content if previous is not None else None
        old_variables = content_variables(old_content)

        self._graph.replace_dependees(cell_name, content_variables(new_content))
        try:
            order = self._graph.recalculation_order(cell_name)
        except CircularDependencyError:
            self._graph.replace_dependees(cell_name, old_variables)
            logger.debug("Rejected %r for %s: circular dependency", content, cell_name)
            raise

        if new_content is None:
            self._cells.pop(cell_name, None)
        elif previous is None:
            self._cells[cell_name] = Cell(new_content)
        else:
            previous.content = new_content

        for dependent in order:
            cell = self._cells.get(dependent)
            if cell is not None:
                cell.recompute(self._lookup)

        if new_content != old_content:
            self._changed = True
        logger.debug("Set %s; recalculated %d cells", cell_name, len(order))
        return order

    def save(self, filename: str | os.PathLike[str]) -> None:
        """Write every non-empty cell to *filename* and clear :attr:`changed`."""
        write_document(
            filename,
            self._version,
            ((name, content_to_text(cell.content)) for name, cell in self._cells.items()),
        )
        self._changed = False

    def get_saved_version(self, filename: str | os.PathLike[str]) -> str:
        """Version label of the document at *filename*."""
        return read_version(filename)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_valid_name(self, name: str) -> bool:
        return (
            isinstance(name, str)
            and self._name_re.fullmatch(name) is not None
            and bool(self._is_valid(name))
        )

    def _cell_name(self, name: str) -> str:
        """Normalize and validate *name*."""
        if not isinstance(name, str):
            raise InvalidNameError(name)
        normalized = self._normalize(name)
        if not self._is_valid_name(normalized):
            raise InvalidNameError(name)
        return normalized

    def _parse_content(self, content: str) -> CellContent | None:
        """Classify raw text; ``None`` means the cell becomes empty."""
        if content == "":
            return None
        if _NUMBER_RE.fullmatch(content):
            number = float(content)
            if math.isfinite(number):
                return NumberContent(number)
        if content.startswith("="):
            return FormulaContent(Formula(content[1:], self._normalize, self._is_valid_name))
        return TextContent(content)

    def _lookup(self, name: str) -> float | EvalError:
        """Numeric value of another cell, for formula evaluation."""
        cell = self._cells.get(name)
        if cell is None:
            raise KeyError(name)
        value = cell.value
        if isinstance(value, NumberValue):
            return value.number
        if isinstance(value, EvalError):
            return value
        raise ValueError(f"Cell {name} holds text, not a number")

    # ------------------------------------------------------------------
    # Mapping-style access
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> CellValue:
        """``sheet["A1"]`` -> cached value."""
        return self.get_cell_value(name)

    def __setitem__(self, name: str, content: str) -> None:
        """``sheet["A1"] = "=B1+1"`` -- shorthand for :meth:`set_contents_of_cell`."""
        self.set_contents_of_cell(name, content)

    def __contains__(self, name: object) -> bool:
        try:
            return self._cell_name(name) in self._cells  # type: ignore[arg-type]
        except InvalidNameError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"<Spreadsheet version={self._version!r} cells={len(self._cells)}>"

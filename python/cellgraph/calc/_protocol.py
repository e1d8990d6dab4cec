"""Cell content/value variants, the EvalError value, and the CellStore protocol."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from cellgraph.calc._formula import Formula


class EvalError:
    """A formula evaluation failure, carried as a value rather than raised.

    Errors propagate through dependent formulas: a formula that reads a cell
    holding an ``EvalError`` evaluates to an ``EvalError`` itself.
    Two errors compare equal when their reasons are equal.
    """

    __slots__ = ("reason",)

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def __repr__(self) -> str:
        return f"EvalError({self.reason!r})"

    def __str__(self) -> str:
        return self.reason

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EvalError):
            return self.reason == other.reason
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("EvalError", self.reason))


# ---------------------------------------------------------------------------
# Content: what the user entered
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class NumberContent:
    number: float


@dataclass(frozen=True)
class FormulaContent:
    formula: Formula


CellContent = Union[TextContent, NumberContent, FormulaContent]


# ---------------------------------------------------------------------------
# Value: what a cell currently displays
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextValue:
    text: str


@dataclass(frozen=True)
class NumberValue:
    number: float


CellValue = Union[TextValue, NumberValue, EvalError]


@runtime_checkable
class CellStore(Protocol):
    """The surface a UI or host process drives a cell store through."""

    @property
    def changed(self) -> bool:
        """True iff content changed since construction, load, or the last save."""
        ...

    def set_contents_of_cell(self, name: str, content: str) -> list[str]:
        """Set a cell from raw text; return it plus every cell recomputed, in order."""
        ...

    def get_cell_contents(self, name: str) -> CellContent:
        ...

    def get_cell_value(self, name: str) -> CellValue:
        ...

    def get_names_of_all_nonempty_cells(self) -> Iterable[str]:
        ...

    def save(self, filename: str | os.PathLike[str]) -> None:
        ...

    def get_saved_version(self, filename: str | os.PathLike[str]) -> str:
        ...

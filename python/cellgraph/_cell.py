"""Cell record and content/value conversions shared by the store and persistence."""

from __future__ import annotations

from dataclasses import dataclass, field

from cellgraph.calc._evaluator import Lookup
from cellgraph.calc._parser import canonical_number
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

ERROR_DISPLAY = "#UNDEFINED"


@dataclass
class Cell:
    """A non-empty cell: user content plus the last computed value."""

    content: CellContent
    value: CellValue = field(default_factory=lambda: TextValue(""))

    @property
    def variables(self) -> frozenset[str]:
        """Cells this one reads (empty unless it holds a formula)."""
        return content_variables(self.content)

    def recompute(self, lookup: Lookup) -> None:
        self.value = compute_value(self.content, lookup)


def content_variables(content: CellContent | None) -> frozenset[str]:
    if isinstance(content, FormulaContent):
        return content.formula.variables
    return frozenset()


def compute_value(content: CellContent, lookup: Lookup) -> CellValue:
    """Value a cell with *content* displays; formulas are evaluated via *lookup*."""
    if isinstance(content, TextContent):
        return TextValue(content.text)
    if isinstance(content, NumberContent):
        return NumberValue(content.number)
    if isinstance(content, FormulaContent):
        result = content.formula.evaluate(lookup)
        if isinstance(result, EvalError):
            return result
        return NumberValue(result)
    raise TypeError(f"Unknown cell content: {content!r}")


def content_to_text(content: CellContent) -> str:
    """Raw text that reproduces *content* when set on a cell (``=`` prefix for formulas)."""
    if isinstance(content, TextContent):
        return content.text
    if isinstance(content, NumberContent):
        return canonical_number(content.number)
    if isinstance(content, FormulaContent):
        return f"={content.formula}"
    raise TypeError(f"Unknown cell content: {content!r}")


def display_value(value: CellValue) -> str:
    """Text a host should render for *value*; errors show as ``#UNDEFINED``."""
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, NumberValue):
        return canonical_number(value.number)
    if isinstance(value, EvalError):
        return ERROR_DISPLAY
    raise TypeError(f"Unknown cell value: {value!r}")

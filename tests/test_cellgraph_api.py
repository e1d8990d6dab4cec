"""Tests for the cellgraph public API: name helpers, value display, value types."""

from __future__ import annotations

import dataclasses

import pytest

import cellgraph


class TestUtils:
    """Coordinate conversion helpers."""

    def test_column_letter(self) -> None:
        from cellgraph import column_letter

        assert column_letter(1) == "A"
        assert column_letter(26) == "Z"
        assert column_letter(27) == "AA"
        assert column_letter(702) == "ZZ"
        assert column_letter(703) == "AAA"

    def test_column_letter_rejects_zero(self) -> None:
        from cellgraph import column_letter

        with pytest.raises(ValueError):
            column_letter(0)

    def test_column_index(self) -> None:
        from cellgraph import column_index

        assert column_index("A") == 1
        assert column_index("z") == 26
        assert column_index("AA") == 27
        assert column_index("ZZ") == 702

    def test_column_index_invalid(self) -> None:
        from cellgraph import column_index

        with pytest.raises(ValueError, match="Invalid column letters"):
            column_index("A1")

    def test_a1_roundtrip(self) -> None:
        from cellgraph import a1_to_rowcol, rowcol_to_a1

        for ref in ("A1", "B3", "Z99", "AA100"):
            assert rowcol_to_a1(*a1_to_rowcol(ref)) == ref
        assert a1_to_rowcol("B3") == (3, 2)

    @pytest.mark.parametrize("ref", ["", "1A", "A", "A0", "A-1", "A1B"])
    def test_invalid_a1_raises(self, ref: str) -> None:
        from cellgraph import a1_to_rowcol

        with pytest.raises(ValueError, match="Invalid A1 reference"):
            a1_to_rowcol(ref)


class TestGridValidator:
    def test_bounds(self) -> None:
        is_valid = cellgraph.grid_validator("C", 10)
        assert is_valid("A1")
        assert is_valid("C10")
        assert not is_valid("D1")
        assert not is_valid("A11")

    def test_rejects_lower_case(self) -> None:
        assert not cellgraph.grid_validator()("a1")

    def test_rejects_non_references(self) -> None:
        is_valid = cellgraph.grid_validator()
        assert not is_valid("A")
        assert not is_valid("A0")

    def test_with_spreadsheet(self) -> None:
        sheet = cellgraph.Spreadsheet(cellgraph.grid_validator("B", 5), str.upper)
        sheet.set_contents_of_cell("b5", "1")
        with pytest.raises(cellgraph.InvalidNameError):
            sheet.set_contents_of_cell("C1", "1")
        with pytest.raises(cellgraph.FormulaFormatError):
            sheet.set_contents_of_cell("A1", "=B6 + 1")


class TestDisplayValue:
    def test_text(self) -> None:
        assert cellgraph.display_value(cellgraph.TextValue("hi")) == "hi"

    def test_numbers(self) -> None:
        assert cellgraph.display_value(cellgraph.NumberValue(42.0)) == "42"
        assert cellgraph.display_value(cellgraph.NumberValue(0.5)) == "0.5"

    def test_error(self) -> None:
        assert cellgraph.display_value(cellgraph.EvalError("division by zero")) == "#UNDEFINED"

    def test_from_sheet(self) -> None:
        sheet = cellgraph.Spreadsheet()
        sheet["A1"] = "=1/0"
        assert cellgraph.display_value(sheet["A1"]) == "#UNDEFINED"


class TestValueTypes:
    def test_eval_error_equality(self) -> None:
        assert cellgraph.EvalError("x") == cellgraph.EvalError("x")
        assert cellgraph.EvalError("x") != cellgraph.EvalError("y")
        assert cellgraph.EvalError("x") != "x"
        assert len({cellgraph.EvalError("x"), cellgraph.EvalError("x")}) == 1

    def test_eval_error_text(self) -> None:
        error = cellgraph.EvalError("division by zero")
        assert repr(error) == "EvalError('division by zero')"
        assert str(error) == "division by zero"

    @pytest.mark.parametrize(
        "instance, field",
        [
            (cellgraph.TextContent("a"), "text"),
            (cellgraph.NumberContent(1.0), "number"),
            (cellgraph.TextValue("a"), "text"),
            (cellgraph.NumberValue(1.0), "number"),
        ],
    )
    def test_frozen(self, instance: object, field: str) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            setattr(instance, field, None)

    def test_content_and_value_distinct(self) -> None:
        assert cellgraph.TextContent("a") != cellgraph.TextValue("a")
        assert cellgraph.NumberContent(1.0) != cellgraph.NumberValue(1.0)


class TestExports:
    def test_all_resolves(self) -> None:
        for name in cellgraph.__all__:
            assert hasattr(cellgraph, name), name

    def test_version(self) -> None:
        assert cellgraph.__version__ == "0.1.0"

    def test_error_hierarchy(self) -> None:
        for exc in (
            cellgraph.InvalidNameError,
            cellgraph.ArgumentNullError,
            cellgraph.FormulaFormatError,
            cellgraph.CircularDependencyError,
            cellgraph.SpreadsheetReadWriteError,
        ):
            assert issubclass(exc, cellgraph.SpreadsheetError)
        assert issubclass(cellgraph.InvalidNameError, ValueError)
        assert issubclass(cellgraph.SpreadsheetReadWriteError, OSError)

    def test_defaults(self) -> None:
        sheet = cellgraph.Spreadsheet()
        assert sheet.version == cellgraph.DEFAULT_VERSION == "default"
        assert cellgraph.identity("a1") == "a1"
        assert cellgraph.always_valid("anything")

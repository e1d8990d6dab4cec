"""Tests for cellgraph.calc formula tokenizer and validator."""

from __future__ import annotations

import pytest

from cellgraph import FormulaFormatError
from cellgraph.calc._parser import (
    Token,
    TokenKind,
    canonical_number,
    is_variable,
    parse_formula,
    tokenize,
)


def _identity(s: str) -> str:
    return s


def _valid(s: str) -> bool:
    return True


def _parse(source: str) -> tuple[tuple[str, ...], frozenset[str]]:
    return parse_formula(source, _identity, _valid)


class TestTokenize:
    def test_simple_expression(self) -> None:
        kinds = [t.kind for t in tokenize("(a1 + 2) * 3")]
        assert kinds == [
            TokenKind.LPAREN,
            TokenKind.VARIABLE,
            TokenKind.OPERATOR,
            TokenKind.NUMBER,
            TokenKind.RPAREN,
            TokenKind.OPERATOR,
            TokenKind.NUMBER,
        ]

    def test_whitespace_dropped(self) -> None:
        texts = [t.text for t in tokenize("  x \t-\n y ")]
        assert texts == ["x", "-", "y"]

    def test_number_forms(self) -> None:
        texts = [t.text for t in tokenize("1 2.5 .5 3. 1e5 2.5E-3 7e+2")]
        assert texts == ["1", "2.5", ".5", "3.", "1e5", "2.5E-3", "7e+2"]

    def test_variable_with_underscores(self) -> None:
        assert list(tokenize("_tmp_2")) == [Token(TokenKind.VARIABLE, "_tmp_2")]

    def test_unrecognized_run_is_one_token(self) -> None:
        tokens = list(tokenize("a1 $# + 2"))
        assert Token(TokenKind.INVALID, "$#") in tokens
        assert tokens[-1] == Token(TokenKind.NUMBER, "2")

    def test_trailing_unrecognized(self) -> None:
        assert list(tokenize("3&"))[-1] == Token(TokenKind.INVALID, "&")

    def test_empty(self) -> None:
        assert list(tokenize("")) == []


class TestCanonicalNumber:
    def test_integral_drops_fraction(self) -> None:
        assert canonical_number(2.0) == "2"
        assert canonical_number(-7.0) == "-7"

    def test_fraction_kept(self) -> None:
        assert canonical_number(2.5) == "2.5"
        assert canonical_number(0.1) == "0.1"

    def test_large_values_use_repr(self) -> None:
        assert canonical_number(1e20) == "1e+20"
        assert float(canonical_number(1e20)) == 1e20

    def test_negative_zero(self) -> None:
        assert canonical_number(-0.0) == "0"


class TestParseFormula:
    def test_tokens_and_variables(self) -> None:
        tokens, variables = _parse("x1 + y2 * x1")
        assert tokens == ("x1", "+", "y2", "*", "x1")
        assert variables == frozenset({"x1", "y2"})

    def test_numbers_reserialized(self) -> None:
        tokens, _ = _parse("2.0 + 2 + 5e0 + 0.50")
        assert tokens == ("2", "+", "2", "+", "5", "+", "0.5")

    def test_variables_normalized(self) -> None:
        tokens, variables = parse_formula("a1+b2", str.upper, _valid)
        assert tokens == ("A1", "+", "B2")
        assert variables == frozenset({"A1", "B2"})

    def test_nested_parentheses(self) -> None:
        tokens, _ = _parse("((1))")
        assert tokens == ("(", "(", "1", ")", ")")

    def test_is_variable(self) -> None:
        assert is_variable("_a9")
        assert not is_variable("9a")
        assert not is_variable("a-b")


class TestParseFormulaErrors:
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "   ",
            "+1",
            "1 +",
            "1 + * 2",
            "(+ 1)",
            "(1 + 2",
            "1 + 2)",
            ")(",
            "(1) 2",
            "(1) x",
            "2 (1)",
            "x (1)",
            "(1)(2)",
            "()",
            "(1 +)",
            "2 3",
            "x y",
            "2x",
            "1 ^ 2",
            "1.5.3",
            "1e999",
        ],
    )
    def test_malformed(self, source: str) -> None:
        with pytest.raises(FormulaFormatError):
            _parse(source)

    def test_unrecognized_token_named(self) -> None:
        with pytest.raises(FormulaFormatError, match=r"\$"):
            _parse("a1 + $b")

    def test_normalized_variable_must_match_pattern(self) -> None:
        with pytest.raises(FormulaFormatError, match="x"):
            parse_formula("x + 1", lambda s: s + "!", _valid)

    def test_validator_rejects_variable(self) -> None:
        with pytest.raises(FormulaFormatError, match="bad"):
            parse_formula("good + bad", _identity, lambda s: s != "bad")

    def test_validator_sees_normalized_name(self) -> None:
        seen: list[str] = []

        def record(name: str) -> bool:
            seen.append(name)
            return True

        parse_formula("ab1", str.upper, record)
        assert seen == ["AB1"]

    def test_none_source(self) -> None:
        with pytest.raises(FormulaFormatError):
            parse_formula(None, _identity, _valid)  # type: ignore[arg-type]

"""Formula: an immutable, validated algebraic expression."""

from __future__ import annotations

from typing import Callable

from cellgraph._utils import always_valid, identity
from cellgraph.calc._evaluator import Lookup, evaluate_tokens
from cellgraph.calc._parser import parse_formula
from cellgraph.calc._protocol import EvalError


class Formula:
    """A parsed formula such as ``"(A1 + 2) * b_3"``.

    Construction validates the syntax and raises
    :class:`~cellgraph.FormulaFormatError` on failure. *normalize* maps each
    variable to its canonical form and *is_valid* must accept the normalized
    form. Formulas compare and hash by their canonical tokens, so
    ``Formula("x + 2.0") == Formula("x+2")``.

    Usage::

        f = Formula("a1 * 2", normalize=str.upper)
        f.variables            # frozenset({'A1'})
        f.evaluate({"A1": 21.0}.__getitem__)   # 42.0
    """

    __slots__ = ("_tokens", "_variables", "_text")

    def __init__(
        self,
        source: str,
        normalize: Callable[[str], str] = identity,
        is_valid: Callable[[str], bool] = always_valid,
    ) -> None:
        tokens, variables = parse_formula(source, normalize, is_valid)
        self._tokens = tokens
        self._variables = variables
        self._text = "".join(tokens)

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens

    @property
    def variables(self) -> frozenset[str]:
        """Distinct normalized variable names."""
        return self._variables

    def get_variables(self) -> list[str]:
        return list(self._variables)

    def evaluate(self, lookup: Lookup) -> float | EvalError:
        """Evaluate against *lookup*, which maps a variable name to a number.

        *lookup* may raise any ``Exception`` or return an :class:`EvalError`
        for a variable it cannot resolve; either way the result is an
        :class:`EvalError` naming that variable. Never raises.
        """
        return evaluate_tokens(self._tokens, self._variables, lookup)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Formula({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Formula):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

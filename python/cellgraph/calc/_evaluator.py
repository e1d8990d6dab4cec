"""Single-pass infix evaluator over canonical formula tokens.

Uses a value stack and an operator stack local to each call. ``*`` and ``/``
are applied as soon as their right operand arrives; ``+`` and ``-`` wait
until the next operator of equal or lower precedence (or a closing
parenthesis) so that both precedence levels associate left to right.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from typing import Callable, Union

from cellgraph.calc._protocol import EvalError

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Union[float, EvalError]]

_MULTIPLICATIVE = ("*", "/")
_ADDITIVE = ("+", "-")


def _absorb(value: float, operators: list[str], values: list[float]) -> EvalError | None:
    """Push *value*, first combining it with a pending ``*`` or ``/``."""
    if operators and operators[-1] in _MULTIPLICATIVE:
        if not values:
            return EvalError("malformed expression")
        op = operators.pop()
        left = values.pop()
        if op == "/":
            if value == 0:
                return EvalError("division by zero")
            values.append(left / value)
        else:
            values.append(left * value)
    else:
        values.append(value)
    return None


def _apply_additive(operators: list[str], values: list[float]) -> None:
    """Resolve a pending ``+`` or ``-`` against the two topmost values."""
    if len(values) > 1 and operators and operators[-1] in _ADDITIVE:
        op = operators.pop()
        right = values.pop()
        left = values.pop()
        values.append(left + right if op == "+" else left - right)


def _resolve(name: str, lookup: Lookup) -> float | EvalError:
    try:
        value = lookup(name)
    except Exception as exc:
        logger.debug("Lookup of %s failed: %s", name, exc)
        return EvalError(f"undefined variable {name}")
    if isinstance(value, EvalError):
        return EvalError(f"variable {name} has an error value: {value.reason}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return EvalError(f"variable {name} is not a number")
    return float(value)


def evaluate_tokens(
    tokens: Sequence[str],
    variables: Collection[str],
    lookup: Lookup,
) -> float | EvalError:
    """Evaluate canonical *tokens*; tokens found in *variables* go through *lookup*.

    Never raises for bad input: every failure comes back as an
    :class:`EvalError`.
    """
    values: list[float] = []
    operators: list[str] = []

    for token in tokens:
        if token == "(" or token in _MULTIPLICATIVE:
            operators.append(token)
            continue

        if token in _ADDITIVE:
            _apply_additive(operators, values)
            operators.append(token)
            continue

        if token == ")":
            _apply_additive(operators, values)
            if not operators or operators[-1] != "(":
                return EvalError("unmatched parenthesis")
            operators.pop()
            if not values:
                return EvalError("malformed expression")
            value: float | EvalError = values.pop()
        elif token in variables:
            value = _resolve(token, lookup)
            if isinstance(value, EvalError):
                return value
        else:
            try:
                value = float(token)
            except ValueError:
                return EvalError(f"unrecognized token {token}")

        err = _absorb(value, operators, values)
        if err is not None:
            return err

    if not operators and len(values) == 1:
        return values[0]
    if len(operators) == 1 and operators[0] in _ADDITIVE and len(values) == 2:
        _apply_additive(operators, values)
        return values[0]
    return EvalError("malformed expression")

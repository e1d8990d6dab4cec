"""Formula tokenizer and syntax validator.

Formulas are infix expressions over numbers, variables, ``+ - * /`` and
parentheses, e.g. ``(A1 + 2.5) * B7``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from cellgraph._errors import FormulaFormatError

# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------

VARIABLE_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
NUMBER_PATTERN = r"(?:\d+\.\d*|\d*\.\d+|\d+)(?:[eE][+-]?\d+)?"

_TOKEN_RE = re.compile(
    rf"""
      (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<operator>[+\-*/])
    | (?P<variable>{VARIABLE_PATTERN})
    | (?P<number>{NUMBER_PATTERN})
    | (?P<space>\s+)
    """,
    re.VERBOSE,
)

_VARIABLE_RE = re.compile(VARIABLE_PATTERN)


class TokenKind(Enum):
    LPAREN = "lparen"
    RPAREN = "rparen"
    OPERATOR = "operator"
    VARIABLE = "variable"
    NUMBER = "number"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


# Tokens that can end an operand / begin one
_OPERAND_END = (TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.RPAREN)
_VALUES = (TokenKind.NUMBER, TokenKind.VARIABLE)


def tokenize(source: str) -> Iterator[Token]:
    """Yield the tokens of *source*, dropping whitespace.

    Any run of characters that is not part of a token is yielded as a single
    ``TokenKind.INVALID`` token.
    """
    pos = 0
    length = len(source)
    invalid_start = -1
    while pos < length:
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            if invalid_start < 0:
                invalid_start = pos
            pos += 1
            continue
        if invalid_start >= 0:
            yield Token(TokenKind.INVALID, source[invalid_start:pos])
            invalid_start = -1
        if m.lastgroup != "space":
            yield Token(TokenKind(m.lastgroup), m.group())
        pos = m.end()
    if invalid_start >= 0:
        yield Token(TokenKind.INVALID, source[invalid_start:])


def canonical_number(value: float) -> str:
    """Serialize a number the way formulas and saved documents store it.

    Integral values drop the fractional part (``2.0`` -> ``"2"``); everything
    else uses the shortest round-tripping ``repr``.
    """
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def is_variable(text: str) -> bool:
    """True if *text* matches the basic variable pattern."""
    return _VARIABLE_RE.fullmatch(text) is not None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def parse_formula(
    source: str,
    normalize: Callable[[str], str],
    is_valid: Callable[[str], bool],
) -> tuple[tuple[str, ...], frozenset[str]]:
    """Validate *source* and return ``(canonical_tokens, variables)``.

    Numbers are re-serialized from their parsed value and variables are
    stored normalized. Raises :class:`FormulaFormatError` describing the
    first problem found.
    """
    if not isinstance(source, str) or not source:
        raise FormulaFormatError("Formula is empty")

    tokens: list[str] = []
    variables: set[str] = set()
    depth = 0
    prev: Token | None = None

    for token in tokenize(source):
        kind = token.kind
        prev_kind = prev.kind if prev is not None else None

        if kind is TokenKind.INVALID:
            raise FormulaFormatError(f"Unrecognized token {token.text!r}")

        if kind in _VALUES:
            if prev_kind is TokenKind.RPAREN:
                raise FormulaFormatError(
                    f"{token.text!r} cannot immediately follow a closing parenthesis"
                )
            if prev_kind in _VALUES:
                raise FormulaFormatError(
                    f"Missing operator between {prev.text!r} and {token.text!r}"
                )
            if kind is TokenKind.NUMBER:
                value = float(token.text)
                if not math.isfinite(value):
                    raise FormulaFormatError(f"Number out of range: {token.text!r}")
                tokens.append(canonical_number(value))
            else:
                name = normalize(token.text)
                if not isinstance(name, str) or not is_variable(name) or not is_valid(name):
                    raise FormulaFormatError(f"Invalid variable {token.text!r}")
                tokens.append(name)
                variables.add(name)

        elif kind is TokenKind.LPAREN:
            if prev_kind in _OPERAND_END:
                raise FormulaFormatError(
                    f"'(' cannot immediately follow {prev.text!r}"
                )
            depth += 1
            tokens.append(token.text)

        elif kind is TokenKind.RPAREN:
            if depth == 0:
                raise FormulaFormatError("Unexpected ')'")
            if prev_kind not in _OPERAND_END:
                raise FormulaFormatError(f"')' cannot immediately follow {prev.text!r}")
            depth -= 1
            tokens.append(token.text)

        else:  # operator
            if prev is None:
                raise FormulaFormatError("Formula cannot start with an operator")
            if prev_kind is TokenKind.OPERATOR:
                raise FormulaFormatError(
                    f"Two operators in a row: {prev.text!r} {token.text!r}"
                )
            if prev_kind is TokenKind.LPAREN:
                raise FormulaFormatError(
                    f"Operator {token.text!r} cannot immediately follow '('"
                )
            tokens.append(token.text)

        prev = token

    if prev is None:
        raise FormulaFormatError("Formula is empty")
    if prev.kind is TokenKind.OPERATOR:
        raise FormulaFormatError("Formula cannot end with an operator")
    if depth != 0:
        raise FormulaFormatError("Unbalanced parentheses")

    return tuple(tokens), frozenset(variables)

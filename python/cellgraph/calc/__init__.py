"""cellgraph.calc - formula parsing, evaluation, and dependency tracking."""

from cellgraph.calc._evaluator import evaluate_tokens
from cellgraph.calc._formula import Formula
from cellgraph.calc._graph import DependencyGraph
from cellgraph.calc._parser import Token, TokenKind, canonical_number, parse_formula, tokenize
from cellgraph.calc._protocol import (
    CellContent,
    CellStore,
    CellValue,
    EvalError,
    FormulaContent,
    NumberContent,
    NumberValue,
    TextContent,
    TextValue,
)

__all__ = [
    "CellContent",
    "CellStore",
    "CellValue",
    "DependencyGraph",
    "EvalError",
    "Formula",
    "FormulaContent",
    "NumberContent",
    "NumberValue",
    "TextContent",
    "TextValue",
    "Token",
    "TokenKind",
    "canonical_number",
    "evaluate_tokens",
    "parse_formula",
    "tokenize",
]

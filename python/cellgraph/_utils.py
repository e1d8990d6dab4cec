"""Cell-name helpers: A1 coordinate conversion and validity predicates."""

from __future__ import annotations

import re
from typing import Callable

_A1_RE = re.compile(r"^([A-Za-z]+)(\d+)$")


def identity(name: str) -> str:
    """Default normalizer: names are used exactly as given."""
    return name


def always_valid(name: str) -> bool:
    """Default validity predicate: every well-formed name is accepted."""
    return True


def column_letter(index: int) -> str:
    """1-based column index -> letters (1 -> A, 27 -> AA)."""
    if index < 1:
        raise ValueError(f"Column index must be >= 1, got {index}")
    letters = ""
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def column_index(letters: str) -> int:
    """Column letters -> 1-based index (A -> 1, AA -> 27). Case-insensitive."""
    index = 0
    for ch in letters.upper():
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid column letters: {letters!r}")
        index = index * 26 + (ord(ch) - 64)
    return index


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """``"B3"`` -> ``(3, 2)``; 1-based ``(row, column)``."""
    m = _A1_RE.match(ref)
    if not m or int(m.group(2)) == 0:
        raise ValueError(f"Invalid A1 reference: {ref!r}")
    return int(m.group(2)), column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    """``(3, 2)`` -> ``"B3"``."""
    if row < 1:
        raise ValueError(f"Row must be >= 1, got {row}")
    return f"{column_letter(col)}{row}"


def grid_validator(max_column: str = "Z", max_row: int = 99) -> Callable[[str], bool]:
    """Build an ``is_valid`` predicate for a bounded grid of upper-case A1 names.

    ``grid_validator("Z", 99)`` accepts ``A1`` through ``Z99`` and rejects
    lower-case names, so pair it with an upper-casing normalizer.
    """
    last_col = column_index(max_column)

    def is_valid(name: str) -> bool:
        if name != name.upper():
            return False
        try:
            row, col = a1_to_rowcol(name)
        except ValueError:
            return False
        return col <= last_col and row <= max_row

    return is_valid

"""
models/parsing.py — Lenient coercion of raw numeric fields.

Catalog exports mix numbers, numeric strings, blanks and placeholders
("N/A", "-", "TBC"). These helpers turn anything unparsable into None so a
single bad field never invalidates the record that carries it.

Usage:
    from flatfinder_shared.models.parsing import parse_number, parse_count

    parse_number("1,250.5")   # 1250.5
    parse_number("N/A")       # None
    parse_count(150.6)        # 151
"""

from __future__ import annotations

import math
from typing import Any


def parse_number(value: Any) -> float | None:
    """Return value as a finite float, or None when it is blank or unparsable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_positive_int(value: Any) -> int | None:
    """Whole number >= 1 (floor levels); anything else is None."""
    number = parse_number(value)
    if number is None or number < 1:
        return None
    return int(number)


def parse_count(value: Any) -> int:
    """Non-negative whole count; fractional estimates are rounded, junk is 0."""
    number = parse_number(value)
    if number is None or number < 0:
        return 0
    return int(round(number))


def parse_flag(value: Any) -> bool | None:
    """Tri-state boolean: recognised yes/no spellings, otherwise None."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return bool(value) if value in (0, 1) else None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"true", "yes", "y", "1"}:
            return True
        if text in {"false", "no", "n", "0"}:
            return False
    return None

"""
time_utils.py — Completion-date and sale-exercise date helpers.

Completion dates in the catalog come in a few shapes:
- Sentinel: "Completed"
- ISO-ish: "2027-3-31", "2027-03-31" (YYYY-M-D, month/day not zero-padded)
- Quarter label: "Q3 2027" (older catalogs)

Sale exercises are keyed by codes such as "Feb2025" (MMMYYYY).

Usage:
    from flatfinder_shared.time_utils import parse_quarter, current_quarter, is_quarter_past

    q = parse_quarter("2027-3-31")            # Quarter(2027, 1)
    str(q)                                    # "Q1 2027"
    is_quarter_past(q, as_of=date(2027, 5, 1))  # True
"""

from __future__ import annotations

import re
from datetime import date
from typing import NamedTuple

_MONTH_ABBREVIATIONS: dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


class Quarter(NamedTuple):
    """Calendar quarter; tuple ordering is chronological."""

    year: int
    quarter: int

    def __str__(self) -> str:
        return f"Q{self.quarter} {self.year}"

    @property
    def start(self) -> date:
        return date(self.year, (self.quarter - 1) * 3 + 1, 1)


def quarter_of(d: date) -> Quarter:
    """Return the calendar quarter containing d."""
    return Quarter(d.year, (d.month - 1) // 3 + 1)


def current_quarter(as_of: date | None = None) -> Quarter:
    """Quarter containing as_of (today when omitted)."""
    return quarter_of(as_of or date.today())


def parse_quarter(raw: str | None) -> Quarter | None:
    """
    Parse a completion-date string into its calendar quarter.

    Returns None for the "Completed" sentinel, empty input, invalid months
    and anything that is neither a YYYY-M-D date nor a quarter label.
    """
    if not raw:
        return None

    s = raw.strip()

    m = re.fullmatch(r"(\d{4})-(\d{1,2})-(\d{1,2})", s)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            return None
        return Quarter(year, (month - 1) // 3 + 1)

    # Q3 2027, 2027-Q3, 2027Q3
    m = re.fullmatch(r"[Qq]([1-4])\s+(\d{4})", s)
    if m:
        return Quarter(int(m.group(2)), int(m.group(1)))
    m = re.fullmatch(r"(\d{4})-?[Qq]([1-4])", s)
    if m:
        return Quarter(int(m.group(1)), int(m.group(2)))

    return None


def is_quarter_past(quarter: Quarter | None, as_of: date | None = None) -> bool:
    """True when quarter is strictly before the quarter containing as_of."""
    if quarter is None:
        return False
    return quarter < current_quarter(as_of)


def parse_sale_exercise(code: str | None) -> date | None:
    """
    Parse a sale-exercise code ("Feb2025") into the first day of its month.

    Returns None when the code does not follow the MMMYYYY pattern.
    """
    if not code:
        return None
    m = re.fullmatch(r"([A-Za-z]{3})(\d{4})", code.strip())
    if not m:
        return None
    month = _MONTH_ABBREVIATIONS.get(m.group(1).lower())
    if month is None:
        return None
    return date(int(m.group(2)), month, 1)


def sort_sale_exercises(codes: list[str]) -> list[str]:
    """
    Order sale-exercise codes newest first.

    Codes that do not parse sort after every dated code, in input order.
    """
    def sort_key(code: str) -> tuple[int, int]:
        parsed = parse_sale_exercise(code)
        if parsed is None:
            return (1, 0)
        return (0, -(parsed.year * 12 + parsed.month))

    return sorted(codes, key=sort_key)

"""
labels.py — Area and unit-type label normalization.

Supply (unit catalog) and demand (applicant statistics) are entered
independently, so the same town or flat type can be spelled differently on
each side. These helpers collapse known aliases to one canonical label so
the two datasets can be joined on (area, unit type).

Usage:
    from flatfinder_shared.labels import normalize_area, normalize_unit_type, combo_key

    normalize_area("Jurong West")            # "Jurong East / West"
    normalize_unit_type("Executive")         # "5-room"
    combo_key("Kallang/Whampoa", "3Gen")     # "Kallang Whampoa - 5-room"
"""

from __future__ import annotations

import polars as pl

from flatfinder_shared.constants import AREA_ALIASES, UNIT_TYPE_ALIASES

COMBO_SEPARATOR = " - "


def normalize_area(raw: str | None) -> str:
    """
    Map a raw area label to its canonical form.

    Labels outside the alias table pass through unchanged. Falsy input
    yields an empty string.
    """
    if not raw:
        return ""
    return AREA_ALIASES.get(raw, raw)


def normalize_unit_type(raw: str | None) -> str:
    """
    Map a raw unit-type label to the label demand statistics are kept under.

    Legacy labels are replaced wherever they occur in the string.
    """
    if not raw:
        return ""
    value = raw
    for alias, canonical in UNIT_TYPE_ALIASES.items():
        value = value.replace(alias, canonical)
    return value


def combo_key(area: str | None, unit_type: str | None) -> str:
    """Join key for an (area, unit type) category, e.g. "Tampines - 4-room"."""
    return f"{normalize_area(area)}{COMBO_SEPARATOR}{normalize_unit_type(unit_type)}"


def normalize_area_expr(col: str) -> pl.Expr:
    """Polars expression applying normalize_area() to a String column."""
    c = pl.col(col).fill_null("")
    return c.replace(AREA_ALIASES)


def normalize_unit_type_expr(col: str) -> pl.Expr:
    """Polars expression applying normalize_unit_type() to a String column."""
    expr = pl.col(col).fill_null("")
    for alias, canonical in UNIT_TYPE_ALIASES.items():
        expr = expr.str.replace_all(alias, canonical, literal=True)
    return expr

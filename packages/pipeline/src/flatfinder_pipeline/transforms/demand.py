"""
transforms/demand.py — Supply/demand aggregation and balloting odds.

Supply (filtered units) and demand (applicant statistics) are grouped by
the normalized (area, unit type) key and joined. For every supply key the
result carries:

- supply:           units in the filtered catalog
- adjusted_supply:  units a typical buyer would accept ("great flat" view):
                    community care -> 0, flexi -> floor(x * 0.54),
                    everything else -> floor(x * 0.95)
- probability:             odds against the filtered supply
- unfiltered_probability:  odds against every unit offered in the category

probability = min(numerator / denominator, 0.99) when denominator > 0,
otherwise 0.99 if there is any supply and 0 if there is none. A supply key
with no demand therefore reads as 0.99 ("no recorded competition").

Usage:
    from flatfinder_pipeline.transforms.demand import build_combo_stats

    stats = build_combo_stats(filtered_units, demand, "first-timer-families-only")
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import polars as pl
import structlog

from flatfinder_pipeline.transforms.normalize import demand_to_frame, units_to_frame
from flatfinder_shared.constants import (
    COMMUNITY_CARE_DESIGNATION,
    FLEXI_DESIGNATION,
    PROBABILITY_CAP,
    SUPPLY_DISCOUNT_COMMUNITY_CARE,
    SUPPLY_DISCOUNT_DEFAULT,
    SUPPLY_DISCOUNT_FLEXI,
    VIEW_MODES,
    ViewMode,
)
from flatfinder_shared.labels import normalize_unit_type
from flatfinder_shared.models import ComboStat, DemandRecord, UnitRecord

log = structlog.get_logger(__name__)

KEY_COLS = ["combo", "area_key", "unit_type_key"]

SUB_POPULATIONS = [
    "first_timer_families",
    "first_timer_singles",
    "second_timer_families",
    "seniors",
]


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


def supply_discount(unit_type: str | None) -> float:
    """Fraction of listed units a typical buyer would accept for unit_type."""
    label = normalize_unit_type(unit_type)
    if COMMUNITY_CARE_DESIGNATION in label:
        return SUPPLY_DISCOUNT_COMMUNITY_CARE
    if FLEXI_DESIGNATION in label:
        return SUPPLY_DISCOUNT_FLEXI
    return SUPPLY_DISCOUNT_DEFAULT


def adjusted_supply(raw: int, unit_type: str | None) -> int:
    return math.floor(raw * supply_discount(unit_type))


def balloting_probability(numerator: float, denominator: float) -> float:
    """Capped supply/demand ratio."""
    if denominator > 0:
        return min(numerator / denominator, PROBABILITY_CAP)
    return PROBABILITY_CAP if numerator > 0 else 0.0


# ---------------------------------------------------------------------------
# Polars expressions
# ---------------------------------------------------------------------------


def supply_discount_expr(unit_type_col: str = "unit_type_key") -> pl.Expr:
    label = pl.col(unit_type_col)
    return (
        pl.when(label.str.contains(COMMUNITY_CARE_DESIGNATION, literal=True))
        .then(pl.lit(SUPPLY_DISCOUNT_COMMUNITY_CARE))
        .when(label.str.contains(FLEXI_DESIGNATION, literal=True))
        .then(pl.lit(SUPPLY_DISCOUNT_FLEXI))
        .otherwise(pl.lit(SUPPLY_DISCOUNT_DEFAULT))
    )


def adjusted_expr(col: str, unit_type_col: str = "unit_type_key") -> pl.Expr:
    return (pl.col(col) * supply_discount_expr(unit_type_col)).floor().cast(pl.Int64)


def probability_expr(numerator: str, denominator: str) -> pl.Expr:
    num = pl.col(numerator).cast(pl.Float64)
    den = pl.col(denominator).cast(pl.Float64)
    return (
        pl.when(den > 0)
        .then(pl.min_horizontal(num / den, pl.lit(PROBABILITY_CAP)))
        .when(num > 0)
        .then(pl.lit(PROBABILITY_CAP))
        .otherwise(pl.lit(0.0))
    )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_supply(units_df: pl.DataFrame) -> pl.DataFrame:
    """Count units per normalized (area, unit type) key, first-seen order."""
    return units_df.group_by(KEY_COLS, maintain_order=True).agg(
        pl.len().cast(pl.Int64).alias("supply")
    )


def aggregate_demand(demand_df: pl.DataFrame) -> pl.DataFrame:
    """Sum applicants, units offered and sub-population counts per key."""
    return demand_df.group_by(KEY_COLS, maintain_order=True).agg(
        pl.col("applicants").fill_null(0).sum(),
        pl.col("units_offered").fill_null(0).sum(),
        *[pl.col(c).fill_null(0).sum() for c in SUB_POPULATIONS],
    )


def combo_stats_frame(
    units_df: pl.DataFrame,
    demand_df: pl.DataFrame,
    view_mode: ViewMode = "all-applicants",
) -> pl.DataFrame:
    """build_combo_stats() over already-built frames; returns a DataFrame."""
    if view_mode not in VIEW_MODES:
        raise ValueError(f"unknown view mode {view_mode!r}; expected one of {VIEW_MODES}")

    supply = aggregate_supply(units_df)
    demand = aggregate_demand(demand_df)

    unmatched = demand.join(supply, on="combo", how="anti")
    if len(unmatched):
        log.debug("unmatched_demand_keys", count=len(unmatched))

    joined = supply.join(
        demand.drop("area_key", "unit_type_key"), on="combo", how="left"
    ).with_columns(
        [pl.col(c).fill_null(0) for c in ["applicants", "units_offered", *SUB_POPULATIONS]]
    )

    joined = joined.with_columns(
        adjusted_expr("supply").alias("adjusted_supply"),
        adjusted_expr("units_offered").alias("adjusted_units_offered"),
    )

    if view_mode == "first-timer-families-only":
        joined = joined.with_columns(
            pl.col("first_timer_families").alias("demand"),
            probability_expr("adjusted_supply", "first_timer_families").alias("probability"),
            probability_expr("adjusted_units_offered", "first_timer_families").alias(
                "unfiltered_probability"
            ),
        )
    else:
        joined = joined.with_columns(
            pl.col("applicants").alias("demand"),
            probability_expr("supply", "applicants").alias("probability"),
            probability_expr("units_offered", "applicants").alias("unfiltered_probability"),
        )

    return joined.rename({"area_key": "area", "unit_type_key": "unit_type"}).sort(
        "probability", descending=True, maintain_order=True
    )


def build_combo_stats(
    units: Sequence[UnitRecord],
    demand: Sequence[DemandRecord],
    view_mode: ViewMode = "all-applicants",
) -> list[ComboStat]:
    """
    Join filtered supply with demand and estimate balloting odds per category.

    Args:
        units:     The filtered catalog.
        demand:    Applicant statistics for the same sale exercise.
        view_mode: "all-applicants" (raw supply over total applicants) or
                   "first-timer-families-only" (adjusted supply over
                   first-timer family applicants).

    Returns:
        ComboStat rows sorted by probability, highest first. Empty when
        units is empty.

    Raises:
        ValueError: unknown view_mode.
    """
    df = combo_stats_frame(units_to_frame(units), demand_to_frame(demand), view_mode)
    stats = [ComboStat(**row) for row in df.iter_rows(named=True)]
    log.debug("combo_stats_built", combos=len(stats), view_mode=view_mode)
    return stats

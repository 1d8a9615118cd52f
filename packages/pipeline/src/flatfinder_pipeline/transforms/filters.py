"""
transforms/filters.py — Conjunctive filtering of the unit catalog.

A FilterState compiles to one polars predicate: AND across dimensions, OR
within a multi-select. Inactive dimensions (empty selection, open range,
None single) contribute nothing, so an all-wildcard state returns every
unit.

Usage:
    from flatfinder_pipeline.transforms.filters import filter_units, extract_filter_options

    matches = filter_units(units, state, secondary_transit_mode=True)
    options = extract_filter_options(subset, all_units=units)
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl
import structlog

from flatfinder_pipeline.transforms.dimensions import RANGE_DIMENSIONS
from flatfinder_pipeline.transforms.normalize import frame_to_units, units_to_frame
from flatfinder_shared.constants import ETHNIC_QUOTA_FIELDS
from flatfinder_shared.models import FilterOptions, FilterState, UnitRecord
from flatfinder_shared.time_utils import sort_sale_exercises

log = structlog.get_logger(__name__)

# FilterState multi-select field -> unit frame column
MULTI_SELECT_COLUMNS: dict[str, str] = {
    "areas": "area",
    "project_names": "project_name",
    "unit_types": "unit_type",
    "completion_dates": "completion_date",
    "nearest_stations": "nearest_mrt",
    "nearest_stations_secondary": "nearest_mrt_lrt",
    "schools_within_1km": "schools_within_1km",
    "schools_within_2km": "schools_within_2km",
}

# Multi-selects matched against a list of amenity names
AMENITY_COLUMNS: frozenset[str] = frozenset({"schools_within_1km", "schools_within_2km"})


def build_predicates(state: FilterState, secondary_transit_mode: bool = False) -> list[pl.Expr]:
    """
    Compile the active dimensions of state into polars predicates.

    Returns an empty list for an all-wildcard state.
    """
    predicates: list[pl.Expr] = []

    if state.sale_exercise:
        predicates.append(pl.col("sale_exercise") == state.sale_exercise)

    for field, col in MULTI_SELECT_COLUMNS.items():
        selected = list(getattr(state, field))
        if not selected:
            continue
        if col in AMENITY_COLUMNS:
            predicates.append(
                pl.col(col).list.eval(pl.element().is_in(selected)).list.any()
            )
        else:
            predicates.append(pl.col(col).is_in(selected))

    for field, (_, build) in RANGE_DIMENSIONS.items():
        bound = getattr(state, field)
        if bound.is_open:
            continue
        value = build(secondary_transit_mode)
        if bound.low is not None:
            predicates.append(value >= bound.low)
        if bound.high is not None:
            predicates.append(value <= bound.high)

    if state.repurchased is not None:
        predicates.append(pl.col("repurchased") == state.repurchased)

    if state.ethnic_group is not None:
        quota_col = ETHNIC_QUOTA_FIELDS.get(state.ethnic_group)
        if quota_col is not None:
            predicates.append(pl.col(quota_col) > 0)

    return predicates


def filter_frame(
    df: pl.DataFrame,
    state: FilterState,
    secondary_transit_mode: bool = False,
) -> pl.DataFrame:
    """
    Keep rows of a unit frame that satisfy every active predicate.

    Null predicate results (missing ROI inputs, unknown repurchase status)
    count as a mismatch.
    """
    predicates = build_predicates(state, secondary_transit_mode)
    if not predicates:
        return df
    return df.filter(pl.all_horizontal(predicates).fill_null(False))


def filter_units(
    units: Sequence[UnitRecord],
    state: FilterState,
    secondary_transit_mode: bool = False,
) -> list[UnitRecord]:
    """
    Return the units matching state, in input order.

    Args:
        units:                  Catalog records.
        state:                  Filter criteria for this pass.
        secondary_transit_mode: Read walking time/distance from the MRT/LRT
                                fields (falling back to MRT-only).

    Returns:
        The matching UnitRecord objects (the same instances, not copies).
    """
    if not units:
        return []

    df = filter_frame(units_to_frame(units), state, secondary_transit_mode)
    matched = frame_to_units(df, units)
    log.debug("filter_applied", matched=len(matched), total=len(units))
    return matched


# ---------------------------------------------------------------------------
# Sale-exercise scoping and option lists
# ---------------------------------------------------------------------------


def select_sale_exercise(units: Sequence[UnitRecord], code: str | None) -> list[UnitRecord]:
    """Units belonging to one sale exercise (all units when code is None)."""
    if not code:
        return list(units)
    return [u for u in units if u.sale_exercise == code]


def latest_sale_exercise(units: Sequence[UnitRecord]) -> str | None:
    """Newest sale-exercise code present in units."""
    codes = sort_sale_exercises(sorted({u.sale_exercise for u in units if u.sale_exercise}))
    return codes[0] if codes else None


def _distinct(values: list[str | None]) -> list[str]:
    # First-seen order
    return list(dict.fromkeys(v for v in values if v))


def extract_filter_options(
    units: Sequence[UnitRecord],
    all_units: Sequence[UnitRecord] | None = None,
) -> FilterOptions:
    """
    Distinct options for every multi-select dimension.

    Args:
        units:     Records the option lists are drawn from (usually one
                   sale exercise).
        all_units: Full catalog used for the sale-exercise list; defaults
                   to units.

    Returns:
        FilterOptions; school names are sorted, sale exercises are newest
        first, everything else keeps first-seen order.
    """
    source = all_units if all_units is not None else units
    exercises = sort_sale_exercises(_distinct([u.sale_exercise for u in source]))

    return FilterOptions(
        sale_exercises=exercises,
        areas=_distinct([u.area for u in units]),
        project_names=_distinct([u.project_name for u in units]),
        completion_dates=_distinct([u.completion_date for u in units]),
        nearest_stations=_distinct([u.nearest_mrt for u in units]),
        nearest_stations_secondary=_distinct([u.nearest_mrt_lrt for u in units]),
        schools_within_1km=sorted({s.name for u in units for s in u.schools_within_1km if s.name}),
        schools_within_2km=sorted({s.name for u in units for s in u.schools_within_2km if s.name}),
    )

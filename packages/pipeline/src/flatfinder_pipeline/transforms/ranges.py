"""
transforms/ranges.py — Slider bounds for the active catalog subset.

Bounds are always recomputed from scratch for the current subset (a new
sale exercise or a transit-mode toggle means a new subset); there is no
incremental update.

Usage:
    from flatfinder_pipeline.transforms.ranges import compute_ranges, default_filter_state

    bounds = compute_ranges(units, secondary_transit_mode=False)
    state = default_filter_state(bounds, sale_exercise="Feb2025")
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl
import structlog

from flatfinder_pipeline.transforms.dimensions import dimension_frame
from flatfinder_pipeline.transforms.normalize import units_to_frame
from flatfinder_shared.constants import FALLBACK_BOUNDS, ROI_FALLBACK_BOUNDS
from flatfinder_shared.models import FilterState, RangeBounds, UnitRecord

log = structlog.get_logger(__name__)


def fallback_bounds() -> RangeBounds:
    """Bounds used when the subset is empty, so sliders never collapse to [0, 0]."""
    fields: dict[str, float] = {}
    for key, (low, high) in FALLBACK_BOUNDS.items():
        fields[f"min_{key}"] = float(low)
        fields[f"max_{key}"] = float(high)
    return RangeBounds(**fields)


def compute_ranges_frame(df: pl.DataFrame, secondary_transit_mode: bool = False) -> RangeBounds:
    """compute_ranges() over an already-built unit frame."""
    if df.is_empty():
        return fallback_bounds()

    dims = dimension_frame(df, secondary_transit_mode)
    fields: dict[str, float] = {}
    for key in FALLBACK_BOUNDS:
        if key == "roi":
            continue
        fields[f"min_{key}"] = float(dims[key].min())
        fields[f"max_{key}"] = float(dims[key].max())

    # ROI only over units that have both a price and a resale estimate
    roi = dims["roi"].drop_nulls()
    if roi.is_empty():
        fields["min_roi"], fields["max_roi"] = ROI_FALLBACK_BOUNDS
    else:
        fields["min_roi"] = float(roi.min())
        fields["max_roi"] = float(roi.max())

    bounds = RangeBounds(**fields)
    log.debug("ranges_computed", rows=len(df), secondary_transit_mode=secondary_transit_mode)
    return bounds


def compute_ranges(
    units: Sequence[UnitRecord],
    secondary_transit_mode: bool = False,
) -> RangeBounds:
    """
    Compute min/max for every numeric filter dimension across units.

    Missing values count as 0. Walking time/distance follow the transit
    mode (secondary field first, primary as fallback). ROI bounds use only
    units with both a price and a resale estimate, and default to
    [-50, 100] when none qualify.

    Args:
        units:                  The active subset of the catalog.
        secondary_transit_mode: Prefer MRT/LRT walking fields.

    Returns:
        RangeBounds (fixed fallback bounds when units is empty).
    """
    return compute_ranges_frame(units_to_frame(units), secondary_transit_mode)


def default_filter_state(
    bounds: RangeBounds,
    *,
    sale_exercise: str | None = None,
    unit_types: Sequence[str] = (),
) -> FilterState:
    """
    Initial filter state for a subset: every range spans its full bounds.

    The ROI range is left open, so units without a resale estimate stay
    visible until the user narrows ROI explicitly.
    """
    return FilterState(
        sale_exercise=sale_exercise,
        unit_types=tuple(unit_types),
        **bounds.as_filter_ranges(include_roi=False),
    )

"""
pipelines/dashboard.py — One full recomputation of the dashboard.

Steps:
  1. Pick the sale exercise (given, else the newest in the catalog)
  2. Compute slider bounds and option lists for that exercise
  3. Build the filter state (given, else defaults) and merge a preset
  4. Filter the catalog
  5. Derive per-unit metrics and chart aggregates over the filtered set
     (ROI, floors, lease, completion, affordability, station walk)
  6. Join filtered supply with demand for balloting odds

Every run starts from scratch; nothing is cached between runs.

Usage:
    from flatfinder_pipeline.pipelines.dashboard import run

    result = run(units, demand)                                  # newest exercise, defaults
    result = run(units, demand, sale_exercise="Feb2025", preset="near_transit")
    result = run(units, demand, view_mode="first-timer-families-only")
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from flatfinder_pipeline.transforms.affordability import affordability_analysis
from flatfinder_pipeline.transforms.demand import build_combo_stats
from flatfinder_pipeline.transforms.filters import (
    extract_filter_options,
    filter_units,
    latest_sale_exercise,
    select_sale_exercise,
)
from flatfinder_pipeline.transforms.metrics import (
    completion_timeline,
    derive_unit_metrics,
    floor_tier_summary,
    lease_buckets,
    location_value_summary,
    roi_by_combo,
    roi_summary,
)
from flatfinder_pipeline.transforms.presets import merge_preset
from flatfinder_pipeline.transforms.ranges import compute_ranges, default_filter_state
from flatfinder_pipeline.utils.logging import get_logger
from flatfinder_shared.constants import ViewMode
from flatfinder_shared.models import (
    AffordabilityAnalysis,
    ComboStat,
    DemandRecord,
    FilterOptions,
    FilterState,
    FloorTierStat,
    LeaseBucket,
    LocationValueSummary,
    RangeBounds,
    RoiComboStat,
    RoiSummary,
    TimelineBucket,
    UnitMetrics,
    UnitRecord,
)

log = get_logger(__name__, pipeline="dashboard")


@dataclass
class DashboardResult:
    """Everything the dashboard renders for one filter state."""

    sale_exercise: str | None
    bounds: RangeBounds
    options: FilterOptions
    filter_state: FilterState
    units: list[UnitRecord]
    unit_metrics: list[UnitMetrics]
    combo_stats: list[ComboStat]
    roi_summary: RoiSummary
    roi_by_combo: list[RoiComboStat] = field(default_factory=list)
    floor_tiers: list[FloorTierStat] = field(default_factory=list)
    lease_buckets: list[LeaseBucket] = field(default_factory=list)
    completion_timeline: list[TimelineBucket] = field(default_factory=list)
    location_value: LocationValueSummary = field(default_factory=LocationValueSummary)
    affordability: AffordabilityAnalysis = field(default_factory=AffordabilityAnalysis)
    total_units: int = 0

    @property
    def matched_units(self) -> int:
        return len(self.units)

    def summary(self) -> dict[str, Any]:
        """JSON-serialisable digest: counts, bounds and balloting odds."""
        return {
            "sale_exercise": self.sale_exercise,
            "total_units": self.total_units,
            "matched_units": self.matched_units,
            "bounds": self.bounds.model_dump(mode="json"),
            "roi": self.roi_summary.model_dump(mode="json"),
            "combo_stats": [s.model_dump(mode="json") for s in self.combo_stats],
            "completion_timeline": [b.model_dump(mode="json") for b in self.completion_timeline],
            "location_value": self.location_value.model_dump(mode="json"),
        }


def run(
    units: Sequence[UnitRecord],
    demand: Sequence[DemandRecord],
    *,
    sale_exercise: str | None = None,
    filter_state: FilterState | None = None,
    preset: str | None = None,
    secondary_transit_mode: bool = False,
    view_mode: ViewMode = "all-applicants",
    as_of: date | None = None,
) -> DashboardResult:
    """
    Run the full dashboard computation.

    Args:
        units:                  Full catalog (any number of sale exercises).
        demand:                 Applicant statistics. Records tagged with a
                                different sale exercise are ignored.
        sale_exercise:          Exercise to show; the newest one by default.
        filter_state:           Starting filter state; defaults span the
                                full bounds of the selected exercise.
        preset:                 Preset merged over the filter state.
        secondary_transit_mode: Prefer MRT/LRT walking fields.
        view_mode:              Probability view for the combo stats.
        as_of:                  Reference date for completion buckets.

    Returns:
        DashboardResult.

    Raises:
        UnknownPresetError: preset is not registered.
        ValueError:         unknown view_mode.
    """
    t0 = time.monotonic()
    code = sale_exercise or latest_sale_exercise(units)
    run_log = log.bind(sale_exercise=code, view_mode=view_mode)
    run_log.info("pipeline_start", units=len(units), demand=len(demand))

    # Bounds and options come from the exercise, or the whole catalog if it has no units
    subset = select_sale_exercise(units, code) or list(units)
    bounds = compute_ranges(subset, secondary_transit_mode)
    options = extract_filter_options(subset, all_units=units)

    state = filter_state or default_filter_state(bounds, sale_exercise=code)
    if state.sale_exercise is None and code:
        state = state.with_updates(sale_exercise=code)
    if preset:
        state = merge_preset(state, preset, bounds)

    matched = filter_units(units, state, secondary_transit_mode)
    exercise_demand = [
        d for d in demand
        if not state.sale_exercise or d.sale_exercise in (None, state.sale_exercise)
    ]

    result = DashboardResult(
        sale_exercise=state.sale_exercise,
        bounds=bounds,
        options=options,
        filter_state=state,
        units=matched,
        unit_metrics=derive_unit_metrics(matched, as_of),
        combo_stats=build_combo_stats(matched, exercise_demand, view_mode),
        roi_summary=roi_summary(matched),
        roi_by_combo=roi_by_combo(matched),
        floor_tiers=floor_tier_summary(matched),
        lease_buckets=lease_buckets(matched, as_of),
        completion_timeline=completion_timeline(matched, as_of),
        location_value=location_value_summary(matched, secondary_transit_mode),
        affordability=affordability_analysis(matched),
        total_units=len(units),
    )

    run_log.info(
        "pipeline_complete",
        matched=result.matched_units,
        combos=len(result.combo_stats),
        duration_ms=int((time.monotonic() - t0) * 1000),
    )
    return result

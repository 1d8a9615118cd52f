"""
transforms/metrics.py — Per-unit derived metrics and their chart aggregates.

Scalar metrics (withheld as None when inputs are missing, never raised):
  roi_pct                 (resale - price) / price * 100
  price_per_lease_year    price / remaining lease years
  floor_tier              building-relative low / mid / high
  completion_bucket       "Completed", "Q<n> YYYY" or "Other"

Set-level aggregates built on them: ROI summaries, floor-tier summaries,
lease-decay buckets, the completion timeline and the station-walk
location value summary.

Completion buckets depend on the current quarter, so every function that
uses them takes an explicit `as_of` date (today when omitted).

Usage:
    from flatfinder_pipeline.transforms.metrics import derive_unit_metrics, completion_timeline

    rows = derive_unit_metrics(filtered_units, as_of=date(2025, 6, 1))
    timeline = completion_timeline(filtered_units, as_of=date(2025, 6, 1))
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import date

import polars as pl
import structlog

from flatfinder_pipeline.transforms.normalize import ROW_COL, units_to_frame
from flatfinder_shared.constants import (
    BEST_VALUE_LIMIT,
    BEST_VALUE_MAX_WALK,
    COMPLETED,
    COMPLETED_LABEL,
    FAR_STATION_MIN_WALK,
    FLOOR_TIER_MIN_SPREAD,
    HIGH_RISE_TIER_FRACTION,
    LEASE_BUCKETS,
    LOW_RISE_MAX_LEVEL,
    MID_RISE_MAX_LEVEL,
    MID_RISE_TIER_FRACTION,
    NEAR_STATION_MAX_WALK,
    OTHER_BUCKET,
    OTHER_LABEL,
    ROI_HIGH_THRESHOLD,
    ROI_TIERS,
    BuildingType,
    FloorTier,
)
from flatfinder_shared.models import (
    FloorTierAssignment,
    FloorTierStat,
    LeaseBucket,
    LocationValuePoint,
    LocationValueSummary,
    RoiComboStat,
    RoiSummary,
    TimelineBucket,
    UnitMetrics,
    UnitRecord,
)
from flatfinder_shared.time_utils import Quarter, is_quarter_past, parse_quarter

log = structlog.get_logger(__name__)

BUILDING_COLS = ["project_name", "block"]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ---------------------------------------------------------------------------
# ROI
# ---------------------------------------------------------------------------


def roi_pct(unit: UnitRecord) -> float | None:
    """Return on investment in percent, None without a positive price and resale value."""
    price, resale = unit.price, unit.approximate_resale_value
    if not price or price <= 0 or not resale or resale <= 0:
        return None
    return (resale - price) / price * 100


def roi_tier(pct: float | None) -> str | None:
    if pct is None:
        return None
    for threshold, tier in ROI_TIERS:
        if pct >= threshold:
            return tier
    return "low"


def roi_summary(units: Sequence[UnitRecord]) -> RoiSummary:
    values = [v for v in (roi_pct(u) for u in units) if v is not None]
    if not values:
        return RoiSummary(count=0)
    return RoiSummary(
        count=len(values),
        avg_roi_pct=_mean(values),
        max_roi_pct=max(values),
        high_roi_count=sum(1 for v in values if v >= ROI_HIGH_THRESHOLD),
    )


def roi_by_combo(units: Sequence[UnitRecord]) -> list[RoiComboStat]:
    """
    ROI statistics per (area, unit type), best first.

    Ordered by average ROI, then average profit, then unit count, all
    descending. Units without an ROI are skipped.
    """
    groups: dict[tuple[str | None, str | None], list[tuple[float, float]]] = defaultdict(list)
    for unit in units:
        pct = roi_pct(unit)
        if pct is None:
            continue
        profit = unit.approximate_resale_value - unit.price
        groups[(unit.area, unit.unit_type)].append((pct, profit))

    stats = [
        RoiComboStat(
            area=area,
            unit_type=unit_type,
            count=len(rows),
            avg_roi_pct=_mean([r for r, _ in rows]),
            min_roi_pct=min(r for r, _ in rows),
            max_roi_pct=max(r for r, _ in rows),
            avg_profit=_mean([p for _, p in rows]),
        )
        for (area, unit_type), rows in groups.items()
    ]
    return sorted(stats, key=lambda s: (s.avg_roi_pct, s.avg_profit, s.count), reverse=True)


# ---------------------------------------------------------------------------
# Lease decay
# ---------------------------------------------------------------------------


def price_per_lease_year(unit: UnitRecord) -> float | None:
    """Price per remaining lease year, None unless both are positive."""
    price, lease = unit.price, unit.max_lease
    if not price or price <= 0 or not lease or lease <= 0:
        return None
    return price / lease


def lease_buckets(
    units: Sequence[UnitRecord],
    as_of: date | None = None,
) -> list[LeaseBucket]:
    """
    Group units by remaining lease and average their price per lease year.

    Leases are floored to whole years. The 98-99 year band is split by
    completion status, so fresh-lease units still under construction are
    not compared with ones ready to move in.
    """
    buckets: list[LeaseBucket] = []
    for label, low, high, requires_completed in LEASE_BUCKETS:
        members = []
        for unit in units:
            lease = math.floor(unit.max_lease or 0)
            if not low <= lease <= high:
                continue
            if requires_completed is not None and is_completed(unit, as_of) != requires_completed:
                continue
            members.append(unit)

        per_year = [v for v in (price_per_lease_year(u) for u in members) if v is not None]
        buckets.append(
            LeaseBucket(
                label=label,
                min_years=low,
                max_years=high,
                count=len(members),
                avg_price_per_lease_year=_mean(per_year),
            )
        )
    return buckets


# ---------------------------------------------------------------------------
# Floor tiers
# ---------------------------------------------------------------------------


def building_type(building_max_level: int) -> BuildingType:
    if building_max_level <= LOW_RISE_MAX_LEVEL:
        return "Low-rise"
    if building_max_level <= MID_RISE_MAX_LEVEL:
        return "Mid-rise"
    return "High-rise"


def floor_tier(level: int, building_min_level: int, building_max_level: int) -> FloorTier:
    """
    Classify a level relative to the levels observed in its building.

    - spread (max - min) of 2 or less: everything is "mid"
    - low-rise (max <= 5): only the bottom / top floor pair are low / high
    - mid-rise (max <= 15): bottom / top 30 % of the spread
    - high-rise: bottom / top 25 % of the spread
    """
    spread = building_max_level - building_min_level
    if spread <= FLOOR_TIER_MIN_SPREAD:
        return "mid"

    if building_max_level <= LOW_RISE_MAX_LEVEL:
        low_cut = building_min_level + 1
        high_cut = building_max_level - 1
    else:
        fraction = (
            MID_RISE_TIER_FRACTION
            if building_max_level <= MID_RISE_MAX_LEVEL
            else HIGH_RISE_TIER_FRACTION
        )
        margin = math.floor(spread * fraction)
        low_cut = building_min_level + margin
        high_cut = building_max_level - margin

    if level <= low_cut:
        return "low"
    if level >= high_cut:
        return "high"
    return "mid"


def _building_levels(df: pl.DataFrame) -> pl.DataFrame:
    """Rows with a level, plus the min/max level of their building."""
    return (
        df.filter(pl.col("level").is_not_null())
        .with_columns(
            pl.col("level").min().over(BUILDING_COLS).alias("building_min_level"),
            pl.col("level").max().over(BUILDING_COLS).alias("building_max_level"),
        )
        .select(ROW_COL, "level", "building_min_level", "building_max_level")
    )


def _floor_tiers_by_row(units: Sequence[UnitRecord]) -> dict[int, FloorTierAssignment]:
    df = units_to_frame(units)
    assignments: dict[int, FloorTierAssignment] = {}
    for row in _building_levels(df).iter_rows(named=True):
        low, high, level = row["building_min_level"], row["building_max_level"], row["level"]
        assignments[row[ROW_COL]] = FloorTierAssignment(
            ref=units[row[ROW_COL]].unit_ref,
            level=level,
            tier=floor_tier(level, low, high),
            building_type=building_type(high),
            building_min_level=low,
            building_max_level=high,
            floor_range=high - low,
        )
    return assignments


def assign_floor_tiers(units: Sequence[UnitRecord]) -> list[FloorTierAssignment]:
    """
    Floor tier for every unit with a level, grouped by building (project + block).

    Units without a level are skipped. Output keeps input order.
    """
    by_row = _floor_tiers_by_row(units)
    return [by_row[i] for i in sorted(by_row)]


def floor_tier_summary(units: Sequence[UnitRecord]) -> list[FloorTierStat]:
    """Unit count, average price and average ROI for low / mid / high tiers."""
    by_row = _floor_tiers_by_row(units)
    prices: dict[str, list[float]] = defaultdict(list)
    rois: dict[str, list[float]] = defaultdict(list)
    counts: dict[str, int] = defaultdict(int)

    for i, assignment in by_row.items():
        unit = units[i]
        counts[assignment.tier] += 1
        if unit.price:
            prices[assignment.tier].append(unit.price)
        pct = roi_pct(unit)
        if pct is not None:
            rois[assignment.tier].append(pct)

    return [
        FloorTierStat(
            tier=tier,
            count=counts[tier],
            avg_price=_mean(prices[tier]),
            avg_roi_pct=_mean(rois[tier]),
        )
        for tier in ("low", "mid", "high")
    ]


# ---------------------------------------------------------------------------
# Completion timeline
# ---------------------------------------------------------------------------


def _is_completed_sentinel(raw: str | None) -> bool:
    return bool(raw) and raw.strip().lower() == COMPLETED.lower()


def completion_bucket(raw: str | None, as_of: date | None = None) -> str:
    """
    Bucket a completion date.

    "Completed" for the sentinel and for any quarter already behind the
    current one, "Q<n> YYYY" for current and future quarters, "Other" when
    the date cannot be parsed.
    """
    if _is_completed_sentinel(raw):
        return COMPLETED
    quarter = parse_quarter(raw)
    if quarter is None:
        return OTHER_BUCKET
    if is_quarter_past(quarter, as_of):
        return COMPLETED
    return str(quarter)


def is_completed(unit: UnitRecord, as_of: date | None = None) -> bool:
    return completion_bucket(unit.completion_date, as_of) == COMPLETED


def completion_timeline(
    units: Sequence[UnitRecord],
    as_of: date | None = None,
) -> list[TimelineBucket]:
    """
    Count units per completion bucket, in display order.

    "Completed" first, then upcoming quarters chronologically, then
    "Other". Buckets with no units are omitted.
    """
    members: dict[str, list[UnitRecord]] = defaultdict(list)
    for unit in units:
        members[completion_bucket(unit.completion_date, as_of)].append(unit)

    quarters = sorted(
        (k for k in members if k not in (COMPLETED, OTHER_BUCKET)),
        key=lambda k: parse_quarter(k) or Quarter(0, 0),
    )
    order = [
        *([COMPLETED] if COMPLETED in members else []),
        *quarters,
        *([OTHER_BUCKET] if OTHER_BUCKET in members else []),
    ]
    labels = {COMPLETED: COMPLETED_LABEL, OTHER_BUCKET: OTHER_LABEL}

    return [
        TimelineBucket(
            key=key,
            label=labels.get(key, key),
            count=len(members[key]),
            avg_price=_mean([u.price for u in members[key] if u.price]),
        )
        for key in order
    ]


# ---------------------------------------------------------------------------
# Location value
# ---------------------------------------------------------------------------


def _station(unit: UnitRecord, secondary_transit_mode: bool) -> str | None:
    # Follows walking_time(): the secondary station only when its time is used
    if secondary_transit_mode and unit.mrt_lrt_walking_time_in_mins:
        return unit.nearest_mrt_lrt or unit.nearest_mrt
    return unit.nearest_mrt


def location_value_summary(
    units: Sequence[UnitRecord],
    secondary_transit_mode: bool = False,
) -> LocationValueSummary:
    """
    Walking time to the nearest station against price.

    Only units with a walking time, a positive price and a named station
    are considered. Best value is the cheapest few within a 10-minute walk,
    in price order.
    """
    points: list[LocationValuePoint] = []
    for unit in units:
        walk = unit.walking_time(secondary_transit_mode)
        station = _station(unit, secondary_transit_mode)
        if walk is None or not unit.price or unit.price <= 0 or not station:
            continue
        points.append(
            LocationValuePoint(
                ref=unit.unit_ref,
                area=unit.area,
                unit_type=unit.unit_type,
                station=station,
                walking_time=walk,
                price=unit.price,
            )
        )

    if not points:
        return LocationValueSummary()

    nearby = sorted(
        (p for p in points if p.walking_time <= BEST_VALUE_MAX_WALK),
        key=lambda p: p.price,
    )
    return LocationValueSummary(
        count=len(points),
        avg_walking_time=_mean([p.walking_time for p in points]),
        near_station_count=sum(1 for p in points if p.walking_time <= NEAR_STATION_MAX_WALK),
        far_from_station_count=sum(1 for p in points if p.walking_time > FAR_STATION_MIN_WALK),
        best_value=nearby[:BEST_VALUE_LIMIT],
    )


# ---------------------------------------------------------------------------
# Per-unit rows
# ---------------------------------------------------------------------------


def derive_unit_metrics(
    units: Sequence[UnitRecord],
    as_of: date | None = None,
) -> list[UnitMetrics]:
    """
    One UnitMetrics row per unit, parallel to the input.

    Floor tiers are building-relative within `units`, so pass the set the
    tiers should be judged against (normally the filtered catalog).
    """
    tiers = _floor_tiers_by_row(units)
    rows = [
        UnitMetrics(
            ref=unit.unit_ref,
            roi_pct=roi_pct(unit),
            price_per_lease_year=price_per_lease_year(unit),
            floor_tier=tiers[i].tier if i in tiers else None,
            completion_bucket=completion_bucket(unit.completion_date, as_of),
        )
        for i, unit in enumerate(units)
    ]
    log.debug("unit_metrics_derived", units=len(rows))
    return rows

"""
models/stats.py — Derived analytics rows.

None of these are stored: each is recomputed from UnitRecord and
DemandRecord inputs on every pass.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from flatfinder_shared.constants import BuildingType, FloorTier
from flatfinder_shared.models.units import UnitRecord, UnitRef


class ComboStat(BaseModel):
    """Supply, demand and balloting odds for one (area, unit type) category."""

    model_config = ConfigDict(frozen=True)

    combo: str                      # "Tampines - 4-room"
    area: str
    unit_type: str
    supply: int                     # units in the filtered catalog
    adjusted_supply: int            # "desirable units only" heuristic
    demand: int                     # denominator for the active view mode
    applicants: int = 0
    units_offered: int = 0          # category total from the demand dataset
    adjusted_units_offered: int = 0
    first_timer_families: int = 0
    first_timer_singles: int = 0
    second_timer_families: int = 0
    seniors: int = 0
    probability: float = Field(ge=0, le=0.99)
    unfiltered_probability: float = Field(ge=0, le=0.99)


class UnitMetrics(BaseModel):
    """Per-unit derived values, traceable to the source unit via `ref`."""

    model_config = ConfigDict(frozen=True)

    ref: UnitRef
    roi_pct: float | None = None
    price_per_lease_year: float | None = None
    floor_tier: FloorTier | None = None
    completion_bucket: str


class FloorTierAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    ref: UnitRef
    level: int
    tier: FloorTier
    building_type: BuildingType
    building_min_level: int
    building_max_level: int
    floor_range: int


class FloorTierStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: FloorTier
    count: int
    avg_price: float
    avg_roi_pct: float


class RoiSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    avg_roi_pct: float | None = None
    max_roi_pct: float | None = None
    high_roi_count: int = 0


class RoiComboStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    area: str | None
    unit_type: str | None
    count: int
    avg_roi_pct: float
    min_roi_pct: float
    max_roi_pct: float
    avg_profit: float


class LeaseBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    min_years: int
    max_years: int
    count: int
    avg_price_per_lease_year: float


class TimelineBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str                        # "Completed", "Q3 2027" or "Other"
    label: str
    count: int
    avg_price: float


class AffordabilityBracket(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    min_income: int
    max_income: int
    max_affordable_price: float
    count: int
    avg_price: float
    min_price: float
    unit_type_counts: dict[str, int] = Field(default_factory=dict)


class AffordabilityAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    brackets: list[AffordabilityBracket] = Field(default_factory=list)
    total_units: int = 0
    avg_price: float = 0.0
    min_price: float = 0.0
    max_price: float = 0.0
    cheapest_by_unit_type: dict[str, UnitRecord] = Field(default_factory=dict)


class LocationValuePoint(BaseModel):
    """One unit plotted as walking time to its station against price."""

    model_config = ConfigDict(frozen=True)

    ref: UnitRef
    area: str | None = None
    unit_type: str | None = None
    station: str
    walking_time: float
    price: float


class LocationValueSummary(BaseModel):
    """Station accessibility of the filtered units and the cheapest well-connected ones."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    avg_walking_time: float | None = None
    near_station_count: int = 0     # walk <= 5 min
    far_from_station_count: int = 0  # walk > 15 min
    best_value: list[LocationValuePoint] = Field(default_factory=list)


class FilterOptions(BaseModel):
    """Distinct option lists for each multi-select dimension."""

    model_config = ConfigDict(frozen=True)

    sale_exercises: list[str] = Field(default_factory=list)
    areas: list[str] = Field(default_factory=list)
    project_names: list[str] = Field(default_factory=list)
    completion_dates: list[str] = Field(default_factory=list)
    nearest_stations: list[str] = Field(default_factory=list)
    nearest_stations_secondary: list[str] = Field(default_factory=list)
    schools_within_1km: list[str] = Field(default_factory=list)
    schools_within_2km: list[str] = Field(default_factory=list)

"""
flatfinder_shared.models — Pydantic models for catalog, demand, filter
state and derived analytics.

Input models (UnitRecord, DemandRecord) accept the raw source field names
as aliases, so payloads from the catalog export validate directly:

    UnitRecord.model_validate({"project_town": "Tampines", "flat_type": "4-room"})
"""

from flatfinder_shared.models.demand import DemandRecord
from flatfinder_shared.models.filters import FilterState, NumericRange, RangeBounds
from flatfinder_shared.models.stats import (
    AffordabilityAnalysis,
    AffordabilityBracket,
    ComboStat,
    FilterOptions,
    FloorTierAssignment,
    FloorTierStat,
    LeaseBucket,
    LocationValuePoint,
    LocationValueSummary,
    RoiComboStat,
    RoiSummary,
    TimelineBucket,
    UnitMetrics,
)
from flatfinder_shared.models.units import Amenity, UnitRecord, UnitRef

__all__ = [
    "Amenity",
    "UnitRecord",
    "UnitRef",
    "DemandRecord",
    "FilterState",
    "NumericRange",
    "RangeBounds",
    "ComboStat",
    "UnitMetrics",
    "FloorTierAssignment",
    "FloorTierStat",
    "RoiSummary",
    "RoiComboStat",
    "LeaseBucket",
    "LocationValuePoint",
    "LocationValueSummary",
    "TimelineBucket",
    "AffordabilityBracket",
    "AffordabilityAnalysis",
    "FilterOptions",
]

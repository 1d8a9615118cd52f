"""
constants.py — shared constants used across the pipeline and CLI.

Label alias tables, unit-type designations, fallback slider bounds and the
empirically tuned policy constants live here so the transforms and their
tests read the same values.

Policy constants (supply discounts, probability cap, floor-tier fractions)
are business rules tuned against past sale exercises. Confirm changes with
the product owner before touching them.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Area aliases: raw label -> canonical label
# ---------------------------------------------------------------------------
AREA_ALIASES: Final[dict[str, str]] = {
    "Jurong East": "Jurong East / West",
    "Jurong West": "Jurong East / West",
    "Jurong East/ West": "Jurong East / West",
    "Jurong East / West": "Jurong East / West",
    "Kallang/Whampoa": "Kallang Whampoa",
    "Central Area": "Central",
}

# Legacy unit types that demand statistics fold into the 5-room category
UNIT_TYPE_ALIASES: Final[dict[str, str]] = {
    "3Gen": "5-room",
    "Executive": "5-room",
}

# Display order for unit types
UNIT_TYPES: Final[list[str]] = [
    "Community Care Apartment",
    "2-room Flexi",
    "3-room",
    "4-room",
    "5-room",
    "Executive",
    "3Gen",
]

COMMUNITY_CARE_DESIGNATION: Final[str] = "Community"
FLEXI_DESIGNATION: Final[str] = "Flexi"

# Completion-date sentinel for units that are already built
COMPLETED: Final[str] = "Completed"
COMPLETED_LABEL: Final[str] = "Ready to Move In"
OTHER_BUCKET: Final[str] = "Other"
OTHER_LABEL: Final[str] = "Future/Other"

# ---------------------------------------------------------------------------
# Balloting policy
# ---------------------------------------------------------------------------
# Share of listed units a typical buyer would accept, by unit-type designation
SUPPLY_DISCOUNT_FLEXI: Final[float] = 0.54
SUPPLY_DISCOUNT_DEFAULT: Final[float] = 0.95
SUPPLY_DISCOUNT_COMMUNITY_CARE: Final[float] = 0.0

PROBABILITY_CAP: Final[float] = 0.99

# ---------------------------------------------------------------------------
# Floor tiers (building-relative)
# ---------------------------------------------------------------------------
FLOOR_TIER_MIN_SPREAD: Final[int] = 2      # spread <= this -> everything is "mid"
LOW_RISE_MAX_LEVEL: Final[int] = 5
MID_RISE_MAX_LEVEL: Final[int] = 15
MID_RISE_TIER_FRACTION: Final[float] = 0.30
HIGH_RISE_TIER_FRACTION: Final[float] = 0.25

# ---------------------------------------------------------------------------
# ROI
# ---------------------------------------------------------------------------
ROI_FALLBACK_BOUNDS: Final[tuple[float, float]] = (-50.0, 100.0)
ROI_HIGH_THRESHOLD: Final[float] = 30.0

# (min ROI %, tier) from best to worst
ROI_TIERS: Final[list[tuple[float, str]]] = [
    (50.0, "high"),
    (30.0, "good"),
    (10.0, "moderate"),
]

# ---------------------------------------------------------------------------
# Location value (walking minutes to the nearest station)
# ---------------------------------------------------------------------------
NEAR_STATION_MAX_WALK: Final[float] = 5.0
FAR_STATION_MIN_WALK: Final[float] = 15.0
BEST_VALUE_MAX_WALK: Final[float] = 10.0
BEST_VALUE_LIMIT: Final[int] = 3

# ---------------------------------------------------------------------------
# Slider bounds used when the active subset is empty
# ---------------------------------------------------------------------------
FALLBACK_BOUNDS: Final[dict[str, tuple[float, float]]] = {
    "price": (0, 1_000_000),
    "size": (0, 200),
    "price_psf": (0, 1200),
    "walking_time": (0, 60),
    "walking_distance": (0, 5000),
    "lease": (0, 99),
    "level": (0, 50),
    "roi": ROI_FALLBACK_BOUNDS,
}

# ---------------------------------------------------------------------------
# Affordability (HDB loan guidelines)
# ---------------------------------------------------------------------------
INCOME_TO_PAYMENT_RATIO: Final[float] = 0.30
ANNUAL_INTEREST_RATE: Final[float] = 0.026
LOAN_TENURE_YEARS: Final[int] = 25
DOWN_PAYMENT_RATIO: Final[float] = 0.20

# (label, min monthly income, max monthly income)
INCOME_BRACKETS: Final[list[tuple[str, int, int]]] = [
    ("≤ $7K", 0, 7000),
    ("$7K - $10K", 7001, 10000),
    ("$10K - $14K", 10001, 14000),
]

# ---------------------------------------------------------------------------
# Lease buckets: (label, min years, max years, completion requirement)
# ---------------------------------------------------------------------------
LEASE_BUCKETS: Final[list[tuple[str, int, int, bool | None]]] = [
    ("99 years (Future)", 98, 99, False),
    ("98-99 years (Ready)", 98, 99, True),
    ("95-97 years", 95, 97, None),
    ("85-94 years", 85, 94, None),
    ("75-84 years", 75, 84, None),
    ("50-74 years", 50, 74, None),
    ("Under 50 years", 0, 49, None),
]

# ---------------------------------------------------------------------------
# Typed literals
# ---------------------------------------------------------------------------
ViewMode = Literal["all-applicants", "first-timer-families-only"]
EthnicGroup = Literal["Chinese", "Malay", "Indian / Others"]
FloorTier = Literal["low", "mid", "high"]
BuildingType = Literal["Low-rise", "Mid-rise", "High-rise"]
PresetName = Literal["recommended", "value", "near_transit", "premium", "family_friendly"]

VIEW_MODES: Final[tuple[str, ...]] = ("all-applicants", "first-timer-families-only")

# Ethnic group -> UnitRecord quota field
ETHNIC_QUOTA_FIELDS: Final[dict[str, str]] = {
    "Chinese": "chinese_quota",
    "Malay": "malay_quota",
    "Indian / Others": "indian_and_other_races_quota",
}

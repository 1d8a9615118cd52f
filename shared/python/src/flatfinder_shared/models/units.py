"""
models/units.py — Pydantic models for the unit catalog.

Raw catalog rows use the source field names (project_town, flat_type,
sbfCode, SCHOOLNAME, ...). Models accept either those aliases or the
Python field names.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from flatfinder_shared.constants import ETHNIC_QUOTA_FIELDS
from flatfinder_shared.models.parsing import (
    parse_count,
    parse_flag,
    parse_number,
    parse_positive_int,
)

# Float fields read leniently: blanks and placeholders become None
NUMERIC_FIELDS: tuple[str, ...] = (
    "price",
    "size_sqm",
    "price_psf",
    "max_lease",
    "approximate_resale_value",
    "walking_time_in_mins",
    "walking_distance_in_m",
    "mrt_lrt_walking_time_in_mins",
    "mrt_lrt_walking_distance_in_m",
    "project_lat",
    "project_lon",
)


class Amenity(BaseModel):
    """A nearby amenity (school) with its walking time in minutes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(validation_alias=AliasChoices("name", "SCHOOLNAME"))
    walk_time: float | None = Field(
        default=None, validation_alias=AliasChoices("walk_time", "WALK_TIME")
    )

    @field_validator("walk_time", mode="before")
    @classmethod
    def lenient_walk_time(cls, v: Any) -> float | None:
        return parse_number(v)


class UnitRef(BaseModel):
    """Identifies a single unit so derived values can be traced back to it."""

    model_config = ConfigDict(frozen=True)

    sale_exercise: str | None = None
    project_name: str | None = None
    block: str | None = None
    unit: str | None = None


class UnitRecord(BaseModel):
    """
    One sellable housing unit in a sale exercise.

    Every numeric attribute is optional; consumers decide their own
    fallback (ranges and filters read missing values as 0, derived metrics
    are withheld).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    sale_exercise: str | None = Field(
        default=None, validation_alias=AliasChoices("sale_exercise", "sbfCode")
    )
    area: str | None = Field(
        default=None, validation_alias=AliasChoices("area", "project_town")
    )
    project_name: str | None = None
    block: str | None = None
    unit: str | None = None
    unit_type: str | None = Field(
        default=None, validation_alias=AliasChoices("unit_type", "flat_type")
    )

    price: float | None = None
    size_sqm: float | None = None
    price_psf: float | None = None
    level: int | None = None
    max_level: int | None = None
    max_lease: float | None = None
    approximate_resale_value: float | None = None

    nearest_mrt: str | None = None
    walking_time_in_mins: float | None = None
    walking_distance_in_m: float | None = None
    nearest_mrt_lrt: str | None = None
    mrt_lrt_walking_time_in_mins: float | None = None
    mrt_lrt_walking_distance_in_m: float | None = None

    schools_within_1km: list[Amenity] = Field(default_factory=list)
    schools_within_2km: list[Amenity] = Field(default_factory=list)

    chinese_quota: int = 0
    malay_quota: int = 0
    indian_and_other_races_quota: int = 0

    repurchased: bool | None = None
    top_date: str | None = None
    top_delay_date: str | None = None

    project_lat: float | None = None
    project_lon: float | None = None

    @field_validator("schools_within_1km", "schools_within_2km", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        # Entries without a school name carry nothing to match on
        return [
            item for item in v
            if isinstance(item, Amenity)
            or (isinstance(item, dict) and (item.get("name") or item.get("SCHOOLNAME")))
        ]

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def lenient_number(cls, v: Any) -> float | None:
        return parse_number(v)

    @field_validator("price", mode="after")
    @classmethod
    def no_negative_price(cls, v: float | None) -> float | None:
        return v if v is None or v >= 0 else None

    @field_validator("level", "max_level", mode="before")
    @classmethod
    def lenient_level(cls, v: Any) -> int | None:
        return parse_positive_int(v)

    @field_validator(
        "chinese_quota", "malay_quota", "indian_and_other_races_quota", mode="before"
    )
    @classmethod
    def lenient_quota(cls, v: Any) -> int:
        return parse_count(v)

    @field_validator("repurchased", mode="before")
    @classmethod
    def lenient_flag(cls, v: Any) -> bool | None:
        return parse_flag(v)

    @field_validator("block", "unit", "project_name", mode="before")
    @classmethod
    def coerce_label(cls, v: Any) -> Any:
        # Blocks such as 123 arrive as numbers in some exports
        return str(v) if isinstance(v, int | float) else v

    @model_validator(mode="before")
    @classmethod
    def drop_inconsistent_max_level(cls, data: Any) -> Any:
        # A level above the building's max level means max_level is stale
        if not isinstance(data, dict):
            return data
        level = parse_positive_int(data.get("level"))
        max_level = parse_positive_int(data.get("max_level"))
        if level is not None and max_level is not None and level > max_level:
            return {**data, "max_level": None}
        return data

    # ------------------------------------------------------------------
    # Derived accessors
    # ------------------------------------------------------------------

    @property
    def completion_date(self) -> str | None:
        """Completion date, preferring top_date over top_delay_date."""
        return self.top_date or self.top_delay_date

    @property
    def unit_ref(self) -> UnitRef:
        return UnitRef(
            sale_exercise=self.sale_exercise,
            project_name=self.project_name,
            block=self.block,
            unit=self.unit,
        )

    def walking_time(self, secondary_transit_mode: bool = False) -> float | None:
        if secondary_transit_mode:
            return self.mrt_lrt_walking_time_in_mins or self.walking_time_in_mins
        return self.walking_time_in_mins

    def walking_distance(self, secondary_transit_mode: bool = False) -> float | None:
        if secondary_transit_mode:
            return self.mrt_lrt_walking_distance_in_m or self.walking_distance_in_m
        return self.walking_distance_in_m

    def has_quota(self, ethnic_group: str | None) -> bool:
        """True when ethnic_group still has quota left (None always matches)."""
        if ethnic_group is None:
            return True
        field = ETHNIC_QUOTA_FIELDS.get(ethnic_group)
        if field is None:
            return True
        return getattr(self, field) > 0

"""
models/filters.py — Filter state and slider bounds.

FilterState is an immutable value object: every user action produces a
new state through with_updates(), and a state never outlives one
filtering pass.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from flatfinder_shared.constants import EthnicGroup


class NumericRange(BaseModel):
    """Inclusive [low, high] bound; None on either side means unbounded."""

    model_config = ConfigDict(frozen=True)

    low: float | None = None
    high: float | None = None

    @classmethod
    def of(cls, low: float | None, high: float | None) -> "NumericRange":
        return cls(low=low, high=high)

    @property
    def is_open(self) -> bool:
        return self.low is None and self.high is None


def _coerce_range(v: Any) -> Any:
    # Accept [low, high] pairs as well as {"low": .., "high": ..}
    if v is None:
        return NumericRange()
    if isinstance(v, list | tuple):
        low, high = (list(v) + [None, None])[:2]
        return NumericRange(low=low, high=high)
    return v


class FilterState(BaseModel):
    """
    The full set of user-chosen criteria for one filtering pass.

    Empty multi-selects, open ranges and None singles are wildcards.
    """

    model_config = ConfigDict(frozen=True)

    sale_exercise: str | None = None

    # Multi-selects (OR within a dimension)
    areas: tuple[str, ...] = ()
    project_names: tuple[str, ...] = ()
    unit_types: tuple[str, ...] = ()
    completion_dates: tuple[str, ...] = ()
    nearest_stations: tuple[str, ...] = ()
    nearest_stations_secondary: tuple[str, ...] = ()
    schools_within_1km: tuple[str, ...] = ()
    schools_within_2km: tuple[str, ...] = ()

    # Numeric ranges (inclusive)
    price_range: NumericRange = NumericRange()
    size_range: NumericRange = NumericRange()
    price_psf_range: NumericRange = NumericRange()
    level_range: NumericRange = NumericRange()
    walking_time_range: NumericRange = NumericRange()
    walking_distance_range: NumericRange = NumericRange()
    lease_range: NumericRange = NumericRange()
    roi_range: NumericRange = NumericRange()

    ethnic_group: EthnicGroup | None = None
    repurchased: bool | None = None

    @field_validator(
        "price_range",
        "size_range",
        "price_psf_range",
        "level_range",
        "walking_time_range",
        "walking_distance_range",
        "lease_range",
        "roi_range",
        mode="before",
    )
    @classmethod
    def coerce_range(cls, v: Any) -> Any:
        return _coerce_range(v)

    @field_validator(
        "areas",
        "project_names",
        "unit_types",
        "completion_dates",
        "nearest_stations",
        "nearest_stations_secondary",
        "schools_within_1km",
        "schools_within_2km",
        mode="before",
    )
    @classmethod
    def coerce_selection(cls, v: Any) -> Any:
        # A single selected option is the same as a one-element selection
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return tuple(v)

    def with_updates(self, **changes: Any) -> "FilterState":
        """Return a new state with the given fields replaced (validated)."""
        return self.model_validate({**self.model_dump(), **changes})


class RangeBounds(BaseModel):
    """Min/max per numeric filter dimension for the active subset."""

    model_config = ConfigDict(frozen=True)

    min_price: float
    max_price: float
    min_size: float
    max_size: float
    min_price_psf: float
    max_price_psf: float
    min_walking_time: float
    max_walking_time: float
    min_walking_distance: float
    max_walking_distance: float
    min_lease: float
    max_lease: float
    min_level: float
    max_level: float
    min_roi: float
    max_roi: float

    def as_filter_ranges(self, *, include_roi: bool = True) -> dict[str, NumericRange]:
        """Full-span ranges keyed by FilterState field name."""
        ranges = {
            "price_range": NumericRange.of(self.min_price, self.max_price),
            "size_range": NumericRange.of(self.min_size, self.max_size),
            "price_psf_range": NumericRange.of(self.min_price_psf, self.max_price_psf),
            "walking_time_range": NumericRange.of(self.min_walking_time, self.max_walking_time),
            "walking_distance_range": NumericRange.of(
                self.min_walking_distance, self.max_walking_distance
            ),
            "lease_range": NumericRange.of(self.min_lease, self.max_lease),
            "level_range": NumericRange.of(self.min_level, self.max_level),
        }
        if include_roi:
            ranges["roi_range"] = NumericRange.of(self.min_roi, self.max_roi)
        return ranges

"""
transforms/presets.py — Named bundles of filter values.

Each preset is a function of the current RangeBounds, so it stays sensible
for whichever sale exercise is selected. A preset resets every numeric
range to its full span (ROI open) and then overrides a few of them; it may
also set unit types. It never touches the sale-exercise selection.

Usage:
    from flatfinder_pipeline.transforms.presets import apply_preset, merge_preset

    partial = apply_preset("near_transit", bounds)
    state = merge_preset(state, "near_transit", bounds)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from flatfinder_shared.models import FilterState, NumericRange, RangeBounds


class UnknownPresetError(KeyError):
    """Raised for a preset name that is not registered."""


def _defaults(bounds: RangeBounds) -> dict[str, Any]:
    return {**bounds.as_filter_ranges(include_roi=False), "roi_range": NumericRange()}


def recommended(bounds: RangeBounds) -> dict[str, Any]:
    return {
        **_defaults(bounds),
        "walking_time_range": NumericRange.of(bounds.min_walking_time, 10),
        "walking_distance_range": NumericRange.of(bounds.min_walking_distance, 1000),
        "lease_range": NumericRange.of(70, bounds.max_lease),
        "level_range": NumericRange.of(10, bounds.max_level),
    }


def value(bounds: RangeBounds) -> dict[str, Any]:
    return {
        **_defaults(bounds),
        "price_psf_range": NumericRange.of(bounds.min_price_psf, bounds.min_price_psf + 200),
    }


def near_transit(bounds: RangeBounds) -> dict[str, Any]:
    return {
        **_defaults(bounds),
        "walking_time_range": NumericRange.of(bounds.min_walking_time, 5),
        "walking_distance_range": NumericRange.of(bounds.min_walking_distance, 500),
    }


def premium(bounds: RangeBounds) -> dict[str, Any]:
    return {
        **_defaults(bounds),
        "level_range": NumericRange.of(20, bounds.max_level),
        "size_range": NumericRange.of(100, bounds.max_size),
        "price_range": NumericRange.of(bounds.max_price * 0.7, bounds.max_price),
    }


def family_friendly(bounds: RangeBounds) -> dict[str, Any]:
    return {
        **_defaults(bounds),
        "unit_types": ("4-room", "5-room", "Executive"),
        "size_range": NumericRange.of(80, bounds.max_size),
        "level_range": NumericRange.of(5, bounds.max_level),
        "lease_range": NumericRange.of(80, bounds.max_lease),
        "walking_time_range": NumericRange.of(bounds.min_walking_time, 15),
    }


PRESETS: dict[str, tuple[str, Callable[[RangeBounds], dict[str, Any]]]] = {
    "recommended": ("Recommended", recommended),
    "value": ("Good Value", value),
    "near_transit": ("Near MRT", near_transit),
    "premium": ("Premium", premium),
    "family_friendly": ("Family Friendly", family_friendly),
}


def apply_preset(name: str, bounds: RangeBounds) -> dict[str, Any]:
    """
    Partial FilterState for a named preset.

    Raises:
        UnknownPresetError: name is not in PRESETS.
    """
    try:
        _, build = PRESETS[name]
    except KeyError:
        raise UnknownPresetError(name) from None
    partial = build(bounds)
    partial.pop("sale_exercise", None)
    return partial


def merge_preset(state: FilterState, name: str, bounds: RangeBounds) -> FilterState:
    """Shallow-merge a preset over state; fields the preset omits are kept."""
    return state.with_updates(**apply_preset(name, bounds))

"""
tests/test_transforms/test_ranges.py — Tests for slider bounds and default filter state.
"""

from __future__ import annotations

import pytest

from flatfinder_pipeline.transforms.ranges import (
    compute_ranges,
    default_filter_state,
    fallback_bounds,
)
from flatfinder_pipeline.transforms.metrics import roi_pct
from flatfinder_shared.constants import FALLBACK_BOUNDS
from flatfinder_shared.models import NumericRange


class TestComputeRanges:
    def test_empty_input_uses_fallback(self):
        bounds = compute_ranges([])
        assert bounds == fallback_bounds()
        assert bounds.max_price == FALLBACK_BOUNDS["price"][1]
        assert (bounds.min_roi, bounds.max_roi) == (-50.0, 100.0)

    def test_fallback_is_never_degenerate(self):
        bounds = fallback_bounds()
        for key in FALLBACK_BOUNDS:
            assert getattr(bounds, f"max_{key}") > getattr(bounds, f"min_{key}")

    def test_min_max_over_subset(self, feb_units):
        bounds = compute_ranges(feb_units)
        assert (bounds.min_price, bounds.max_price) == (90000, 700000)
        assert (bounds.min_size, bounds.max_size) == (32, 120)
        assert (bounds.min_level, bounds.max_level) == (2, 19)
        assert (bounds.min_lease, bounds.max_lease) == (95, 99)
        assert (bounds.min_walking_time, bounds.max_walking_time) == (4, 12)

    def test_every_value_within_bounds(self, catalog):
        bounds = compute_ranges(catalog)
        for unit in catalog:
            assert bounds.min_price <= (unit.price or 0) <= bounds.max_price
            assert bounds.min_size <= (unit.size_sqm or 0) <= bounds.max_size
            assert bounds.min_price_psf <= (unit.price_psf or 0) <= bounds.max_price_psf
            assert bounds.min_level <= (unit.level or 0) <= bounds.max_level
            assert bounds.min_lease <= (unit.max_lease or 0) <= bounds.max_lease
            walk = unit.walking_time(False) or 0
            assert bounds.min_walking_time <= walk <= bounds.max_walking_time
            roi = roi_pct(unit)
            if roi is not None:
                assert bounds.min_roi <= roi <= bounds.max_roi

    def test_missing_value_counts_as_zero(self, feb_units, make_unit):
        bounds = compute_ranges([*feb_units, make_unit(price=None)])
        assert bounds.min_price == 0

    def test_secondary_transit_mode(self, feb_units):
        primary = compute_ranges(feb_units, secondary_transit_mode=False)
        secondary = compute_ranges(feb_units, secondary_transit_mode=True)
        assert primary.min_walking_time == 4
        assert secondary.min_walking_time == 3
        assert secondary.min_walking_distance == 250
        assert secondary.max_walking_time == primary.max_walking_time

    def test_roi_only_over_units_with_both_inputs(self, feb_units):
        bounds = compute_ranges(feb_units)
        assert bounds.min_roi == pytest.approx(50000 / 650000 * 100)
        assert bounds.max_roi == pytest.approx(150000 / 450000 * 100)

    def test_roi_fallback_when_no_unit_qualifies(self, make_unit):
        bounds = compute_ranges([make_unit(price=400000), make_unit(price=0, approximate_resale_value=1)])
        assert (bounds.min_roi, bounds.max_roi) == (-50.0, 100.0)
        assert bounds.max_price == 400000


class TestDefaultFilterState:
    def test_ranges_span_bounds(self, feb_units):
        bounds = compute_ranges(feb_units)
        state = default_filter_state(bounds, sale_exercise="Feb2025")
        assert state.sale_exercise == "Feb2025"
        assert state.price_range == NumericRange.of(bounds.min_price, bounds.max_price)
        assert state.walking_distance_range == NumericRange.of(
            bounds.min_walking_distance, bounds.max_walking_distance
        )

    def test_roi_left_open(self, feb_units):
        state = default_filter_state(compute_ranges(feb_units))
        assert state.roi_range.is_open

    def test_unit_types(self, feb_units):
        state = default_filter_state(compute_ranges(feb_units), unit_types=["4-room"])
        assert state.unit_types == ("4-room",)

"""
tests/test_transforms/test_presets.py — Tests for preset filter profiles.
"""

from __future__ import annotations

import pytest

from flatfinder_pipeline.transforms.filters import filter_units
from flatfinder_pipeline.transforms.presets import (
    PRESETS,
    UnknownPresetError,
    apply_preset,
    merge_preset,
)
from flatfinder_pipeline.transforms.ranges import compute_ranges, default_filter_state
from flatfinder_shared.models import FilterState, NumericRange


@pytest.fixture
def bounds(feb_units):
    return compute_ranges(feb_units)


class TestApplyPreset:
    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_never_touches_sale_exercise(self, name, bounds):
        partial = apply_preset(name, bounds)
        assert "sale_exercise" not in partial

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_roi_left_open(self, name, bounds):
        assert apply_preset(name, bounds)["roi_range"].is_open

    def test_derived_from_current_bounds(self, bounds):
        partial = apply_preset("value", bounds)
        assert partial["price_psf_range"] == NumericRange.of(
            bounds.min_price_psf, bounds.min_price_psf + 200
        )
        assert partial["price_range"] == NumericRange.of(bounds.min_price, bounds.max_price)

    def test_premium(self, bounds):
        partial = apply_preset("premium", bounds)
        assert partial["price_range"] == NumericRange.of(0.7 * bounds.max_price, bounds.max_price)
        assert partial["level_range"].low == 20
        assert partial["size_range"].low == 100

    def test_recommended(self, bounds):
        partial = apply_preset("recommended", bounds)
        assert partial["walking_time_range"].high == 10
        assert partial["walking_distance_range"].high == 1000
        assert partial["lease_range"].low == 70
        assert partial["level_range"].low == 10

    def test_unknown_name(self, bounds):
        with pytest.raises(UnknownPresetError):
            apply_preset("penthouse", bounds)

    def test_unknown_name_is_key_error(self, bounds):
        with pytest.raises(KeyError):
            apply_preset("penthouse", bounds)


class TestMergePreset:
    def test_keeps_fields_preset_omits(self, bounds):
        state = FilterState(sale_exercise="Feb2025", areas=["Tampines"], repurchased=True)
        merged = merge_preset(state, "near_transit", bounds)
        assert merged.sale_exercise == "Feb2025"
        assert merged.areas == ("Tampines",)
        assert merged.repurchased is True
        assert merged.walking_time_range.high == 5

    def test_overrides_earlier_ranges(self, bounds):
        state = FilterState(level_range=NumericRange.of(15, 16))
        merged = merge_preset(state, "value", bounds)
        assert merged.level_range == NumericRange.of(bounds.min_level, bounds.max_level)

    def test_near_transit_matches(self, feb_units, bounds):
        state = merge_preset(default_filter_state(bounds), "near_transit", bounds)
        assert [u.unit for u in filter_units(feb_units, state)] == ["#08-20", "#02-21"]

    def test_family_friendly_matches(self, feb_units, bounds):
        state = merge_preset(default_filter_state(bounds), "family_friendly", bounds)
        assert state.unit_types == ("4-room", "5-room", "Executive")
        assert [u.unit for u in filter_units(feb_units, state)] == ["#05-12", "#12-12", "#19-12"]

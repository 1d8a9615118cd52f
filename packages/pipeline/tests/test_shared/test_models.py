"""
tests/test_shared/test_models.py — Tests for the pydantic record and filter models.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flatfinder_shared.models import (
    DemandRecord,
    FilterState,
    NumericRange,
    RangeBounds,
    UnitRecord,
)


class TestUnitRecord:
    def test_source_aliases(self, raw_catalog):
        unit = UnitRecord.model_validate(raw_catalog[0])
        assert unit.sale_exercise == "Feb2025"
        assert unit.area == "Tampines"
        assert unit.unit_type == "4-room"
        assert [s.name for s in unit.schools_within_2km] == [
            "Tampines Primary",
            "Junyuan Secondary",
        ]
        assert unit.schools_within_1km[0].walk_time == 8

    def test_field_names_accepted(self):
        unit = UnitRecord(area="Bedok", unit_type="3-room", price=300000)
        assert unit.area == "Bedok"
        assert unit.price == 300000

    def test_numeric_block_becomes_string(self, raw_catalog):
        unit = UnitRecord.model_validate(raw_catalog[3])
        assert unit.block == "210"

    def test_null_lists_and_quotas_default(self):
        unit = UnitRecord.model_validate(
            {"schools_within_1km": None, "chinese_quota": None, "malay_quota": ""}
        )
        assert unit.schools_within_1km == []
        assert unit.chinese_quota == 0
        assert unit.malay_quota == 0

    def test_level_above_building_max_keeps_unit(self):
        unit = UnitRecord(level=21, max_level=20)
        assert unit.level == 21
        assert unit.max_level is None

    def test_level_zero_withheld(self):
        assert UnitRecord(level=0).level is None

    def test_negative_price_withheld(self):
        assert UnitRecord(price=-1).price is None

    @pytest.mark.parametrize("raw", ["", "  ", "N/A", "-", None, float("nan")])
    def test_malformed_numerics_become_none(self, raw):
        unit = UnitRecord.model_validate(
            {
                "price": raw,
                "walking_time_in_mins": raw,
                "max_lease": raw,
                "approximate_resale_value": raw,
                "level": raw,
            }
        )
        assert unit.price is None
        assert unit.walking_time_in_mins is None
        assert unit.max_lease is None
        assert unit.approximate_resale_value is None
        assert unit.level is None

    def test_numeric_strings_parsed(self):
        unit = UnitRecord.model_validate(
            {"price": "512,000", "level": "12", "max_lease": "98.5", "chinese_quota": "3"}
        )
        assert unit.price == 512000
        assert unit.level == 12
        assert unit.max_lease == 98.5
        assert unit.chinese_quota == 3

    def test_malformed_quota_and_flag_degrade(self):
        unit = UnitRecord.model_validate(
            {"malay_quota": "N/A", "chinese_quota": -2, "repurchased": "unknown"}
        )
        assert unit.malay_quota == 0
        assert unit.chinese_quota == 0
        assert unit.repurchased is None

    def test_flag_spellings(self):
        assert UnitRecord(repurchased="Yes").repurchased is True
        assert UnitRecord(repurchased="false").repurchased is False

    def test_malformed_school_walk_time(self):
        unit = UnitRecord.model_validate(
            {"schools_within_1km": [{"SCHOOLNAME": "Bedok Green Primary", "WALK_TIME": "?"}]}
        )
        assert unit.schools_within_1km[0].name == "Bedok Green Primary"
        assert unit.schools_within_1km[0].walk_time is None

    def test_completion_date_prefers_top_date(self):
        unit = UnitRecord(top_date="2028-3-31", top_delay_date="2028-9-30")
        assert unit.completion_date == "2028-3-31"

    def test_completion_date_falls_back_to_delay_date(self):
        assert UnitRecord(top_delay_date="2027-6-30").completion_date == "2027-6-30"

    def test_unit_ref(self, catalog):
        ref = catalog[0].unit_ref
        assert (ref.sale_exercise, ref.project_name, ref.block, ref.unit) == (
            "Feb2025",
            "Tampines Green",
            "101A",
            "#05-12",
        )


class TestUnitRecordTransit:
    def test_primary_mode_ignores_secondary_fields(self, catalog):
        assert catalog[0].walking_time(False) == 6
        assert catalog[0].walking_distance(False) == 500

    def test_secondary_mode_prefers_secondary_fields(self, catalog):
        assert catalog[0].walking_time(True) == 3
        assert catalog[0].walking_distance(True) == 250

    def test_secondary_zero_falls_back_to_primary(self, catalog):
        assert catalog[1].walking_time(True) == 6
        assert catalog[1].walking_distance(True) == 500

    def test_secondary_missing_falls_back_to_primary(self, catalog):
        assert catalog[2].walking_time(True) == 6


class TestUnitRecordQuota:
    def test_none_group_always_matches(self, catalog):
        assert catalog[0].has_quota(None)

    def test_group_with_quota(self, catalog):
        assert catalog[0].has_quota("Chinese")
        assert catalog[1].has_quota("Indian / Others")

    def test_group_without_quota(self, catalog):
        assert not catalog[0].has_quota("Indian / Others")


class TestDemandRecord:
    def test_source_aliases(self, raw_demand):
        record = DemandRecord.model_validate(raw_demand[0])
        assert record.area == "Tampines"
        assert record.unit_type == "4-room"
        assert record.applicants == 300
        assert record.units_offered == 150
        assert record.first_timer_families == 200
        assert record.seniors == 20

    def test_null_counts_become_zero(self, raw_demand):
        record = DemandRecord.model_validate(raw_demand[3])
        assert record.first_timer_singles == 0

    def test_negative_counts_become_zero(self):
        assert DemandRecord(applicants=-5).applicants == 0

    def test_fractional_estimates_rounded(self):
        record = DemandRecord.model_validate(
            {
                "Town": "Tampines",
                "Flat Type": "4-room",
                "Number of Applicants": "320",
                "Estimated Applicants - First-Timer Families": 150.6,
                "Estimated Applicants - Seniors": "12.2",
            }
        )
        assert record.applicants == 320
        assert record.first_timer_families == 151
        assert record.seniors == 12

    @pytest.mark.parametrize("raw", ["N/A", "-", "", None])
    def test_placeholder_counts_become_zero(self, raw):
        record = DemandRecord.model_validate({"Town": "Bedok", "Number of Units": raw})
        assert record.area == "Bedok"
        assert record.units_offered == 0


class TestFilterState:
    def test_defaults_are_wildcards(self):
        state = FilterState()
        assert state.areas == ()
        assert state.price_range.is_open
        assert state.ethnic_group is None
        assert state.repurchased is None

    def test_range_from_pair(self):
        state = FilterState(price_range=[100, None])
        assert state.price_range == NumericRange(low=100, high=None)
        assert not state.price_range.is_open

    def test_single_selection_becomes_tuple(self):
        assert FilterState(areas="Tampines").areas == ("Tampines",)

    def test_with_updates_returns_new_state(self):
        state = FilterState(areas=["Tampines"])
        updated = state.with_updates(repurchased=True, price_range=NumericRange.of(0, 10))
        assert updated is not state
        assert state.repurchased is None
        assert updated.repurchased is True
        assert updated.areas == ("Tampines",)
        assert updated.price_range.high == 10

    def test_frozen(self):
        with pytest.raises(ValidationError):
            FilterState().areas = ("Bedok",)

    def test_unknown_ethnic_group_rejected(self):
        with pytest.raises(ValidationError):
            FilterState(ethnic_group="Martian")


class TestRangeBounds:
    @pytest.fixture
    def bounds(self) -> RangeBounds:
        return RangeBounds(
            min_price=1, max_price=2, min_size=3, max_size=4,
            min_price_psf=5, max_price_psf=6, min_walking_time=7, max_walking_time=8,
            min_walking_distance=9, max_walking_distance=10, min_lease=11, max_lease=12,
            min_level=13, max_level=14, min_roi=15, max_roi=16,
        )

    def test_as_filter_ranges(self, bounds):
        ranges = bounds.as_filter_ranges()
        assert ranges["price_range"] == NumericRange.of(1, 2)
        assert ranges["level_range"] == NumericRange.of(13, 14)
        assert ranges["roi_range"] == NumericRange.of(15, 16)
        assert set(ranges) <= set(FilterState.model_fields)

    def test_without_roi(self, bounds):
        assert "roi_range" not in bounds.as_filter_ranges(include_roi=False)

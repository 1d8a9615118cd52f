"""
tests/test_transforms/test_demand.py — Tests for supply/demand aggregation and balloting odds.
"""

from __future__ import annotations

import pytest

from flatfinder_pipeline.transforms.demand import (
    adjusted_supply,
    balloting_probability,
    build_combo_stats,
    supply_discount,
)
from flatfinder_shared.constants import PROBABILITY_CAP
from flatfinder_shared.models import DemandRecord


def by_combo(stats):
    return {s.combo: s for s in stats}


class TestScalarHelpers:
    @pytest.mark.parametrize(
        "unit_type, expected",
        [
            ("Community Care Apartment", 0.0),
            ("2-room Flexi", 0.54),
            ("4-room", 0.95),
            ("Executive", 0.95),
        ],
    )
    def test_supply_discount(self, unit_type, expected):
        assert supply_discount(unit_type) == expected

    def test_adjusted_supply_floors(self):
        assert adjusted_supply(3, "4-room") == 2
        assert adjusted_supply(50, "2-room Flexi") == 27
        assert adjusted_supply(10, "Community Care Apartment") == 0

    def test_probability_ratio(self):
        assert balloting_probability(3, 300) == pytest.approx(0.01)

    def test_probability_capped(self):
        assert balloting_probability(500, 100) == PROBABILITY_CAP

    def test_no_demand(self):
        assert balloting_probability(5, 0) == PROBABILITY_CAP
        assert balloting_probability(0, 0) == 0.0


class TestBuildComboStats:
    def test_groups_by_normalized_key(self, feb_units, feb_demand):
        stats = by_combo(build_combo_stats(feb_units, feb_demand))
        assert set(stats) == {
            "Tampines - 4-room",
            "Jurong East / West - 5-room",
            "Kallang Whampoa - 2-room Flexi",
            "Kallang Whampoa - Community Care Apartment",
        }
        jurong = stats["Jurong East / West - 5-room"]
        assert jurong.supply == 2
        assert jurong.area == "Jurong East / West"
        assert jurong.unit_type == "5-room"

    def test_demand_keys_without_supply_are_dropped(self, feb_units, feb_demand, log_output):
        stats = build_combo_stats(feb_units, feb_demand)
        assert "Bedok - 3-room" not in by_combo(stats)
        events = [e for e in log_output.entries if e["event"] == "unmatched_demand_keys"]
        assert events and events[0]["count"] == 1

    def test_all_applicants_mode(self, feb_units, feb_demand):
        stats = by_combo(build_combo_stats(feb_units, feb_demand, "all-applicants"))
        tampines = stats["Tampines - 4-room"]
        assert tampines.supply == 3
        assert tampines.demand == 300
        assert tampines.units_offered == 150
        assert tampines.first_timer_families == 200
        assert tampines.probability == pytest.approx(0.01)
        assert tampines.unfiltered_probability == pytest.approx(0.5)
        assert stats["Jurong East / West - 5-room"].unfiltered_probability == PROBABILITY_CAP

    def test_first_timer_families_mode(self, feb_units, feb_demand):
        stats = by_combo(build_combo_stats(feb_units, feb_demand, "first-timer-families-only"))
        tampines = stats["Tampines - 4-room"]
        assert tampines.adjusted_supply == 2
        assert tampines.adjusted_units_offered == 142
        assert tampines.demand == 200
        assert tampines.probability == pytest.approx(2 / 200)
        assert tampines.unfiltered_probability == pytest.approx(142 / 200)

        flexi = stats["Kallang Whampoa - 2-room Flexi"]
        assert flexi.adjusted_supply == 0
        assert flexi.probability == 0.0
        assert flexi.unfiltered_probability == PROBABILITY_CAP

    def test_supply_without_demand(self, feb_units, feb_demand):
        cca = by_combo(build_combo_stats(feb_units, feb_demand))[
            "Kallang Whampoa - Community Care Apartment"
        ]
        assert cca.demand == 0
        assert cca.probability == PROBABILITY_CAP
        assert cca.unfiltered_probability == 0.0

    def test_community_care_adjusted_to_zero(self, feb_units, feb_demand):
        cca = by_combo(build_combo_stats(feb_units, feb_demand, "first-timer-families-only"))[
            "Kallang Whampoa - Community Care Apartment"
        ]
        assert cca.adjusted_supply == 0
        assert cca.probability == 0.0

    def test_sorted_by_probability_desc(self, feb_units, feb_demand):
        stats = build_combo_stats(feb_units, feb_demand)
        assert [s.combo for s in stats] == [
            "Kallang Whampoa - Community Care Apartment",
            "Jurong East / West - 5-room",
            "Kallang Whampoa - 2-room Flexi",
            "Tampines - 4-room",
        ]

    @pytest.mark.parametrize("mode", ["all-applicants", "first-timer-families-only"])
    def test_probabilities_bounded(self, catalog, demand, mode):
        for stat in build_combo_stats(catalog, demand, mode):
            assert 0 <= stat.probability <= PROBABILITY_CAP
            assert 0 <= stat.unfiltered_probability <= PROBABILITY_CAP

    def test_duplicate_demand_rows_are_summed(self, feb_units):
        demand = [
            DemandRecord(area="Tampines", unit_type="4-room", applicants=100, units_offered=40),
            DemandRecord(area="Tampines", unit_type="4-room", applicants=200, units_offered=60),
        ]
        tampines = by_combo(build_combo_stats(feb_units, demand))["Tampines - 4-room"]
        assert tampines.applicants == 300
        assert tampines.units_offered == 100

    def test_empty_supply(self, feb_demand):
        assert build_combo_stats([], feb_demand) == []

    def test_empty_demand(self, feb_units):
        stats = build_combo_stats(feb_units, [])
        assert all(s.probability == PROBABILITY_CAP for s in stats)

    def test_unknown_view_mode(self, feb_units, feb_demand):
        with pytest.raises(ValueError, match="unknown view mode"):
            build_combo_stats(feb_units, feb_demand, "everyone")

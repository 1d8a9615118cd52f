"""
tests/test_cli.py — Tests for the click CLI.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from flatfinder_pipeline import cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    # Keep structlog routed to the test LogCapture
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def catalog_path(fixture_path):
    return str(fixture_path / "catalog.json")


@pytest.fixture
def demand_path(fixture_path):
    return str(fixture_path / "demand.json")


class TestExercises:
    def test_lists_newest_first(self, runner, catalog_path):
        result = runner.invoke(cli.main, ["exercises", "--catalog", catalog_path])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [
            {"sale_exercise": "Feb2025", "units": 7},
            {"sale_exercise": "Oct2024", "units": 2},
        ]

    def test_missing_catalog(self, runner, tmp_path):
        result = runner.invoke(cli.main, ["exercises", "--catalog", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "catalog file not found" in result.output


class TestRanges:
    def test_latest_exercise_by_default(self, runner, catalog_path):
        result = runner.invoke(cli.main, ["ranges", "--catalog", catalog_path])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["sale_exercise"] == "Feb2025"
        assert payload["units"] == 7
        assert payload["min_price"] == 90000
        assert payload["min_walking_time"] == 4

    def test_secondary_transit(self, runner, catalog_path):
        result = runner.invoke(
            cli.main, ["ranges", "--catalog", catalog_path, "--secondary-transit"]
        )
        assert json.loads(result.output)["min_walking_time"] == 3

    def test_empty_exercise_uses_fallback(self, runner, catalog_path):
        result = runner.invoke(
            cli.main, ["ranges", "--catalog", catalog_path, "--sale-exercise", "Jan1999"]
        )
        payload = json.loads(result.output)
        assert payload["units"] == 0
        assert payload["max_price"] == 1_000_000


class TestSummarize:
    def test_summary(self, runner, catalog_path, demand_path):
        result = runner.invoke(
            cli.main,
            ["summarize", "--catalog", catalog_path, "--demand", demand_path,
             "--as-of", "2025-06-01"],
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["sale_exercise"] == "Feb2025"
        assert payload["matched_units"] == 7
        assert payload["combo_stats"][0]["combo"] == "Kallang Whampoa - Community Care Apartment"
        assert [b["key"] for b in payload["completion_timeline"]][0] == "Completed"

    def test_preset_and_view_mode(self, runner, catalog_path, demand_path):
        result = runner.invoke(
            cli.main,
            ["summarize", "--catalog", catalog_path, "--demand", demand_path,
             "--preset", "family_friendly", "--view-mode", "first-timer-families-only"],
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["matched_units"] == 3
        assert payload["combo_stats"][0]["demand"] == 200

    def test_unknown_preset_rejected(self, runner, catalog_path, demand_path):
        result = runner.invoke(
            cli.main,
            ["summarize", "--catalog", catalog_path, "--demand", demand_path,
             "--preset", "penthouse"],
        )
        assert result.exit_code == 2

    def test_invalid_demand_file(self, runner, catalog_path, tmp_path):
        bad = tmp_path / "demand.json"
        bad.write_text("[oops")
        result = runner.invoke(
            cli.main,
            ["summarize", "--catalog", catalog_path, "--demand", str(bad)],
        )
        assert result.exit_code == 1
        assert "could not read demand" in result.output

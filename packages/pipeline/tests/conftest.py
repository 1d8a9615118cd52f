"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()     — resolves paths to tests/fixtures/
  catalog / demand   — validated records loaded from the fixture files
  feb_units          — the Feb2025 sale exercise of the catalog
  as_of              — fixed reference date (Q2 2025) for completion buckets
  log_output         — structlog LogCapture; every test logs into it
  make_unit()        — factory for one-off UnitRecords
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest
import structlog
from structlog.testing import LogCapture

from flatfinder_shared.models import DemandRecord, UnitRecord

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def log_output() -> LogCapture:
    return LogCapture()


@pytest.fixture(autouse=True)
def _capture_structlog(log_output: LogCapture):
    """Route structlog into LogCapture so tests never print log lines."""
    structlog.configure(processors=[log_output])
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def raw_catalog() -> list[dict[str, Any]]:
    return json.loads((FIXTURES_DIR / "catalog.json").read_text())["data"]


@pytest.fixture
def raw_demand() -> list[dict[str, Any]]:
    return json.loads((FIXTURES_DIR / "demand.json").read_text())


@pytest.fixture
def catalog(raw_catalog) -> list[UnitRecord]:
    """Full catalog: 7 Feb2025 units followed by 2 Oct2024 units."""
    return [UnitRecord.model_validate(row) for row in raw_catalog]


@pytest.fixture
def demand(raw_demand) -> list[DemandRecord]:
    return [DemandRecord.model_validate(row) for row in raw_demand]


@pytest.fixture
def feb_units(catalog) -> list[UnitRecord]:
    return [u for u in catalog if u.sale_exercise == "Feb2025"]


@pytest.fixture
def feb_demand(demand) -> list[DemandRecord]:
    return [d for d in demand if d.sale_exercise == "Feb2025"]


@pytest.fixture
def as_of() -> date:
    return date(2025, 6, 1)


@pytest.fixture
def make_unit():
    """Build a UnitRecord from keyword overrides."""
    def _make(**fields: Any) -> UnitRecord:
        base: dict[str, Any] = {
            "sale_exercise": "Feb2025",
            "area": "Tampines",
            "project_name": "Test Court",
            "block": "1",
            "unit_type": "4-room",
        }
        return UnitRecord(**{**base, **fields})
    return _make

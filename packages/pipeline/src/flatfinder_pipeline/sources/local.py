"""
sources/local.py — Unit catalog and demand statistics from local JSON files.

Both files hold either a JSON array of records or an object wrapping the
array under "data" (the shape the upstream export API returns). Field
names are the source names (sbfCode, project_town, flat_type, Town,
"Flat Type", ...); see the model aliases.

Usage:
    from flatfinder_pipeline.sources.local import load_units, load_demand

    units = load_units("data/catalog.json")
    demand = load_demand("data/demand.json")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from flatfinder_pipeline.sources.base import BaseSource
from flatfinder_shared.models import DemandRecord, UnitRecord


class LocalJsonSource(BaseSource):
    """Reads one JSON file of records."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__()
        self._log = self._log.bind(path=str(self.path))

    def extract(self) -> list[dict[str, Any]]:
        with self.path.open(encoding="utf-8") as f:
            payload = json.load(f)

        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        if not isinstance(payload, list):
            raise ValueError(
                f"{self.path}: expected a JSON array or an object with a 'data' array"
            )
        return payload


class LocalCatalogSource(LocalJsonSource):
    name = "local_catalog"
    model = UnitRecord


class LocalDemandSource(LocalJsonSource):
    name = "local_demand"
    model = DemandRecord


def load_units(path: str | Path) -> list[UnitRecord]:
    """
    Load the unit catalog from path.

    Raises:
        FileNotFoundError: path does not exist.
        ValueError:        the file is not JSON or has the wrong shape.
    """
    return LocalCatalogSource(path).run()


def load_demand(path: str | Path) -> list[DemandRecord]:
    """Load applicant statistics from path; raises like load_units()."""
    return LocalDemandSource(path).run()

"""
flatfinder_pipeline — Filtering and derived-metrics pipeline for the
flatfinder property-search dashboard.

Architecture:
  sources/     — local JSON loaders for the unit catalog and demand statistics
  transforms/  — slider bounds, conjunctive filters, presets, balloting odds,
                 ROI / floor-tier / lease / completion / affordability metrics
  pipelines/   — the dashboard orchestrator (one full recomputation per call)
  utils/       — structlog configuration

Quick start:
    from flatfinder_pipeline.sources.local import load_units, load_demand
    from flatfinder_pipeline.pipelines.dashboard import run

    result = run(load_units("data/catalog.json"), load_demand("data/demand.json"))

CLI:
    flatfinder exercises
    flatfinder summarize --preset recommended

Shared code from flatfinder_shared:
    from flatfinder_shared.config import settings
    from flatfinder_shared.models import UnitRecord, DemandRecord, FilterState
    from flatfinder_shared.labels import normalize_area, normalize_unit_type
    from flatfinder_shared.constants import PROBABILITY_CAP, UNIT_TYPES
"""

__version__ = "0.1.0"

"""
cli.py — Click CLI entrypoint.

Usage:
    flatfinder exercises
    flatfinder ranges --sale-exercise Feb2025 --secondary-transit
    flatfinder summarize --preset near_transit --view-mode first-timer-families-only
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import click
import structlog

from flatfinder_pipeline.pipelines.dashboard import run as run_dashboard
from flatfinder_pipeline.sources.local import load_demand, load_units
from flatfinder_pipeline.transforms.filters import (
    latest_sale_exercise,
    select_sale_exercise,
)
from flatfinder_pipeline.transforms.presets import PRESETS, UnknownPresetError
from flatfinder_pipeline.transforms.ranges import compute_ranges
from flatfinder_pipeline.utils.logging import configure_logging
from flatfinder_shared.config import settings
from flatfinder_shared.constants import VIEW_MODES
from flatfinder_shared.models import DemandRecord, UnitRecord
from flatfinder_shared.time_utils import sort_sale_exercises

log = structlog.get_logger(__name__)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_units(path: Path | None) -> list[UnitRecord]:
    source = path or settings.catalog_path
    try:
        return load_units(source)
    except FileNotFoundError:
        raise click.ClickException(f"catalog file not found: {source}") from None
    except ValueError as exc:
        raise click.ClickException(f"could not read catalog {source}: {exc}") from exc


def _load_demand(path: Path | None) -> list[DemandRecord]:
    source = path or settings.demand_path
    try:
        return load_demand(source)
    except FileNotFoundError:
        raise click.ClickException(f"demand file not found: {source}") from None
    except ValueError as exc:
        raise click.ClickException(f"could not read demand {source}: {exc}") from exc


catalog_option = click.option(
    "--catalog",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Unit catalog JSON (default: $DATA_DIR/$CATALOG_FILE)",
)
sale_exercise_option = click.option(
    "--sale-exercise",
    default=None,
    help="Sale exercise code, e.g. Feb2025 (default: newest)",
)
transit_option = click.option(
    "--secondary-transit/--primary-transit",
    default=settings.secondary_transit_mode,
    help="Use MRT/LRT walking fields",
)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["json", "console"]),
    help="Log output format",
)
def main(log_level: str, log_format: str) -> None:
    """flatfinder property-search dashboard tools."""
    configure_logging(log_level=log_level, log_format=log_format)


@main.command()
@catalog_option
def exercises(catalog: Path | None) -> None:
    """List sale exercises in the catalog, newest first, with unit counts."""
    units = _load_units(catalog)
    codes = sort_sale_exercises(sorted({u.sale_exercise for u in units if u.sale_exercise}))
    _echo_json([
        {"sale_exercise": code, "units": len(select_sale_exercise(units, code))}
        for code in codes
    ])


@main.command()
@catalog_option
@sale_exercise_option
@transit_option
def ranges(catalog: Path | None, sale_exercise: str | None, secondary_transit: bool) -> None:
    """Print slider bounds for one sale exercise."""
    units = _load_units(catalog)
    code = sale_exercise or latest_sale_exercise(units)
    subset = select_sale_exercise(units, code)
    if not subset:
        log.warning("sale_exercise_empty", sale_exercise=code)
    bounds = compute_ranges(subset, secondary_transit)
    _echo_json({"sale_exercise": code, "units": len(subset), **bounds.model_dump(mode="json")})


@main.command()
@catalog_option
@click.option(
    "--demand",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Demand statistics JSON (default: $DATA_DIR/$DEMAND_FILE)",
)
@sale_exercise_option
@transit_option
@click.option(
    "--preset",
    type=click.Choice(sorted(PRESETS)),
    default=None,
    help="Apply a preset filter profile",
)
@click.option(
    "--view-mode",
    type=click.Choice(VIEW_MODES),
    default=settings.view_mode,
    help="Balloting probability view",
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date for completion buckets (default: today)",
)
def summarize(
    catalog: Path | None,
    demand: Path | None,
    sale_exercise: str | None,
    secondary_transit: bool,
    preset: str | None,
    view_mode: str,
    as_of: Any,
) -> None:
    """Run the dashboard computation and print counts, bounds and balloting odds."""
    units = _load_units(catalog)
    demand_records = _load_demand(demand)
    reference: date | None = as_of.date() if as_of else None

    try:
        result = run_dashboard(
            units,
            demand_records,
            sale_exercise=sale_exercise,
            preset=preset,
            secondary_transit_mode=secondary_transit,
            view_mode=view_mode,
            as_of=reference,
        )
    except (UnknownPresetError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    _echo_json(result.summary())


if __name__ == "__main__":
    main()

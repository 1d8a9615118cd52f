"""
transforms/normalize.py — Record → polars DataFrame conversion and label normalization.

Every transform works on a DataFrame built here so column names, dtypes
and fallback rules are decided in one place:

- numeric dimensions are Float64 (level and quotas Int64); missing values
  stay null here and each transform decides its own fill;
- amenity lists become List(String) columns of amenity names;
- `_row` holds the position of the record in the input list, so filtered
  frames can be mapped back to the original UnitRecord objects;
- `area_key` / `unit_type_key` hold the normalized join key.

Usage:
    from flatfinder_pipeline.transforms.normalize import units_to_frame, demand_to_frame

    df = units_to_frame(units)
    demand_df = demand_to_frame(demand)
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from flatfinder_shared.labels import COMBO_SEPARATOR, normalize_area_expr, normalize_unit_type_expr
from flatfinder_shared.models import DemandRecord, UnitRecord

ROW_COL = "_row"

UNIT_SCHEMA: dict[str, pl.DataType] = {
    ROW_COL: pl.Int64(),
    "sale_exercise": pl.String(),
    "area": pl.String(),
    "project_name": pl.String(),
    "block": pl.String(),
    "unit": pl.String(),
    "unit_type": pl.String(),
    "price": pl.Float64(),
    "size_sqm": pl.Float64(),
    "price_psf": pl.Float64(),
    "level": pl.Int64(),
    "max_lease": pl.Float64(),
    "approximate_resale_value": pl.Float64(),
    "nearest_mrt": pl.String(),
    "walking_time_in_mins": pl.Float64(),
    "walking_distance_in_m": pl.Float64(),
    "nearest_mrt_lrt": pl.String(),
    "mrt_lrt_walking_time_in_mins": pl.Float64(),
    "mrt_lrt_walking_distance_in_m": pl.Float64(),
    "schools_within_1km": pl.List(pl.String()),
    "schools_within_2km": pl.List(pl.String()),
    "chinese_quota": pl.Int64(),
    "malay_quota": pl.Int64(),
    "indian_and_other_races_quota": pl.Int64(),
    "repurchased": pl.Boolean(),
    "completion_date": pl.String(),
}

DEMAND_SCHEMA: dict[str, pl.DataType] = {
    "sale_exercise": pl.String(),
    "area": pl.String(),
    "unit_type": pl.String(),
    "applicants": pl.Int64(),
    "units_offered": pl.Int64(),
    "first_timer_families": pl.Int64(),
    "first_timer_singles": pl.Int64(),
    "second_timer_families": pl.Int64(),
    "seniors": pl.Int64(),
}


def _unit_row(index: int, unit: UnitRecord) -> dict:
    return {
        ROW_COL: index,
        "sale_exercise": unit.sale_exercise,
        "area": unit.area,
        "project_name": unit.project_name,
        "block": unit.block,
        "unit": unit.unit,
        "unit_type": unit.unit_type,
        "price": unit.price,
        "size_sqm": unit.size_sqm,
        "price_psf": unit.price_psf,
        "level": unit.level,
        "max_lease": unit.max_lease,
        "approximate_resale_value": unit.approximate_resale_value,
        "nearest_mrt": unit.nearest_mrt,
        "walking_time_in_mins": unit.walking_time_in_mins,
        "walking_distance_in_m": unit.walking_distance_in_m,
        "nearest_mrt_lrt": unit.nearest_mrt_lrt,
        "mrt_lrt_walking_time_in_mins": unit.mrt_lrt_walking_time_in_mins,
        "mrt_lrt_walking_distance_in_m": unit.mrt_lrt_walking_distance_in_m,
        "schools_within_1km": [s.name for s in unit.schools_within_1km],
        "schools_within_2km": [s.name for s in unit.schools_within_2km],
        "chinese_quota": unit.chinese_quota,
        "malay_quota": unit.malay_quota,
        "indian_and_other_races_quota": unit.indian_and_other_races_quota,
        "repurchased": unit.repurchased,
        "completion_date": unit.completion_date,
    }


def units_to_frame(units: Sequence[UnitRecord]) -> pl.DataFrame:
    """
    Build the canonical unit DataFrame (one row per record, input order kept).

    An empty input yields an empty frame with the full schema.
    """
    rows = [_unit_row(i, u) for i, u in enumerate(units)]
    df = pl.DataFrame(rows, schema=UNIT_SCHEMA)
    return add_combo_keys(df)


def demand_to_frame(demand: Sequence[DemandRecord]) -> pl.DataFrame:
    """Build the canonical demand DataFrame with normalized join keys."""
    rows = [d.model_dump(include=set(DEMAND_SCHEMA)) for d in demand]
    df = pl.DataFrame(rows, schema=DEMAND_SCHEMA)
    return add_combo_keys(df)


def add_combo_keys(
    df: pl.DataFrame,
    *,
    area_col: str = "area",
    unit_type_col: str = "unit_type",
) -> pl.DataFrame:
    """
    Add area_key, unit_type_key and combo columns from the raw label columns.

    Args:
        df:            Input DataFrame.
        area_col:      Column holding raw area labels.
        unit_type_col: Column holding raw unit-type labels.

    Returns:
        DataFrame with the normalized key columns appended.
    """
    df = df.with_columns(
        normalize_area_expr(area_col).alias("area_key"),
        normalize_unit_type_expr(unit_type_col).alias("unit_type_key"),
    )
    return df.with_columns(
        (pl.col("area_key") + pl.lit(COMBO_SEPARATOR) + pl.col("unit_type_key")).alias("combo")
    )


def frame_to_units(df: pl.DataFrame, units: Sequence[UnitRecord]) -> list[UnitRecord]:
    """Map a (filtered) unit frame back to the original records, in frame order."""
    return [units[i] for i in df[ROW_COL].to_list()]


# ---------------------------------------------------------------------------
# Stateless helper functions
# ---------------------------------------------------------------------------


def falsy_to_null(col: str) -> pl.Expr:
    """Null out zero values so `a or b` fallbacks can use fill_null()."""
    return pl.when(pl.col(col) == 0).then(None).otherwise(pl.col(col))


"""
transforms/dimensions.py — Numeric filter dimensions as polars expressions.

Each dimension resolves to one expression over the unit frame built by
transforms.normalize. Fallback rules:

- price, size, price_psf, level, lease: missing → 0
- walking time / distance: with the secondary transit mode on, the
  MRT/LRT field is used and falls back to the MRT-only field when it is
  missing or zero; missing → 0
- roi: computed only when price > 0 and resale value > 0, otherwise null
  (a null ROI never satisfies an ROI bound)
"""

from __future__ import annotations

from collections.abc import Callable

import polars as pl

from flatfinder_pipeline.transforms.normalize import ROW_COL, falsy_to_null


def walking_time_expr(secondary_transit_mode: bool) -> pl.Expr:
    if secondary_transit_mode:
        expr = falsy_to_null("mrt_lrt_walking_time_in_mins").fill_null(
            pl.col("walking_time_in_mins")
        )
    else:
        expr = pl.col("walking_time_in_mins")
    return expr.fill_null(0.0).alias("walking_time")


def walking_distance_expr(secondary_transit_mode: bool) -> pl.Expr:
    if secondary_transit_mode:
        expr = falsy_to_null("mrt_lrt_walking_distance_in_m").fill_null(
            pl.col("walking_distance_in_m")
        )
    else:
        expr = pl.col("walking_distance_in_m")
    return expr.fill_null(0.0).alias("walking_distance")


def roi_expr(
    price_col: str = "price",
    resale_col: str = "approximate_resale_value",
) -> pl.Expr:
    """ROI % = (resale - price) / price * 100, null unless both are positive."""
    price = pl.col(price_col)
    resale = pl.col(resale_col)
    return (
        pl.when((price > 0) & (resale > 0))
        .then((resale - price) / price * 100)
        .otherwise(None)
        .alias("roi_pct")
    )


def _filled(col: str, alias: str) -> Callable[[bool], pl.Expr]:
    def build(secondary_transit_mode: bool) -> pl.Expr:
        return pl.col(col).cast(pl.Float64).fill_null(0.0).alias(alias)
    return build


# FilterState range field -> (bounds key, expression factory)
RANGE_DIMENSIONS: dict[str, tuple[str, Callable[[bool], pl.Expr]]] = {
    "price_range": ("price", _filled("price", "price")),
    "size_range": ("size", _filled("size_sqm", "size")),
    "price_psf_range": ("price_psf", _filled("price_psf", "price_psf")),
    "walking_time_range": ("walking_time", walking_time_expr),
    "walking_distance_range": ("walking_distance", walking_distance_expr),
    "lease_range": ("lease", _filled("max_lease", "lease")),
    "level_range": ("level", _filled("level", "level")),
    "roi_range": ("roi", lambda _secondary: roi_expr()),
}


def dimension_frame(df: pl.DataFrame, secondary_transit_mode: bool) -> pl.DataFrame:
    """Project the unit frame onto one resolved column per numeric dimension."""
    return df.select(
        pl.col(ROW_COL),
        *[build(secondary_transit_mode).alias(key) for key, build in RANGE_DIMENSIONS.values()],
    )

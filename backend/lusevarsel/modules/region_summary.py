"""Per-region aggregates for the dashboard header and region filter."""
from __future__ import annotations

from typing import Sequence

import polars as pl

from lusevarsel.models.base import RiskLevelEnum
from lusevarsel.modules.risk_scoring import risk_level, score_current
from lusevarsel.schemas.risk import RegionSummary
from lusevarsel.schemas.site import Site


def sites_frame(sites: Sequence[Site]) -> pl.DataFrame:
    """One row per site with its current score and level."""
    rows = []
    for site in sites:
        score = score_current(site)
        rows.append({
            "region_id": site.region_id,
            "score": score,
            "critical": risk_level(score) == RiskLevelEnum.CRITICAL,
            "parasite_load": site.parasite_load,
            "water_temp": site.water_temp,
        })
    return pl.DataFrame(
        rows,
        schema={
            "region_id": pl.Int64,
            "score": pl.Int64,
            "critical": pl.Boolean,
            "parasite_load": pl.Float64,
            "water_temp": pl.Float64,
        },
    )


def summarize_regions(sites: Sequence[Site]) -> list[RegionSummary]:
    """Site count and averages for every region that has at least one site."""
    if not sites:
        return []

    summary = (
        sites_frame(sites)
        .group_by("region_id")
        .agg(
            pl.len().alias("site_count"),
            pl.col("score").mean().alias("average_score"),
            pl.col("critical").sum().alias("critical_count"),
            pl.col("parasite_load").mean().alias("average_parasite_load"),
            pl.col("water_temp").mean().alias("average_water_temp"),
        )
        .sort("region_id")
    )

    return [
        RegionSummary(
            region_id=row["region_id"],
            site_count=row["site_count"],
            average_score=round(row["average_score"], 2),
            critical_count=row["critical_count"],
            average_parasite_load=round(row["average_parasite_load"], 3),
            average_water_temp=(
                round(row["average_water_temp"], 1)
                if row["average_water_temp"] is not None else None
            ),
        )
        for row in summary.iter_rows(named=True)
    ]

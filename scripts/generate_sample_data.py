#!/usr/bin/env python3
"""Dump a synthetic site + vessel dataset as feed-shaped JSON.

The output mimics the paginated site feed (``{"items": [...]}``) so it can be
served by a local static file server and pointed at with SITES_FEED_URL while
developing offline. Sites are generated without position correction, so the
file holds raw shore coordinates and ingestion corrects each point exactly once.
"""
from __future__ import annotations

import json
import random
import sys
from pathlib import Path

import typer

# Ensure the backend package is importable when running from repo root.
_backend_dir = Path(__file__).resolve().parent.parent / "backend"
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))

from lusevarsel.modules.position_corrector import PositionCorrector
from lusevarsel.modules.synthetic_data import generate_sites, generate_vessels

cli = typer.Typer(help="Generate sample feed data for LuseVarsel development/testing.")


class RawPositions(PositionCorrector):
    """Leaves coordinates untouched; the feed should carry pre-correction points."""

    def correct(self, lat: float, lng: float) -> tuple[float, float]:
        return lat, lng


def _site_record(site) -> dict:
    return {
        "localityNo": site.id,
        "name": site.name,
        "productionAreaId": site.region_id,
        "lat": round(site.lat, 5),
        "lng": round(site.lng, 5),
        "adultFemaleLice": round(site.parasite_load, 3),
        "seaTemperature": round(site.water_temp, 1) if site.water_temp is not None else None,
        "salinity": round(site.salinity, 1) if site.salinity is not None else None,
        "loadIncreasing": site.load_increasing,
        "currentDirection": round(site.current_direction, 0) if site.current_direction is not None else None,
        "currentSpeed": site.current_speed,
        "chlorophyll": site.chlorophyll,
        "forcedCull": site.forced_cull,
        "diseaseCode": site.disease_code.value if site.disease_code else None,
        "inQuarantine": site.in_quarantine,
    }


def _vessel_record(vessel) -> dict:
    return {
        "mmsi": vessel.id,
        "name": vessel.name,
        "shipType": vessel.type.value,
        "latitude": round(vessel.lat, 5),
        "longitude": round(vessel.lng, 5),
        "trueHeading": vessel.heading,
        "speedOverGround": vessel.speed_knots,
        "passedRiskZone": vessel.passed_risk_zone,
    }


@cli.command()
def main(
    out_dir: Path = typer.Option(Path("data/sample"), "--out", help="Output directory"),
    sites: int = typer.Option(60, "--sites"),
    vessels: int = typer.Option(25, "--vessels"),
    seed: int = typer.Option(42, "--seed", help="Random seed (same seed, same dataset)"),
):
    rng = random.Random(seed)
    site_rows = [_site_record(s) for s in generate_sites(sites, rng, RawPositions())]
    vessel_rows = [_vessel_record(v) for v in generate_vessels(vessels, rng)]

    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "sites.json").write_text(json.dumps({"items": site_rows}, ensure_ascii=False, indent=2))
    (out_dir / "vessels.json").write_text(json.dumps(vessel_rows, ensure_ascii=False, indent=2))
    typer.echo(f"Wrote {len(site_rows)} sites and {len(vessel_rows)} vessels to {out_dir}")


if __name__ == "__main__":
    cli()

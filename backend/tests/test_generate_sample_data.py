"""Tests for the sample feed dump script."""
from __future__ import annotations

import json
import random

from typer.testing import CliRunner

from lusevarsel.modules.normalize import build_sites
from lusevarsel.modules.position_corrector import MAX_OFFSET_M, MIN_OFFSET_M, PositionCorrector
from lusevarsel.modules.synthetic_data import generate_sites
from lusevarsel.utils.geo import haversine_meters
from scripts.generate_sample_data import RawPositions, cli

runner = CliRunner()


def _dump(tmp_path, sites=12, seed=5) -> list[dict]:
    result = runner.invoke(cli, ["--out", str(tmp_path), "--sites", str(sites), "--vessels", "3", "--seed", str(seed)])
    assert result.exit_code == 0, result.output
    return json.loads((tmp_path / "sites.json").read_text())["items"]


def test_raw_positions_is_identity():
    assert RawPositions().correct(60.9, 8.5) == (60.9, 8.5)


def test_feed_carries_uncorrected_positions(tmp_path):
    rows = _dump(tmp_path)
    raw = generate_sites(12, random.Random(5), RawPositions())
    assert [(r["lat"], r["lng"]) for r in rows] == [(round(s.lat, 5), round(s.lng, 5)) for s in raw]

    corrected = generate_sites(12, random.Random(5))
    for row, site in zip(rows, corrected):
        assert haversine_meters(row["lat"], row["lng"], site.lat, site.lng) > MIN_OFFSET_M * 0.9


def test_ingest_moves_each_site_once(tmp_path):
    rows = _dump(tmp_path)
    sites = build_sites(rows, PositionCorrector())
    assert [s.id for s in sites] == [r["localityNo"] for r in rows]
    for row, site in zip(rows, sites):
        moved = haversine_meters(row["lat"], row["lng"], site.lat, site.lng)
        assert MIN_OFFSET_M * 0.9 < moved < MAX_OFFSET_M * 1.1

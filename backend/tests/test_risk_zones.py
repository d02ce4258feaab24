"""Tests for risk-zone polygons from config/risk_zones.yaml."""
from __future__ import annotations

from unittest.mock import patch

import pytest

from lusevarsel.config import settings
from lusevarsel.modules.risk_zones import in_risk_zone, load_risk_zones, reload_risk_zones, zone_containing


@pytest.fixture(autouse=True)
def fresh_zones():
    reload_risk_zones()
    yield
    reload_risk_zones()


def test_repo_zones_loaded():
    assert len(load_risk_zones()) == 3


def test_point_inside_hardanger_zone():
    assert zone_containing(60.2, 6.0) == "Hardangerfjorden ILA-sone"
    assert in_risk_zone(60.2, 6.0)


def test_point_outside_all_zones():
    assert zone_containing(58.0, 5.0) is None
    assert not in_risk_zone(58.0, 5.0)


def test_invalid_entries_skipped(tmp_path):
    path = tmp_path / "risk_zones.yaml"
    path.write_text(
        "zones:\n"
        "  - name: no polygon\n"
        "  - name: bowtie\n"
        "    polygon: [[0, 0], [1, 1], [1, 0], [0, 1], [0, 0]]\n"
        "  - name: box\n"
        "    polygon: [[10, 60], [11, 60], [11, 61], [10, 61], [10, 60]]\n"
    )
    with patch.object(settings, "RISK_ZONES_CONFIG", str(path)):
        zones = reload_risk_zones()
    assert [name for name, _ in zones] == ["box"]
    assert zone_containing(60.5, 10.5) == "box"


def test_missing_file_means_no_zones(tmp_path):
    with patch.object(settings, "RISK_ZONES_CONFIG", str(tmp_path / "absent.yaml")):
        assert reload_risk_zones() == []
    assert not in_risk_zone(60.2, 6.0)

"""Shared test fixtures."""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from lusevarsel.main import app
from lusevarsel.api.routes import get_acquirer
from lusevarsel.modules.risk_scoring import reload_scoring_config
from lusevarsel.schemas.site import Site
from lusevarsel.schemas.vessel import Vessel


def make_site(site_id: str = "1", **overrides) -> Site:
    """Site at 60°N 5°E with no lice, no temperature and no optional signals."""
    fields = {
        "id": site_id,
        "name": f"Site {site_id}",
        "region_id": 3,
        "lat": 60.0,
        "lng": 5.0,
        "parasite_load": 0.0,
    }
    fields.update(overrides)
    return Site(**fields)


def make_vessel(vessel_id: str = "v1", **overrides) -> Vessel:
    fields = {
        "id": vessel_id,
        "name": f"Vessel {vessel_id}",
        "lat": 60.0,
        "lng": 5.0,
        "passed_risk_zone": True,
    }
    fields.update(overrides)
    return Vessel(**fields)


class FakeAcquirer:
    """Stands in for SiteAcquirer in route tests; no network, no cache."""

    def __init__(self, sites, vessels):
        self.sites = sites
        self.vessels = vessels

    async def acquire_sites(self):
        return self.sites

    async def acquire_vessels(self):
        return self.vessels

    async def acquire_all(self):
        return self.sites, self.vessels


@pytest.fixture(autouse=True)
def default_scoring_config():
    """Every test starts and ends with the weights from config/risk_scoring.yaml."""
    reload_scoring_config()
    yield
    reload_scoring_config()


@pytest.fixture
def fake_acquirer():
    sites = [
        make_site("10", parasite_load=0.6, water_temp=9.0, region_id=3),
        make_site("11", parasite_load=0.2, lat=60.1, region_id=3),
        make_site("20", parasite_load=0.0, water_temp=5.0, lat=66.0, lng=12.5, region_id=8),
    ]
    vessels = [make_vessel("v1", lat=60.05)]
    return FakeAcquirer(sites, vessels)


@pytest.fixture
def api_client(fake_acquirer):
    """TestClient with the acquirer dependency overridden and no database setup."""
    app.dependency_overrides[get_acquirer] = lambda: fake_acquirer
    with patch("lusevarsel.main.init_db"):
        with TestClient(app) as client:
            yield client
    app.dependency_overrides.clear()

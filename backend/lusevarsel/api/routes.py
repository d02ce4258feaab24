from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Query

from lusevarsel.config import settings
from lusevarsel.database import SessionLocal
from lusevarsel.modules.acquisition import SiteAcquirer
from lusevarsel.modules.position_corrector import PositionCorrector
from lusevarsel.modules.region_summary import summarize_regions
from lusevarsel.modules.risk_scoring import assess_site
from lusevarsel.modules.site_cache import SqlCacheStore
from lusevarsel.schemas.risk import RegionSummary, SiteAssessment
from lusevarsel.schemas.vessel import Vessel

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_acquirer() -> SiteAcquirer:
    """Process-wide acquirer backed by the ``cache_slots`` table."""
    return SiteAcquirer(SqlCacheStore(SessionLocal))


def get_corrector() -> PositionCorrector:
    """Corrector with the same seed ingestion uses, so answers match stored sites."""
    return PositionCorrector(settings.CORRECTOR_SEED)


@router.get("/sites", tags=["sites"], response_model=list[SiteAssessment])
async def list_sites(
    region_id: Optional[int] = Query(None, ge=1, le=13),
    limit: int = Query(100, ge=1, le=1000),
    acquirer: SiteAcquirer = Depends(get_acquirer),
) -> list[SiteAssessment]:
    """Scored sites, riskiest first. Neighbour exposure always uses the full set."""
    sites, vessels = await acquirer.acquire_all()
    selected = [s for s in sites if region_id is None or s.region_id == region_id][:limit]
    return [assess_site(site, sites, vessels) for site in selected]


@router.get("/regions", tags=["sites"], response_model=list[RegionSummary])
async def list_regions(acquirer: SiteAcquirer = Depends(get_acquirer)) -> list[RegionSummary]:
    sites = await acquirer.acquire_sites()
    return summarize_regions(sites)


@router.get("/vessels", tags=["vessels"], response_model=list[Vessel])
async def list_vessels(acquirer: SiteAcquirer = Depends(get_acquirer)) -> list[Vessel]:
    return await acquirer.acquire_vessels()


@router.get("/correct", tags=["geo"])
def correct(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    corrector: PositionCorrector = Depends(get_corrector),
) -> dict:
    corrected_lat, corrected_lng = corrector.correct(lat, lng)
    return {"lat": corrected_lat, "lng": corrected_lng}

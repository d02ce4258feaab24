"""Output contract handed to the presentation layer.

Nothing else crosses this boundary: no rule breakdowns, no raw inputs.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from lusevarsel.models.base import RiskColorEnum, RiskLevelEnum


class RiskReading(BaseModel):
    score: int = Field(ge=1, le=10)
    level: RiskLevelEnum
    color: RiskColorEnum


class SiteAssessment(BaseModel):
    site_id: str
    name: str
    region_id: int
    lat: float
    lng: float
    current: RiskReading
    predictive: RiskReading
    future: RiskReading


class RegionSummary(BaseModel):
    region_id: int
    site_count: int
    average_score: float
    critical_count: int
    average_parasite_load: float
    average_water_temp: Optional[float] = None

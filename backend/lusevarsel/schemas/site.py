"""Pydantic record for a monitored aquaculture site.

A Site is rebuilt from the feed on every acquisition cycle and never mutated;
refreshes replace the whole collection. ``lat``/``lng`` always hold the output
of the position corrector, never the raw geocoded point.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from lusevarsel.models.base import DiseaseCodeEnum

# Chlorophyll-a above this (µg/L) is treated as harmful-algae risk
ALGAE_CHLOROPHYLL_THRESHOLD: float = 10.0


class Site(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    region_id: int = Field(ge=1, le=13)
    lat: float
    lng: float
    parasite_load: float = Field(ge=0)
    water_temp: Optional[float] = None
    salinity: Optional[float] = None
    load_increasing: bool = False
    nearby_high_load_neighbor: bool = False
    current_direction: Optional[float] = None
    current_speed: Optional[float] = None
    chlorophyll: Optional[float] = None
    forced_cull: Optional[bool] = None
    disease_code: Optional[DiseaseCodeEnum] = None
    in_quarantine: Optional[bool] = None

    @property
    def position(self) -> tuple[float, float]:
        return self.lat, self.lng

    @property
    def has_algae_risk(self) -> bool:
        return self.chlorophyll is not None and self.chlorophyll > ALGAE_CHLOROPHYLL_THRESHOLD


class CacheEnvelope(BaseModel):
    """On-disk shape of the site cache slot: ``{data, timestamp}``."""

    data: list[Site]
    timestamp: datetime

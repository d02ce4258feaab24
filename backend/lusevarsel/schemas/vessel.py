"""Pydantic record for a vessel seen near the sites.

Only ``passed_risk_zone`` feeds the scoring engine; the rest is carried for
the map and tables.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lusevarsel.models.base import VesselTypeEnum


class Vessel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    type: VesselTypeEnum = VesselTypeEnum.UNKNOWN
    lat: float
    lng: float
    heading: float = 0.0
    speed_knots: float = 0.0
    # Entered a designated high-risk zone within the trailing 7 days
    passed_risk_zone: bool = False

    @field_validator("heading")
    @classmethod
    def heading_in_compass_range(cls, v: float) -> float:
        return v % 360.0

    @property
    def position(self) -> tuple[float, float]:
        return self.lat, self.lng

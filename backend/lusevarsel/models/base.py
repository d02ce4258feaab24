"""Shared declarative base and enums for all models."""
from __future__ import annotations

import enum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DiseaseCodeEnum(str, enum.Enum):
    A = "A"
    B = "B"
    C = "C"


class VesselTypeEnum(str, enum.Enum):
    WELL_BOAT = "WellBoat"
    SERVICE = "Service"
    FISHING = "Fishing"
    CABLE = "Cable"
    UNKNOWN = "Unknown"


class RiskLevelEnum(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskColorEnum(str, enum.Enum):
    # Same token on the map, the tables and the PDF report
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"

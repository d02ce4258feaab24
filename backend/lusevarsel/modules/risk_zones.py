"""Designated high-risk zones (config/risk_zones.yaml).

Used to flag vessels when the vessel feed does not report risk-zone passage
itself. Only the reported position is checked, so this under-counts vessels
that crossed a zone earlier in the 7-day window.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from shapely.geometry import Point, Polygon
from shapely.prepared import prep

from lusevarsel.config import settings

logger = logging.getLogger(__name__)

_RISK_ZONES: list[tuple[str, Any]] | None = None


def _zones_path() -> Path:
    if settings.RISK_ZONES_CONFIG:
        return Path(settings.RISK_ZONES_CONFIG)
    return Path(__file__).resolve().parents[3] / "config" / "risk_zones.yaml"


def load_risk_zones() -> list[tuple[str, Any]]:
    """Lazy-load zones as (name, prepared polygon) pairs."""
    global _RISK_ZONES
    if _RISK_ZONES is None:
        zones: list[tuple[str, Any]] = []
        config_path = _zones_path()
        if not config_path.exists():
            logger.warning("risk_zones.yaml not found at %s — no zone checks", config_path)
        else:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            for entry in data.get("zones") or []:
                name = entry.get("name", "unnamed")
                try:
                    polygon = Polygon(entry["polygon"])
                except (KeyError, TypeError, ValueError) as exc:
                    logger.warning("Skipping risk zone %s: %s", name, exc)
                    continue
                if not polygon.is_valid:
                    logger.warning("Skipping risk zone %s: invalid polygon", name)
                    continue
                zones.append((name, prep(polygon)))
        _RISK_ZONES = zones
    return _RISK_ZONES


def reload_risk_zones() -> list[tuple[str, Any]]:
    global _RISK_ZONES
    _RISK_ZONES = None
    return load_risk_zones()


def zone_containing(lat: float, lng: float) -> str | None:
    """Name of the first zone containing the point, or None."""
    point = Point(lng, lat)
    for name, polygon in load_risk_zones():
        if polygon.contains(point):
            return name
    return None


def in_risk_zone(lat: float, lng: float) -> bool:
    return zone_containing(lat, lng) is not None

"""Shared geometry helpers.

Scoring works in raw coordinate degrees (flat-earth, fine at the tens-of-km scale
of a production area); haversine is only used to report real offsets in metres.
"""
from __future__ import annotations

import math

_EARTH_RADIUS_M: float = 6_371_000.0  # Earth mean radius in metres
METRES_PER_DEGREE_LAT: float = 111_320.0


def degree_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Unprojected Euclidean distance in degrees.

    Known approximation: a degree of longitude shrinks with latitude, so at 70°N
    the east-west reach of a given threshold is roughly a third of the
    north-south reach.
    """
    return math.hypot(lat2 - lat1, lng2 - lng1)


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres between two WGS-84 coordinates."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    )
    return _EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlam = math.radians(lon2 - lon1)
    x = math.sin(dlam) * math.cos(phi2)
    y = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlam)
    return math.degrees(math.atan2(x, y)) % 360.0


def angle_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two bearings, in [0, 180]."""
    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff

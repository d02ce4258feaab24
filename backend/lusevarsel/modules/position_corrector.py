"""Position corrector — nudges geocoded site coordinates off land.

Registry coordinates for fish farms are often geocoded to the shore base or a
nearby road rather than the net pens, so raw points land on the coast. There is
no land/water lookup here: each latitude band has a base bearing pointing
roughly seaward for that stretch of coastline and a base offset distance.

  band    latitude      bearing    offset
  0       < 59.0        225° SW    1100 m   (Skagerrak / Ryfylke)
  1       59.0–60.5     250°       1000 m
  2       60.5–62.0     270° W      900 m   (Hardanger / Sogn)
  3       62.0–63.5     295°        800 m
  4       63.5–65.0     320° NW     700 m   (Trøndelag)
  5       65.0–67.0     345°        650 m
  6       67.0–69.0      15°        575 m   (Lofoten / Vesterålen)
  7       >= 69.0        45° NE     500 m   (Troms / Finnmark)

A SHA-256 hash of the rounded input perturbs the bearing by up to ±30° and the
distance by up to ±15%, so farms registered at the same shore point fan out
instead of stacking. The result is a pure function of (seed, lat, lng).
"""
from __future__ import annotations

import hashlib
import math
from typing import NamedTuple

from lusevarsel.utils.geo import METRES_PER_DEGREE_LAT

MIN_OFFSET_M: float = 400.0
MAX_OFFSET_M: float = 1200.0
BEARING_JITTER_DEG: float = 30.0
MAGNITUDE_JITTER: float = 0.15
_HASH_PRECISION = 4  # decimal places (~11 m) used when hashing the input
_MIN_COS_LAT = 0.01  # keeps the longitude scale finite at the poles


class LatitudeBand(NamedTuple):
    max_lat: float
    bearing_deg: float
    offset_m: float


LATITUDE_BANDS: tuple[LatitudeBand, ...] = (
    LatitudeBand(59.0, 225.0, 1100.0),
    LatitudeBand(60.5, 250.0, 1000.0),
    LatitudeBand(62.0, 270.0, 900.0),
    LatitudeBand(63.5, 295.0, 800.0),
    LatitudeBand(65.0, 320.0, 700.0),
    LatitudeBand(67.0, 345.0, 650.0),
    LatitudeBand(69.0, 15.0, 575.0),
    LatitudeBand(math.inf, 45.0, 500.0),
)


def band_for_latitude(lat: float) -> LatitudeBand:
    """Return the band whose upper bound is the first one above *lat*."""
    for band in LATITUDE_BANDS:
        if lat < band.max_lat:
            return band
    return LATITUDE_BANDS[-1]


class PositionCorrector:
    """Deterministic seaward offset for raw (lat, lng) pairs.

    Args:
        seed: Mixed into the hash that drives the per-point variation. Two
            correctors with the same seed always agree; a different seed moves
            every point to a different (still deterministic) spot.
    """

    def __init__(self, seed: str = "") -> None:
        self.seed = seed

    def _variation(self, lat: float, lng: float) -> tuple[float, float]:
        """Two uniform values in [0, 1) derived from the rounded coordinate."""
        key = f"{self.seed}|{round(lat, _HASH_PRECISION):.{_HASH_PRECISION}f}|{round(lng, _HASH_PRECISION):.{_HASH_PRECISION}f}"
        digest = hashlib.sha256(key.encode()).digest()
        u1 = int.from_bytes(digest[0:4], "big") / 2**32
        u2 = int.from_bytes(digest[4:8], "big") / 2**32
        return u1, u2

    def offset_for(self, lat: float, lng: float) -> tuple[float, float]:
        """Return (bearing_deg, distance_m) that :meth:`correct` applies."""
        band = band_for_latitude(lat)
        u1, u2 = self._variation(lat, lng)
        bearing = (band.bearing_deg + (u1 * 2 - 1) * BEARING_JITTER_DEG) % 360.0
        distance = band.offset_m * (1 + (u2 * 2 - 1) * MAGNITUDE_JITTER)
        distance = min(MAX_OFFSET_M, max(MIN_OFFSET_M, distance))
        return bearing, distance

    def correct(self, lat: float, lng: float) -> tuple[float, float]:
        """Map a raw coordinate to a water-biased one.

        Raises:
            ValueError: if either coordinate is NaN or infinite.
        """
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Non-finite coordinate: ({lat}, {lng})")

        bearing, distance = self.offset_for(lat, lng)
        theta = math.radians(bearing)
        cos_lat = max(_MIN_COS_LAT, math.cos(math.radians(lat)))

        dlat = distance * math.cos(theta) / METRES_PER_DEGREE_LAT
        dlng = distance * math.sin(theta) / (METRES_PER_DEGREE_LAT * cos_lat)

        new_lat = min(90.0, max(-90.0, lat + dlat))
        new_lng = ((lng + dlng + 180.0) % 360.0) - 180.0
        return new_lat, new_lng


_default_corrector = PositionCorrector()


def correct_position(lat: float, lng: float) -> tuple[float, float]:
    """Correct a coordinate with the default (unseeded) corrector."""
    return _default_corrector.correct(lat, lng)

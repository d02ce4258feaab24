"""Synthetic fallback dataset.

Used only when the live feed fails and no cached copy exists, so the dashboard
stays usable fully offline. Farm names and localities are fixed pools along the
Norwegian coast; measurements are drawn from plausible ranges. Raw positions go
through the position corrector like live data.

Randomness comes from the ``rng`` argument. Ids are ``farm-<n>`` / ``vessel-<n>``
so they stay stable across cycles even though the measurements change.
"""
from __future__ import annotations

import random
from typing import NamedTuple

from lusevarsel.models.base import DiseaseCodeEnum, VesselTypeEnum
from lusevarsel.modules.position_corrector import PositionCorrector
from lusevarsel.schemas.site import Site
from lusevarsel.schemas.vessel import Vessel

FARM_NAMES = [
    "Nordlaks", "SalMar", "Mowi", "Lerøy", "Grieg", "Nova Sea", "Cermaq",
    "Alsaker", "Bremnes", "SinkabergHansen", "Eidsfjord", "Kvarøy", "Lovundlaks",
]


class Locality(NamedTuple):
    name: str
    lat: float
    lng: float
    region_id: int


LOCALITIES = [
    Locality("Ryfylke", 59.1, 5.9, 2),
    Locality("Hardanger", 60.3, 6.2, 3),
    Locality("Sogn", 61.1, 5.5, 4),
    Locality("Sunnmøre", 62.2, 6.0, 5),
    Locality("Nordmøre", 63.1, 7.8, 6),
    Locality("Trøndelag S", 63.8, 9.0, 6),
    Locality("Trøndelag N", 64.5, 10.5, 7),
    Locality("Helgeland", 66.0, 12.5, 8),
    Locality("Lofoten", 68.0, 13.5, 9),
    Locality("Vesterålen", 68.8, 15.0, 9),
    Locality("Senja", 69.3, 17.5, 10),
    Locality("Vest-Finnmark", 70.2, 22.5, 12),
    Locality("Øst-Finnmark", 70.5, 29.0, 13),
]

VESSEL_NAMES = [
    ("Ronja Storm", VesselTypeEnum.WELL_BOAT),
    ("Aqua Fjord", VesselTypeEnum.WELL_BOAT),
    ("Båtservice Viking", VesselTypeEnum.SERVICE),
    ("Frøy Bas", VesselTypeEnum.SERVICE),
    ("Havfisk Senja", VesselTypeEnum.FISHING),
    ("Kystfangst", VesselTypeEnum.FISHING),
    ("Nexans Skagerrak", VesselTypeEnum.CABLE),
    ("Ukjent", VesselTypeEnum.UNKNOWN),
]

_POSITION_JITTER_LAT = 0.8
_POSITION_JITTER_LNG = 1.5


def _jittered(rng: random.Random, locality: Locality) -> tuple[float, float]:
    lat = locality.lat + (rng.random() - 0.5) * _POSITION_JITTER_LAT
    lng = locality.lng + (rng.random() - 0.5) * _POSITION_JITTER_LNG
    return lat, lng


def generate_sites(
    count: int = 60,
    rng: random.Random | None = None,
    corrector: PositionCorrector | None = None,
) -> list[Site]:
    """Build *count* plausible sites spread round-robin over ``LOCALITIES``."""
    rng = rng or random.Random()
    corrector = corrector or PositionCorrector()
    sites: list[Site] = []

    for i in range(count):
        locality = LOCALITIES[i % len(LOCALITIES)]
        lat, lng = corrector.correct(*_jittered(rng, locality))
        disease = rng.choice(list(DiseaseCodeEnum)) if rng.random() < 0.05 else None

        sites.append(Site(
            id=f"farm-{i}",
            name=f"{FARM_NAMES[i % len(FARM_NAMES)]} {locality.name} {i + 1}",
            region_id=locality.region_id,
            lat=lat,
            lng=lng,
            parasite_load=rng.random() * 0.8,
            water_temp=4 + rng.random() * 10,
            salinity=28 + rng.random() * 7,
            load_increasing=rng.random() > 0.7,
            nearby_high_load_neighbor=rng.random() > 0.8,
            current_direction=rng.random() * 360,
            current_speed=rng.random() * 0.5,
            chlorophyll=rng.random() * 14,
            forced_cull=rng.random() < 0.02,
            disease_code=disease,
            in_quarantine=disease is not None and rng.random() < 0.5,
        ))
    return sites


def generate_vessels(count: int = 25, rng: random.Random | None = None) -> list[Vessel]:
    """Build *count* vessels near the site localities."""
    rng = rng or random.Random()
    vessels: list[Vessel] = []

    for i in range(count):
        locality = LOCALITIES[rng.randrange(len(LOCALITIES))]
        name, vessel_type = VESSEL_NAMES[i % len(VESSEL_NAMES)]
        lat, lng = _jittered(rng, locality)
        vessels.append(Vessel(
            id=f"vessel-{i}",
            name=f"{name} {i + 1}",
            type=vessel_type,
            lat=lat,
            lng=lng,
            heading=float(rng.randrange(360)),
            speed_knots=round(rng.random() * 14, 1),
            passed_risk_zone=rng.random() < 0.2,
        ))
    return vessels

"""Feed record normalization and validation.

Maps raw site and vessel records from the upstream feeds onto the canonical
``Site`` / ``Vessel`` schemas. A record that cannot be placed or identified is
dropped (``None``) rather than failing the whole fetch.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable

from pydantic import ValidationError
from unidecode import unidecode

from lusevarsel.models.base import DiseaseCodeEnum, VesselTypeEnum
from lusevarsel.modules.position_corrector import PositionCorrector
from lusevarsel.schemas.site import Site
from lusevarsel.schemas.vessel import Vessel

logger = logging.getLogger(__name__)


# --- Field aliases (first present key wins) ---

_SITE_ID_KEYS = ("localityNo", "localityId", "locality_no", "siteId", "id")
_SITE_NAME_KEYS = ("name", "localityName", "siteName")
_LAT_KEYS = ("lat", "latitude", "LAT")
_LNG_KEYS = ("lng", "lon", "longitude", "LON")
_REGION_KEYS = ("productionAreaId", "productionArea", "regionId", "region_id", "po")
_LOAD_KEYS = ("adultFemaleLice", "avgAdultFemaleLice", "parasiteLoad", "liceCount")
_TEMP_KEYS = ("seaTemperature", "waterTemp", "temperature", "temp")
_SALINITY_KEYS = ("salinity",)
_LOAD_INCREASE_KEYS = ("liceIncrease", "loadIncreasing")
_NEIGHBOR_KEYS = ("highLiceNeighbor", "nearbyHighLoadNeighbor")
_CURRENT_DIR_KEYS = ("currentDirection", "current_direction")
_CURRENT_SPEED_KEYS = ("currentSpeed", "current_speed")
_CHLOROPHYLL_KEYS = ("chlorophyll", "chlorophyllA")
_CULL_KEYS = ("forcedCull", "forcedSlaughter")
_DISEASE_KEYS = ("diseaseCode", "disease")
_QUARANTINE_KEYS = ("inQuarantine", "quarantine")

_VESSEL_ID_KEYS = ("id", "mmsi", "MMSI")
_VESSEL_NAME_KEYS = ("name", "shipName", "vesselName", "NAME")
_HEADING_KEYS = ("heading", "trueHeading", "courseOverGround", "cog")
_SPEED_KEYS = ("speedKnots", "speedOverGround", "sog", "speed")
_SHIP_TYPE_KEYS = ("shipType", "type", "vesselType", "ship_type")
_RISK_ZONE_KEYS = ("passedRiskZone", "passed_risk_zone")

# Ordered: the first matching keyword group wins ("service well boat" is a well boat)
_VESSEL_TYPE_KEYWORDS: tuple[tuple[VesselTypeEnum, tuple[str, ...]], ...] = (
    (VesselTypeEnum.WELL_BOAT, ("wellboat", "well boat", "bronnbat", "live fish", "fish carrier")),
    (VesselTypeEnum.CABLE, ("cable", "kabel")),
    (VesselTypeEnum.FISHING, ("fishing", "fiske", "trawler", "seiner")),
    (VesselTypeEnum.SERVICE, ("service", "workboat", "work boat", "arbeidsbat", "supply", "tug")),
)

# Production areas along the coast, south to north: (upper latitude bound, area id).
# Above 70°N the coast runs east-west, so areas 12/13 split on longitude instead.
_PRODUCTION_AREA_BANDS: tuple[tuple[float, int], ...] = (
    (59.0, 1),
    (59.5, 2),
    (60.5, 3),
    (62.2, 4),
    (63.0, 5),
    (64.3, 6),
    (65.2, 7),
    (67.3, 8),
    (68.9, 9),
    (69.5, 10),
    (70.0, 11),
)
_FINNMARK_SPLIT_LNG = 24.0


# --- Shared helpers ---


def unwrap_records(payload: Any) -> list[dict]:
    """Return the record list from a bare array or a paginated ``items``/``data`` object.

    Raises:
        ValueError: payload has no recognisable record list.
    """
    if isinstance(payload, dict):
        for key in ("items", "data"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
    if not isinstance(payload, list):
        raise ValueError(f"Unexpected feed payload type: {type(payload).__name__}")
    return [r for r in payload if isinstance(r, dict)]


def _first(record: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _to_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "ja", "1"):
            return True
        if lowered in ("false", "no", "nei", "0"):
            return False
    return None


def _to_identifier(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def infer_region_id(lat: float, lng: float) -> int:
    """Best-guess production area (1–13) from a coastal coordinate."""
    for max_lat, area_id in _PRODUCTION_AREA_BANDS:
        if lat < max_lat:
            return area_id
    return 13 if lng >= _FINNMARK_SPLIT_LNG else 12


def _parse_disease_code(value: Any) -> DiseaseCodeEnum | None:
    if value is None:
        return None
    try:
        return DiseaseCodeEnum(str(value).strip().upper())
    except ValueError:
        return None


# --- Sites ---


def map_site_record(record: dict, corrector: PositionCorrector) -> Site | None:
    """Map one raw site record onto a corrected ``Site``.

    Returns None if latitude, longitude or locality identifier is missing or
    unusable.
    """
    site_id = _to_identifier(_first(record, _SITE_ID_KEYS))
    raw_lat = _to_float(_first(record, _LAT_KEYS))
    raw_lng = _to_float(_first(record, _LNG_KEYS))
    if site_id is None or raw_lat is None or raw_lng is None:
        logger.debug("Dropping site record without id/position: %s", record)
        return None
    if not (-90 <= raw_lat <= 90) or not (-180 <= raw_lng <= 180):
        logger.debug("Dropping site %s: coordinate out of range (%s, %s)", site_id, raw_lat, raw_lng)
        return None

    lat, lng = corrector.correct(raw_lat, raw_lng)

    region_id = _to_float(_first(record, _REGION_KEYS))
    if region_id is None or not region_id.is_integer() or not (1 <= region_id <= 13):
        region_id = infer_region_id(raw_lat, raw_lng)

    load = _to_float(_first(record, _LOAD_KEYS))
    name = _first(record, _SITE_NAME_KEYS)

    try:
        return Site(
            id=site_id,
            name=str(name).strip() if name is not None else f"Lokalitet {site_id}",
            region_id=int(region_id),
            lat=lat,
            lng=lng,
            parasite_load=max(0.0, load) if load is not None else 0.0,
            water_temp=_to_float(_first(record, _TEMP_KEYS)),
            salinity=_to_float(_first(record, _SALINITY_KEYS)),
            load_increasing=bool(_to_bool(_first(record, _LOAD_INCREASE_KEYS))),
            nearby_high_load_neighbor=bool(_to_bool(_first(record, _NEIGHBOR_KEYS))),
            current_direction=_to_float(_first(record, _CURRENT_DIR_KEYS)),
            current_speed=_to_float(_first(record, _CURRENT_SPEED_KEYS)),
            chlorophyll=_to_float(_first(record, _CHLOROPHYLL_KEYS)),
            forced_cull=_to_bool(_first(record, _CULL_KEYS)),
            disease_code=_parse_disease_code(_first(record, _DISEASE_KEYS)),
            in_quarantine=_to_bool(_first(record, _QUARANTINE_KEYS)),
        )
    except ValidationError as exc:
        logger.debug("Dropping site %s: %s", site_id, exc)
        return None


def build_sites(records: list[dict], corrector: PositionCorrector) -> list[Site]:
    """Map every record, keeping the first occurrence of each locality id."""
    sites: list[Site] = []
    seen: set[str] = set()
    dropped = 0
    for record in records:
        site = map_site_record(record, corrector)
        if site is None or site.id in seen:
            dropped += 1
            continue
        seen.add(site.id)
        sites.append(site)
    if dropped:
        logger.info("Site feed: kept %d records, dropped %d", len(sites), dropped)
    return sites


# --- Vessels ---


def infer_vessel_type(ship_type: Any) -> VesselTypeEnum:
    """Classify free-text ship type by keyword; accents folded (brønnbåt → bronnbat)."""
    if ship_type is None:
        return VesselTypeEnum.UNKNOWN
    text = unidecode(str(ship_type)).casefold()
    for vessel_type, keywords in _VESSEL_TYPE_KEYWORDS:
        if any(kw in text for kw in keywords):
            return vessel_type
    return VesselTypeEnum.UNKNOWN


def map_vessel_record(
    record: dict,
    zone_check: Callable[[float, float], bool] | None = None,
) -> Vessel | None:
    """Map one raw AIS record onto a ``Vessel``.

    When the feed carries no risk-zone flag, *zone_check(lat, lng)* decides it.
    """
    vessel_id = _to_identifier(_first(record, _VESSEL_ID_KEYS))
    lat = _to_float(_first(record, _LAT_KEYS))
    lng = _to_float(_first(record, _LNG_KEYS))
    if vessel_id is None or lat is None or lng is None:
        return None
    # AIS "not available" sentinels
    if lat == 91.0 or lng == 181.0:
        return None

    heading = _to_float(_first(record, _HEADING_KEYS))
    if heading is not None and heading >= 360.0:
        heading = None  # 511 = not available
    speed = _to_float(_first(record, _SPEED_KEYS))
    if speed is not None and speed >= 102.2:
        speed = None

    passed = _to_bool(_first(record, _RISK_ZONE_KEYS))
    if passed is None:
        passed = bool(zone_check(lat, lng)) if zone_check is not None else False

    name = _first(record, _VESSEL_NAME_KEYS)
    try:
        return Vessel(
            id=vessel_id,
            name=str(name).strip() if name is not None else "",
            type=infer_vessel_type(_first(record, _SHIP_TYPE_KEYS)),
            lat=lat,
            lng=lng,
            heading=heading if heading is not None else 0.0,
            speed_knots=speed if speed is not None else 0.0,
            passed_risk_zone=passed,
        )
    except ValidationError as exc:
        logger.debug("Dropping vessel %s: %s", vessel_id, exc)
        return None


def build_vessels(
    records: list[dict],
    zone_check: Callable[[float, float], bool] | None = None,
) -> list[Vessel]:
    vessels = [v for v in (map_vessel_record(r, zone_check) for r in records) if v is not None]
    if len(vessels) < len(records):
        logger.info("Vessel feed: kept %d records, dropped %d", len(vessels), len(records) - len(vessels))
    return vessels

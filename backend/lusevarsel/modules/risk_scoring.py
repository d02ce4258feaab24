"""Risk scoring engine.

Three layered scores per site, each an integer in [1, 10]:

  current     — lice load and water temperature at the site itself
  predictive  — current + disease/quarantine/algae state + exposure to diseased
                neighbours (~30 km), upstream neighbours and risk-zone vessels
  future      — predictive + a 1–2 week horizon: thermal growth window and
                wider (~50 km) disease and vessel exposure

Every rule adds a fixed, non-negative number of points, so predictive >= current
and future >= predictive always hold, and each point can be traced back to one
rule via the ``compute_*_breakdown`` functions. Weights come from
config/risk_scoring.yaml; the built-in defaults below are used for anything the
file does not set.

Distances are unprojected degree-Euclidean (flat earth). That is good enough at
the scale of a production area but stretches east-west reach at high latitude.
"""
from __future__ import annotations

import copy
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Sequence

import yaml

from lusevarsel.config import settings
from lusevarsel.models.base import RiskColorEnum, RiskLevelEnum
from lusevarsel.schemas.risk import RiskReading, SiteAssessment
from lusevarsel.schemas.site import Site
from lusevarsel.schemas.vessel import Vessel
from lusevarsel.utils.geo import angle_difference, degree_distance, initial_bearing_deg

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10

_DEFAULT_CONFIG: dict[str, dict[str, float]] = {
    "current": {
        "load_multiplier": 10,
        "warm_water_above_c": 8,
        "warm_water_points": 2,
        "high_load_above": 0.5,
        "high_load_points": 2,
    },
    "predictive": {
        "disease_points": 3,
        "quarantine_points": 2,
        "algae_points": 2,
        "neighbor_radius_deg": 0.27,
        "diseased_neighbor_points": 2,
        "upstream_cone_deg": 45,
        "upstream_neighbor_points": 1.5,
        "risk_vessel_points": 1.5,
    },
    "future": {
        "thermal_optimum_min_c": 7,
        "thermal_optimum_max_c": 15,
        "thermal_optimum_points": 2,
        "warm_stress_points": 1,
        "neighbor_radius_deg": 0.5,
        "max_diseased_neighbor_points": 3,
        "risk_vessel_points": 1,
    },
    "score_bands": {
        "critical": 8,
        "high": 6,
        "medium": 4,
    },
}

_LEVEL_COLORS: dict[RiskLevelEnum, RiskColorEnum] = {
    RiskLevelEnum.CRITICAL: RiskColorEnum.RED,
    RiskLevelEnum.HIGH: RiskColorEnum.ORANGE,
    RiskLevelEnum.MEDIUM: RiskColorEnum.YELLOW,
    RiskLevelEnum.LOW: RiskColorEnum.GREEN,
}

_SCORING_CONFIG: dict[str, Any] | None = None


def _config_path() -> Path:
    if settings.RISK_SCORING_CONFIG:
        return Path(settings.RISK_SCORING_CONFIG)
    # config/ is at repo root (one level above backend/)
    return Path(__file__).resolve().parents[3] / "config" / "risk_scoring.yaml"


def load_scoring_config() -> dict[str, Any]:
    """Lazy-load risk_scoring.yaml, layered over the built-in defaults."""
    global _SCORING_CONFIG
    if _SCORING_CONFIG is None:
        config = copy.deepcopy(_DEFAULT_CONFIG)
        config_path = _config_path()
        if not config_path.exists():
            logger.warning("risk_scoring.yaml not found at %s — using built-in weights", config_path)
        else:
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
            missing = [s for s in _DEFAULT_CONFIG if s not in loaded]
            if missing:
                logger.warning("risk_scoring.yaml missing sections: %s", ", ".join(missing))
            for section, values in loaded.items():
                if section not in config or not isinstance(values, dict):
                    logger.warning("risk_scoring.yaml: ignoring unknown section '%s'", section)
                    continue
                for key, val in values.items():
                    if isinstance(val, bool) or not isinstance(val, (int, float)) or val < 0:
                        logger.warning(
                            "risk_scoring.yaml %s.%s=%r is not a non-negative number — keeping default",
                            section, key, val,
                        )
                        continue
                    config[section][key] = val
        _SCORING_CONFIG = config
    return _SCORING_CONFIG


def reload_scoring_config() -> dict[str, Any]:
    """Force-reload scoring config from disk (e.g. after YAML edits)."""
    global _SCORING_CONFIG
    _SCORING_CONFIG = None
    return load_scoring_config()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp_score(value: float) -> int:
    return min(MAX_SCORE, max(MIN_SCORE, _round_half_up(value)))


def _finish(breakdown: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    subtotal = sum(v for k, v in breakdown.items() if not k.startswith("_"))
    final_score = _clamp_score(subtotal)
    breakdown["_additive_subtotal"] = round(subtotal, 4)
    breakdown["_final_score"] = final_score
    return final_score, breakdown


# ── Spatial helpers ──────────────────────────────────────────────────────────


def _neighbors_within(site: Site, sites: Iterable[Site], radius_deg: float) -> list[Site]:
    """Other sites strictly closer than *radius_deg* (degree distance)."""
    return [
        other for other in sites
        if other.id != site.id
        and degree_distance(site.lat, site.lng, other.lat, other.lng) < radius_deg
    ]


def _risk_vessels_within(site: Site, vessels: Iterable[Vessel], radius_deg: float) -> list[Vessel]:
    return [
        v for v in vessels
        if v.passed_risk_zone
        and degree_distance(site.lat, site.lng, v.lat, v.lng) < radius_deg
    ]


def _is_upstream(site: Site, neighbor: Site, cone_deg: float) -> bool:
    """True when *neighbor* lies in the direction the site's current comes from.

    ``current_direction`` is the bearing the water arrives from, so a
    neighbour inside that cone is shedding water (and lice) onto the site.
    """
    if site.current_direction is None:
        return False
    bearing = initial_bearing_deg(site.lat, site.lng, neighbor.lat, neighbor.lng)
    return angle_difference(bearing, site.current_direction) <= cone_deg


# ── Current score ────────────────────────────────────────────────────────────


def compute_current_breakdown(site: Site, config: dict | None = None) -> tuple[int, dict[str, Any]]:
    """Current score from the site's own measurements.

    The flat load term and the high-load bonus both key off ``parasite_load``;
    the overlap is kept until the product owner rules on it.
    """
    cfg = (config or load_scoring_config())["current"]
    breakdown: dict[str, Any] = {"parasite_load": site.parasite_load * cfg["load_multiplier"]}

    if site.water_temp is not None and site.water_temp > cfg["warm_water_above_c"]:
        breakdown["warm_water"] = cfg["warm_water_points"]
    if site.parasite_load > cfg["high_load_above"]:
        breakdown["high_load"] = cfg["high_load_points"]

    return _finish(breakdown)


def score_current(site: Site) -> int:
    return compute_current_breakdown(site)[0]


# ── Predictive score ─────────────────────────────────────────────────────────


def compute_predictive_breakdown(
    site: Site,
    sites: Sequence[Site],
    vessels: Sequence[Vessel],
    config: dict | None = None,
) -> tuple[int, dict[str, Any]]:
    config = config or load_scoring_config()
    cfg = config["predictive"]
    current, _ = compute_current_breakdown(site, config)
    breakdown: dict[str, Any] = {"current_score": current}

    if site.disease_code is not None:
        breakdown["disease"] = cfg["disease_points"]
    if site.in_quarantine:
        breakdown["quarantine"] = cfg["quarantine_points"]
    if site.has_algae_risk:
        breakdown["algae"] = cfg["algae_points"]

    diseased = [
        n for n in _neighbors_within(site, sites, cfg["neighbor_radius_deg"])
        if n.disease_code is not None
    ]
    if diseased:
        breakdown["diseased_neighbors"] = len(diseased) * cfg["diseased_neighbor_points"]
        upstream = [n for n in diseased if _is_upstream(site, n, cfg["upstream_cone_deg"])]
        if upstream:
            breakdown["upstream_diseased_neighbors"] = len(upstream) * cfg["upstream_neighbor_points"]

    risk_vessels = _risk_vessels_within(site, vessels, cfg["neighbor_radius_deg"])
    if risk_vessels:
        breakdown["risk_zone_vessels"] = len(risk_vessels) * cfg["risk_vessel_points"]

    return _finish(breakdown)


def score_predictive(site: Site, sites: Sequence[Site], vessels: Sequence[Vessel]) -> int:
    return compute_predictive_breakdown(site, sites, vessels)[0]


# ── Future (1–2 week) score ──────────────────────────────────────────────────


def compute_future_breakdown(
    site: Site,
    sites: Sequence[Site],
    vessels: Sequence[Vessel],
    config: dict | None = None,
) -> tuple[int, dict[str, Any]]:
    """Predictive score projected 1–2 weeks ahead.

    Vessels count 1 point each here, not the 1.5 used by the predictive score.
    Both weights are kept as they are until the product owner settles whether
    the difference is intended.
    """
    config = config or load_scoring_config()
    cfg = config["future"]
    predictive, _ = compute_predictive_breakdown(site, sites, vessels, config)
    breakdown: dict[str, Any] = {"predictive_score": predictive}

    temp = site.water_temp
    if temp is not None:
        if cfg["thermal_optimum_min_c"] <= temp <= cfg["thermal_optimum_max_c"]:
            breakdown["thermal_optimum"] = cfg["thermal_optimum_points"]
        elif temp > cfg["thermal_optimum_max_c"]:
            breakdown["warm_stress"] = cfg["warm_stress_points"]

    diseased_count = sum(
        1 for n in _neighbors_within(site, sites, cfg["neighbor_radius_deg"])
        if n.disease_code is not None
    )
    if diseased_count:
        breakdown["regional_disease_spread"] = min(cfg["max_diseased_neighbor_points"], diseased_count)

    risk_vessels = _risk_vessels_within(site, vessels, cfg["neighbor_radius_deg"])
    if risk_vessels:
        breakdown["regional_risk_vessels"] = len(risk_vessels) * cfg["risk_vessel_points"]

    return _finish(breakdown)


def score_future(site: Site, sites: Sequence[Site], vessels: Sequence[Vessel]) -> int:
    return compute_future_breakdown(site, sites, vessels)[0]


# ── Classification ───────────────────────────────────────────────────────────


def risk_level(score: int) -> RiskLevelEnum:
    """Map a 1–10 score to its level.

    Default bands (config score_bands):
      critical  8–10
      high      6–7
      medium    4–5
      low       1–3
    """
    bands = load_scoring_config()["score_bands"]
    if score >= bands["critical"]:
        return RiskLevelEnum.CRITICAL
    if score >= bands["high"]:
        return RiskLevelEnum.HIGH
    if score >= bands["medium"]:
        return RiskLevelEnum.MEDIUM
    return RiskLevelEnum.LOW


def risk_color(level: RiskLevelEnum) -> RiskColorEnum:
    return _LEVEL_COLORS[RiskLevelEnum(level)]


def reading_for(score: int) -> RiskReading:
    level = risk_level(score)
    return RiskReading(score=score, level=level, color=risk_color(level))


def assess_site(site: Site, sites: Sequence[Site], vessels: Sequence[Vessel]) -> SiteAssessment:
    """Build the presentation contract for one site across all three horizons."""
    config = load_scoring_config()
    current, _ = compute_current_breakdown(site, config)
    predictive, _ = compute_predictive_breakdown(site, sites, vessels, config)
    future, breakdown = compute_future_breakdown(site, sites, vessels, config)
    logger.debug("Site %s scored %d/%d/%d: %s", site.id, current, predictive, future, breakdown)
    return SiteAssessment(
        site_id=site.id,
        name=site.name,
        region_id=site.region_id,
        lat=site.lat,
        lng=site.lng,
        current=reading_for(current),
        predictive=reading_for(predictive),
        future=reading_for(future),
    )


def assess_sites(sites: Sequence[Site], vessels: Sequence[Vessel]) -> list[SiteAssessment]:
    return [assess_site(site, sites, vessels) for site in sites]


def sort_by_current_score(sites: Iterable[Site]) -> list[Site]:
    """Highest current score first; stable for ties."""
    return sorted(sites, key=score_current, reverse=True)

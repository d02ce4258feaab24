"""Tests for feed record mapping: sites, vessels, and payload unwrapping."""
from __future__ import annotations

import pytest

from lusevarsel.models.base import DiseaseCodeEnum, VesselTypeEnum
from lusevarsel.modules.normalize import (
    build_sites,
    build_vessels,
    infer_region_id,
    infer_vessel_type,
    map_site_record,
    map_vessel_record,
    unwrap_records,
)
from lusevarsel.modules.position_corrector import PositionCorrector


@pytest.fixture
def corrector():
    return PositionCorrector()


class TestUnwrapRecords:
    def test_bare_array(self):
        assert unwrap_records([{"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]

    @pytest.mark.parametrize("key", ["items", "data"])
    def test_paginated_object(self, key):
        assert unwrap_records({key: [{"a": 1}], "total": 1}) == [{"a": 1}]

    def test_non_dict_entries_skipped(self):
        assert unwrap_records([{"a": 1}, "junk", 3, None]) == [{"a": 1}]

    @pytest.mark.parametrize("payload", [{"results": []}, "text", 42, None])
    def test_unrecognised_payload_raises(self, payload):
        with pytest.raises(ValueError):
            unwrap_records(payload)


class TestMapSiteRecord:
    def test_minimal_record(self, corrector):
        site = map_site_record({"lat": 60.9, "lng": 8.5, "localityNo": "42"}, corrector)
        assert site is not None
        assert site.id == "42"
        assert site.position == corrector.correct(60.9, 8.5)
        assert site.position != (60.9, 8.5)
        assert site.parasite_load == 0.0
        assert site.name == "Lokalitet 42"

    def test_aliases(self, corrector):
        site = map_site_record({
            "latitude": "63.1",
            "longitude": 7.8,
            "localityId": 13579.0,
            "localityName": "Flatøya",
            "avgAdultFemaleLice": 0.31,
            "seaTemperature": 9.4,
            "productionAreaId": 6,
            "diseaseCode": "b",
            "quarantine": "ja",
            "chlorophyllA": 11.2,
            "forcedSlaughter": 0,
        }, corrector)
        assert site.id == "13579"
        assert site.name == "Flatøya"
        assert site.parasite_load == pytest.approx(0.31)
        assert site.water_temp == pytest.approx(9.4)
        assert site.region_id == 6
        assert site.disease_code == DiseaseCodeEnum.B
        assert site.in_quarantine is True
        assert site.has_algae_risk is True
        assert site.forced_cull is False

    @pytest.mark.parametrize("record", [
        {"lng": 8.5, "localityNo": "1"},
        {"lat": 60.9, "localityNo": "1"},
        {"lat": 60.9, "lng": 8.5},
        {"lat": "north", "lng": 8.5, "localityNo": "1"},
        {"lat": 60.9, "lng": 8.5, "localityNo": ""},
        {"lat": 95.0, "lng": 8.5, "localityNo": "1"},
        {"lat": 60.9, "lng": float("nan"), "localityNo": "1"},
    ])
    def test_unusable_records_dropped(self, corrector, record):
        assert map_site_record(record, corrector) is None

    def test_region_inferred_when_missing(self, corrector):
        site = map_site_record({"lat": 60.9, "lng": 8.5, "localityNo": "42"}, corrector)
        assert site.region_id == infer_region_id(60.9, 8.5) == 4

    def test_region_inferred_when_out_of_range(self, corrector):
        site = map_site_record({"lat": 68.0, "lng": 13.5, "localityNo": "7", "regionId": 99}, corrector)
        assert site.region_id == 9

    def test_negative_load_floored(self, corrector):
        site = map_site_record({"lat": 60.0, "lng": 5.0, "localityNo": "1", "adultFemaleLice": -0.2}, corrector)
        assert site.parasite_load == 0.0

    def test_unknown_disease_code_ignored(self, corrector):
        site = map_site_record({"lat": 60.0, "lng": 5.0, "localityNo": "1", "diseaseCode": "ILA"}, corrector)
        assert site.disease_code is None


class TestInferRegion:
    @pytest.mark.parametrize("lat,lng,region", [
        (58.5, 7.0, 1),
        (59.3, 5.5, 2),
        (60.0, 5.5, 3),
        (61.0, 5.0, 4),
        (62.5, 6.5, 5),
        (63.5, 9.0, 6),
        (64.8, 11.0, 7),
        (66.0, 12.5, 8),
        (68.0, 14.0, 9),
        (69.2, 17.5, 10),
        (69.7, 19.0, 11),
        (70.3, 22.5, 12),
        (70.5, 29.0, 13),
    ])
    def test_bands(self, lat, lng, region):
        assert infer_region_id(lat, lng) == region


class TestBuildSites:
    def test_drops_bad_and_duplicate_records(self, corrector):
        records = [
            {"lat": 60.0, "lng": 5.0, "localityNo": "1"},
            {"lat": 60.1, "lng": 5.1, "localityNo": "1"},
            {"lng": 5.0, "localityNo": "2"},
            {"lat": 61.0, "lng": 5.0, "localityNo": "3"},
        ]
        sites = build_sites(records, corrector)
        assert [s.id for s in sites] == ["1", "3"]


class TestInferVesselType:
    @pytest.mark.parametrize("text,expected", [
        ("Brønnbåt", VesselTypeEnum.WELL_BOAT),
        ("WELL BOAT", VesselTypeEnum.WELL_BOAT),
        ("Service / wellboat", VesselTypeEnum.WELL_BOAT),
        ("Cable layer", VesselTypeEnum.CABLE),
        ("FISHING VESSEL", VesselTypeEnum.FISHING),
        ("Stern trawler", VesselTypeEnum.FISHING),
        ("Arbeidsbåt", VesselTypeEnum.SERVICE),
        ("Offshore supply", VesselTypeEnum.SERVICE),
        ("Tanker", VesselTypeEnum.UNKNOWN),
        ("", VesselTypeEnum.UNKNOWN),
        (None, VesselTypeEnum.UNKNOWN),
    ])
    def test_keyword_match(self, text, expected):
        assert infer_vessel_type(text) == expected


class TestMapVesselRecord:
    def test_ais_record(self):
        vessel = map_vessel_record({
            "mmsi": 257123450,
            "shipName": "RONJA STORM",
            "shipType": "Wellboat",
            "latitude": 60.3,
            "longitude": 5.9,
            "trueHeading": 370,
            "speedOverGround": 11.2,
            "passedRiskZone": True,
        })
        assert vessel.id == "257123450"
        assert vessel.type == VesselTypeEnum.WELL_BOAT
        assert vessel.heading == 0.0  # 370 is not a valid heading
        assert vessel.speed_knots == pytest.approx(11.2)
        assert vessel.passed_risk_zone is True

    def test_zone_check_used_when_flag_absent(self):
        record = {"id": "v1", "lat": 60.2, "lng": 6.0}
        assert map_vessel_record(record, lambda lat, lng: True).passed_risk_zone is True
        assert map_vessel_record(record, lambda lat, lng: False).passed_risk_zone is False
        assert map_vessel_record(record).passed_risk_zone is False

    def test_feed_flag_wins_over_zone_check(self):
        record = {"id": "v1", "lat": 60.2, "lng": 6.0, "passedRiskZone": False}
        assert map_vessel_record(record, lambda lat, lng: True).passed_risk_zone is False

    @pytest.mark.parametrize("record", [
        {"lat": 60.0, "lng": 5.0},
        {"id": "v1", "lng": 5.0},
        {"id": "v1", "lat": 91.0, "lng": 181.0},
    ])
    def test_unusable_records_dropped(self, record):
        assert map_vessel_record(record) is None

    def test_build_vessels(self):
        vessels = build_vessels([{"id": "a", "lat": 60, "lng": 5}, {"id": "b"}])
        assert [v.id for v in vessels] == ["a"]

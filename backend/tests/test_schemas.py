"""Tests for the Site and Vessel records."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import make_site, make_vessel
from lusevarsel.models.base import DiseaseCodeEnum


class TestSite:
    def test_immutable(self):
        site = make_site()
        with pytest.raises(ValidationError):
            site.parasite_load = 2.0

    @pytest.mark.parametrize("region_id", [0, 14])
    def test_region_range(self, region_id):
        with pytest.raises(ValidationError):
            make_site(region_id=region_id)

    def test_negative_load_rejected(self):
        with pytest.raises(ValidationError):
            make_site(parasite_load=-0.1)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            make_site(site_id="")

    def test_disease_code_enum(self):
        assert make_site(disease_code="C").disease_code == DiseaseCodeEnum.C
        with pytest.raises(ValidationError):
            make_site(disease_code="D")

    def test_algae_risk_derived(self):
        assert make_site(chlorophyll=10.5).has_algae_risk
        assert not make_site(chlorophyll=None).has_algae_risk

    def test_position(self):
        assert make_site(lat=61.2, lng=4.9).position == (61.2, 4.9)


class TestVessel:
    @pytest.mark.parametrize("heading,expected", [(0, 0), (359, 359), (360, 0), (-90, 270)])
    def test_heading_normalised(self, heading, expected):
        assert make_vessel(heading=heading).heading == expected

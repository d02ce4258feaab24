"""Tests for the latitude-banded seaward position corrector."""
from __future__ import annotations

import math

import pytest

from lusevarsel.modules.position_corrector import (
    BEARING_JITTER_DEG,
    LATITUDE_BANDS,
    MAX_OFFSET_M,
    MIN_OFFSET_M,
    PositionCorrector,
    band_for_latitude,
    correct_position,
)
from lusevarsel.utils.geo import angle_difference, haversine_meters, initial_bearing_deg


class TestBands:
    def test_eight_bands(self):
        assert len(LATITUDE_BANDS) == 8

    @pytest.mark.parametrize("lat,bearing", [
        (57.5, 225.0),
        (58.99, 225.0),
        (59.0, 250.0),
        (60.9, 270.0),
        (63.0, 295.0),
        (64.0, 320.0),
        (66.0, 345.0),
        (68.0, 15.0),
        (69.0, 45.0),
        (80.0, 45.0),
    ])
    def test_band_bearing(self, lat, bearing):
        assert band_for_latitude(lat).bearing_deg == bearing

    def test_magnitude_decreases_northward(self):
        offsets = [b.offset_m for b in LATITUDE_BANDS]
        assert offsets == sorted(offsets, reverse=True)

    def test_bearings_rotate_clockwise_sw_to_ne(self):
        # Unwrap past north so the rotation is monotonic
        unwrapped = [b.bearing_deg if b.bearing_deg >= 180 else b.bearing_deg + 360 for b in LATITUDE_BANDS]
        assert unwrapped == sorted(unwrapped)
        assert LATITUDE_BANDS[0].bearing_deg == 225.0
        assert LATITUDE_BANDS[-1].bearing_deg == 45.0


class TestDeterminism:
    def test_same_input_same_output(self):
        corrector = PositionCorrector()
        assert corrector.correct(60.9, 8.5) == corrector.correct(60.9, 8.5)

    def test_independent_instances_agree(self):
        assert PositionCorrector("x").correct(63.4, 10.4) == PositionCorrector("x").correct(63.4, 10.4)

    def test_module_helper_matches_default_instance(self):
        assert correct_position(68.2, 14.1) == PositionCorrector().correct(68.2, 14.1)

    def test_seed_changes_result(self):
        assert PositionCorrector("a").correct(60.9, 8.5) != PositionCorrector("b").correct(60.9, 8.5)

    def test_colocated_inputs_do_not_snap_to_one_vector(self):
        corrector = PositionCorrector()
        bearings = {round(corrector.offset_for(60.9 + i * 0.001, 8.5)[0], 3) for i in range(20)}
        assert len(bearings) > 1


class TestOffset:
    @pytest.mark.parametrize("lat,lng", [
        (58.1, 6.6), (59.3, 5.3), (60.9, 8.5), (62.5, 6.1),
        (64.0, 10.0), (66.0, 12.5), (68.2, 14.1), (70.5, 29.0),
    ])
    def test_output_differs_and_distance_in_range(self, lat, lng):
        new_lat, new_lng = correct_position(lat, lng)
        assert (new_lat, new_lng) != (lat, lng)
        distance = haversine_meters(lat, lng, new_lat, new_lng)
        # 111 320 m/deg vs the haversine mean radius differ by ~0.1%
        assert MIN_OFFSET_M * 0.99 <= distance <= MAX_OFFSET_M * 1.01

    @pytest.mark.parametrize("lat,lng", [(58.1, 6.6), (60.9, 8.5), (64.0, 10.0), (70.5, 29.0)])
    def test_bearing_within_band_jitter(self, lat, lng):
        band = band_for_latitude(lat)
        bearing, _ = PositionCorrector().offset_for(lat, lng)
        assert angle_difference(bearing, band.bearing_deg) <= BEARING_JITTER_DEG

    def test_applied_direction_matches_offset_bearing(self):
        corrector = PositionCorrector()
        bearing, _ = corrector.offset_for(60.9, 8.5)
        new_lat, new_lng = corrector.correct(60.9, 8.5)
        actual = initial_bearing_deg(60.9, 8.5, new_lat, new_lng)
        assert angle_difference(actual, bearing) < 1.0

    def test_longitude_scaled_by_cosine(self):
        # Same bearing and distance at 70°N needs ~2.9x the longitude delta of 0°N
        corrector = PositionCorrector()
        _, distance = corrector.offset_for(70.0, 20.0)
        new_lat, new_lng = corrector.correct(70.0, 20.0)
        assert haversine_meters(70.0, 20.0, new_lat, new_lng) == pytest.approx(distance, rel=0.01)

    def test_polar_input_stays_total(self):
        new_lat, new_lng = correct_position(89.999, 0.0)
        assert -90.0 <= new_lat <= 90.0
        assert -180.0 <= new_lng < 180.0

    def test_longitude_wraps_at_antimeridian(self):
        _, new_lng = correct_position(75.0, 179.9999)
        assert -180.0 <= new_lng < 180.0

    @pytest.mark.parametrize("lat,lng", [(math.nan, 5.0), (60.0, math.inf), (-math.inf, 0.0)])
    def test_non_finite_input_rejected(self, lat, lng):
        with pytest.raises(ValueError):
            correct_position(lat, lng)

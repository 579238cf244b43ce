"""Tests for geographic primitives."""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from wayfinder.models.geometry import (
    LatLng,
    bearing,
    bearing_delta,
    haversine,
    haversine_many,
    polyline_length,
)

# 0.001 degree of arc on a 6 371 km sphere
MILLIDEGREE_M = 2 * math.pi * 6_371_000 / 360 * 0.001


class TestLatLng:
    def test_create(self):
        p = LatLng(lat=33.97, lon=-117.33)
        assert p.lat == 33.97
        assert p.lon == -117.33

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError):
            LatLng(lat=91.0, lon=0.0)

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError):
            LatLng(lat=0.0, lon=-181.0)

    def test_equality_tolerance(self):
        assert LatLng(lat=1.0, lon=2.0) == LatLng(lat=1.0 + 1e-12, lon=2.0)

    def test_inequality(self):
        assert LatLng(lat=1.0, lon=2.0) != LatLng(lat=1.0, lon=2.0001)

    def test_hash_equal_points(self):
        p1 = LatLng(lat=1.0, lon=2.0)
        p2 = LatLng(lat=1.0, lon=2.0)
        assert len({p1, p2}) == 1

    def test_hash_agrees_with_equality(self):
        p1 = LatLng(lat=1.0, lon=2.0)
        p2 = LatLng(lat=1.0 + 1e-12, lon=2.0 - 1e-12)
        assert p1 == p2
        assert hash(p1) == hash(p2)
        assert {p1: "a"}[p2] == "a"

    def test_frozen(self):
        p = LatLng(lat=1.0, lon=2.0)
        with pytest.raises(ValidationError):
            p.lat = 3.0

    def test_distance_to(self):
        a = LatLng(lat=0.0, lon=0.0)
        b = LatLng(lat=0.0, lon=0.001)
        assert a.distance_to(b) == pytest.approx(MILLIDEGREE_M, rel=1e-9)


class TestHaversine:
    def test_zero(self):
        assert haversine(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_along_equator(self):
        assert haversine(0.0, 0.0, 0.0, 0.001) == pytest.approx(MILLIDEGREE_M, rel=1e-9)

    def test_along_meridian(self):
        assert haversine(0.0, 0.0, 0.001, 0.0) == pytest.approx(MILLIDEGREE_M, rel=1e-9)

    def test_longitude_shrinks_with_latitude(self):
        assert haversine(60.0, 0.0, 60.0, 0.001) == pytest.approx(MILLIDEGREE_M / 2, rel=1e-3)

    def test_symmetric(self):
        assert haversine(33.9, -117.3, 34.0, -117.2) == pytest.approx(
            haversine(34.0, -117.2, 33.9, -117.3)
        )

    def test_vectorized_matches_scalar(self):
        lats = np.array([0.0, 0.001, 33.97])
        lons = np.array([0.001, 0.0, -117.33])
        many = haversine_many(0.0, 0.0, lats, lons)
        for i in range(3):
            assert many[i] == pytest.approx(haversine(0.0, 0.0, lats[i], lons[i]))


class TestBearing:
    @pytest.mark.parametrize(
        "lat2, lon2, expected",
        [(0.001, 0.0, 0.0), (0.0, 0.001, 90.0), (-0.001, 0.0, 180.0), (0.0, -0.001, 270.0)],
    )
    def test_cardinal_directions(self, lat2, lon2, expected):
        assert bearing(0.0, 0.0, lat2, lon2) == pytest.approx(expected, abs=1e-6)

    def test_range(self):
        b = bearing(0.0, 0.0, 0.001, -0.001)
        assert 0.0 <= b < 360.0
        assert b == pytest.approx(315.0, abs=0.01)

    def test_delta_right_is_positive(self):
        assert bearing_delta(90.0, 180.0) == pytest.approx(90.0)

    def test_delta_left_is_negative(self):
        assert bearing_delta(90.0, 0.0) == pytest.approx(-90.0)

    def test_delta_wraps_through_north(self):
        assert bearing_delta(350.0, 10.0) == pytest.approx(20.0)
        assert bearing_delta(10.0, 350.0) == pytest.approx(-20.0)

    def test_delta_reversal(self):
        assert bearing_delta(0.0, 180.0) == pytest.approx(180.0)


class TestPolylineLength:
    def test_empty_and_single(self):
        assert polyline_length([]) == 0.0
        assert polyline_length([LatLng(lat=0.0, lon=0.0)]) == 0.0

    def test_sum_of_segments(self):
        points = [
            LatLng(lat=0.0, lon=0.0),
            LatLng(lat=0.0, lon=0.001),
            LatLng(lat=0.001, lon=0.001),
        ]
        expected = points[0].distance_to(points[1]) + points[1].distance_to(points[2])
        assert polyline_length(points) == pytest.approx(expected)

    def test_many_short_segments_match_straight_line(self):
        points = [LatLng(lat=0.0, lon=i * 0.000001) for i in range(1001)]
        straight = points[0].distance_to(points[-1])
        assert polyline_length(points) == pytest.approx(straight, rel=1e-6)

"""Tests for landmark lookups and travel time estimates."""

from datetime import timedelta

import pytest

from wayfinder.generators import generate_sample_campus
from wayfinder.generators.campus import ORIGIN
from wayfinder.models import Campus, LandmarkKind, LatLng
from wayfinder.routing import estimate_travel_time, nearest_landmark


@pytest.fixture(scope="module")
def campus() -> Campus:
    return generate_sample_campus()


def _near_restrooms(dlon: float = 0.0) -> LatLng:
    # Between the two floors' restrooms, which sit 0.0005° apart
    return LatLng(lat=ORIGIN.lat + 0.00146, lon=ORIGIN.lon + 0.0015 + dlon)


class TestNearestLandmark:
    def test_closest_without_floor(self, campus):
        found = nearest_landmark(campus, _near_restrooms(-0.00005), LandmarkKind.RESTROOM)
        assert found.id == "library-0-restroom"

    def test_same_floor_preferred(self, campus):
        found = nearest_landmark(
            campus, _near_restrooms(-0.00005), LandmarkKind.RESTROOM,
            current_floor_id="library-1",
        )
        assert found.id == "library-1-restroom"

    def test_bias_disabled(self, campus):
        found = nearest_landmark(
            campus, _near_restrooms(-0.00005), LandmarkKind.RESTROOM,
            current_floor_id="library-1", same_floor_bias=1.0,
        )
        assert found.id == "library-0-restroom"

    def test_outdoor_kind(self, campus):
        found = nearest_landmark(campus, ORIGIN, LandmarkKind.PARKING)
        assert found.id == "lot-30"

    def test_missing_kind(self, campus):
        assert nearest_landmark(campus, ORIGIN, LandmarkKind.ESCALATOR) is None


class TestTravelTime:
    def test_default_speed(self):
        assert estimate_travel_time(140.0) == timedelta(seconds=100)

    def test_custom_speed(self):
        assert estimate_travel_time(100.0, walking_speed_mps=2.0) == timedelta(seconds=50)

    @pytest.mark.parametrize("speed", [0.0, -1.0])
    def test_rejects_non_positive_speed(self, speed):
        with pytest.raises(ValueError):
            estimate_travel_time(10.0, walking_speed_mps=speed)

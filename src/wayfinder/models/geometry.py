"""Geographic primitives: coordinates, great-circle distance and bearing.

All distances are in meters. Bearings are degrees clockwise from north,
normalized to [0, 360).
"""

from __future__ import annotations

import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

EARTH_RADIUS_M = 6_371_000.0

# Coordinates compare equal when they agree to this many decimal places
# (about 0.1 mm).
COORDINATE_DECIMALS = 9


class LatLng(BaseModel):
    """A WGS84 coordinate (degrees). Immutable and hashable."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(ge=-180.0, le=180.0, description="Longitude in degrees")

    def distance_to(self, other: LatLng) -> float:
        """Haversine distance to another coordinate (meters)."""
        return haversine(self.lat, self.lon, other.lat, other.lon)

    def bearing_to(self, other: LatLng) -> float:
        """Initial great-circle bearing towards another coordinate."""
        return bearing(self.lat, self.lon, other.lat, other.lon)

    def _key(self) -> tuple[float, float]:
        return round(self.lat, COORDINATE_DECIMALS), round(self.lon, COORDINATE_DECIMALS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LatLng):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def haversine_many(
    lat: float, lon: float, lats: np.ndarray, lons: np.ndarray
) -> np.ndarray:
    """Vectorized haversine from one point to arrays of points (degrees in)."""
    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    dphi = phi2 - phi1
    dlmb = np.radians(lons - lon)
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(a)))


def bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from point 1 to point 2 in degrees [0, 360)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlmb = math.radians(lon2 - lon1)
    y = math.sin(dlmb) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlmb)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def bearing_delta(incoming: float, outgoing: float) -> float:
    """Signed turn angle in (-180, 180]; positive turns right."""
    delta = (outgoing - incoming) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def polyline_length(points: list[LatLng]) -> float:
    """Sum of haversine distances along an ordered list of points."""
    return math.fsum(points[i].distance_to(points[i + 1]) for i in range(len(points) - 1))

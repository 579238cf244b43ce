"""Spatial model and geographic primitives."""

from wayfinder.models.ids import generate_id, waypoint_node_id
from wayfinder.models.geometry import (
    EARTH_RADIUS_M,
    LatLng,
    bearing,
    bearing_delta,
    haversine,
    haversine_many,
    polyline_length,
)
from wayfinder.models.spatial import (
    Building,
    Campus,
    Floor,
    Intersection,
    Landmark,
    LandmarkKind,
    Road,
    RoadKind,
    TransitionKind,
)

__all__ = [
    "generate_id",
    "waypoint_node_id",
    "EARTH_RADIUS_M",
    "LatLng",
    "bearing",
    "bearing_delta",
    "haversine",
    "haversine_many",
    "polyline_length",
    "Building",
    "Campus",
    "Floor",
    "Intersection",
    "Landmark",
    "LandmarkKind",
    "Road",
    "RoadKind",
    "TransitionKind",
]

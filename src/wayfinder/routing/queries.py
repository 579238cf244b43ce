"""Convenience lookups built on the spatial model."""

from __future__ import annotations

from datetime import timedelta

from wayfinder.models.geometry import LatLng
from wayfinder.models.spatial import Campus, Landmark, LandmarkKind


def nearest_landmark(
    campus: Campus,
    position: LatLng,
    kind: LandmarkKind,
    current_floor_id: str | None = None,
    same_floor_bias: float = 0.5,
) -> Landmark | None:
    """Closest landmark of `kind` by straight-line distance.

    Landmarks on `current_floor_id` have their distance multiplied by
    `same_floor_bias`, so a restroom on your floor beats one slightly
    closer on the floor above. Ties go to the first landmark in campus
    order.
    """
    best: Landmark | None = None
    best_score = float("inf")
    for _, floor, landmark in campus.iter_landmarks():
        if landmark.kind is not kind:
            continue
        score = position.distance_to(landmark.position)
        if current_floor_id is not None and floor is not None and floor.id == current_floor_id:
            score *= same_floor_bias
        if score < best_score:
            best, best_score = landmark, score
    return best


def estimate_travel_time(distance_m: float, walking_speed_mps: float = 1.4) -> timedelta:
    """Walking time for a distance at a constant speed."""
    if walking_speed_mps <= 0:
        raise ValueError(f"Walking speed must be positive, got {walking_speed_mps}")
    return timedelta(seconds=distance_m / walking_speed_mps)

"""Aggregate network statistics reported alongside validation issues."""

from __future__ import annotations

import math
from collections import Counter
from typing import Any

from wayfinder.graph.network import NavigationGraph
from wayfinder.models.spatial import Campus, LandmarkKind


def network_statistics(
    graph: NavigationGraph,
    campus: Campus,
    components: list[list[str]],
) -> dict[str, Any]:
    """Counts and lengths describing the campus and its graph."""
    stats: dict[str, Any] = dict(graph.statistics())

    indoor = math.fsum(road.length for b, _, road in campus.iter_roads() if b is not None)
    outdoor = math.fsum(road.length for b, _, road in campus.iter_roads() if b is None)
    stats["indoor_road_length_m"] = round(indoor, 2)
    stats["outdoor_road_length_m"] = round(outdoor, 2)
    stats["total_road_length_m"] = round(indoor + outdoor, 2)

    landmarks = [landmark for _, _, landmark in campus.iter_landmarks()]
    kinds = Counter(landmark.kind for landmark in landmarks)
    entrances = [landmark for landmark in landmarks if landmark.kind.is_entrance]

    stats["buildings"] = len(campus.buildings)
    stats["floors"] = sum(len(b.floors) for b in campus.buildings)
    stats["intersections"] = sum(1 for _ in campus.iter_intersections())
    stats["landmarks"] = len(landmarks)
    stats["elevators"] = kinds[LandmarkKind.ELEVATOR]
    stats["stairs"] = kinds[LandmarkKind.STAIRS]
    stats["escalators"] = kinds[LandmarkKind.ESCALATOR]
    stats["vertical_circulation"] = (
        stats["elevators"] + stats["stairs"] + stats["escalators"]
    )
    stats["entrances"] = len(entrances)
    stats["accessible_entrances"] = sum(1 for e in entrances if e.accessible)
    stats["connected_components"] = len(components)
    stats["largest_component_size"] = len(components[0]) if components else 0
    return stats

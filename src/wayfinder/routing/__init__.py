"""Route search, turn-by-turn instructions and landmark lookups."""

from wayfinder.routing.astar import (
    AStarPathfinder,
    CancelCheck,
    FloorTransition,
    PathfindingResult,
    SearchFailure,
    SearchOptions,
    find_path,
    find_path_between_nodes,
)
from wayfinder.routing.instructions import (
    Instruction,
    Maneuver,
    build_instructions,
    classify_turn,
)
from wayfinder.routing.queries import estimate_travel_time, nearest_landmark

__all__ = [
    "AStarPathfinder",
    "CancelCheck",
    "FloorTransition",
    "Instruction",
    "Maneuver",
    "PathfindingResult",
    "SearchFailure",
    "SearchOptions",
    "build_instructions",
    "classify_turn",
    "estimate_travel_time",
    "find_path",
    "find_path_between_nodes",
    "nearest_landmark",
]

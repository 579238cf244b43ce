"""Turn-by-turn instruction synthesis.

Each road edge has an entry bearing (its first segment) and an exit
bearing (its last segment). The signed difference between one edge's exit
and the next edge's entry classifies the maneuver at the shared node.
Straight runs along the same named path are merged into one step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wayfinder.graph.network import GraphEdge, GraphNode, NodeKind
from wayfinder.models.geometry import bearing_delta
from wayfinder.models.spatial import TransitionKind

# Segments shorter than this have no meaningful bearing.
MIN_BEARING_SEGMENT_M = 0.5


class Maneuver(str, Enum):
    DEPART = "depart"
    CONTINUE = "continue"
    TURN_LEFT = "turn-left"
    TURN_RIGHT = "turn-right"
    SHARP_LEFT = "sharp-left"
    SHARP_RIGHT = "sharp-right"
    USE_ELEVATOR = "use-elevator"
    USE_STAIRS = "use-stairs"
    USE_ESCALATOR = "use-escalator"
    ARRIVE = "arrive"


_TURN_TEXT = {
    Maneuver.TURN_LEFT: "Turn left",
    Maneuver.TURN_RIGHT: "Turn right",
    Maneuver.SHARP_LEFT: "Make a sharp left",
    Maneuver.SHARP_RIGHT: "Make a sharp right",
}

_TRANSITION_MANEUVER = {
    TransitionKind.ELEVATOR: Maneuver.USE_ELEVATOR,
    TransitionKind.STAIRS: Maneuver.USE_STAIRS,
    TransitionKind.ESCALATOR: Maneuver.USE_ESCALATOR,
}

_FALLBACK_NAMES = {
    NodeKind.INTERSECTION: "intersection",
    NodeKind.LANDMARK: "destination",
    NodeKind.ROAD_WAYPOINT: "waypoint",
    NodeKind.FLOOR_TRANSITION_ANCHOR: "floor transition",
}


@dataclass
class Instruction:
    """One step of a route description."""

    maneuver: Maneuver
    text: str
    distance_m: float = 0.0
    node_id: str | None = None


def classify_turn(
    delta: float,
    straight_threshold: float = 20.0,
    sharp_threshold: float = 120.0,
) -> Maneuver:
    """Classify a signed bearing change (positive = clockwise = right)."""
    magnitude = abs(delta)
    if magnitude < straight_threshold:
        return Maneuver.CONTINUE
    if delta > 0:
        return Maneuver.SHARP_RIGHT if magnitude > sharp_threshold else Maneuver.TURN_RIGHT
    return Maneuver.SHARP_LEFT if magnitude > sharp_threshold else Maneuver.TURN_LEFT


def node_label(node: GraphNode) -> str:
    return node.name or _FALLBACK_NAMES[node.kind]


def _edge_bearings(edge: GraphEdge) -> tuple[float | None, float | None]:
    """(entry, exit) bearings of an edge, None where it has no length."""
    points = edge.geometry
    segments = [
        (points[i], points[i + 1])
        for i in range(len(points) - 1)
        if points[i].distance_to(points[i + 1]) >= MIN_BEARING_SEGMENT_M
    ]
    if not segments:
        return None, None
    first, last = segments[0], segments[-1]
    return first[0].bearing_to(first[1]), last[0].bearing_to(last[1])


def _level_text(node: GraphNode) -> str:
    return f"level {node.level}" if node.level is not None else "the next level"


def _transition_instruction(edge: GraphEdge, a: GraphNode, b: GraphNode) -> Instruction:
    maneuver = _TRANSITION_MANEUVER.get(edge.transition, Maneuver.USE_STAIRS)
    what = edge.transition.value
    label = f" ({edge.name})" if edge.name and edge.name.lower() != what else ""
    return Instruction(
        maneuver=maneuver,
        text=f"Take the {what}{label} from {_level_text(a)} to {_level_text(b)}",
        distance_m=edge.weight,
        node_id=a.id,
    )


def build_instructions(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    straight_threshold: float = 20.0,
    sharp_threshold: float = 120.0,
) -> list[Instruction]:
    """Describe a route given its node sequence and the edges between them.

    `nodes` has one more element than `edges`.
    """
    if not nodes:
        return []

    steps = [Instruction(Maneuver.DEPART, f"Start at {node_label(nodes[0])}", 0.0, nodes[0].id)]
    run_name: str | None = None
    run_distance = 0.0
    run_node: str | None = None
    previous_exit: float | None = None

    def flush() -> None:
        nonlocal run_name, run_distance, run_node
        if run_name is not None:
            steps.append(
                Instruction(
                    Maneuver.CONTINUE,
                    f"Continue along {run_name} for {run_distance:.0f} m",
                    run_distance,
                    run_node,
                )
            )
        run_name, run_distance, run_node = None, 0.0, None

    for i, edge in enumerate(edges):
        via = nodes[i]
        if edge.is_vertical_transition:
            flush()
            steps.append(_transition_instruction(edge, via, nodes[i + 1]))
            previous_exit = None
            continue

        name = edge.name or "the path"
        entry, exit_ = _edge_bearings(edge)
        if previous_exit is not None and entry is not None:
            maneuver = classify_turn(
                bearing_delta(previous_exit, entry), straight_threshold, sharp_threshold
            )
            if maneuver is not Maneuver.CONTINUE:
                flush()
                steps.append(Instruction(maneuver, f"{_TURN_TEXT[maneuver]} onto {name}", 0.0, via.id))
        if run_name is not None and name != run_name:
            flush()
        if run_name is None:
            run_name, run_node = name, via.id
        run_distance += edge.weight
        if exit_ is not None:
            previous_exit = exit_

    flush()
    steps.append(Instruction(Maneuver.ARRIVE, f"Arrive at {node_label(nodes[-1])}", 0.0, nodes[-1].id))
    return steps

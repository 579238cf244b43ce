"""A* route search over the navigation graph.

g is the accumulated (preference-adjusted) edge weight, h the haversine
distance to the goal node. Every edge weighs at least the straight-line
distance between its endpoints and preference factors only raise weights,
so h never overestimates and a closed set is safe.

Frontier entries are (f, g, insertion counter, node id): ties on f go to
the lower g, then to the earlier insertion.

Expected failures ("no node near that point", "no route") come back as a
PathfindingResult with success=False rather than as exceptions.
"""

from __future__ import annotations

import heapq
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from wayfinder.graph.index import LinearScanIndex, NodeIndex
from wayfinder.graph.network import GraphEdge, NavigationGraph
from wayfinder.models.geometry import LatLng
from wayfinder.models.spatial import TransitionKind
from wayfinder.routing.instructions import Instruction, build_instructions
from wayfinder.settings import NavigationSettings

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class SearchFailure(str, Enum):
    NO_NEARBY_NODE = "no-nearby-node"
    NO_PATH_FOUND = "no-path-found"
    CANCELLED = "cancelled"
    UNKNOWN_NODE = "unknown-node"


@dataclass
class SearchOptions:
    """Per-query search options.

    With `prefer_elevator`, stairs and escalator edges cost
    `elevator_preference_factor` times their weight, so an elevator wins
    whenever the detour to it is not too long, and stairs remain usable
    when no elevator route exists.
    """

    prefer_elevator: bool = True
    elevator_preference_factor: float = 1.5
    start_floor_id: str | None = None
    goal_floor_id: str | None = None
    start_building_id: str | None = None
    goal_building_id: str | None = None
    search_radius_m: float = 100.0
    max_expansions: int = 100_000
    excluded_nodes: frozenset[str] = frozenset()
    straight_threshold_deg: float = 20.0
    sharp_turn_threshold_deg: float = 120.0

    @classmethod
    def from_settings(cls, settings: NavigationSettings, **overrides) -> SearchOptions:
        values = dict(
            elevator_preference_factor=settings.elevator_preference_factor,
            search_radius_m=settings.search_radius_m,
            max_expansions=settings.max_expansions,
            straight_threshold_deg=settings.straight_threshold_deg,
            sharp_turn_threshold_deg=settings.sharp_turn_threshold_deg,
        )
        values.update(overrides)
        return cls(**values)

    def edge_cost(self, edge: GraphEdge) -> float:
        if (
            self.prefer_elevator
            and edge.is_vertical_transition
            and edge.transition is not TransitionKind.ELEVATOR
        ):
            return edge.weight * self.elevator_preference_factor
        return edge.weight


@dataclass
class FloorTransition:
    """A vertical edge used by a route."""

    from_node: str
    to_node: str
    from_floor_id: str | None
    to_floor_id: str | None
    from_level: int | None
    to_level: int | None
    transition: TransitionKind
    building_id: str | None = None


@dataclass
class PathfindingResult:
    """Outcome of one search.

    `total_distance` is the plain sum of the route's edge weights; `cost`
    is what the search minimized (preference factors applied).
    """

    success: bool
    node_ids: list[str] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    polyline: list[LatLng] = field(default_factory=list)
    total_distance: float = 0.0
    cost: float = 0.0
    floor_transitions: list[FloorTransition] = field(default_factory=list)
    instructions: list[Instruction] = field(default_factory=list)
    failure: SearchFailure | None = None
    message: str = ""
    expanded: int = 0
    start_offset_m: float = 0.0
    goal_offset_m: float = 0.0

    @classmethod
    def failed(
        cls, failure: SearchFailure, message: str, expanded: int = 0
    ) -> PathfindingResult:
        return cls(success=False, failure=failure, message=message, expanded=expanded)

    @property
    def instruction_text(self) -> list[str]:
        return [step.text for step in self.instructions]

    def estimated_duration(self, walking_speed_mps: float = 1.4) -> timedelta:
        """Walking time including the legs to and from the resolved nodes."""
        distance = self.total_distance + self.start_offset_m + self.goal_offset_m
        return timedelta(seconds=distance / walking_speed_mps)


class AStarPathfinder:
    """Searches one graph. Safe to share between concurrent searches."""

    def __init__(self, graph: NavigationGraph, index: NodeIndex | None = None) -> None:
        self.graph = graph
        self._index = index

    @property
    def index(self) -> NodeIndex:
        if self._index is None:
            self._index = LinearScanIndex.from_graph(self.graph)
        return self._index

    def find_path(
        self,
        start: LatLng,
        goal: LatLng,
        options: SearchOptions | None = None,
        cancel: CancelCheck | None = None,
    ) -> PathfindingResult:
        """Route between two coordinates, resolved to their nearest nodes."""
        options = options or SearchOptions()
        start_id = self.index.nearest(
            start,
            floor_id=options.start_floor_id,
            building_id=options.start_building_id,
            max_distance=options.search_radius_m,
        )
        if start_id is None:
            return PathfindingResult.failed(
                SearchFailure.NO_NEARBY_NODE,
                f"No node within {options.search_radius_m:.0f} m of the start position",
            )
        goal_id = self.index.nearest(
            goal,
            floor_id=options.goal_floor_id,
            building_id=options.goal_building_id,
            max_distance=options.search_radius_m,
        )
        if goal_id is None:
            return PathfindingResult.failed(
                SearchFailure.NO_NEARBY_NODE,
                f"No node within {options.search_radius_m:.0f} m of the goal position",
            )

        result = self.find_path_between_nodes(start_id, goal_id, options, cancel)
        if result.success:
            result.start_offset_m = start.distance_to(self.graph.nodes[start_id].position)
            result.goal_offset_m = goal.distance_to(self.graph.nodes[goal_id].position)
        return result

    def find_path_between_nodes(
        self,
        start_id: str,
        goal_id: str,
        options: SearchOptions | None = None,
        cancel: CancelCheck | None = None,
    ) -> PathfindingResult:
        """Route between two node ids."""
        options = options or SearchOptions()
        graph = self.graph
        if start_id not in graph:
            return PathfindingResult.failed(
                SearchFailure.UNKNOWN_NODE, f"Start node not found: {start_id}"
            )
        if goal_id not in graph:
            return PathfindingResult.failed(
                SearchFailure.UNKNOWN_NODE, f"Goal node not found: {goal_id}"
            )

        goal_position = graph.nodes[goal_id].position

        def heuristic(node_id: str) -> float:
            return graph.nodes[node_id].position.distance_to(goal_position)

        g_score: dict[str, float] = {start_id: 0.0}
        came_by: dict[str, GraphEdge] = {}
        closed: set[str] = set()
        frontier = [(heuristic(start_id), 0.0, 0, start_id)]
        counter = 1
        expanded = 0

        while frontier:
            if cancel is not None and cancel():
                logger.debug("Search %s -> %s cancelled after %d expansions", start_id, goal_id, expanded)
                return PathfindingResult.failed(
                    SearchFailure.CANCELLED, "Search cancelled", expanded
                )

            _, g, _, current = heapq.heappop(frontier)
            if current in closed or g > g_score[current]:
                continue
            if current == goal_id:
                return self._assemble(start_id, goal_id, came_by, g, expanded, options)
            if expanded >= options.max_expansions:
                logger.info(
                    "Search %s -> %s stopped at the %d-expansion bound",
                    start_id,
                    goal_id,
                    options.max_expansions,
                )
                return PathfindingResult.failed(
                    SearchFailure.NO_PATH_FOUND,
                    f"Search bound of {options.max_expansions} expansions reached",
                    expanded,
                )

            closed.add(current)
            expanded += 1

            for edge in graph.nodes[current].edges:
                neighbor = edge.target
                if neighbor in closed or neighbor in options.excluded_nodes:
                    continue
                if neighbor not in graph:
                    continue
                tentative = g + options.edge_cost(edge)
                if tentative < g_score.get(neighbor, math.inf):
                    g_score[neighbor] = tentative
                    came_by[neighbor] = edge
                    heapq.heappush(
                        frontier, (tentative + heuristic(neighbor), tentative, counter, neighbor)
                    )
                    counter += 1

        return PathfindingResult.failed(
            SearchFailure.NO_PATH_FOUND,
            f"No path found from {start_id} to {goal_id}",
            expanded,
        )

    def _assemble(
        self,
        start_id: str,
        goal_id: str,
        came_by: dict[str, GraphEdge],
        cost: float,
        expanded: int,
        options: SearchOptions,
    ) -> PathfindingResult:
        edges: list[GraphEdge] = []
        current = goal_id
        while current != start_id:
            edge = came_by[current]
            edges.append(edge)
            current = edge.source
        edges.reverse()

        node_ids = [start_id, *(edge.target for edge in edges)]
        nodes = [self.graph.nodes[node_id] for node_id in node_ids]

        polyline: list[LatLng] = [nodes[0].position]
        for edge in edges:
            points = edge.geometry or [
                self.graph.nodes[edge.source].position,
                self.graph.nodes[edge.target].position,
            ]
            for point in points:
                # Skips join vertices and stacked vertical transitions.
                if point != polyline[-1]:
                    polyline.append(point)

        transitions = [
            FloorTransition(
                from_node=edge.source,
                to_node=edge.target,
                from_floor_id=self.graph.nodes[edge.source].floor_id,
                to_floor_id=self.graph.nodes[edge.target].floor_id,
                from_level=self.graph.nodes[edge.source].level,
                to_level=self.graph.nodes[edge.target].level,
                transition=edge.transition,
                building_id=self.graph.nodes[edge.source].building_id,
            )
            for edge in edges
            if edge.is_vertical_transition
        ]

        return PathfindingResult(
            success=True,
            node_ids=node_ids,
            edges=edges,
            polyline=polyline,
            total_distance=math.fsum(edge.weight for edge in edges),
            cost=cost,
            floor_transitions=transitions,
            instructions=build_instructions(
                nodes,
                edges,
                options.straight_threshold_deg,
                options.sharp_turn_threshold_deg,
            ),
            expanded=expanded,
        )


def find_path(
    graph: NavigationGraph,
    start: LatLng,
    goal: LatLng,
    options: SearchOptions | None = None,
    *,
    index: NodeIndex | None = None,
    cancel: CancelCheck | None = None,
) -> PathfindingResult:
    """Route between two coordinates on `graph`."""
    return AStarPathfinder(graph, index).find_path(start, goal, options, cancel)


def find_path_between_nodes(
    graph: NavigationGraph,
    start_id: str,
    goal_id: str,
    options: SearchOptions | None = None,
    *,
    cancel: CancelCheck | None = None,
) -> PathfindingResult:
    """Route between two node ids on `graph`."""
    return AStarPathfinder(graph).find_path_between_nodes(start_id, goal_id, options, cancel)

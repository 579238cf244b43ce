"""Navigation graph builder.

Turns a Campus snapshot into a NavigationGraph:

1. One node per intersection (outdoor and per floor) and per landmark.
2. Roads are walked point by point. A point becomes a waypoint node unless
   it is pinned to, or lies within the snap tolerance of, an intersection
   (endpoints may also snap to an earlier road's endpoint). Consecutive
   nodes are joined by edges weighted by haversine length; two-way roads
   get an edge in each direction, one-way roads only the forward edge.
3. Landmarks are linked to the nearest road node(s) in their own scope
   within the connection radius. Ground-floor entrances are also linked to
   the outdoor network.
4. Instances of the same elevator/staircase on different floors are joined
   into a clique of vertical edges weighted by a per-floor penalty.

Malformed geometry never raises: the element is skipped, logged, and
recorded in `graph.degraded` for the validator to report.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from itertools import permutations

from wayfinder.graph.index import LinearScanIndex
from wayfinder.graph.network import (
    DegradedElement,
    EdgeKind,
    GraphEdge,
    GraphNode,
    NavigationGraph,
    NodeKind,
)
from wayfinder.models.geometry import LatLng, polyline_length
from wayfinder.models.ids import waypoint_node_id
from wayfinder.models.spatial import Building, Campus, Floor, Landmark, Road
from wayfinder.settings import NavigationSettings

logger = logging.getLogger(__name__)

# (building id, floor id); (None, None) is the outdoor layer
Scope = tuple[str | None, str | None]

OUTDOOR: Scope = (None, None)


def _scope(building: Building | None, floor: Floor | None) -> Scope:
    return (
        building.id if building is not None else None,
        floor.id if floor is not None else None,
    )


def _closest_within(
    nodes: list[GraphNode], position: LatLng, tolerance: float
) -> GraphNode | None:
    """Closest node within tolerance; first inserted wins ties."""
    best: GraphNode | None = None
    best_distance = tolerance
    for node in nodes:
        distance = node.position.distance_to(position)
        if distance <= best_distance and (best is None or distance < best_distance):
            best = node
            best_distance = distance
    return best


class GraphBuilder:
    """Builds navigation graphs with a fixed set of settings."""

    def __init__(self, settings: NavigationSettings | None = None) -> None:
        self.settings = settings or NavigationSettings()

    def build(self, campus: Campus) -> NavigationGraph:
        """Build a fresh graph. Raises ValueError if no campus is given."""
        if campus is None:
            raise ValueError("A spatial model is required to build a navigation graph")

        graph = NavigationGraph(source_key=campus.cache_key())
        self._add_intersection_nodes(graph, campus)
        self._add_landmark_nodes(graph, campus)
        self._add_road_edges(graph, campus)
        self._connect_landmarks(graph, campus)
        self._add_vertical_circulation(graph, campus)

        logger.debug(
            "Built navigation graph for campus %s: %d nodes, %d edges, %d degraded",
            campus.id,
            graph.node_count,
            graph.edge_count,
            len(graph.degraded),
        )
        return graph

    # ── Nodes ─────────────────────────────────────────────────────────

    def _try_add_node(self, graph: NavigationGraph, node: GraphNode) -> bool:
        if node.id in graph:
            graph.degraded.append(
                DegradedElement(node.id, "duplicate id; element left out of the graph")
            )
            logger.warning("Duplicate id %s; keeping the first element", node.id)
            return False
        graph.add_node(node)
        return True

    def _add_intersection_nodes(self, graph: NavigationGraph, campus: Campus) -> None:
        for building, floor, intersection in campus.iter_intersections():
            building_id, floor_id = _scope(building, floor)
            self._try_add_node(
                graph,
                GraphNode(
                    id=intersection.id,
                    position=intersection.position,
                    kind=NodeKind.INTERSECTION,
                    floor_id=floor_id,
                    building_id=building_id,
                    level=floor.level if floor is not None else None,
                    name=intersection.name,
                ),
            )

    def _add_landmark_nodes(self, graph: NavigationGraph, campus: Campus) -> None:
        for building, floor, landmark in campus.iter_landmarks():
            building_id, floor_id = _scope(building, floor)
            kind = (
                NodeKind.FLOOR_TRANSITION_ANCHOR
                if landmark.kind.is_vertical_circulation
                else NodeKind.LANDMARK
            )
            self._try_add_node(
                graph,
                GraphNode(
                    id=landmark.id,
                    position=landmark.position,
                    kind=kind,
                    floor_id=floor_id,
                    building_id=building_id,
                    level=floor.level if floor is not None else None,
                    name=landmark.name,
                    landmark_kind=landmark.kind,
                ),
            )

    # ── Roads ─────────────────────────────────────────────────────────

    def _add_road_edges(self, graph: NavigationGraph, campus: Campus) -> None:
        intersections: dict[Scope, list[GraphNode]] = defaultdict(list)
        for node in graph.nodes.values():
            if node.kind is NodeKind.INTERSECTION:
                intersections[(node.building_id, node.floor_id)].append(node)
        endpoints: dict[Scope, list[GraphNode]] = defaultdict(list)

        for building, floor, road in campus.iter_roads():
            scope = _scope(building, floor)
            self._process_road(
                graph, road, floor, scope, intersections[scope], endpoints[scope]
            )

    def _pinned_endpoints(self, graph: NavigationGraph, road: Road) -> dict[int, str]:
        """Endpoint indices pinned to intersections listed on the road.

        With two or more entries the first and last pin the road's ends. A
        single entry pins only the end closer to it; the other end is free.
        """
        pinned: dict[int, str] = {}
        listed = road.connected_intersections
        if not listed:
            return pinned
        last = len(road.points) - 1
        if len(listed) == 1:
            node = graph.get_node(listed[0])
            if node is None:
                return pinned
            first_gap = node.position.distance_to(road.points[0])
            last_gap = node.position.distance_to(road.points[last])
            candidates = [(0 if first_gap <= last_gap else last, listed[0])]
        else:
            candidates = [(0, listed[0]), (last, listed[-1])]
        for index, intersection_id in candidates:
            node = graph.get_node(intersection_id)
            if node is not None and node.kind is NodeKind.INTERSECTION:
                pinned[index] = intersection_id
        return pinned

    def _process_road(
        self,
        graph: NavigationGraph,
        road: Road,
        floor: Floor | None,
        scope: Scope,
        intersections: list[GraphNode],
        endpoints: list[GraphNode],
    ) -> None:
        if road.id in graph.road_nodes:
            graph.degraded.append(DegradedElement(road.id, "duplicate road id"))
            logger.warning("Skipping road %s: duplicate road id", road.id)
            return
        if len(road.points) < 2:
            graph.degraded.append(
                DegradedElement(
                    road.id, f"road has {len(road.points)} point(s), needs at least 2"
                )
            )
            logger.warning(
                "Skipping road %s (%s): fewer than two points", road.id, road.name
            )
            return

        tolerance = self.settings.snap_tolerance_m
        pinned = self._pinned_endpoints(graph, road)
        last = len(road.points) - 1

        node_ids: list[str] = []
        segments: list[tuple[str, str, list[LatLng]]] = []
        geometry: list[LatLng] = []

        for index, point in enumerate(road.points):
            node_id = pinned.get(index)
            if node_id is None:
                match = _closest_within(intersections, point, tolerance)
                if match is None and index in (0, last):
                    match = _closest_within(endpoints, point, tolerance)
                if match is not None:
                    node_id = match.id
            if node_id is None:
                waypoint = GraphNode(
                    id=waypoint_node_id(road.id, index),
                    position=point,
                    kind=NodeKind.ROAD_WAYPOINT,
                    floor_id=scope[1],
                    building_id=scope[0],
                    level=floor.level if floor is not None else None,
                    name=road.name,
                )
                if not self._try_add_node(graph, waypoint):
                    continue
                if index in (0, last):
                    endpoints.append(waypoint)
                node_id = waypoint.id

            geometry.append(point)
            if node_ids and node_ids[-1] == node_id:
                continue
            if node_ids:
                segments.append((node_ids[-1], node_id, geometry))
                geometry = [point]
            node_ids.append(node_id)

        graph.road_nodes[road.id] = node_ids
        if not segments:
            graph.degraded.append(
                DegradedElement(road.id, "all road points collapse onto a single node")
            )
            logger.warning("Road %s collapses onto a single node", road.id)
            return

        name = road.name or road.kind.value
        for source, target, points in segments:
            # Endpoints sit exactly on the nodes so weights never undercut
            # the straight-line distance between them.
            points = [graph.nodes[source].position, *points[1:-1], graph.nodes[target].position]
            weight = polyline_length(points)
            graph.add_edge(
                GraphEdge(
                    source=source,
                    target=target,
                    weight=weight,
                    kind=EdgeKind.ROAD,
                    one_way=road.one_way,
                    road_id=road.id,
                    name=name,
                    geometry=points,
                )
            )
            if not road.one_way:
                graph.add_edge(
                    GraphEdge(
                        source=target,
                        target=source,
                        weight=weight,
                        kind=EdgeKind.ROAD,
                        road_id=road.id,
                        name=name,
                        geometry=list(reversed(points)),
                    )
                )

    # ── Landmarks ─────────────────────────────────────────────────────

    def _link(
        self, graph: NavigationGraph, landmark_id: str, node_id: str, kind: EdgeKind
    ) -> None:
        a = graph.nodes[landmark_id]
        b = graph.nodes[node_id]
        distance = a.position.distance_to(b.position)
        name = a.name or (a.landmark_kind.value if a.landmark_kind else "")
        graph.add_edge(
            GraphEdge(
                source=a.id,
                target=b.id,
                weight=distance,
                kind=kind,
                name=name,
                geometry=[a.position, b.position],
            )
        )
        graph.add_edge(
            GraphEdge(
                source=b.id,
                target=a.id,
                weight=distance,
                kind=kind,
                name=name,
                geometry=[b.position, a.position],
            )
        )

    def _connect_landmarks(self, graph: NavigationGraph, campus: Campus) -> None:
        by_scope: dict[Scope, list[GraphNode]] = defaultdict(list)
        for node in graph.nodes.values():
            if node.is_road_node:
                by_scope[(node.building_id, node.floor_id)].append(node)
        indexes = {scope: LinearScanIndex(nodes) for scope, nodes in by_scope.items()}

        radius = self.settings.landmark_connection_radius_m
        limit = self.settings.landmark_link_count
        processed: set[str] = set()

        for building, floor, landmark in campus.iter_landmarks():
            if not self._owns_node(graph, landmark, floor) or landmark.id in processed:
                continue
            processed.add(landmark.id)

            index = indexes.get(_scope(building, floor))
            hits = index.within(landmark.position, radius, limit=limit) if index else []
            for node_id, _ in hits:
                self._link(graph, landmark.id, node_id, EdgeKind.LANDMARK_LINK)

            outdoor_hits: list[tuple[str, float]] = []
            if (
                landmark.kind.is_entrance
                and floor is not None
                and floor.level == 0
                and OUTDOOR in indexes
            ):
                outdoor_hits = indexes[OUTDOOR].within(landmark.position, radius, limit=1)
                for node_id, _ in outdoor_hits:
                    self._link(graph, landmark.id, node_id, EdgeKind.ENTRANCE_LINK)

            if hits or outdoor_hits:
                graph.linked_landmarks.add(landmark.id)
            else:
                logger.debug(
                    "Landmark %s (%s) has no road node within %.1f m",
                    landmark.id,
                    landmark.name,
                    radius,
                )

    @staticmethod
    def _owns_node(graph: NavigationGraph, landmark: Landmark, floor: Floor | None) -> bool:
        """True if the graph node with this landmark's id came from this landmark."""
        node = graph.get_node(landmark.id)
        if node is None or node.landmark_kind is None:
            return False
        return node.floor_id == (floor.id if floor is not None else None) and (
            node.position == landmark.position
        )

    # ── Vertical circulation ──────────────────────────────────────────

    def _add_vertical_circulation(self, graph: NavigationGraph, campus: Campus) -> None:
        penalty = self.settings.vertical_transition_penalty_m
        for building in campus.buildings:
            members = [
                (floor, landmark)
                for floor, landmark in building.iter_landmarks()
                if landmark.kind.is_vertical_circulation
                and self._owns_node(graph, landmark, floor)
            ]
            if not members:
                continue

            parent = {landmark.id: landmark.id for _, landmark in members}

            def find(x: str) -> str:
                while parent[x] != x:
                    parent[x] = parent[parent[x]]
                    x = parent[x]
                return x

            floors = {floor.id: floor for floor in building.floors}
            for floor, landmark in members:
                for target_floor_id in landmark.connected_floors:
                    target = floors.get(target_floor_id)
                    if target is None or target.id == floor.id:
                        continue
                    counterpart = _find_counterpart(landmark, floor, target, members)
                    if counterpart is None:
                        logger.debug(
                            "%s %s lists floor %s but no counterpart exists there",
                            landmark.kind.value,
                            landmark.id,
                            target_floor_id,
                        )
                        continue
                    root_a, root_b = find(landmark.id), find(counterpart.id)
                    if root_a != root_b:
                        parent[root_b] = root_a

            groups: dict[str, list[tuple[Floor, Landmark]]] = defaultdict(list)
            for floor, landmark in members:
                groups[find(landmark.id)].append((floor, landmark))

            for group in groups.values():
                for (floor_a, a), (floor_b, b) in permutations(group, 2):
                    if floor_a.id == floor_b.id:
                        continue
                    spanned = max(1, abs(floor_a.level - floor_b.level))
                    weight = penalty * spanned + a.position.distance_to(b.position)
                    graph.add_edge(
                        GraphEdge(
                            source=a.id,
                            target=b.id,
                            weight=weight,
                            kind=EdgeKind.VERTICAL,
                            transition=a.kind.transition_kind,
                            name=a.name or a.kind.value,
                            geometry=[a.position, b.position],
                        )
                    )


def _find_counterpart(
    landmark: Landmark,
    floor: Floor,
    target: Floor,
    members: list[tuple[Floor, Landmark]],
) -> Landmark | None:
    """The instance of `landmark` on `target`.

    Same kind required; prefer instances that list `floor` back, then the
    same name, then the nearest position.
    """
    candidates = [
        other
        for other_floor, other in members
        if other_floor.id == target.id and other.kind == landmark.kind
    ]
    if not candidates:
        return None
    candidates.sort(
        key=lambda c: (
            floor.id not in c.connected_floors,
            c.name != landmark.name,
            landmark.position.distance_to(c.position),
        )
    )
    return candidates[0]


def build_graph(
    campus: Campus, settings: NavigationSettings | None = None
) -> NavigationGraph:
    """Build a navigation graph from a campus snapshot."""
    return GraphBuilder(settings).build(campus)

"""Navigation graph data structures.

Nodes are junctions, landmarks and road waypoints. Edges are directed; a
two-way road contributes one edge in each direction with equal weight.
Weights are meters (vertical transitions use a meters-equivalent penalty).

The graph owns its nodes and edges. Callers get read access through the
query methods; a built graph is treated as immutable while searches run.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from wayfinder.models.geometry import LatLng
from wayfinder.models.spatial import LandmarkKind, TransitionKind


class NodeKind(str, Enum):
    """Semantic kind of a graph node."""

    INTERSECTION = "intersection"
    LANDMARK = "landmark"
    ROAD_WAYPOINT = "road-waypoint"
    FLOOR_TRANSITION_ANCHOR = "floor-transition-anchor"


class EdgeKind(str, Enum):
    """What produced an edge."""

    ROAD = "road"
    LANDMARK_LINK = "landmark-link"
    ENTRANCE_LINK = "entrance-link"
    VERTICAL = "vertical"


@dataclass
class GraphEdge:
    """A directed, weighted edge.

    `geometry` holds the edge's own points, endpoints included, so a route
    polyline keeps the shape of the road it follows.
    """

    source: str
    target: str
    weight: float
    kind: EdgeKind = EdgeKind.ROAD
    one_way: bool = False
    transition: TransitionKind = TransitionKind.NONE
    road_id: str | None = None
    name: str = ""
    geometry: list[LatLng] = field(default_factory=list)

    @property
    def is_vertical_transition(self) -> bool:
        return self.transition is not TransitionKind.NONE


@dataclass
class GraphNode:
    """A node in the navigation graph."""

    id: str
    position: LatLng
    kind: NodeKind
    floor_id: str | None = None
    building_id: str | None = None
    level: int | None = None
    name: str = ""
    landmark_kind: LandmarkKind | None = None
    edges: list[GraphEdge] = field(default_factory=list)

    @property
    def is_outdoor(self) -> bool:
        return self.building_id is None

    @property
    def is_road_node(self) -> bool:
        return self.kind in (NodeKind.INTERSECTION, NodeKind.ROAD_WAYPOINT)


@dataclass
class DegradedElement:
    """A spatial-model element the builder could not fully use."""

    element_id: str
    reason: str


class NavigationGraph:
    """Node set plus adjacency, with O(1) node lookup by id.

    Besides nodes and edges the graph keeps builder bookkeeping the
    validator reads: which nodes each road produced, which landmarks were
    linked to the road network, and which elements were skipped.
    """

    def __init__(self, source_key: str | None = None) -> None:
        self.source_key = source_key
        self._nodes: dict[str, GraphNode] = {}
        self._in_degree: Counter[str] = Counter()
        self.road_nodes: dict[str, list[str]] = {}
        self.linked_landmarks: set[str] = set()
        self.degraded: list[DegradedElement] = []

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> dict[str, GraphNode]:
        """Read-only view intent: callers must not mutate this mapping."""
        return self._nodes

    # ── Mutation ──────────────────────────────────────────────────────

    def add_node(self, node: GraphNode) -> GraphNode:
        """Add a node. Raises ValueError if the id is already taken."""
        if node.id in self._nodes:
            raise ValueError(f"Duplicate node id '{node.id}'")
        self._nodes[node.id] = node
        return node

    def remove_node(self, node_id: str) -> GraphNode:
        """Remove a node and every edge touching it."""
        node = self._nodes.pop(node_id, None)
        if node is None:
            raise KeyError(node_id)
        for edge in node.edges:
            self._in_degree[edge.target] -= 1
        for other in self._nodes.values():
            kept = [e for e in other.edges if e.target != node_id]
            if len(kept) != len(other.edges):
                other.edges = kept
        self._in_degree.pop(node_id, None)
        return node

    def add_edge(self, edge: GraphEdge) -> GraphEdge:
        """Add a directed edge. Both endpoints must exist; weight must be >= 0."""
        if edge.weight < 0:
            raise ValueError(
                f"Edge {edge.source}->{edge.target} has negative weight {edge.weight}"
            )
        source = self._nodes.get(edge.source)
        if source is None or edge.target not in self._nodes:
            raise ValueError(
                f"Edge {edge.source}->{edge.target} references an unknown node"
            )
        source.edges.append(edge)
        self._in_degree[edge.target] += 1
        return edge

    def remove_edge(self, source: str, target: str) -> int:
        """Remove every edge source->target. Returns the number removed."""
        node = self._nodes.get(source)
        if node is None:
            return 0
        kept = [e for e in node.edges if e.target != target]
        removed = len(node.edges) - len(kept)
        node.edges = kept
        self._in_degree[target] -= removed
        return removed

    # ── Queries ───────────────────────────────────────────────────────

    def get_node(self, node_id: str) -> GraphNode | None:
        return self._nodes.get(node_id)

    def edges_from(self, node_id: str) -> list[GraphEdge]:
        node = self._nodes.get(node_id)
        return list(node.edges) if node else []

    def get_edge(self, source: str, target: str) -> GraphEdge | None:
        """Cheapest edge source->target, or None."""
        candidates = [e for e in self.edges_from(source) if e.target == target]
        return min(candidates, key=lambda e: e.weight) if candidates else None

    def neighbors(self, node_id: str) -> list[GraphNode]:
        """Distinct successors of a node, in edge order."""
        seen: dict[str, GraphNode] = {}
        for edge in self.edges_from(node_id):
            if edge.target not in seen:
                seen[edge.target] = self._nodes[edge.target]
        return list(seen.values())

    def out_degree(self, node_id: str) -> int:
        node = self._nodes.get(node_id)
        return len(node.edges) if node else 0

    def in_degree(self, node_id: str) -> int:
        return self._in_degree.get(node_id, 0)

    def degree(self, node_id: str) -> int:
        return self.in_degree(node_id) + self.out_degree(node_id)

    def nodes_on_floor(self, floor_id: str) -> list[GraphNode]:
        return [n for n in self._nodes.values() if n.floor_id == floor_id]

    def nodes_in_building(self, building_id: str) -> list[GraphNode]:
        return [n for n in self._nodes.values() if n.building_id == building_id]

    def iter_edges(self) -> Iterator[GraphEdge]:
        for node in self._nodes.values():
            yield from node.edges

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(n.edges) for n in self._nodes.values())

    def undirected_adjacency(self) -> dict[str, set[str]]:
        """Neighbor sets ignoring edge direction (self-loops dropped)."""
        adjacency: dict[str, set[str]] = {node_id: set() for node_id in self._nodes}
        for edge in self.iter_edges():
            if edge.source == edge.target:
                continue
            adjacency[edge.source].add(edge.target)
            adjacency[edge.target].add(edge.source)
        return adjacency

    def statistics(self) -> dict[str, int]:
        """Node and edge totals, with node counts per kind."""
        kinds = Counter(n.kind for n in self._nodes.values())
        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "intersection_nodes": kinds[NodeKind.INTERSECTION],
            "landmark_nodes": kinds[NodeKind.LANDMARK],
            "waypoint_nodes": kinds[NodeKind.ROAD_WAYPOINT],
            "anchor_nodes": kinds[NodeKind.FLOOR_TRANSITION_ANCHOR],
        }

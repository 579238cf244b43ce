"""Tests for the navigation graph data structure."""

import pytest

from wayfinder.graph import GraphEdge, GraphNode, NavigationGraph, NodeKind
from wayfinder.models import LatLng


def _node(node_id: str, lon: float = 0.0, kind: NodeKind = NodeKind.INTERSECTION, **kw) -> GraphNode:
    return GraphNode(id=node_id, position=LatLng(lat=0.0, lon=lon), kind=kind, **kw)


@pytest.fixture
def triangle() -> NavigationGraph:
    """a <-> b <-> c, plus a one-way c -> a."""
    g = NavigationGraph()
    for i, node_id in enumerate("abc"):
        g.add_node(_node(node_id, lon=i * 0.001))
    g.add_edge(GraphEdge("a", "b", 10.0))
    g.add_edge(GraphEdge("b", "a", 10.0))
    g.add_edge(GraphEdge("b", "c", 20.0))
    g.add_edge(GraphEdge("c", "b", 20.0))
    g.add_edge(GraphEdge("c", "a", 35.0, one_way=True))
    return g


class TestMutation:
    def test_duplicate_node_rejected(self, triangle: NavigationGraph):
        with pytest.raises(ValueError, match="Duplicate node id"):
            triangle.add_node(_node("a"))

    def test_negative_weight_rejected(self, triangle: NavigationGraph):
        with pytest.raises(ValueError, match="negative weight"):
            triangle.add_edge(GraphEdge("a", "c", -1.0))

    def test_unknown_endpoint_rejected(self, triangle: NavigationGraph):
        with pytest.raises(ValueError, match="unknown node"):
            triangle.add_edge(GraphEdge("a", "zzz", 1.0))

    def test_zero_weight_allowed(self, triangle: NavigationGraph):
        triangle.add_edge(GraphEdge("a", "a", 0.0))
        assert triangle.out_degree("a") == 2

    def test_remove_edge(self, triangle: NavigationGraph):
        assert triangle.remove_edge("b", "c") == 1
        assert triangle.get_edge("b", "c") is None
        assert triangle.in_degree("c") == 0
        assert triangle.remove_edge("b", "c") == 0

    def test_remove_edge_unknown_source(self, triangle: NavigationGraph):
        assert triangle.remove_edge("zzz", "a") == 0

    def test_remove_node_drops_incident_edges(self, triangle: NavigationGraph):
        triangle.remove_node("b")
        assert "b" not in triangle
        assert triangle.edge_count == 1
        assert triangle.in_degree("a") == 1
        assert triangle.out_degree("a") == 0

    def test_remove_missing_node(self, triangle: NavigationGraph):
        with pytest.raises(KeyError):
            triangle.remove_node("zzz")


class TestQueries:
    def test_lookup(self, triangle: NavigationGraph):
        assert triangle.get_node("b").id == "b"
        assert triangle.get_node("zzz") is None
        assert "a" in triangle
        assert len(triangle) == 3

    def test_degrees(self, triangle: NavigationGraph):
        assert triangle.out_degree("a") == 1
        assert triangle.in_degree("a") == 2
        assert triangle.degree("a") == 3

    def test_get_edge_cheapest(self, triangle: NavigationGraph):
        triangle.add_edge(GraphEdge("a", "b", 4.0))
        assert triangle.get_edge("a", "b").weight == 4.0

    def test_neighbors_distinct(self, triangle: NavigationGraph):
        triangle.add_edge(GraphEdge("b", "a", 12.0))
        assert [n.id for n in triangle.neighbors("b")] == ["a", "c"]

    def test_edges_from_is_a_copy(self, triangle: NavigationGraph):
        triangle.edges_from("a").clear()
        assert triangle.out_degree("a") == 1

    def test_counts(self, triangle: NavigationGraph):
        assert triangle.node_count == 3
        assert triangle.edge_count == 5
        assert len(list(triangle.iter_edges())) == 5

    def test_undirected_adjacency_ignores_direction_and_self_loops(self, triangle: NavigationGraph):
        triangle.add_edge(GraphEdge("a", "a", 0.0))
        adjacency = triangle.undirected_adjacency()
        assert adjacency["a"] == {"b", "c"}
        assert adjacency["c"] == {"a", "b"}

    def test_scope_filters(self):
        g = NavigationGraph()
        g.add_node(_node("out"))
        g.add_node(_node("in", building_id="b1", floor_id="f1"))
        assert [n.id for n in g.nodes_on_floor("f1")] == ["in"]
        assert [n.id for n in g.nodes_in_building("b1")] == ["in"]
        assert g.nodes["out"].is_outdoor
        assert not g.nodes["in"].is_outdoor

    def test_statistics(self):
        g = NavigationGraph()
        g.add_node(_node("i"))
        g.add_node(_node("l", kind=NodeKind.LANDMARK))
        g.add_node(_node("w", kind=NodeKind.ROAD_WAYPOINT))
        g.add_node(_node("e", kind=NodeKind.FLOOR_TRANSITION_ANCHOR))
        g.add_edge(GraphEdge("i", "w", 1.0))
        assert g.statistics() == {
            "total_nodes": 4,
            "total_edges": 1,
            "intersection_nodes": 1,
            "landmark_nodes": 1,
            "waypoint_nodes": 1,
            "anchor_nodes": 1,
        }

    def test_road_node_kinds(self):
        assert _node("i").is_road_node
        assert _node("w", kind=NodeKind.ROAD_WAYPOINT).is_road_node
        assert not _node("l", kind=NodeKind.LANDMARK).is_road_node

"""Tests for turn-by-turn instruction synthesis."""

import pytest

from wayfinder.graph import EdgeKind, GraphEdge, GraphNode, NodeKind, build_graph
from wayfinder.models import Campus, Intersection, LatLng, Road, TransitionKind
from wayfinder.routing import Maneuver, build_instructions, classify_turn, find_path_between_nodes


def _p(lat: float, lon: float) -> LatLng:
    return LatLng(lat=lat, lon=lon)


def _grid_campus(ab_name: str = "East Walk", bc_name: str = "Main Street") -> Campus:
    """a(0,0) -- b(0,0.001) -- c(0,0.002), with d(0.001,0.001) north of b."""
    points = {"a": _p(0, 0), "b": _p(0, 0.001), "c": _p(0, 0.002), "d": _p(0.001, 0.001)}

    def road(rid: str, name: str, s: str, t: str) -> Road:
        return Road(id=rid, name=name, points=[points[s], points[t]], connected_intersections=[s, t])

    return Campus(
        outdoor_intersections=[Intersection(id=k, name=k.upper(), position=v) for k, v in points.items()],
        outdoor_roads=[
            road("ab", ab_name, "a", "b"),
            road("bc", bc_name, "b", "c"),
            road("bd", "North Walk", "b", "d"),
        ],
    )


def _maneuvers(result) -> list[Maneuver]:
    return [step.maneuver for step in result.instructions]


class TestClassifyTurn:
    @pytest.mark.parametrize(
        "delta, expected",
        [
            (0.0, Maneuver.CONTINUE),
            (19.9, Maneuver.CONTINUE),
            (-19.9, Maneuver.CONTINUE),
            (20.0, Maneuver.TURN_RIGHT),
            (45.0, Maneuver.TURN_RIGHT),
            (-45.0, Maneuver.TURN_LEFT),
            (120.0, Maneuver.TURN_RIGHT),
            (150.0, Maneuver.SHARP_RIGHT),
            (-150.0, Maneuver.SHARP_LEFT),
            (180.0, Maneuver.SHARP_RIGHT),
        ],
    )
    def test_default_thresholds(self, delta, expected):
        assert classify_turn(delta) is expected

    def test_custom_thresholds(self):
        assert classify_turn(30.0, straight_threshold=45.0) is Maneuver.CONTINUE
        assert classify_turn(-100.0, sharp_threshold=90.0) is Maneuver.SHARP_LEFT


class TestRouteInstructions:
    def test_left_turn(self):
        graph = build_graph(_grid_campus())
        result = find_path_between_nodes(graph, "a", "d")
        assert _maneuvers(result) == [
            Maneuver.DEPART,
            Maneuver.CONTINUE,
            Maneuver.TURN_LEFT,
            Maneuver.CONTINUE,
            Maneuver.ARRIVE,
        ]
        assert result.instructions[2].text == "Turn left onto North Walk"
        assert result.instructions[2].node_id == "b"

    def test_right_turn(self):
        graph = build_graph(_grid_campus())
        result = find_path_between_nodes(graph, "d", "a")
        assert Maneuver.TURN_RIGHT in _maneuvers(result)
        assert result.instructions[-1].text == "Arrive at A"

    def test_straight_segments_merge(self):
        graph = build_graph(_grid_campus(ab_name="Main Street", bc_name="Main Street"))
        result = find_path_between_nodes(graph, "a", "c")
        assert _maneuvers(result) == [Maneuver.DEPART, Maneuver.CONTINUE, Maneuver.ARRIVE]
        assert result.instructions[1].distance_m == pytest.approx(result.total_distance)
        assert result.instructions[1].text.startswith("Continue along Main Street for 222 m")

    def test_name_change_splits_straight_run(self):
        graph = build_graph(_grid_campus())
        result = find_path_between_nodes(graph, "a", "c")
        assert _maneuvers(result) == [
            Maneuver.DEPART,
            Maneuver.CONTINUE,
            Maneuver.CONTINUE,
            Maneuver.ARRIVE,
        ]


class TestBuildInstructions:
    @staticmethod
    def _node(node_id: str, lat: float, lon: float, level: int | None = None) -> GraphNode:
        return GraphNode(node_id, _p(lat, lon), NodeKind.INTERSECTION, level=level, name=node_id)

    @staticmethod
    def _edge(a: GraphNode, b: GraphNode, name: str, **kw) -> GraphEdge:
        return GraphEdge(
            a.id, b.id, a.position.distance_to(b.position), name=name,
            geometry=[a.position, b.position], **kw,
        )

    def test_empty_route(self):
        assert build_instructions([], []) == []

    def test_degenerate_edge_keeps_previous_bearing(self):
        p0 = self._node("p0", 0, 0)
        p1 = self._node("p1", 0, 0.001)
        p2 = self._node("p2", 0, 0.0010001)  # ~1 cm further east
        p3 = self._node("p3", 0.001, 0.0010001)
        steps = build_instructions(
            [p0, p1, p2, p3],
            [self._edge(p0, p1, "East"), self._edge(p1, p2, "Stub"), self._edge(p2, p3, "North")],
        )
        assert Maneuver.TURN_LEFT in [s.maneuver for s in steps]

    @pytest.mark.parametrize(
        "transition, maneuver",
        [
            (TransitionKind.ELEVATOR, Maneuver.USE_ELEVATOR),
            (TransitionKind.STAIRS, Maneuver.USE_STAIRS),
            (TransitionKind.ESCALATOR, Maneuver.USE_ESCALATOR),
        ],
    )
    def test_vertical_transition(self, transition, maneuver):
        low = self._node("low", 0, 0, level=0)
        high = self._node("high", 0, 0, level=2)
        edge = GraphEdge("low", "high", 30.0, kind=EdgeKind.VERTICAL, transition=transition,
                         name="Core", geometry=[low.position, high.position])
        steps = build_instructions([low, high], [edge])
        assert [s.maneuver for s in steps] == [Maneuver.DEPART, maneuver, Maneuver.ARRIVE]
        assert steps[1].text == f"Take the {transition.value} (Core) from level 0 to level 2"
        assert steps[1].distance_m == 30.0

    def test_turn_after_vertical_transition_not_reported(self):
        a = self._node("a", 0, 0, level=0)
        b = self._node("b", 0, 0.001, level=0)
        b2 = self._node("b2", 0, 0.001, level=1)
        c = self._node("c", 0.001, 0.001, level=1)
        steps = build_instructions(
            [a, b, b2, c],
            [
                self._edge(a, b, "Lower Hall"),
                GraphEdge("b", "b2", 15.0, kind=EdgeKind.VERTICAL,
                          transition=TransitionKind.STAIRS, name="stairs"),
                self._edge(b2, c, "Upper Hall"),
            ],
        )
        assert [s.maneuver for s in steps] == [
            Maneuver.DEPART,
            Maneuver.CONTINUE,
            Maneuver.USE_STAIRS,
            Maneuver.CONTINUE,
            Maneuver.ARRIVE,
        ]
        assert steps[2].text == "Take the stairs from level 0 to level 1"

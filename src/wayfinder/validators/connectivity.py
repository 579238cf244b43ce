"""Graph connectivity validators.

Error codes:
    E001: Node has no incoming or outgoing edges → ERROR
    W002: Road ends in a dead end and is not marked as a cul-de-sac → WARNING
    E003: Node group disconnected from the main network → ERROR
    W004: Road joins no intersection and no other road → WARNING
"""

from __future__ import annotations

from collections import Counter, deque

from wayfinder.graph.network import NavigationGraph, NodeKind
from wayfinder.models.spatial import Campus
from wayfinder.validators.issues import Category, Severity, ValidationIssue


def validate_connectivity(
    graph: NavigationGraph,
    campus: Campus,
    components: list[list[str]] | None = None,
) -> list[ValidationIssue]:
    """Run all connectivity validators."""
    if components is None:
        components = connected_components(graph)
    issues: list[ValidationIssue] = []
    issues.extend(validate_isolated_nodes(graph))
    issues.extend(validate_dead_end_roads(graph, campus))
    issues.extend(validate_components(graph, components))
    issues.extend(validate_unconnected_roads(graph, campus))
    return issues


def connected_components(graph: NavigationGraph) -> list[list[str]]:
    """Components of the graph with edge direction ignored.

    Sorted largest first; equal sizes keep node insertion order. Node ids
    within a component are in BFS order from its first-inserted node.
    """
    adjacency = graph.undirected_adjacency()
    seen: set[str] = set()
    components: list[list[str]] = []

    for node_id in graph.nodes:
        if node_id in seen:
            continue
        seen.add(node_id)
        component = [node_id]
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            for neighbor in sorted(adjacency[current]):
                if neighbor not in seen:
                    seen.add(neighbor)
                    component.append(neighbor)
                    queue.append(neighbor)
        components.append(component)

    components.sort(key=len, reverse=True)
    return components


def validate_isolated_nodes(graph: NavigationGraph) -> list[ValidationIssue]:
    """E001: node with in-degree and out-degree both zero."""
    issues: list[ValidationIssue] = []
    for node in graph.nodes.values():
        if graph.degree(node.id) > 0:
            continue
        label = node.name or node.id
        issues.append(ValidationIssue(
            code="E001",
            severity=Severity.ERROR,
            category=Category.CONNECTIVITY,
            title="Isolated node",
            message=f"{node.kind.value.capitalize()} '{label}' has no connections.",
            suggested_fix="Connect it to a nearby road or remove it.",
            related_id=node.id,
            location=node.position,
        ))
    return issues


def validate_dead_end_roads(
    graph: NavigationGraph, campus: Campus
) -> list[ValidationIssue]:
    """W002: a road endpoint whose node leads nowhere else.

    Roads flagged `cul_de_sac` are dead ends by design and are skipped.
    """
    issues: list[ValidationIssue] = []
    adjacency = graph.undirected_adjacency()

    for _, _, road in campus.iter_roads():
        if road.cul_de_sac:
            continue
        node_ids = graph.road_nodes.get(road.id)
        if not node_ids or len(node_ids) < 2:
            continue
        dead_ends = [
            node_id
            for node_id in dict.fromkeys((node_ids[0], node_ids[-1]))
            if len(adjacency.get(node_id, ())) <= 1
        ]
        if not dead_ends:
            continue
        which = "both ends" if len(dead_ends) == 2 else "one end"
        issues.append(ValidationIssue(
            code="W002",
            severity=Severity.WARNING,
            category=Category.NAVIGATION,
            title="Dead-end road",
            message=f"Road '{road.name or road.id}' is a dead end at {which}.",
            suggested_fix=(
                "Connect the end to another road, or mark the road as a cul-de-sac."
            ),
            related_id=road.id,
            location=graph.nodes[dead_ends[0]].position,
        ))
    return issues


def validate_components(
    graph: NavigationGraph, components: list[list[str]]
) -> list[ValidationIssue]:
    """E003: every component other than the largest."""
    issues: list[ValidationIssue] = []
    if len(components) <= 1:
        return issues

    main_size = len(components[0])
    for number, component in enumerate(components[1:], start=2):
        first = graph.nodes[component[0]]
        sample = ", ".join(graph.nodes[n].name or n for n in component[:3])
        more = f" and {len(component) - 3} more" if len(component) > 3 else ""
        issues.append(ValidationIssue(
            code="E003",
            severity=Severity.ERROR,
            category=Category.CONNECTIVITY,
            title=f"Disconnected component {number}",
            message=(
                f"{len(component)} node(s) ({sample}{more}) cannot reach the "
                f"main network of {main_size} node(s)."
            ),
            suggested_fix="Add a road linking this group to the rest of the network.",
            related_id=first.id,
            location=first.position,
        ))
    return issues


def validate_unconnected_roads(
    graph: NavigationGraph, campus: Campus
) -> list[ValidationIssue]:
    """W004: road that lists no intersections and touches nothing.

    Roads joined by snapping (an endpoint on an intersection or on another
    road's node) count as connected.
    """
    issues: list[ValidationIssue] = []
    shared = Counter(
        node_id for node_ids in graph.road_nodes.values() for node_id in set(node_ids)
    )

    for _, _, road in campus.iter_roads():
        if road.connected_intersections:
            continue
        node_ids = graph.road_nodes.get(road.id)
        if not node_ids or len(node_ids) < 2:
            continue
        joined = any(
            graph.nodes[node_id].kind is NodeKind.INTERSECTION or shared[node_id] > 1
            for node_id in node_ids
        )
        if joined:
            continue
        issues.append(ValidationIssue(
            code="W004",
            severity=Severity.WARNING,
            category=Category.NAVIGATION,
            title="Unconnected road",
            message=(
                f"Road '{road.name or road.id}' is not connected to any "
                f"intersection or other road."
            ),
            suggested_fix="Draw the road's ends onto an intersection or list them.",
            related_id=road.id,
            location=road.points[0],
        ))
    return issues

"""Spatial-model data integrity validators.

Error codes:
    E020: Id used more than once in the same scope → ERROR
    E021: Road has no points → ERROR
    W022: Road has a single point → WARNING
    I023: Road is shorter than the short-road threshold → INFO
    W024: Road references an unknown intersection → WARNING
    I025: Road has very short segments → INFO (performance)
    W026: Campus has no buildings, roads or intersections → WARNING
    W027: Element left out of the graph by the builder → WARNING
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable

from wayfinder.graph.network import NavigationGraph
from wayfinder.models.spatial import Campus
from wayfinder.settings import NavigationSettings
from wayfinder.validators.issues import Category, Severity, ValidationIssue


def validate_integrity(
    graph: NavigationGraph,
    campus: Campus,
    settings: NavigationSettings | None = None,
) -> list[ValidationIssue]:
    """Run all data integrity validators."""
    settings = settings or NavigationSettings()
    issues: list[ValidationIssue] = []
    issues.extend(validate_empty_campus(campus))
    issues.extend(validate_duplicate_ids(campus))
    issues.extend(validate_roads(campus, settings))
    already_reported = {
        issue.related_id for issue in issues if issue.severity is not Severity.INFO
    }
    issues.extend(validate_degraded(graph, already_reported))
    return issues


def validate_empty_campus(campus: Campus) -> list[ValidationIssue]:
    """W026: nothing to navigate."""
    if not campus.is_empty:
        return []
    return [ValidationIssue(
        code="W026",
        severity=Severity.WARNING,
        category=Category.DATA_INTEGRITY,
        title="Empty campus",
        message=f"Campus '{campus.name}' has no buildings, roads or intersections.",
        suggested_fix="Add roads and intersections to build a navigable network.",
        related_id=campus.id,
    )]


def _duplicates(ids: Iterable[str]) -> list[str]:
    counts = Counter(ids)
    return [element_id for element_id, count in counts.items() if count > 1]


def validate_duplicate_ids(campus: Campus) -> list[ValidationIssue]:
    """E020: duplicate building/floor ids, and duplicate element ids per layer.

    A layer is the outdoor layer or one floor; intersections, roads and
    landmarks in a layer share one id space.
    """
    issues: list[ValidationIssue] = []

    def report(element_id: str, what: str, where: str) -> None:
        issues.append(ValidationIssue(
            code="E020",
            severity=Severity.ERROR,
            category=Category.DATA_INTEGRITY,
            title=f"Duplicate {what} id",
            message=f"Id '{element_id}' is used more than once {where}.",
            suggested_fix="Give every element a unique id.",
            related_id=element_id,
        ))

    for element_id in _duplicates(b.id for b in campus.buildings):
        report(element_id, "building", "among buildings")
    for element_id in _duplicates(f.id for b in campus.buildings for f in b.floors):
        report(element_id, "floor", "among floors")

    layers: dict[str, list[str]] = defaultdict(list)
    layers["the outdoor layer"].extend(
        [i.id for i in campus.outdoor_intersections]
        + [r.id for r in campus.outdoor_roads]
        + [lm.id for lm in campus.outdoor_landmarks]
    )
    for building in campus.buildings:
        for floor in building.floors:
            layers[f"on {building.name} - {floor.display_name}"].extend(
                [i.id for i in floor.intersections]
                + [r.id for r in floor.roads]
                + [lm.id for lm in floor.landmarks]
            )
    for where, ids in layers.items():
        for element_id in _duplicates(ids):
            report(element_id, "element", where)
    return issues


def validate_roads(campus: Campus, settings: NavigationSettings) -> list[ValidationIssue]:
    """E021, W022, I023, W024, I025 for every road."""
    issues: list[ValidationIssue] = []
    intersection_ids = {i.id for _, _, i in campus.iter_intersections()}

    for _, _, road in campus.iter_roads():
        label = road.name or road.id
        count = len(road.points)
        if count == 0:
            issues.append(ValidationIssue(
                code="E021",
                severity=Severity.ERROR,
                category=Category.DATA_INTEGRITY,
                title="Empty road",
                message=f"Road '{label}' has no points.",
                suggested_fix="Draw the road again or delete it.",
                related_id=road.id,
            ))
        elif count == 1:
            issues.append(ValidationIssue(
                code="W022",
                severity=Severity.WARNING,
                category=Category.DATA_INTEGRITY,
                title="Single-point road",
                message=f"Road '{label}' has only one point and cannot be navigated.",
                suggested_fix="Add at least one more point.",
                related_id=road.id,
                location=road.points[0],
            ))
        else:
            if road.length < settings.short_road_m:
                issues.append(ValidationIssue(
                    code="I023",
                    severity=Severity.INFO,
                    category=Category.DATA_INTEGRITY,
                    title="Very short road",
                    message=f"Road '{label}' is only {road.length:.2f} m long.",
                    suggested_fix="Check whether this road is a drawing mistake.",
                    related_id=road.id,
                    location=road.points[0],
                ))
            short_segments = sum(
                1
                for a, b in zip(road.points, road.points[1:])
                if a.distance_to(b) < settings.dense_segment_m
            )
            if short_segments:
                issues.append(ValidationIssue(
                    code="I025",
                    severity=Severity.INFO,
                    category=Category.PERFORMANCE,
                    title="Dense road geometry",
                    message=(
                        f"Road '{label}' has {short_segments} segment(s) shorter than "
                        f"{settings.dense_segment_m} m."
                    ),
                    suggested_fix="Simplify the road geometry.",
                    related_id=road.id,
                    location=road.points[0],
                ))

        unknown = [i for i in road.connected_intersections if i not in intersection_ids]
        if unknown:
            issues.append(ValidationIssue(
                code="W024",
                severity=Severity.WARNING,
                category=Category.DATA_INTEGRITY,
                title="Unknown intersection reference",
                message=(
                    f"Road '{label}' references unknown intersection(s): "
                    f"{', '.join(unknown)}."
                ),
                suggested_fix="Remove the stale references.",
                related_id=road.id,
                location=road.points[0] if road.points else None,
            ))
    return issues


def validate_degraded(
    graph: NavigationGraph, already_reported: set[str | None] = frozenset()
) -> list[ValidationIssue]:
    """W027: elements the builder skipped, unless another check covers them."""
    issues: list[ValidationIssue] = []
    for element in graph.degraded:
        if element.element_id in already_reported:
            continue
        issues.append(ValidationIssue(
            code="W027",
            severity=Severity.WARNING,
            category=Category.DATA_INTEGRITY,
            title="Element left out of the graph",
            message=f"'{element.element_id}': {element.reason}.",
            suggested_fix="Fix the element's geometry or id.",
            related_id=element.element_id,
        ))
    return issues

"""Landmark reachability and building accessibility validators.

Error codes:
    W010: Landmark not linked to any road node → WARNING (navigation)
    E011: Multi-floor building without elevator or stairs → ERROR
    W012: Multi-floor building without an elevator → WARNING
    W013: Building has no entrance → WARNING
    I014: Building entrances are not marked accessible → INFO
    I015: Building has a single entrance → INFO
    W016: Building has no ground floor (level 0) → WARNING
    W017: Elevator/stairs lists no connected floors → WARNING
    E018: Elevator/stairs lists a floor that does not exist → ERROR (data integrity)
    W019: Elevator/stairs lists a floor it is not wired to → WARNING
"""

from __future__ import annotations

from wayfinder.graph.network import NavigationGraph
from wayfinder.models.spatial import Building, Campus, LandmarkKind
from wayfinder.settings import NavigationSettings
from wayfinder.validators.issues import Category, Severity, ValidationIssue


def validate_accessibility(
    graph: NavigationGraph,
    campus: Campus,
    settings: NavigationSettings | None = None,
) -> list[ValidationIssue]:
    """Run all landmark and building accessibility validators."""
    settings = settings or NavigationSettings()
    issues: list[ValidationIssue] = []
    issues.extend(validate_landmark_reachability(graph, campus, settings))
    for building in campus.buildings:
        issues.extend(validate_vertical_circulation(graph, building))
        issues.extend(validate_building_access(building))
    return issues


def validate_landmark_reachability(
    graph: NavigationGraph,
    campus: Campus,
    settings: NavigationSettings,
) -> list[ValidationIssue]:
    """W010: landmark the builder could not link to a road node."""
    issues: list[ValidationIssue] = []
    radius = settings.landmark_connection_radius_m

    for building, floor, landmark in campus.iter_landmarks():
        node = graph.get_node(landmark.id)
        # Landmarks dropped as duplicates are reported by the integrity checks.
        if node is None or node.landmark_kind is None or node.position != landmark.position:
            continue
        if landmark.id in graph.linked_landmarks:
            continue
        where = f" in {building.name} - {floor.display_name}" if building and floor else ""
        issues.append(ValidationIssue(
            code="W010",
            severity=Severity.WARNING,
            category=Category.NAVIGATION,
            title="Unreachable landmark",
            message=(
                f"Landmark '{landmark.name or landmark.id}'{where} is more than "
                f"{radius:.0f} m from any road."
            ),
            suggested_fix="Add a road or walkway within reach of this landmark.",
            related_id=landmark.id,
            location=landmark.position,
        ))
    return issues


def validate_vertical_circulation(
    graph: NavigationGraph, building: Building
) -> list[ValidationIssue]:
    """E011, W012, W017, E018, W019 for one building."""
    issues: list[ValidationIssue] = []
    if not building.is_multi_floor:
        return issues

    circulation = [
        (floor, landmark)
        for floor, landmark in building.iter_landmarks()
        if landmark.kind.is_vertical_circulation
    ]
    if not circulation:
        issues.append(ValidationIssue(
            code="E011",
            severity=Severity.ERROR,
            category=Category.ACCESSIBILITY,
            title="No vertical circulation",
            message=(
                f"Building '{building.name}' has {len(building.floors)} floors "
                f"but no elevator, stairs or escalator."
            ),
            suggested_fix="Add an elevator or staircase connecting the floors.",
            related_id=building.id,
            location=building.center,
        ))
    if not any(lm.kind is LandmarkKind.ELEVATOR for _, lm in circulation):
        issues.append(ValidationIssue(
            code="W012",
            severity=Severity.WARNING,
            category=Category.ACCESSIBILITY,
            title="No elevator",
            message=(
                f"Building '{building.name}' has several floors but no elevator; "
                f"upper floors are not step-free."
            ),
            suggested_fix="Add an elevator serving every floor.",
            related_id=building.id,
            location=building.center,
        ))

    floor_ids = {floor.id for floor in building.floors}
    for floor, landmark in circulation:
        label = f"{landmark.kind.value.capitalize()} '{landmark.name or landmark.id}'"
        if not landmark.connected_floors:
            issues.append(ValidationIssue(
                code="W017",
                severity=Severity.WARNING,
                category=Category.ACCESSIBILITY,
                title="Single-floor circulation",
                message=f"{label} on {floor.display_name} lists no connected floors.",
                suggested_fix="List the floors this element serves.",
                related_id=landmark.id,
                location=landmark.position,
            ))
            continue

        wired = {
            graph.nodes[edge.target].floor_id
            for edge in graph.edges_from(landmark.id)
            if edge.is_vertical_transition
        }
        for target_floor_id in landmark.connected_floors:
            if target_floor_id == floor.id:
                continue
            if target_floor_id not in floor_ids:
                issues.append(ValidationIssue(
                    code="E018",
                    severity=Severity.ERROR,
                    category=Category.DATA_INTEGRITY,
                    title="Unknown connected floor",
                    message=(
                        f"{label} lists floor '{target_floor_id}', which does not "
                        f"exist in '{building.name}'."
                    ),
                    suggested_fix="Remove the floor reference or fix its id.",
                    related_id=landmark.id,
                    location=landmark.position,
                ))
            elif target_floor_id not in wired:
                target = building.get_floor(target_floor_id)
                issues.append(ValidationIssue(
                    code="W019",
                    severity=Severity.WARNING,
                    category=Category.ACCESSIBILITY,
                    title="Disconnected vertical circulation",
                    message=(
                        f"{label} on {floor.display_name} lists "
                        f"{target.display_name if target else target_floor_id} "
                        f"but has no matching {landmark.kind.value} there."
                    ),
                    suggested_fix=(
                        f"Add a {landmark.kind.value} on that floor at the same spot."
                    ),
                    related_id=landmark.id,
                    location=landmark.position,
                ))
    return issues


def validate_building_access(building: Building) -> list[ValidationIssue]:
    """W013, I014, I015, W016 for one building."""
    issues: list[ValidationIssue] = []

    if building.floors and building.ground_floor is None:
        issues.append(ValidationIssue(
            code="W016",
            severity=Severity.WARNING,
            category=Category.ACCESSIBILITY,
            title="No ground floor",
            message=f"Building '{building.name}' has no floor at level 0.",
            suggested_fix="Add a ground floor or renumber the floor levels.",
            related_id=building.id,
            location=building.center,
        ))

    entrances = [lm for _, lm in building.iter_landmarks() if lm.kind.is_entrance]
    if not entrances:
        issues.append(ValidationIssue(
            code="W013",
            severity=Severity.WARNING,
            category=Category.ACCESSIBILITY,
            title="No building entrances",
            message=f"Building '{building.name}' has no entrance or exit landmark.",
            suggested_fix="Add at least one entrance on the ground floor.",
            related_id=building.id,
            location=building.center,
        ))
        return issues

    if not any(lm.accessible for lm in entrances):
        issues.append(ValidationIssue(
            code="I014",
            severity=Severity.INFO,
            category=Category.ACCESSIBILITY,
            title="No accessible entrance",
            message=f"None of the entrances of '{building.name}' is marked accessible.",
            suggested_fix="Mark step-free entrances as accessible.",
            related_id=building.id,
            location=entrances[0].position,
        ))
    if len(entrances) == 1:
        issues.append(ValidationIssue(
            code="I015",
            severity=Severity.INFO,
            category=Category.ACCESSIBILITY,
            title="Single entrance",
            message=f"Building '{building.name}' has only one entrance.",
            suggested_fix="Consider adding an additional entrance or emergency exit.",
            related_id=building.id,
            location=entrances[0].position,
        ))
    return issues

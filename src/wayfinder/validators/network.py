"""Network validator entry point.

Runs the connectivity, accessibility and integrity validators over a built
graph and the campus it came from. Neither input is modified. Issues are
always collected, never raised.
"""

from __future__ import annotations

import logging

from wayfinder.graph.builder import build_graph
from wayfinder.graph.network import NavigationGraph
from wayfinder.models.spatial import Campus
from wayfinder.settings import NavigationSettings
from wayfinder.validators.accessibility import validate_accessibility
from wayfinder.validators.connectivity import connected_components, validate_connectivity
from wayfinder.validators.integrity import validate_integrity
from wayfinder.validators.issues import ValidationResult
from wayfinder.validators.statistics import network_statistics

logger = logging.getLogger(__name__)


def validate(
    graph: NavigationGraph,
    campus: Campus,
    settings: NavigationSettings | None = None,
) -> ValidationResult:
    """Validate a navigation graph against its campus.

    Args:
        graph: Graph built from `campus`.
        campus: The spatial model snapshot.
        settings: Thresholds (connection radius, short road, dense segment).

    Returns:
        All issues found plus network statistics.
    """
    settings = settings or NavigationSettings()
    components = connected_components(graph)

    result = ValidationResult()
    result.issues.extend(validate_connectivity(graph, campus, components))
    result.issues.extend(validate_accessibility(graph, campus, settings))
    result.issues.extend(validate_integrity(graph, campus, settings))
    result.statistics = network_statistics(graph, campus, components)

    logger.debug(
        "Validated campus %s: %d error(s), %d warning(s), %d info",
        campus.id,
        result.error_count,
        result.warning_count,
        result.info_count,
    )
    return result


def validate_campus(
    campus: Campus, settings: NavigationSettings | None = None
) -> ValidationResult:
    """Build a graph for `campus` and validate it."""
    settings = settings or NavigationSettings()
    return validate(build_graph(campus, settings), campus, settings)

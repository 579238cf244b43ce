"""Identifier generation and derivation.

Entities in the spatial model carry caller-supplied ids. Graph nodes that
have no entity of their own (road waypoints) derive theirs from the road id
and point index, so rebuilding from an unchanged model yields the same ids.
"""

from __future__ import annotations

import uuid


def generate_id() -> str:
    """Generate a new random entity id."""
    return uuid.uuid4().hex


def waypoint_node_id(road_id: str, index: int) -> str:
    """Stable node id for point `index` of road `road_id`."""
    return f"{road_id}#{index}"

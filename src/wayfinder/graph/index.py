"""Nearest-node lookup from a coordinate.

Callers depend on the NodeIndex protocol only, so the linear scan below can
be replaced by a spatial tree without touching them. The scan is
vectorized with numpy; at campus sizes (up to a few thousand nodes) that
is fast enough for interactive use.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import numpy as np

from wayfinder.graph.network import GraphNode, NavigationGraph, NodeKind
from wayfinder.models.geometry import LatLng, haversine_many


class NodeIndex(Protocol):
    """Spatial lookup over graph nodes."""

    def nearest(
        self,
        position: LatLng,
        *,
        floor_id: str | None = None,
        building_id: str | None = None,
        kinds: Iterable[NodeKind] | None = None,
        max_distance: float | None = None,
    ) -> str | None: ...

    def within(
        self,
        position: LatLng,
        radius: float,
        *,
        floor_id: str | None = None,
        building_id: str | None = None,
        kinds: Iterable[NodeKind] | None = None,
        limit: int | None = None,
    ) -> list[tuple[str, float]]: ...


class LinearScanIndex:
    """Brute-force nearest-node index.

    Filters: `floor_id` / `building_id` restrict to that scope when given
    (None means unrestricted), `kinds` restricts node kinds. Ties on
    distance resolve to the node inserted first.
    """

    def __init__(self, nodes: Iterable[GraphNode]) -> None:
        self._nodes = list(nodes)
        self._ids = [n.id for n in self._nodes]
        self._lats = np.array([n.position.lat for n in self._nodes], dtype=float)
        self._lons = np.array([n.position.lon for n in self._nodes], dtype=float)

    @classmethod
    def from_graph(cls, graph: NavigationGraph) -> LinearScanIndex:
        return cls(graph.nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def _mask(
        self,
        floor_id: str | None,
        building_id: str | None,
        kinds: Iterable[NodeKind] | None,
    ) -> np.ndarray:
        mask = np.ones(len(self._nodes), dtype=bool)
        if floor_id is not None:
            mask &= np.array([n.floor_id == floor_id for n in self._nodes], dtype=bool)
        if building_id is not None:
            mask &= np.array(
                [n.building_id == building_id for n in self._nodes], dtype=bool
            )
        if kinds is not None:
            wanted = set(kinds)
            mask &= np.array([n.kind in wanted for n in self._nodes], dtype=bool)
        return mask

    def within(
        self,
        position: LatLng,
        radius: float,
        *,
        floor_id: str | None = None,
        building_id: str | None = None,
        kinds: Iterable[NodeKind] | None = None,
        limit: int | None = None,
    ) -> list[tuple[str, float]]:
        """(node id, distance) pairs within `radius`, nearest first."""
        if not self._nodes:
            return []
        distances = haversine_many(position.lat, position.lon, self._lats, self._lons)
        mask = self._mask(floor_id, building_id, kinds) & (distances <= radius)
        candidates = np.flatnonzero(mask)
        order = candidates[np.argsort(distances[candidates], kind="stable")]
        if limit is not None:
            order = order[:limit]
        return [(self._ids[i], float(distances[i])) for i in order]

    def nearest(
        self,
        position: LatLng,
        *,
        floor_id: str | None = None,
        building_id: str | None = None,
        kinds: Iterable[NodeKind] | None = None,
        max_distance: float | None = None,
    ) -> str | None:
        """Id of the closest matching node, or None if nothing is in range."""
        radius = np.inf if max_distance is None else max_distance
        hits = self.within(
            position,
            radius,
            floor_id=floor_id,
            building_id=building_id,
            kinds=kinds,
            limit=1,
        )
        return hits[0][0] if hits else None

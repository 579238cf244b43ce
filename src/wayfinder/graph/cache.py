"""Rebuild-on-change cache for the navigation graph.

The owning application holds one GraphCache per campus it edits. `get`
returns the cached graph while the campus cache key is unchanged and
rebuilds otherwise; `invalidate` forces the next `get` to rebuild.
"""

from __future__ import annotations

import logging

from wayfinder.graph.builder import GraphBuilder
from wayfinder.graph.network import NavigationGraph
from wayfinder.models.spatial import Campus
from wayfinder.settings import NavigationSettings

logger = logging.getLogger(__name__)


class GraphCache:
    """Holds at most one built graph, keyed by `Campus.cache_key()`."""

    def __init__(self, settings: NavigationSettings | None = None) -> None:
        self._builder = GraphBuilder(settings)
        self._graph: NavigationGraph | None = None
        self._key: str | None = None
        self.builds = 0

    @property
    def key(self) -> str | None:
        return self._key

    def get(self, campus: Campus) -> NavigationGraph:
        """Cached graph for `campus`, rebuilding if it changed."""
        key = campus.cache_key()
        if self._graph is None or key != self._key:
            return self.rebuild(campus)
        return self._graph

    def rebuild(self, campus: Campus) -> NavigationGraph:
        """Build unconditionally and cache the result."""
        graph = self._builder.build(campus)
        self._graph = graph
        self._key = graph.source_key
        self.builds += 1
        logger.debug("Rebuilt navigation graph (%s), build #%d", self._key, self.builds)
        return graph

    def invalidate(self) -> None:
        """Drop the cached graph."""
        self._graph = None
        self._key = None

"""Navigation graph: data structures, builder, nearest-node index, cache.

- network: GraphNode / GraphEdge / NavigationGraph
- builder: Campus → NavigationGraph
- index: nearest-node lookup (NodeIndex protocol, linear scan)
- cache: rebuild-on-change holder keyed by the campus identity
"""

from wayfinder.graph.network import (
    DegradedElement,
    EdgeKind,
    GraphEdge,
    GraphNode,
    NavigationGraph,
    NodeKind,
)
from wayfinder.graph.index import LinearScanIndex, NodeIndex
from wayfinder.graph.builder import GraphBuilder, build_graph
from wayfinder.graph.cache import GraphCache

__all__ = [
    "DegradedElement",
    "EdgeKind",
    "GraphEdge",
    "GraphNode",
    "NavigationGraph",
    "NodeKind",
    "LinearScanIndex",
    "NodeIndex",
    "GraphBuilder",
    "build_graph",
    "GraphCache",
]

"""Campus wayfinding: navigation graph, A* routing and network validation."""

__version__ = "0.1.0"

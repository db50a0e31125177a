from .overview_graph import MAX_EDGE_THICKNESS, OverviewGraph, build_overview_graph

__all__ = [
    "MAX_EDGE_THICKNESS",
    "OverviewGraph",
    "build_overview_graph",
]

"""Graph engine for the airport network.

This subpackage contains the in-memory graph store, the traversal
primitives built on top of it, and the path and network queries.
"""

from .analysis import AttributeKey, NetworkAnalyzer
from .network import FlightGraph, Route, Vertex
from .paths import (
    common_airlines,
    merge_segments,
    path_distance,
    shortest_paths,
    shortest_paths_through_waypoints,
)
from .traversal import TraversalState, bfs, dfs, dfs_all, iter_bfs

__all__ = [
    "FlightGraph",
    "Vertex",
    "Route",
    "TraversalState",
    "bfs",
    "dfs",
    "dfs_all",
    "iter_bfs",
    "shortest_paths",
    "shortest_paths_through_waypoints",
    "merge_segments",
    "common_airlines",
    "path_distance",
    "NetworkAnalyzer",
    "AttributeKey",
]

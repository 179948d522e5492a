"""Minimum-hop path enumeration.

``shortest_paths`` lists every minimum-hop path between two airports that
breadth-first search can reach through its discovery tree, and
``shortest_paths_through_waypoints`` chains such searches through an
ordered list of mandatory stops.

Composition is combinatorial: with ``k`` waypoints and ``b`` equally short
options per segment there can be ``b ** (k + 1)`` composed paths. Shortest
path ties are rare on real networks, but callers can bound the output
with ``max_paths``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

from ..domain.models import Airline, Airport, FlightPath
from .network import FlightGraph, Vertex
from .traversal import TraversalState, iter_bfs

logger = logging.getLogger(__name__)

SegmentFinder = Callable[[Vertex, Vertex], List[FlightPath]]


def _resolve(graph: FlightGraph, node: "str | Vertex") -> Optional[Vertex]:
    if isinstance(node, Vertex):
        return node
    return graph.find_vertex(node)


def _walk_back(parents: Dict[Vertex, Optional[Vertex]], vertex: Vertex) -> List[Vertex]:
    chain: List[Vertex] = []
    current: Optional[Vertex] = vertex
    while current is not None:
        chain.append(current)
        current = parents[current]
    chain.reverse()
    return chain


def path_distance(graph: FlightGraph, airports: Sequence[Airport]) -> float:
    """Sum of the route distances along consecutive airports."""
    return sum(
        graph.distance_between(a.code, b.code) for a, b in zip(airports, airports[1:])
    )


def shortest_paths(
    graph: FlightGraph,
    source: "str | Vertex",
    target: "str | Vertex",
) -> List[FlightPath]:
    """Find all minimum-hop paths from ``source`` to ``target``.

    The search runs breadth-first from the source. Every route into the
    target leaving a dequeued vertex yields a candidate built from that
    vertex's discovery path; candidates longer than the best seen are
    discarded, and the search stops once no shorter or equal candidate
    can appear.

    Args:
        graph: The flight network.
        source: Departure airport code or vertex.
        target: Arrival airport code or vertex.

    Returns:
        Paths of equal hop count in discovery order. A single one-airport
        path when source and target coincide; empty when either endpoint
        is absent or the target is unreachable.
    """
    start = _resolve(graph, source)
    goal = _resolve(graph, target)
    if start is None or goal is None:
        return []
    if start is goal:
        return [FlightPath((start.airport,), 0.0)]

    parents: Dict[Vertex, Optional[Vertex]] = {}
    best_hops: Optional[int] = None
    found: List[List[Vertex]] = []

    for vertex, depth, parent in iter_bfs(start, TraversalState()):
        parents[vertex] = parent
        hops = depth + 1
        if best_hops is not None and hops > best_hops:
            break
        if vertex.route_to(goal) is None:
            continue

        chain = _walk_back(parents, vertex)
        chain.append(goal)
        if best_hops is None or hops < best_hops:
            best_hops = hops
            found = []
        found.append(chain)

    paths = []
    for chain in found:
        airports = tuple(v.airport for v in chain)
        paths.append(FlightPath(airports, path_distance(graph, airports)))
    return paths


def merge_segments(first: FlightPath, second: FlightPath) -> Optional[FlightPath]:
    """Concatenate two paths that share an endpoint.

    Returns:
        The joined path, or None if either path is empty or the last
        airport of ``first`` is not the first airport of ``second``.
    """
    if first.is_empty or second.is_empty:
        return None
    if first.airports[-1] != second.airports[0]:
        logger.debug(
            "Dropping misaligned segments",
            extra={"first": first.codes, "second": second.codes},
        )
        return None
    return FlightPath(
        first.airports + second.airports[1:],
        first.total_distance + second.total_distance,
    )


def shortest_paths_through_waypoints(
    graph: FlightGraph,
    source: "str | Vertex",
    waypoints: Sequence["str | Vertex"],
    target: "str | Vertex",
    max_paths: Optional[int] = None,
    segment_finder: Optional[SegmentFinder] = None,
) -> List[FlightPath]:
    """Compose minimum-hop paths that visit ``waypoints`` in order.

    Each consecutive pair of stops (source, waypoints..., target) is solved
    independently and the segment choices are combined by cross product.

    Args:
        graph: The flight network.
        source: Departure airport code or vertex.
        waypoints: Mandatory intermediate airports, in travel order.
        target: Arrival airport code or vertex.
        max_paths: Upper bound on the number of composed paths kept.
        segment_finder: Optional replacement for ``shortest_paths`` used to
            solve each segment (e.g. a cached one).

    Returns:
        Composed paths; empty if any stop is absent or any segment is
        unreachable.
    """
    stops = [_resolve(graph, node) for node in (source, *waypoints, target)]
    resolved = [stop for stop in stops if stop is not None]
    if len(resolved) != len(stops):
        return []

    def default_finder(a: Vertex, b: Vertex) -> List[FlightPath]:
        return shortest_paths(graph, a, b)

    find = segment_finder or default_finder

    composed = find(resolved[0], resolved[1])
    for a, b in zip(resolved[1:], resolved[2:]):
        if not composed:
            break
        segments = find(a, b)
        joined: List[FlightPath] = []
        for head in composed:
            for tail in segments:
                merged = merge_segments(head, tail)
                if merged is not None:
                    joined.append(merged)
        composed = joined

        if max_paths is not None and len(composed) > max_paths:
            logger.warning(
                "Composed path limit reached",
                extra={"limit": max_paths, "candidates": len(composed)},
            )
            composed = composed[:max_paths]

    if max_paths is not None:
        composed = composed[:max_paths]
    return composed


def common_airlines(graph: FlightGraph, path: "FlightPath | Sequence[Airport]") -> FrozenSet[Airline]:
    """Airlines that operate every leg of ``path``.

    The per-route airline sets are intersected leg by leg and the check
    stops as soon as the running intersection is empty. A path with no
    legs has no operating airline.
    """
    airports = path.airports if isinstance(path, FlightPath) else tuple(path)

    running: Optional[FrozenSet[Airline]] = None
    for a, b in zip(airports, airports[1:]):
        airlines = graph.airlines_between(a.code, b.code)
        running = airlines if running is None else running & airlines
        if not running:
            return frozenset()
    return running or frozenset()

"""Network-wide analytics over a ``FlightGraph``.

The analyzer never mutates the graph. Every query allocates its own
traversal state, and an absent start airport yields an empty or zero
result rather than an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Hashable, Iterator, List, Optional, Set, Tuple, Union

from ..domain.models import Airport, FlightPath, RankedAirport, ReachabilitySummary
from ..monitoring import timed
from .network import FlightGraph, Vertex
from .paths import path_distance
from .traversal import TraversalState, dfs, iter_bfs


class AttributeKey(Enum):
    """Airport attribute used to count distinct destinations."""

    CODE = "code"
    CITY = "city"
    COUNTRY = "country"

    def project(self, airport: Airport) -> Hashable:
        return getattr(airport, self.value)


Projection = Union[AttributeKey, Callable[[Airport], Hashable]]


def _projector(key: Projection) -> Callable[[Airport], Hashable]:
    if isinstance(key, AttributeKey):
        return key.project
    return key


@dataclass
class NetworkAnalyzer:
    """Analytical queries over the flight network.

    Attributes:
        graph: The flight network to analyze
    """

    graph: FlightGraph
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _vertex(self, start: "str | Vertex") -> Optional[Vertex]:
        if isinstance(start, Vertex):
            return start
        return self.graph.find_vertex(start)

    # ------------------------------------------------------------------
    # Reachability
    # ------------------------------------------------------------------

    def count_reachable_within(
        self,
        start: "str | Vertex",
        layovers: int,
        key: Projection = AttributeKey.CODE,
    ) -> int:
        """Count distinct destinations reachable with at most ``layovers`` stops.

        The walk is breadth-first. For every vertex dequeued at a depth no
        greater than ``layovers``, the projected attribute of each route
        destination is collected, so the result counts the neighbours of
        the vertices within the limit (a destination may be the start itself
        when a route leads back to it).

        Args:
            start: Starting airport code or vertex.
            layovers: Maximum number of intermediate stops.
            key: Attribute to count, or a callable projecting an airport.

        Returns:
            Number of distinct projected values, 0 if ``start`` is absent.
        """
        source = self._vertex(start)
        if source is None:
            return 0

        project = _projector(key)
        destinations: Set[Hashable] = set()
        for vertex, depth, _ in iter_bfs(source, TraversalState()):
            if depth > layovers:
                break
            for route in vertex.routes:
                destinations.add(project(route.target.airport))
        return len(destinations)

    def count_reachable_airports_within(self, start: "str | Vertex", layovers: int) -> int:
        return self.count_reachable_within(start, layovers, AttributeKey.CODE)

    def count_reachable_cities_within(self, start: "str | Vertex", layovers: int) -> int:
        return self.count_reachable_within(start, layovers, AttributeKey.CITY)

    def count_reachable_countries_within(self, start: "str | Vertex", layovers: int) -> int:
        return self.count_reachable_within(start, layovers, AttributeKey.COUNTRY)

    def reachable_summary(self, start: "str | Vertex") -> ReachabilitySummary:
        """Count every airport, city and country reachable from ``start``.

        The start airport itself is not counted.
        """
        source = self._vertex(start)
        if source is None:
            return ReachabilitySummary()

        airports: Set[str] = set()
        cities: Set[Tuple[str, str]] = set()
        countries: Set[str] = set()

        def collect(vertex: Vertex) -> None:
            airport = vertex.airport
            airports.add(airport.code)
            cities.add((airport.city, airport.country))
            countries.add(airport.country)

        dfs(self.graph, source, visit=collect)
        return ReachabilitySummary(
            airports=len(airports), cities=len(cities), countries=len(countries)
        )

    # ------------------------------------------------------------------
    # Diameter
    # ------------------------------------------------------------------

    def _eccentricity_paths(self, source: Vertex) -> Tuple[int, List[List[Vertex]]]:
        parents: Dict[Vertex, Optional[Vertex]] = {}
        farthest: List[Vertex] = []
        max_depth = 0

        for vertex, depth, parent in iter_bfs(source, TraversalState()):
            parents[vertex] = parent
            if depth > max_depth:
                max_depth = depth
                farthest = []
            if depth == max_depth:
                farthest.append(vertex)

        chains = []
        for vertex in farthest:
            chain: List[Vertex] = []
            current: Optional[Vertex] = vertex
            while current is not None:
                chain.append(current)
                current = parents[current]
            chain.reverse()
            chains.append(chain)
        return max_depth, chains

    def diameter(self) -> Tuple[int, List[FlightPath]]:
        """Compute the directed hop diameter and the paths achieving it.

        One breadth-first search runs from every airport, so the cost is
        O(V * (V + E)). Distances follow route direction: an airport that
        can reach another does not imply the reverse.

        Returns:
            ``(diameter, paths)`` where ``paths`` holds one discovery path
            for every (source, destination) pair at maximal distance.
            ``(0, [])`` for an empty graph.
        """
        diameter = 0
        longest: List[List[Vertex]] = []

        with timed("diameter", self._logger, vertices=len(self.graph)):
            for source in self.graph:
                distance, chains = self._eccentricity_paths(source)
                if distance > diameter:
                    diameter = distance
                    longest = []
                if distance == diameter:
                    longest.extend(chains)

        paths = []
        for chain in longest:
            airports = tuple(v.airport for v in chain)
            paths.append(FlightPath(airports, path_distance(self.graph, airports)))

        self._logger.info(
            "Diameter computed",
            extra={"diameter": diameter, "paths": len(paths)},
        )
        return diameter, paths

    # ------------------------------------------------------------------
    # Articulation points
    # ------------------------------------------------------------------

    def articulation_points(self) -> Set[str]:
        """Find the essential airports of the network.

        A single depth-first pass over every component maintains the
        discovery order and low-link value of each vertex. A root is
        essential when it has at least two DFS children; any other vertex
        is essential when one of its children has a low-link not smaller
        than the vertex's own discovery order. Low-links are only lowered
        through routes to vertices whose subtree is still open.

        Returns:
            Codes of the essential airports.
        """
        state = TraversalState()
        essential: Set[str] = set()
        counter = 0

        def enter(vertex: Vertex) -> None:
            nonlocal counter
            state.mark_visited(vertex)
            state.set_processing(vertex, True)
            state.discovery[vertex] = counter
            state.low[vertex] = counter
            counter += 1

        with timed("articulation_points", self._logger, vertices=len(self.graph)):
            for root in self.graph:
                if state.is_visited(root):
                    continue

                enter(root)
                root_children = 0
                stack: List[Tuple[Vertex, Iterator[Vertex]]] = [
                    (root, root.neighbors())
                ]

                while stack:
                    vertex, neighbors = stack[-1]
                    child: Optional[Vertex] = None
                    for neighbor in neighbors:
                        if not state.is_visited(neighbor):
                            child = neighbor
                            break
                        if state.is_processing(neighbor):
                            state.low[vertex] = min(
                                state.low[vertex], state.discovery[neighbor]
                            )

                    if child is not None:
                        if vertex is root:
                            root_children += 1
                        enter(child)
                        stack.append((child, child.neighbors()))
                        continue

                    stack.pop()
                    state.set_processing(vertex, False)
                    if not stack:
                        break

                    parent = stack[-1][0]
                    state.low[parent] = min(state.low[parent], state.low[vertex])
                    if parent is not root and state.low[vertex] >= state.discovery[parent]:
                        essential.add(parent.code)

                if root_children > 1:
                    essential.add(root.code)

        self._logger.info(
            "Articulation points computed", extra={"count": len(essential)}
        )
        return essential

    # ------------------------------------------------------------------
    # Traffic ranking
    # ------------------------------------------------------------------

    def top_k_by_traffic(self, k: int) -> List[RankedAirport]:
        """Rank airports by inbound plus outbound flights.

        ``k`` counts traffic levels, not airports: every airport sharing
        one of the ``k`` highest traffic values is returned, so a tie is
        never cut in the middle. With traffic [10, 10, 10, 8] and ``k=2``
        all four airports are returned. Airports with equal traffic keep
        their insertion order.

        Returns:
            Ranked airports, busiest first. Empty when ``k < 1``.
        """
        if k < 1:
            return []

        ranked = sorted(self.graph, key=lambda v: v.traffic, reverse=True)
        result: List[RankedAirport] = []
        levels = 0
        last: Optional[int] = None
        for vertex in ranked:
            if vertex.traffic != last:
                levels += 1
                last = vertex.traffic
                if levels > k:
                    break
            result.append(RankedAirport(vertex.airport, vertex.traffic))
        return result

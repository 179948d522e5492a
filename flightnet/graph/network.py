"""In-memory store for the airport network.

The store owns the airport vertices and the directed flight routes
between them. It is populated once by the ingestion adapter and is
treated as read-only by every query afterwards: traversal state lives in
per-query objects (see ``traversal.TraversalState``), never on the
vertices themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional

from ..domain.models import Airline, Airport

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    """Normalize an airport code for lookups (trimmed, upper-cased)."""
    return code.strip().upper()


@dataclass(eq=False)
class Route:
    """A directed flight route between two airports.

    Attributes:
        source: Vertex the route leaves from
        target: Vertex the route arrives at
        distance: Great-circle distance in kilometers
    """

    source: Vertex
    target: Vertex
    distance: float
    _airlines: Dict[str, Airline] = field(default_factory=dict, repr=False)

    @property
    def airlines(self) -> FrozenSet[Airline]:
        """Airlines operating this route."""
        return frozenset(self._airlines.values())

    def add_airline(self, airline: Airline) -> bool:
        """Merge an airline onto the route.

        Returns:
            True if the airline was not already operating the route.
        """
        if airline.code in self._airlines:
            return False
        self._airlines[airline.code] = airline
        return True


@dataclass(eq=False)
class Vertex:
    """An airport vertex with its outgoing routes and traffic counters.

    ``flights_in`` and ``flights_out`` count individual flights (one per
    airline per route) and are maintained by the ingestion adapter.
    ``in_degree`` and ``out_degree`` count routes and are refreshed by
    ``FlightGraph.compute_degrees``.
    """

    airport: Airport
    in_degree: int = 0
    out_degree: int = 0
    flights_in: int = 0
    flights_out: int = 0
    _routes: Dict[str, Route] = field(default_factory=dict, repr=False)

    @property
    def code(self) -> str:
        return self.airport.code

    @property
    def routes(self) -> List[Route]:
        """Outgoing routes in insertion order."""
        return list(self._routes.values())

    @property
    def traffic(self) -> int:
        """Total number of flights in and out of the airport."""
        return self.flights_in + self.flights_out

    def route_to(self, target: Vertex) -> Optional[Route]:
        return self._routes.get(normalize_code(target.code))

    def neighbors(self) -> Iterator[Vertex]:
        for route in self._routes.values():
            yield route.target


@dataclass
class FlightGraph:
    """Directed graph of airports connected by flight routes.

    Airports are indexed by their (normalized) code and kept in insertion
    order. There is at most one route per ordered pair of airports; the
    airlines sharing a route are merged onto it.

    Example:
        graph = FlightGraph()
        graph.add_airport(Airport("JFK"))
        graph.add_airport(Airport("ORD"))
        graph.add_route("JFK", "ORD", 1188.0)
    """

    _vertices: Dict[str, Vertex] = field(default_factory=dict, repr=False)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._vertices

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices.values())

    def add_airport(self, airport: Airport) -> bool:
        """Insert an airport unless one with the same code exists.

        Returns:
            True if the airport was inserted.
        """
        key = normalize_code(airport.code)
        if key in self._vertices:
            return False
        self._vertices[key] = Vertex(airport)
        return True

    def add_route(self, source_code: str, target_code: str, distance: float) -> bool:
        """Add a directed route between two existing airports.

        Adding a route that already exists is a no-op that still reports
        success; airlines are merged separately through ``add_airline``.

        Returns:
            False if either endpoint is missing or the distance is
            negative, True otherwise.
        """
        source = self.find_vertex(source_code)
        target = self.find_vertex(target_code)
        if source is None or target is None:
            return False
        if distance < 0:
            logger.debug(
                "Rejected route with negative distance",
                extra={"source": source.code, "target": target.code, "distance": distance},
            )
            return False

        key = normalize_code(target.code)
        if key not in source._routes:
            source._routes[key] = Route(source, target, distance)
        return True

    def add_airline(self, source_code: str, target_code: str, airline: Airline) -> bool:
        """Merge an airline onto an existing route.

        Returns:
            False if the route does not exist, True otherwise.
        """
        route = self.get_route(source_code, target_code)
        if route is None:
            return False
        route.add_airline(airline)
        return True

    def record_flight(self, source_code: str, target_code: str) -> None:
        """Count one flight from ``source_code`` to ``target_code``."""
        source = self.find_vertex(source_code)
        target = self.find_vertex(target_code)
        if source is None or target is None:
            return
        source.flights_out += 1
        target.flights_in += 1

    def find_vertex(self, code: str) -> Optional[Vertex]:
        """Look up a vertex by airport code (case-insensitive)."""
        return self._vertices.get(normalize_code(code))

    def find_airport(self, code: str) -> Optional[Airport]:
        vertex = self.find_vertex(code)
        return vertex.airport if vertex is not None else None

    def get_route(self, source_code: str, target_code: str) -> Optional[Route]:
        source = self.find_vertex(source_code)
        if source is None:
            return None
        return source._routes.get(normalize_code(target_code))

    def vertices(self) -> List[Vertex]:
        """All vertices in insertion order."""
        return list(self._vertices.values())

    def airports(self) -> List[Airport]:
        """All airports in insertion order."""
        return [vertex.airport for vertex in self._vertices.values()]

    def routes(self) -> Iterator[Route]:
        for vertex in self._vertices.values():
            yield from vertex._routes.values()

    def num_routes(self) -> int:
        return sum(len(vertex._routes) for vertex in self._vertices.values())

    def compute_degrees(self) -> None:
        """Recompute in-degree and out-degree of every vertex.

        Must be called once after bulk route insertion, before anything
        reads the degree counters.
        """
        for vertex in self._vertices.values():
            vertex.in_degree = 0
            vertex.out_degree = len(vertex._routes)

        for vertex in self._vertices.values():
            for route in vertex._routes.values():
                route.target.in_degree += 1

        logger.debug(
            "Degrees computed",
            extra={"vertices": len(self._vertices), "routes": self.num_routes()},
        )

    def airlines_between(self, source_code: str, target_code: str) -> FrozenSet[Airline]:
        """Airlines operating the direct route, empty if there is none."""
        route = self.get_route(source_code, target_code)
        if route is None:
            return frozenset()
        return route.airlines

    def distance_between(self, source_code: str, target_code: str) -> float:
        """Distance of the direct route, ``0.0`` if there is none."""
        route = self.get_route(source_code, target_code)
        if route is None:
            return 0.0
        return route.distance

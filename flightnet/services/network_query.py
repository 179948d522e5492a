"""Network query service - statistics and lookups over the flight network.

This service gathers the per-airport and global statistics, the
attribute searches and the analyzer queries behind one facade that the
presentation layer can call. Absent airports never raise here: they
produce zero or empty answers, and callers that need to tell the two
apart use ``find_airport`` or ``require_airport`` first.
"""

from __future__ import annotations

import logging
import unicodedata
from collections import defaultdict
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

from ..domain.errors import AirportNotFoundError
from ..domain.models import (
    Airline,
    Airport,
    FlightPath,
    GeoLocation,
    RankedAirport,
    ReachabilitySummary,
)
from ..graph.analysis import NetworkAnalyzer
from ..graph.network import FlightGraph, Vertex
from ..graph.traversal import dfs_all


def canonicalize(text: str) -> str:
    """Normalize text for matching (no accents, no whitespace, case-folded)."""
    normalized = unicodedata.normalize("NFD", text)
    normalized = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    return "".join(normalized.casefold().split())


@dataclass
class NetworkQueryService:
    """Statistics and searches over a loaded flight network.

    Attributes:
        graph: The flight network
        airlines: Known airline catalogue keyed by ICAO code
    """

    graph: FlightGraph
    airlines: Mapping[str, Airline] = field(default_factory=dict)
    analyzer: NetworkAnalyzer = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.analyzer = NetworkAnalyzer(self.graph)

    # ------------------------------------------------------------------
    # Global statistics
    # ------------------------------------------------------------------

    def count_airports(self) -> int:
        return len(self.graph)

    def count_flights(self) -> int:
        """Total number of flights (airline-route pairs) in the network."""
        return sum(vertex.flights_in for vertex in self.graph)

    def count_routes(self) -> int:
        """Total number of distinct directed routes."""
        return sum(vertex.out_degree for vertex in self.graph)

    def flights_per_city(self) -> Dict[Tuple[str, str], int]:
        """Outbound flights aggregated by (city, country)."""
        totals: Dict[Tuple[str, str], int] = defaultdict(int)

        def add(vertex: Vertex) -> None:
            airport = vertex.airport
            totals[(airport.city, airport.country)] += vertex.flights_out

        dfs_all(self.graph, visit=add)
        return dict(totals)

    def flights_per_airline(self) -> Dict[Airline, int]:
        """Number of routes operated by each airline."""
        totals: Dict[Airline, int] = defaultdict(int)

        def add(vertex: Vertex) -> None:
            for route in vertex.routes:
                for airline in route.airlines:
                    totals[airline] += 1

        dfs_all(self.graph, visit=add)
        return dict(totals)

    # ------------------------------------------------------------------
    # Per-airport statistics
    # ------------------------------------------------------------------

    def flights_out(self, code: str) -> int:
        vertex = self.graph.find_vertex(code)
        return vertex.flights_out if vertex is not None else 0

    def flights_in(self, code: str) -> int:
        vertex = self.graph.find_vertex(code)
        return vertex.flights_in if vertex is not None else 0

    def airlines_out(self, code: str) -> Set[Airline]:
        """Distinct airlines flying out of an airport."""
        vertex = self.graph.find_vertex(code)
        if vertex is None:
            return set()
        return {airline for route in vertex.routes for airline in route.airlines}

    def countries_flown_to(self, code: str) -> int:
        """Number of distinct countries served by direct routes."""
        vertex = self.graph.find_vertex(code)
        if vertex is None:
            return 0
        return len({route.target.airport.country for route in vertex.routes})

    def countries_flown_to_from_city(self, city: str, country: str) -> int:
        countries = {
            route.target.airport.country
            for vertex in self._city_vertices(city, country)
            for route in vertex.routes
        }
        return len(countries)

    def reachable(self, code: str) -> ReachabilitySummary:
        """Every airport, city and country reachable from an airport."""
        return self.analyzer.reachable_summary(code)

    def reachable_within(self, code: str, layovers: int) -> ReachabilitySummary:
        """Destinations reachable with at most ``layovers`` stops."""
        return ReachabilitySummary(
            airports=self.analyzer.count_reachable_airports_within(code, layovers),
            cities=self.analyzer.count_reachable_cities_within(code, layovers),
            countries=self.analyzer.count_reachable_countries_within(code, layovers),
        )

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def find_airport(self, code: str) -> Optional[Airport]:
        return self.graph.find_airport(code)

    def require_airport(self, code: str) -> Airport:
        """Look up an airport, raising if it is not in the network.

        Raises:
            AirportNotFoundError: If the code is unknown.
        """
        airport = self.graph.find_airport(code)
        if airport is None:
            raise AirportNotFoundError(f"Airport not found: {code}", airport_code=code)
        return airport

    def find_airports_matching(
        self, query: str, attribute: Callable[[Airport], str]
    ) -> List[Airport]:
        """Airports whose projected attribute contains ``query``.

        Matching ignores case, accents and whitespace. Results are sorted
        by airport name.
        """
        needle = canonicalize(query)
        matches = [
            airport
            for airport in self.graph.airports()
            if needle in canonicalize(attribute(airport))
        ]
        return sorted(matches, key=lambda a: a.name.casefold())

    def find_airports_by_name(self, query: str) -> List[Airport]:
        return self.find_airports_matching(query, attrgetter("name"))

    def find_airports_by_city(self, query: str) -> List[Airport]:
        return self.find_airports_matching(query, attrgetter("city"))

    def find_airports_by_country(self, query: str) -> List[Airport]:
        return self.find_airports_matching(query, attrgetter("country"))

    def _city_vertices(self, city: str, country: str) -> List[Vertex]:
        city_key = canonicalize(city)
        country_key = canonicalize(country)
        return [
            vertex
            for vertex in self.graph
            if canonicalize(vertex.airport.city) == city_key
            and canonicalize(vertex.airport.country) == country_key
        ]

    def airports_in_city(self, city: str, country: str) -> List[Airport]:
        """Airports located exactly in the given city and country."""
        return [vertex.airport for vertex in self._city_vertices(city, country)]

    def closest_airports(self, location: GeoLocation) -> List[Airport]:
        """All airports tied at the minimum distance from ``location``."""
        closest: List[Airport] = []
        best = float("inf")
        for airport in self.graph.airports():
            distance = location.distance_to(airport.location)
            if distance < best:
                best = distance
                closest = [airport]
            elif distance == best:
                closest.append(airport)
        return sorted(closest, key=lambda a: a.name.casefold())

    def find_airline(self, code: str) -> Optional[Airline]:
        return self.airlines.get(code.strip().upper())

    # ------------------------------------------------------------------
    # Network analysis
    # ------------------------------------------------------------------

    def diameter(self) -> Tuple[int, List[FlightPath]]:
        return self.analyzer.diameter()

    def essential_airports(self) -> Set[str]:
        return self.analyzer.articulation_points()

    def top_k_by_traffic(self, k: int) -> List[RankedAirport]:
        return self.analyzer.top_k_by_traffic(k)

"""Itinerary planner - ranks candidate trips between airports.

The planner turns the path finder's minimum-hop candidates into the
"best flights" offered to a traveller:

1. Every (source, destination) pair is solved, optionally through an
   ordered list of mandatory waypoints.
2. In same-airline mode, only trips a single airline can operate end to
   end are kept.
3. Only the candidates with the fewest flights across all pairs survive.
4. Survivors are sorted by total distance, shortest first.

Several sources or destinations (e.g. every airport of a city) and
waypoints make the same segment come up repeatedly, so segment searches
go through a cache that is cleared at the start of every request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from ..adapters.cache import InMemoryCache
from ..config import get_config
from ..domain.errors import NoRouteFoundError
from ..domain.models import Airline, Airport, FlightPath, Itinerary
from ..graph.network import FlightGraph, Vertex
from ..graph.paths import common_airlines, shortest_paths, shortest_paths_through_waypoints
from ..ports.cache import CachePort

AirportRef = Union[str, Airport, Vertex]


def _code(ref: AirportRef) -> str:
    if isinstance(ref, str):
        return ref
    return ref.code


@dataclass
class ItineraryPlanner:
    """Ranks minimum-hop trips between groups of airports.

    Attributes:
        graph: The flight network
        cache: Cache for segment searches within one request
        max_composed_paths: Cap on paths composed through waypoints
    """

    graph: FlightGraph
    cache: CachePort[Any] = field(
        default_factory=lambda: InMemoryCache(name="segments")
    )
    max_composed_paths: int = field(
        default_factory=lambda: get_config().analysis.max_composed_paths
    )
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _segment(self, source: Vertex, target: Vertex) -> List[FlightPath]:
        return self.cache.get_or_compute(
            f"{source.code}->{target.code}",
            lambda: shortest_paths(self.graph, source, target),
        )

    def candidates(
        self,
        source: AirportRef,
        destination: AirportRef,
        waypoints: Sequence[AirportRef] = (),
    ) -> List[FlightPath]:
        """Minimum-hop paths for one source/destination pair."""
        return shortest_paths_through_waypoints(
            self.graph,
            _code(source),
            [_code(w) for w in waypoints],
            _code(destination),
            max_paths=self.max_composed_paths,
            segment_finder=self._segment,
        )

    def best_itineraries(
        self,
        sources: Sequence[AirportRef],
        destinations: Sequence[AirportRef],
        waypoints: Sequence[AirportRef] = (),
        same_airline: bool = False,
    ) -> List[Itinerary]:
        """Rank the best trips from any source to any destination.

        Args:
            sources: Candidate departure airports.
            destinations: Candidate arrival airports.
            waypoints: Mandatory intermediate airports, in travel order.
            same_airline: Keep only trips one airline can fly end to end.

        Returns:
            Itineraries with the fewest flights, shortest distance first.
            Empty when no source connects to any destination.
        """
        self.cache.clear()
        self._logger.debug(
            "Planning itineraries",
            extra={
                "sources": [_code(s) for s in sources],
                "destinations": [_code(d) for d in destinations],
                "waypoints": [_code(w) for w in waypoints],
                "same_airline": same_airline,
            },
        )

        best_hops: Optional[int] = None
        selected: List[Itinerary] = []

        for source in sources:
            for destination in destinations:
                for path in self.candidates(source, destination, waypoints):
                    airlines: frozenset[Airline] = frozenset()
                    if same_airline:
                        airlines = common_airlines(self.graph, path)
                        if not airlines:
                            continue

                    if best_hops is None or path.hops < best_hops:
                        best_hops = path.hops
                        selected = []
                    if path.hops == best_hops:
                        selected.append(Itinerary(path=path, airlines=airlines))

        selected.sort(key=lambda itinerary: itinerary.total_distance)
        self._logger.info(
            "Itineraries planned",
            extra={"count": len(selected), "hops": best_hops},
        )
        return selected

    def best_itinerary(
        self,
        sources: Sequence[AirportRef],
        destinations: Sequence[AirportRef],
        waypoints: Sequence[AirportRef] = (),
        same_airline: bool = False,
    ) -> Itinerary:
        """Return the single best trip.

        Raises:
            NoRouteFoundError: If no trip connects the airports.
        """
        itineraries = self.best_itineraries(sources, destinations, waypoints, same_airline)
        if not itineraries:
            departure = tuple(_code(s) for s in sources)
            arrival = tuple(_code(d) for d in destinations)
            raise NoRouteFoundError(
                f"No itinerary from {', '.join(departure)} to {', '.join(arrival)}",
                departure=departure,
                arrival=arrival,
            )
        return itineraries[0]

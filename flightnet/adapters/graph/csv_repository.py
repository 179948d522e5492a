"""CSV Graph Repository adapter.

Builds the flight network from three CSV files:

- airports: ``Code,Name,City,Country,Latitude,Longitude``
- airlines: ``Code,Name,Callsign,Country``
- flights:  ``Source,Target,Airline``

Each flight row is one airline operating one route. Rows for the same
ordered pair of airports collapse onto a single route whose airline set
grows, while the per-airport flight counters count every row.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence

from ...config import GraphConfig, get_config
from ...domain.errors import AirportNotFoundError, GraphError
from ...domain.models import Airline, Airport, GeoLocation
from ...graph.network import FlightGraph


def _rows(path: Path) -> Iterator[Dict[str, str]]:
    with path.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f, skipinitialspace=True)
        for row in reader:
            # Surplus columns land under the None key; they are ignored.
            yield {
                key.strip(): (value or "").strip()
                for key, value in row.items()
                if key is not None
            }


def _coordinate(value: str) -> float:
    return float(value) if value else 0.0


@dataclass
class CSVGraphRepository:
    """Graph repository that loads from CSV files.

    This adapter implements GraphRepositoryPort. The graph and the
    airline catalogue are loaded once and cached.

    Attributes:
        config: Graph configuration (paths, file names)
        earth_radius_km: Radius used for route distances
    """

    config: GraphConfig = field(default_factory=lambda: get_config().graph)
    earth_radius_km: float = field(
        default_factory=lambda: get_config().analysis.earth_radius_km
    )
    _logger: logging.Logger = field(init=False, repr=False)

    # Cached data
    _graph: Optional[FlightGraph] = field(default=None, repr=False)
    _airlines: Optional[Dict[str, Airline]] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> FlightGraph:
        """Load the flight network from CSV files.

        Returns:
            The populated graph, with degrees computed.

        Raises:
            GraphError: If a data file cannot be read or parsed.
        """
        if self._graph is not None:
            return self._graph

        self._logger.debug(
            "Loading graph",
            extra={
                "airports_path": str(self.config.airports_path),
                "airlines_path": str(self.config.airlines_path),
                "flights_path": str(self.config.flights_path),
            },
        )

        airlines = self._load_airlines()
        graph = FlightGraph()
        self._load_airports(graph)
        self._load_flights(graph, airlines)
        graph.compute_degrees()

        self._graph = graph
        self._logger.info(
            "Graph loaded",
            extra={
                "airports": len(graph),
                "routes": graph.num_routes(),
                "airlines": len(airlines),
            },
        )
        return graph

    def _load_airlines(self) -> Dict[str, Airline]:
        if self._airlines is not None:
            return self._airlines

        path = self.config.airlines_path
        airlines: Dict[str, Airline] = {}
        try:
            for row in _rows(path):
                code = row.get("Code", "").upper()
                if not code:
                    continue
                airlines[code] = Airline(
                    code=code,
                    name=row.get("Name", ""),
                    callsign=row.get("Callsign", ""),
                    country=row.get("Country", ""),
                )
        except (OSError, ValueError, csv.Error) as e:
            raise GraphError(
                f"Failed to load airlines: {e}", file_path=str(path), cause=e
            )

        self._airlines = airlines
        return airlines

    def _load_airports(self, graph: FlightGraph) -> None:
        path = self.config.airports_path
        try:
            for row in _rows(path):
                code = row.get("Code", "")
                if not code:
                    continue

                try:
                    location = GeoLocation(
                        latitude=_coordinate(row.get("Latitude", "")),
                        longitude=_coordinate(row.get("Longitude", "")),
                    )
                except ValueError:
                    self._logger.warning(
                        "Invalid coordinates, defaulting to origin",
                        extra={"airport": code},
                    )
                    location = GeoLocation(0.0, 0.0)

                airport = Airport(
                    code=code,
                    name=row.get("Name", "") or code,
                    city=row.get("City", ""),
                    country=row.get("Country", ""),
                    location=location,
                )
                if not graph.add_airport(airport):
                    self._logger.warning("Duplicate airport", extra={"airport": code})
        except (OSError, ValueError, csv.Error) as e:
            raise GraphError(
                f"Failed to load airports: {e}", file_path=str(path), cause=e
            )

    def _load_flights(self, graph: FlightGraph, airlines: Dict[str, Airline]) -> None:
        path = self.config.flights_path
        skipped = 0
        try:
            for row in _rows(path):
                source_code = row.get("Source", "")
                target_code = row.get("Target", "")
                source = graph.find_vertex(source_code)
                target = graph.find_vertex(target_code)
                if source is None or target is None:
                    skipped += 1
                    continue

                if graph.get_route(source_code, target_code) is None:
                    distance = source.airport.location.distance_to(
                        target.airport.location, self.earth_radius_km
                    )
                    graph.add_route(source_code, target_code, distance)

                airline = airlines.get(row.get("Airline", "").upper())
                if airline is not None:
                    graph.add_airline(source_code, target_code, airline)
                graph.record_flight(source_code, target_code)
        except (OSError, ValueError, csv.Error) as e:
            raise GraphError(
                f"Failed to load flights: {e}", file_path=str(path), cause=e
            )

        if skipped:
            self._logger.warning(
                "Skipped flights with unknown airports", extra={"skipped": skipped}
            )

    def get_airport(self, code: str) -> Optional[Airport]:
        """Get airport details by code, or None if not found."""
        return self.load().find_airport(code)

    def get_airport_or_raise(self, code: str) -> Airport:
        """Get airport details by code, raising if not found.

        Raises:
            AirportNotFoundError: If the airport is not found.
        """
        airport = self.get_airport(code)
        if airport is None:
            raise AirportNotFoundError(
                f"Airport not found: {code}",
                airport_code=code,
            )
        return airport

    def list_airports(self) -> Sequence[Airport]:
        return self.load().airports()

    def get_airline(self, code: str) -> Optional[Airline]:
        """Get airline details by ICAO code (case-insensitive)."""
        return self._load_airlines().get(code.strip().upper())

    def list_airlines(self) -> Sequence[Airline]:
        return sorted(self._load_airlines().values())

    def clear_cache(self) -> None:
        """Clear cached graph and airline data."""
        self._graph = None
        self._airlines = None
        self._logger.debug("Graph cache cleared")

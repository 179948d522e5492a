"""Graph ports - Abstractions for loading the flight network.

These protocols define the contract between the graph engine and the
ingestion collaborators that build it from persistent storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Airline, Airport
    from ..graph.network import FlightGraph


class GraphRepositoryPort(Protocol):
    """Port for loading graph data.

    Implementation: adapters/graph/csv_repository.py

    The repository builds the flight network once (airports, then routes
    with their merged airlines and flight counters, then degrees) and
    hands it over as immutable for the rest of the run.
    """

    def load(self) -> FlightGraph:
        """Load the flight network.

        Returns:
            The fully populated graph.
        """
        ...

    def get_airport(self, code: str) -> Optional[Airport]:
        """Get airport details by code.

        Args:
            code: The IATA code to look up (e.g., 'JFK').

        Returns:
            The airport, or None if not found.
        """
        ...

    def list_airports(self) -> Sequence[Airport]:
        """List all airports in the graph."""
        ...

    def get_airline(self, code: str) -> Optional[Airline]:
        """Get airline details by ICAO code, or None if unknown."""
        ...

    def list_airlines(self) -> Sequence[Airline]:
        """List the known airline catalogue."""
        ...

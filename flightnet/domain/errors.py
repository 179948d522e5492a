"""Typed domain errors for the flight network.

Query operations never raise for absent airports or unreachable targets;
these errors are reserved for ingestion failures and for the explicit
``*_or_raise`` style lookups used by callers that want to fail loudly.

All errors inherit from FlightNetworkError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FlightNetworkError(Exception):
    """Base error for the flight network domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class GraphError(FlightNetworkError):
    """Graph loading or data integrity error.

    Attributes:
        file_path: Path to the graph data file if relevant
    """

    file_path: Optional[str] = None


@dataclass
class AirportNotFoundError(FlightNetworkError):
    """Airport code not found in the graph.

    Attributes:
        airport_code: The airport code that was not found
    """

    airport_code: str = ""


@dataclass
class NoRouteFoundError(FlightNetworkError):
    """No itinerary exists between the requested airports.

    Attributes:
        departure: Departure airport codes
        arrival: Arrival airport codes
    """

    departure: tuple[str, ...] = ()
    arrival: tuple[str, ...] = ()


@dataclass
class ConfigurationError(FlightNetworkError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None

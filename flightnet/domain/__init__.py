"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application.
"""

from .errors import (
    AirportNotFoundError,
    ConfigurationError,
    FlightNetworkError,
    GraphError,
    NoRouteFoundError,
)
from .models import (
    Airline,
    Airport,
    FlightPath,
    GeoLocation,
    Itinerary,
    RankedAirport,
    ReachabilitySummary,
)

__all__ = [
    # Models
    "GeoLocation",
    "Airport",
    "Airline",
    "FlightPath",
    "RankedAirport",
    "ReachabilitySummary",
    "Itinerary",
    # Errors
    "FlightNetworkError",
    "GraphError",
    "AirportNotFoundError",
    "NoRouteFoundError",
    "ConfigurationError",
]

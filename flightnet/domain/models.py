"""Immutable domain models for the flight network.

All models are frozen dataclasses with slots for memory efficiency.
Airports and airlines compare and hash by their code only, so display
attributes never influence graph identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from geopy.distance import great_circle

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    def distance_to(
        self, other: GeoLocation, radius_km: float = EARTH_RADIUS_KM
    ) -> float:
        """Great-circle distance in kilometers to another location."""
        return great_circle(
            (self.latitude, self.longitude),
            (other.latitude, other.longitude),
            radius=radius_km,
        ).km


@dataclass(frozen=True, slots=True)
class Airport:
    """An airport with its location and metadata.

    Attributes:
        code: Unique IATA identifier (e.g., 'JFK')
        name: Human-readable airport name
        city: City where the airport is located
        country: Country where the airport is located
        location: GPS coordinates of the airport
    """

    code: str
    name: str = field(default="", compare=False)
    city: str = field(default="", compare=False)
    country: str = field(default="", compare=False)
    location: GeoLocation = field(
        default_factory=lambda: GeoLocation(0.0, 0.0), compare=False
    )

    def distance_to(self, other: Airport) -> float:
        """Great-circle distance in kilometers to another airport."""
        return self.location.distance_to(other.location)


@dataclass(frozen=True, slots=True, order=True)
class Airline:
    """An airline operating flight routes.

    Attributes:
        code: Unique ICAO identifier (e.g., 'TAP')
        name: Official airline name
        callsign: Radio callsign, '_' when the airline has none
        country: Country of registry
    """

    code: str
    name: str = field(default="", compare=False)
    callsign: str = field(default="", compare=False)
    country: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class FlightPath:
    """An ordered sequence of airports forming a trip.

    Attributes:
        airports: Airports in travel order, source first, target last
        total_distance: Summed route distance in kilometers
    """

    airports: tuple[Airport, ...]
    total_distance: float = 0.0

    @property
    def codes(self) -> tuple[str, ...]:
        """Return the airport codes along the path."""
        return tuple(airport.code for airport in self.airports)

    @property
    def hops(self) -> int:
        """Return the number of flights taken."""
        return max(len(self.airports) - 1, 0)

    @property
    def layovers(self) -> int:
        """Return the number of intermediate stops."""
        return max(len(self.airports) - 2, 0)

    @property
    def is_empty(self) -> bool:
        """Check if the path has no airports."""
        return len(self.airports) == 0

    @property
    def source(self) -> Optional[Airport]:
        return self.airports[0] if self.airports else None

    @property
    def target(self) -> Optional[Airport]:
        return self.airports[-1] if self.airports else None


@dataclass(frozen=True, slots=True)
class RankedAirport:
    """An airport with its total flight traffic (inbound plus outbound)."""

    airport: Airport
    flights: int


@dataclass(frozen=True, slots=True)
class ReachabilitySummary:
    """Distinct destinations reachable from an airport.

    Attributes:
        airports: Number of distinct reachable airports
        cities: Number of distinct (city, country) pairs
        countries: Number of distinct countries
    """

    airports: int = 0
    cities: int = 0
    countries: int = 0


@dataclass(frozen=True, slots=True)
class Itinerary:
    """A candidate trip returned by the itinerary planner.

    Attributes:
        path: The flight path of the trip
        airlines: Airlines able to operate every leg (same-airline mode only)
    """

    path: FlightPath
    airlines: FrozenSet[Airline] = field(default_factory=frozenset)

    @property
    def total_distance(self) -> float:
        return self.path.total_distance

    @property
    def layovers(self) -> int:
        return self.path.layovers

    @property
    def is_single_airline(self) -> bool:
        """Check if one airline covers the whole trip."""
        return len(self.airlines) > 0

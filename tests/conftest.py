"""Shared fixtures: small flight networks built in memory."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import pytest

from flightnet.config import reset_config
from flightnet.domain.models import Airline, Airport, GeoLocation
from flightnet.graph.network import FlightGraph

RouteSpec = Tuple[str, str, float, Sequence[str]]

AIRLINES = {
    code: Airline(code=code, name=f"{code} Airways", callsign=code, country="Nowhere")
    for code in ("AAL", "DAL", "UAL", "TAP")
}


def make_graph(
    routes: Iterable[RouteSpec],
    airports: Optional[Iterable[Airport]] = None,
) -> FlightGraph:
    """Build a graph from ``(source, target, distance, airline_codes)`` rows.

    Airports referenced by a route but not listed explicitly are created
    with the code as name, city and country.
    """
    graph = FlightGraph()
    for airport in airports or ():
        graph.add_airport(airport)

    routes = list(routes)
    for source, target, _, _ in routes:
        for code in (source, target):
            graph.add_airport(Airport(code=code, name=code, city=code, country=code))

    for source, target, distance, airline_codes in routes:
        graph.add_route(source, target, distance)
        for airline_code in airline_codes:
            graph.add_airline(source, target, AIRLINES[airline_code])
            graph.record_flight(source, target)

    graph.compute_degrees()
    return graph


def both_ways(routes: Iterable[RouteSpec]) -> list:
    """Duplicate every route in the opposite direction."""
    rows = []
    for source, target, distance, airlines in routes:
        rows.append((source, target, distance, airlines))
        rows.append((target, source, distance, airlines))
    return rows


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def us_graph() -> FlightGraph:
    """JFK -> ORD -> LAX with no direct JFK -> LAX route."""
    airports = [
        Airport("JFK", "John F Kennedy Intl", "New York", "United States", GeoLocation(40.64, -73.78)),
        Airport("ORD", "Chicago O'Hare Intl", "Chicago", "United States", GeoLocation(41.98, -87.90)),
        Airport("LAX", "Los Angeles Intl", "Los Angeles", "United States", GeoLocation(33.94, -118.41)),
    ]
    return make_graph(
        [
            ("JFK", "ORD", 1200.0, ["AAL", "UAL"]),
            ("ORD", "LAX", 1500.0, ["AAL"]),
        ],
        airports=airports,
    )


@pytest.fixture
def diamond_graph() -> FlightGraph:
    """A -> {B, C} -> D, two equally short paths with different lengths."""
    return make_graph(
        [
            ("A", "B", 100.0, ["AAL"]),
            ("A", "C", 50.0, ["DAL"]),
            ("B", "D", 100.0, ["AAL"]),
            ("C", "D", 300.0, ["DAL", "AAL"]),
        ]
    )


@pytest.fixture
def cycle_graph() -> FlightGraph:
    """Directed cycle A -> B -> C -> D -> A."""
    return make_graph(
        [
            ("A", "B", 1.0, ["AAL"]),
            ("B", "C", 1.0, ["AAL"]),
            ("C", "D", 1.0, ["AAL"]),
            ("D", "A", 1.0, ["AAL"]),
        ]
    )


@pytest.fixture
def bowtie_graph() -> FlightGraph:
    """Two directed cycles sharing exactly the airport X."""
    return make_graph(
        [
            ("A", "B", 1.0, ["AAL"]),
            ("B", "X", 1.0, ["AAL"]),
            ("X", "A", 1.0, ["AAL"]),
            ("X", "C", 1.0, ["DAL"]),
            ("C", "D", 1.0, ["DAL"]),
            ("D", "X", 1.0, ["DAL"]),
        ]
    )

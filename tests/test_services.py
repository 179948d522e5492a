import pytest

from flightnet.adapters.cache import InMemoryCache, NullCache
from flightnet.domain.errors import AirportNotFoundError, NoRouteFoundError
from flightnet.domain.models import Airport, GeoLocation
from flightnet.services import ItineraryPlanner, NetworkQueryService

from .conftest import AIRLINES, make_graph


@pytest.fixture
def world_graph():
    airports = [
        Airport("LIS", "Humberto Delgado", "Lisbon", "Portugal", GeoLocation(38.78, -9.14)),
        Airport("OPO", "Francisco Sa Carneiro", "Porto", "Portugal", GeoLocation(41.25, -8.68)),
        Airport("CDG", "Charles de Gaulle", "Paris", "France", GeoLocation(49.01, 2.55)),
        Airport("ORY", "Orly", "Paris", "France", GeoLocation(48.73, 2.36)),
        Airport("GRU", "Guarulhos", "São Paulo", "Brazil", GeoLocation(-23.43, -46.47)),
    ]
    return make_graph(
        [
            ("LIS", "OPO", 274.0, ["TAP"]),
            ("LIS", "CDG", 1450.0, ["TAP", "AAL"]),
            ("LIS", "GRU", 7940.0, ["TAP"]),
            ("CDG", "GRU", 9400.0, ["AAL"]),
            ("ORY", "LIS", 1420.0, ["TAP"]),
            ("ORY", "OPO", 1210.0, ["TAP"]),
            ("OPO", "LIS", 274.0, ["TAP"]),
        ],
        airports=airports,
    )


@pytest.fixture
def service(world_graph):
    return NetworkQueryService(world_graph, airlines=AIRLINES)


# ---------------------------------------------------------------------------
# NetworkQueryService
# ---------------------------------------------------------------------------


def test_global_counts(service):
    assert service.count_airports() == 5
    assert service.count_routes() == 7
    assert service.count_flights() == 8


def test_flights_per_city(service):
    totals = service.flights_per_city()

    assert totals[("Lisbon", "Portugal")] == 4
    assert totals[("Paris", "France")] == 3
    assert totals[("São Paulo", "Brazil")] == 0


def test_flights_per_airline_counts_routes(service):
    totals = {airline.code: count for airline, count in service.flights_per_airline().items()}

    assert totals == {"TAP": 6, "AAL": 2}


def test_per_airport_statistics(service):
    assert service.flights_out("LIS") == 4
    assert service.flights_in("lis") == 2
    assert {a.code for a in service.airlines_out("LIS")} == {"TAP", "AAL"}
    assert service.countries_flown_to("LIS") == 3


def test_statistics_of_absent_airport_are_empty(service):
    assert service.flights_out("XXX") == 0
    assert service.flights_in("XXX") == 0
    assert service.airlines_out("XXX") == set()
    assert service.countries_flown_to("XXX") == 0


def test_countries_flown_to_from_city(service):
    # CDG serves Brazil, ORY serves Portugal.
    assert service.countries_flown_to_from_city("paris", "FRANCE") == 2
    assert service.countries_flown_to_from_city("Paris", "Texas") == 0


def test_reachability(service):
    everything = service.reachable("ORY")
    assert (everything.airports, everything.cities, everything.countries) == (4, 4, 3)

    direct = service.reachable_within("ORY", 0)
    assert (direct.airports, direct.cities, direct.countries) == (2, 2, 1)


def test_require_airport(service):
    assert service.require_airport("cdg").name == "Charles de Gaulle"

    with pytest.raises(AirportNotFoundError) as exc_info:
        service.require_airport("XXX")
    assert exc_info.value.airport_code == "XXX"
    assert service.find_airport("XXX") is None


def test_attribute_searches_ignore_case_accents_and_spaces(service):
    assert [a.code for a in service.find_airports_by_city("sao paulo")] == ["GRU"]
    assert [a.code for a in service.find_airports_by_name("DE")] == ["CDG", "LIS"]
    assert [a.code for a in service.find_airports_by_country("portugal")] == ["OPO", "LIS"]
    assert service.find_airports_by_country("Spain") == []


def test_airports_in_city(service):
    assert [a.code for a in service.airports_in_city("Paris", "France")] == ["CDG", "ORY"]


def test_closest_airports(service):
    closest = service.closest_airports(GeoLocation(48.70, 2.40))

    assert [a.code for a in closest] == ["ORY"]


def test_find_airline(service):
    assert service.find_airline(" tap ").code == "TAP"
    assert service.find_airline("XXX") is None


def test_network_queries_delegate_to_analyzer(service):
    diameter, paths = service.diameter()

    assert diameter == 2
    assert all(p.hops == 2 for p in paths)
    assert service.essential_airports() == {"LIS", "CDG"}
    assert [r.airport.code for r in service.top_k_by_traffic(1)] == ["LIS"]


# ---------------------------------------------------------------------------
# ItineraryPlanner
# ---------------------------------------------------------------------------


def test_best_itinerary_through_hub(us_graph):
    planner = ItineraryPlanner(us_graph)

    itinerary = planner.best_itinerary(["JFK"], ["LAX"])

    assert itinerary.path.codes == ("JFK", "ORD", "LAX")
    assert itinerary.total_distance == 2700.0
    assert itinerary.layovers == 1
    assert not itinerary.is_single_airline


def test_fewest_flights_win_across_destinations(us_graph):
    planner = ItineraryPlanner(us_graph)

    itineraries = planner.best_itineraries(["JFK"], ["LAX", "ORD"])

    assert [i.path.codes for i in itineraries] == [("JFK", "ORD")]


def test_ties_are_sorted_by_distance(diamond_graph):
    planner = ItineraryPlanner(diamond_graph)

    itineraries = planner.best_itineraries(["A"], ["D"])

    assert [i.path.codes for i in itineraries] == [("A", "B", "D"), ("A", "C", "D")]
    assert [i.total_distance for i in itineraries] == [200.0, 350.0]


def test_same_airline_mode_filters_mixed_trips():
    graph = make_graph(
        [
            ("A", "X", 10.0, []),
            ("A", "B", 10.0, ["AAL"]),
            ("B", "Y", 10.0, ["AAL", "DAL"]),
        ]
    )
    planner = ItineraryPlanner(graph)

    any_airline = planner.best_itineraries(["A"], ["X", "Y"])
    single = planner.best_itineraries(["A"], ["X", "Y"], same_airline=True)

    assert [i.path.codes for i in any_airline] == [("A", "X")]
    assert [i.path.codes for i in single] == [("A", "B", "Y")]
    assert {a.code for a in single[0].airlines} == {"AAL"}
    assert single[0].is_single_airline


def test_waypoints_are_visited_in_order(us_graph):
    planner = ItineraryPlanner(us_graph)

    itinerary = planner.best_itinerary(["JFK"], ["LAX"], waypoints=["ORD"])

    assert itinerary.path.codes == ("JFK", "ORD", "LAX")


def test_planner_accepts_airports_and_vertices(us_graph):
    planner = ItineraryPlanner(us_graph)
    jfk = us_graph.find_airport("JFK")
    lax = us_graph.find_vertex("LAX")

    assert planner.best_itinerary([jfk], [lax]).path.codes == ("JFK", "ORD", "LAX")


def test_no_route_raises(us_graph):
    planner = ItineraryPlanner(us_graph)

    assert planner.best_itineraries(["LAX"], ["JFK"]) == []
    with pytest.raises(NoRouteFoundError) as exc_info:
        planner.best_itinerary(["LAX"], ["JFK", "ORD"])

    assert exc_info.value.departure == ("LAX",)
    assert exc_info.value.arrival == ("JFK", "ORD")


def test_segment_cache_is_reset_per_request(us_graph):
    cache = InMemoryCache(name="segments")
    planner = ItineraryPlanner(us_graph, cache=cache)

    planner.best_itineraries(["JFK"], ["LAX"], waypoints=["ORD"])
    assert cache.size() == 2

    planner.best_itineraries(["JFK"], ["ORD"])
    assert cache.size() == 1


def test_planner_works_without_cache(diamond_graph):
    planner = ItineraryPlanner(diamond_graph, cache=NullCache())

    assert len(planner.best_itineraries(["A"], ["D"])) == 2


def test_composed_path_cap_comes_from_config(diamond_graph, monkeypatch):
    monkeypatch.setenv("FLIGHTNET_ANALYSIS_MAX_COMPOSED_PATHS", "1")

    planner = ItineraryPlanner(diamond_graph)

    assert planner.max_composed_paths == 1
    assert len(planner.best_itineraries(["A"], ["D"])) == 1

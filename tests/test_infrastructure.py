import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from flightnet.adapters.cache import InMemoryCache, NullCache
from flightnet.config import AnalysisConfig, AppConfig, GraphConfig, ObservabilityConfig, get_config
from flightnet.container import Container, get_container, reset_container
from flightnet.domain.errors import ConfigurationError, FlightNetworkError, GraphError
from flightnet.graph.network import FlightGraph
from flightnet.monitoring import configure_logging, timed
from flightnet.ports.cache import CachePort
from flightnet.ports.graph import GraphRepositoryPort
from flightnet.services import ItineraryPlanner, NetworkQueryService


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "airports.csv").write_text(
        "Code,Name,City,Country,Latitude,Longitude\n"
        "JFK,John F Kennedy Intl,New York,United States,40.64,-73.78\n"
        "LAX,Los Angeles Intl,Los Angeles,United States,33.94,-118.41\n",
        encoding="utf-8",
    )
    (tmp_path / "airlines.csv").write_text(
        "Code,Name,Callsign,Country\nAAL,American Airlines,AMERICAN,United States\n",
        encoding="utf-8",
    )
    (tmp_path / "flights.csv").write_text(
        "Source,Target,Airline\nJFK,LAX,AAL\n",
        encoding="utf-8",
    )
    return tmp_path


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_config_defaults():
    config = get_config()

    assert config.analysis.max_composed_paths == 10_000
    assert config.analysis.earth_radius_km == 6371.0
    assert config.graph.flights_path == config.graph.data_dir / "flights.csv"
    assert config.observability.level == "INFO"


def test_config_is_cached():
    assert get_config() is get_config()


def test_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("FLIGHTNET_GRAPH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("FLIGHTNET_GRAPH_AIRPORTS_FILE", "ports.csv")
    monkeypatch.setenv("FLIGHTNET_LOG_LEVEL", "DEBUG")

    config = get_config()

    assert config.graph.airports_path == Path(tmp_path) / "ports.csv"
    assert config.observability.level == "DEBUG"


def test_config_rejects_non_positive_limits():
    with pytest.raises(ValidationError):
        AnalysisConfig(max_composed_paths=0)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_errors_carry_cause():
    cause = OSError("disk on fire")
    error = GraphError("Failed to load airports", file_path="airports.csv", cause=cause)

    assert isinstance(error, FlightNetworkError)
    assert str(error) == "Failed to load airports: disk on fire"
    assert error.file_path == "airports.csv"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def test_configure_logging_sets_package_level():
    package_logger = logging.getLogger("flightnet")
    try:
        configure_logging(ObservabilityConfig(level="warning"))
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ConfigurationError) as exc_info:
        configure_logging(ObservabilityConfig(level="LOUD"))

    assert exc_info.value.setting_name == "FLIGHTNET_LOG_LEVEL"


def test_timed_logs_elapsed_time(caplog):
    log = logging.getLogger("flightnet.tests")

    with caplog.at_level(logging.DEBUG, logger="flightnet.tests"):
        with timed("sample", log, vertices=3):
            pass

    [record] = caplog.records
    assert record.query == "sample"
    assert record.vertices == 3
    assert record.elapsed_ms >= 0


# ---------------------------------------------------------------------------
# Caches
# ---------------------------------------------------------------------------


def test_memory_cache_get_or_compute():
    cache = InMemoryCache(name="test")
    calls = []

    def compute():
        calls.append(1)
        return ["path"]

    assert cache.get_or_compute("A->B", compute) == ["path"]
    assert cache.get_or_compute("A->B", compute) == ["path"]
    assert len(calls) == 1
    assert cache.stats()["hits"] == 1


def test_memory_cache_evicts_least_recently_used():
    cache = InMemoryCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_memory_cache_clear_reports_entries():
    cache = InMemoryCache()
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.clear() == 2
    assert cache.size() == 0


def test_null_cache_always_recomputes():
    cache = NullCache()
    cache.set("a", 1)

    assert cache.get("a") is None
    assert cache.get_or_compute("a", lambda: 2) == 2
    assert cache.size() == 0


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------


def test_container_wires_services(data_dir):
    config = AppConfig(graph=GraphConfig(data_dir=data_dir))
    container = Container.create_default(config)

    graph = container.resolve(FlightGraph)
    service = container.resolve(NetworkQueryService)
    planner = container.resolve(ItineraryPlanner)

    assert service.graph is graph
    assert planner.graph is graph
    assert planner.cache is container.resolve(CachePort)
    assert service.count_airports() == 2
    assert service.find_airline("aal").name == "American Airlines"
    assert planner.best_itinerary(["JFK"], ["LAX"]).path.codes == ("JFK", "LAX")


def test_container_registration_override():
    container = Container()
    container.register(CachePort, NullCache)

    assert isinstance(container.resolve(CachePort), NullCache)
    assert container.resolve(CachePort) is container.resolve(CachePort)

    container.register(CachePort, InMemoryCache, singleton=False)
    assert isinstance(container.resolve(CachePort), InMemoryCache)
    assert container.resolve(CachePort) is not container.resolve(CachePort)


def test_container_unregistered_type_raises():
    container = Container()

    assert not container.is_registered(GraphRepositoryPort)
    with pytest.raises(KeyError):
        container.resolve(GraphRepositoryPort)


def test_container_load_failure_surfaces_graph_error(tmp_path):
    container = Container.create_default(AppConfig(graph=GraphConfig(data_dir=tmp_path)))

    with pytest.raises(GraphError):
        container.resolve(FlightGraph)


def test_default_container_reads_environment(data_dir, monkeypatch):
    monkeypatch.setenv("FLIGHTNET_GRAPH_DATA_DIR", str(data_dir))
    reset_container()
    try:
        container = get_container()
        assert container is get_container()
        assert len(container.resolve(FlightGraph)) == 2
    finally:
        reset_container()

"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
data file locations, analysis limits and logging.

Configuration can be overridden via environment variables:
- FLIGHTNET_GRAPH_DATA_DIR=/path/to/data
- FLIGHTNET_ANALYSIS_MAX_COMPOSED_PATHS=500
- FLIGHTNET_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GraphConfig(BaseSettings):
    """Graph data configuration.

    Environment variables prefixed with FLIGHTNET_GRAPH_.
    """

    model_config = SettingsConfigDict(env_prefix="FLIGHTNET_GRAPH_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    airports_file: str = "airports.csv"
    airlines_file: str = "airlines.csv"
    flights_file: str = "flights.csv"

    @property
    def airports_path(self) -> Path:
        """Full path to airports CSV file."""
        return self.data_dir / self.airports_file

    @property
    def airlines_path(self) -> Path:
        """Full path to airlines CSV file."""
        return self.data_dir / self.airlines_file

    @property
    def flights_path(self) -> Path:
        """Full path to flights CSV file."""
        return self.data_dir / self.flights_file


class AnalysisConfig(BaseSettings):
    """Limits applied to path and network queries.

    Environment variables prefixed with FLIGHTNET_ANALYSIS_.
    """

    model_config = SettingsConfigDict(env_prefix="FLIGHTNET_ANALYSIS_")

    max_composed_paths: int = Field(default=10_000, gt=0)
    earth_radius_km: float = Field(default=6371.0, gt=0)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with FLIGHTNET_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="FLIGHTNET_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.graph.flights_path)
        print(config.analysis.max_composed_paths)

    Environment variables prefixed with FLIGHTNET_.
    """

    model_config = SettingsConfigDict(env_prefix="FLIGHTNET_")

    graph: GraphConfig = Field(default_factory=GraphConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def project_root(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()

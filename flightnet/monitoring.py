from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .config import ObservabilityConfig, get_config
from .domain.errors import ConfigurationError

logger = logging.getLogger("flightnet")


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Apply the logging level and format from the configuration.

    Raises:
        ConfigurationError: If the configured level is not a logging level.
    """
    config = config or get_config().observability
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level {config.level!r}",
            setting_name="FLIGHTNET_LOG_LEVEL",
            expected_type="DEBUG, INFO, WARNING, ERROR or CRITICAL",
        )

    logging.basicConfig(level=level, format=config.format)
    logger.setLevel(level)
    logger.debug(f"Logging configured at {config.level.upper()}")


@contextmanager
def timed(
    label: str, log: Optional[logging.Logger] = None, **context: Any
) -> Iterator[None]:
    """Log how long the wrapped block took, at DEBUG level."""
    log = log or logger
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.debug(
            f"{label} finished in {elapsed_ms:.1f}ms",
            extra={"query": label, "elapsed_ms": round(elapsed_ms, 2), **context},
        )

"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the graph engine and external
adapters. They enable dependency injection and make the system testable.
"""

from .cache import CachePort
from .graph import GraphRepositoryPort

__all__ = [
    "GraphRepositoryPort",
    "CachePort",
]

"""Services layer - Application orchestration.

This module contains the services that answer the use cases on top of
the graph engine.

Available services:
- NetworkQueryService: Statistics, searches and network analysis
- ItineraryPlanner: Ranked trips between airports, with waypoints
"""

from .itinerary import ItineraryPlanner
from .network_query import NetworkQueryService

__all__ = ["NetworkQueryService", "ItineraryPlanner"]

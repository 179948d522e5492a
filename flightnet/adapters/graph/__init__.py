"""Graph adapters - Implementations of graph-related ports.

Available implementations:
- CSVGraphRepository: Builds the flight network from CSV files
"""

from .csv_repository import CSVGraphRepository

__all__ = ["CSVGraphRepository"]

"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the graph engine to external systems like:
- Graph storage (CSV files)
- Caching systems (in-memory, null)
"""

"""Top-level package for the flight network analyzer.

The package models airports and flight routes as a directed graph and
answers reachability, shortest-path, diameter, essential-airport and
traffic-ranking queries over it.
"""

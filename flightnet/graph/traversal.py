"""Breadth-first and depth-first walks over a ``FlightGraph``.

Every walk works on a fresh ``TraversalState`` unless the caller passes
one in, so visitation marks never leak from one query into the next.
Callers accumulate results through visit hooks instead of duplicating
the traversal loops.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterator, List, Optional, Set, Tuple

from .network import FlightGraph, Vertex

BFSVisit = Callable[[Vertex, int, Vertex], None]
DFSVisit = Callable[[Vertex], None]


@dataclass
class TraversalState:
    """Per-query algorithm state for the vertices of one graph.

    Attributes:
        visited: Vertices already discovered
        processing: Vertices whose DFS subtree is still open
        discovery: DFS discovery order (articulation points only)
        low: Low-link values (articulation points only)
    """

    visited: Set[Vertex] = field(default_factory=set)
    processing: Set[Vertex] = field(default_factory=set)
    discovery: Dict[Vertex, int] = field(default_factory=dict)
    low: Dict[Vertex, int] = field(default_factory=dict)

    def is_visited(self, vertex: Vertex) -> bool:
        return vertex in self.visited

    def mark_visited(self, vertex: Vertex) -> None:
        self.visited.add(vertex)

    def is_processing(self, vertex: Vertex) -> bool:
        return vertex in self.processing

    def set_processing(self, vertex: Vertex, value: bool) -> None:
        if value:
            self.processing.add(vertex)
        else:
            self.processing.discard(vertex)


def _resolve(graph: FlightGraph, start: "str | Vertex") -> Optional[Vertex]:
    if isinstance(start, Vertex):
        return start
    return graph.find_vertex(start)


def iter_bfs(
    start: Vertex, state: Optional[TraversalState] = None
) -> Iterator[Tuple[Vertex, int, Optional[Vertex]]]:
    """Yield ``(vertex, depth, parent)`` in level order.

    Vertices are marked visited when enqueued, so each one is yielded
    exactly once. The start vertex is yielded first with depth 0 and no
    parent.
    """
    state = state or TraversalState()
    queue: Deque[Tuple[Vertex, int, Optional[Vertex]]] = deque()
    queue.append((start, 0, None))
    state.mark_visited(start)

    while queue:
        vertex, depth, parent = queue.popleft()
        yield vertex, depth, parent

        for neighbor in vertex.neighbors():
            if not state.is_visited(neighbor):
                state.mark_visited(neighbor)
                queue.append((neighbor, depth + 1, vertex))


def bfs(
    graph: FlightGraph,
    start: "str | Vertex",
    visit: Optional[BFSVisit] = None,
    state: Optional[TraversalState] = None,
) -> List[Vertex]:
    """Breadth-first walk from ``start``.

    Args:
        graph: The flight network.
        start: Starting airport code or vertex.
        visit: Optional hook called as ``visit(vertex, depth, parent)`` once
            per newly discovered vertex (the start is not reported).
        state: Optional traversal state to reuse within a single query.

    Returns:
        Vertices in level order, start first. Empty if ``start`` is absent.
    """
    source = _resolve(graph, start)
    if source is None:
        return []

    order: List[Vertex] = []
    for vertex, depth, parent in iter_bfs(source, state):
        order.append(vertex)
        if visit is not None and parent is not None:
            visit(vertex, depth, parent)
    return order


def _dfs_from(
    source: Vertex,
    state: TraversalState,
    order: List[Vertex],
    visit: Optional[DFSVisit],
    report_source: bool,
) -> None:
    stack: List[Vertex] = [source]

    while stack:
        vertex = stack.pop()
        if state.is_visited(vertex):
            continue
        state.mark_visited(vertex)
        order.append(vertex)
        if visit is not None and (report_source or vertex is not source):
            visit(vertex)

        # Reversed so neighbors are expanded in route insertion order.
        for neighbor in reversed(list(vertex.neighbors())):
            if not state.is_visited(neighbor):
                stack.append(neighbor)


def dfs(
    graph: FlightGraph,
    start: "str | Vertex",
    visit: Optional[DFSVisit] = None,
    state: Optional[TraversalState] = None,
) -> List[Vertex]:
    """Depth-first pre-order walk from ``start``.

    Args:
        graph: The flight network.
        start: Starting airport code or vertex.
        visit: Optional hook called once per newly discovered vertex
            (the start is not reported).
        state: Optional traversal state to reuse within a single query.

    Returns:
        Vertices in pre-order, start first. Empty if ``start`` is absent.
    """
    source = _resolve(graph, start)
    if source is None:
        return []

    order: List[Vertex] = []
    _dfs_from(source, state or TraversalState(), order, visit, report_source=False)
    return order


def dfs_all(graph: FlightGraph, visit: Optional[DFSVisit] = None) -> List[Vertex]:
    """Depth-first walk covering every component of the graph.

    Unlike ``dfs``, the hook is called for every vertex, including the
    root of each component.
    """
    state = TraversalState()
    order: List[Vertex] = []
    for vertex in graph:
        if not state.is_visited(vertex):
            _dfs_from(vertex, state, order, visit, report_source=True)
    return order

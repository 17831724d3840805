from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from phasekit.errors import CyclicOrderError
from phasekit.graph import PhaseGraph, Vertex


class _Color(Enum):
    GREY = 1
    BLACK = 2


def topological_order(graph: PhaseGraph) -> list[Vertex]:
    """Linearize ``graph`` by reversing a depth-first post-order.

    Every vertex is visited, reachable or not. Roots and successors are walked
    in reverse insertion order, so once the post-order is reversed, vertices
    left unconstrained by edges keep their declaration order.
    """

    state: dict[Vertex, _Color] = {}
    path: list[Vertex] = []
    post_order: list[Vertex] = []

    def visit(vertex: Vertex) -> None:
        state[vertex] = _Color.GREY
        path.append(vertex)
        for successor in reversed(graph.successors(vertex)):
            color = state.get(successor)
            if color is None:
                visit(successor)
            elif color is _Color.GREY:
                start = path.index(successor)
                cycle = [v.label for v in path[start:]] + [successor.label]
                raise CyclicOrderError(cycle)
        path.pop()
        state[vertex] = _Color.BLACK
        post_order.append(vertex)

    for vertex in reversed(graph.vertices()):
        if vertex not in state:
            visit(vertex)

    post_order.reverse()
    return post_order


def phase_names(order: Iterable[Vertex]) -> list[str]:
    """Drop boundary vertices, keeping each phase or alias name once."""

    names: list[str] = []
    seen: set[str] = set()
    for vertex in order:
        if vertex.is_boundary or vertex.name in seen:
            continue
        seen.add(vertex.name)
        names.append(vertex.name)
    return names

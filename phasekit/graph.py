"""Translate a tree lifecycle into a directed graph of ordering constraints.

Every phase contributes four vertices chained in order::

    entry-pre -> entry-post -> body -> exit-post

Nested phases hang between their parent's ``entry-post`` and ``body``, so all
child work is pre-work for the parent. Links and aliases attach to those
boundary points. Edges read "source is emitted before target".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from phasekit.errors import UnresolvedReferenceError, UnsupportedLifecycleError
from phasekit.model import AliasPlacement, Lifecycle, LinkKind, MapLifecycle, Phase

logger = logging.getLogger(__name__)


class Boundary(str, Enum):
    ENTRY_PRE = "entry-pre"
    ENTRY_POST = "entry-post"
    EXIT_POST = "exit-post"


@dataclass(frozen=True)
class Vertex:
    name: str
    boundary: Boundary | None = None

    @property
    def is_boundary(self) -> bool:
        return self.boundary is not None

    @property
    def label(self) -> str:
        if self.boundary is None:
            return self.name
        return f"{self.name}<{self.boundary.value}>"


class PhaseGraph:
    def __init__(self) -> None:
        self._successors: dict[Vertex, list[Vertex]] = {}
        self._edge_count = 0

    def add_vertex(self, vertex: Vertex) -> Vertex:
        self._successors.setdefault(vertex, [])
        return vertex

    def add_edge(self, source: Vertex, target: Vertex) -> None:
        self.add_vertex(target)
        successors = self._successors.setdefault(source, [])
        if target not in successors:
            successors.append(target)
            self._edge_count += 1

    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._successors)

    def successors(self, vertex: Vertex) -> tuple[Vertex, ...]:
        return tuple(self._successors.get(vertex, ()))

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._successors

    @property
    def edge_count(self) -> int:
        return self._edge_count


def _entry_pre(name: str) -> Vertex:
    return Vertex(name, Boundary.ENTRY_PRE)


def _entry_post(name: str) -> Vertex:
    return Vertex(name, Boundary.ENTRY_POST)


def _exit_post(name: str) -> Vertex:
    return Vertex(name, Boundary.EXIT_POST)


class _Builder:
    def __init__(self, lifecycle_id: str, phases: dict[str, Phase]) -> None:
        self.lifecycle_id = lifecycle_id
        self.phases = phases
        self.graph = PhaseGraph()

    def _require_phase(self, name: str, *, source: str) -> Phase:
        found = self.phases.get(name)
        if found is None:
            raise UnresolvedReferenceError(self.lifecycle_id, name, source=source)
        return found

    def add_phase(self, phase: Phase, before: Vertex | None, after: Vertex | None) -> None:
        graph = self.graph
        ep0 = graph.add_vertex(_entry_pre(phase.name))
        ep1 = graph.add_vertex(_entry_post(phase.name))
        ep2 = graph.add_vertex(Vertex(phase.name))
        ep3 = graph.add_vertex(_exit_post(phase.name))
        graph.add_edge(ep0, ep1)
        graph.add_edge(ep1, ep2)
        graph.add_edge(ep2, ep3)
        if before is not None:
            graph.add_edge(before, ep0)
        if after is not None:
            graph.add_edge(ep3, after)

        for link in phase.links:
            if not link.in_project:
                logger.debug(
                    "Ignoring %s-scoped link %s %s on phase %s",
                    link.pointer.scope,
                    link.kind,
                    link.phase,
                    phase.name,
                )
                continue
            self._require_phase(link.phase, source=f"link '{link.kind}' on phase '{phase.name}'")
            if link.kind is LinkKind.AFTER:
                graph.add_edge(Vertex(link.phase), ep0)
            else:
                graph.add_edge(ep3, _entry_pre(link.phase))

        for child in phase.phases:
            self.add_phase(child, ep1, ep2)

    def add_alias(self, name: str, placement: AliasPlacement, target_name: str) -> None:
        target = self._require_phase(target_name, source=f"alias '{name}'")
        graph = self.graph
        vertex = graph.add_vertex(Vertex(name))
        if placement is AliasPlacement.PRE:
            graph.add_edge(_entry_pre(target.name), vertex)
            graph.add_edge(vertex, _entry_post(target.name))
        elif placement is AliasPlacement.POST:
            graph.add_edge(Vertex(target.name), vertex)
            graph.add_edge(vertex, _exit_post(target.name))
        else:
            graph.add_edge(_entry_post(target.name), vertex)
            for child in target.phases:
                graph.add_edge(_exit_post(child.name), vertex)
            graph.add_edge(vertex, Vertex(target.name))


def build_graph(lifecycle: Lifecycle) -> PhaseGraph:
    """Build a fresh ordering graph for ``lifecycle``.

    Raises ``UnresolvedReferenceError`` when a project-scoped link or an alias
    names a phase missing from the tree, and ``UnsupportedLifecycleError`` for
    legacy flat lifecycles.
    """

    if isinstance(lifecycle, MapLifecycle):
        raise UnsupportedLifecycleError(lifecycle.id)

    index: dict[str, Phase] = {}
    for phase in lifecycle.all_phases():
        index.setdefault(phase.name, phase)

    builder = _Builder(lifecycle.id, index)
    for top in lifecycle.phases:
        builder.add_phase(top, None, None)
    for entry in lifecycle.aliases:
        builder.add_alias(entry.name, entry.placement, entry.phase)

    graph = builder.graph
    logger.debug(
        "Built graph for %s: %d vertices, %d edges",
        lifecycle.id,
        len(graph.vertices()),
        graph.edge_count,
    )
    return graph

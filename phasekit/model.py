"""Immutable lifecycle definitions: phases, links, aliases and lifecycles."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, TypeAlias

PRE = "pre:"
RUN = "run:"
POST = "post:"


def _require_name(value: object, *, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{what} must be a non-empty string")
    return value.strip()


class LinkKind(str, Enum):
    BEFORE = "before"
    AFTER = "after"

    def __str__(self) -> str:
        return self.value


class PointerScope(str, Enum):
    PROJECT = "project"
    DEPENDENCIES = "dependencies"
    CHILDREN = "children"

    def __str__(self) -> str:
        return self.value


class AliasPlacement(str, Enum):
    PRE = "pre"
    RUN = "run"
    POST = "post"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Pointer:
    phase: str
    scope: PointerScope = PointerScope.PROJECT

    def __post_init__(self) -> None:
        object.__setattr__(self, "phase", _require_name(self.phase, what="Pointer.phase"))
        object.__setattr__(self, "scope", PointerScope(self.scope))


@dataclass(frozen=True)
class Link:
    kind: LinkKind
    pointer: Pointer

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", LinkKind(self.kind))
        if not isinstance(self.pointer, Pointer):
            raise TypeError(f"Link.pointer must be a Pointer (type={type(self.pointer).__name__})")

    @property
    def phase(self) -> str:
        return self.pointer.phase

    @property
    def in_project(self) -> bool:
        return self.pointer.scope is PointerScope.PROJECT


def after(name: str, scope: PointerScope = PointerScope.PROJECT) -> Link:
    return Link(LinkKind.AFTER, Pointer(name, scope))


def before(name: str, scope: PointerScope = PointerScope.PROJECT) -> Link:
    return Link(LinkKind.BEFORE, Pointer(name, scope))


@dataclass(frozen=True)
class GoalRef:
    """A pinned plugin goal, ``groupId:artifactId:version:goal``."""

    group_id: str
    artifact_id: str
    version: str
    goal: str

    @classmethod
    def parse(cls, coordinate: str) -> "GoalRef":
        parts = _require_name(coordinate, what="goal coordinate").split(":")
        if len(parts) != 4 or not all(part.strip() for part in parts):
            raise ValueError(
                f"Goal coordinate must be groupId:artifactId:version:goal (got {coordinate!r})"
            )
        group_id, artifact_id, version, goal = (part.strip() for part in parts)
        return cls(group_id=group_id, artifact_id=artifact_id, version=version, goal=goal)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}:{self.goal}"


@dataclass(frozen=True)
class Phase:
    name: str
    phases: tuple["Phase", ...] = ()
    links: tuple[Link, ...] = ()
    goal: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require_name(self.name, what="Phase.name"))
        object.__setattr__(self, "phases", tuple(self.phases))
        object.__setattr__(self, "links", tuple(self.links))
        for child in self.phases:
            if not isinstance(child, Phase):
                raise TypeError(
                    f"Phase {self.name!r} children must be Phase (type={type(child).__name__})"
                )
        for link in self.links:
            if not isinstance(link, Link):
                raise TypeError(
                    f"Phase {self.name!r} links must be Link (type={type(link).__name__})"
                )
        if self.goal is not None:
            object.__setattr__(self, "goal", str(GoalRef.parse(self.goal)))

    def walk(self) -> Iterator["Phase"]:
        yield self
        for child in self.phases:
            yield from child.walk()


@dataclass(frozen=True)
class Alias:
    """Legacy flat phase name pinned to a point inside a phase's span.

    ``target`` is ``<phase>`` or ``run:<phase>`` (just before the phase's own
    work, after its nested phases), ``pre:<phase>`` (start of the span) or
    ``post:<phase>`` (end of the span).
    """

    name: str
    target: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require_name(self.name, what="Alias.name"))
        target = _require_name(self.target, what="Alias.target")
        if ":" in target:
            qualifier, _, phase_name = target.partition(":")
            if qualifier.strip() not in {p.value for p in AliasPlacement}:
                raise ValueError(
                    f"Alias {self.name!r} target qualifier must be one of: pre, run, post (got {target!r})"
                )
            target = f"{qualifier.strip()}:{_require_name(phase_name, what='Alias.target phase')}"
        object.__setattr__(self, "target", target)

    @property
    def placement(self) -> AliasPlacement:
        if ":" not in self.target:
            return AliasPlacement.RUN
        return AliasPlacement(self.target.split(":", 1)[0])

    @property
    def phase(self) -> str:
        return self.target.split(":", 1)[-1]


def alias(name: str, target: str) -> Alias:
    return Alias(name, target)


def phase(name: str, *items: Phase | Link | str) -> Phase:
    """Compact builder: ``phase("test", after("compile"), phase("unit"), "g:a:1.0:goal")``."""

    children: list[Phase] = []
    links: list[Link] = []
    goal: str | None = None
    for item in items:
        if isinstance(item, Phase):
            children.append(item)
        elif isinstance(item, Link):
            links.append(item)
        elif isinstance(item, str):
            if goal is not None:
                raise ValueError(f"Phase {name!r} declares more than one goal")
            goal = item
        else:
            raise TypeError(f"Unsupported phase item for {name!r}: {type(item).__name__}")
    return Phase(name=name, phases=tuple(children), links=tuple(links), goal=goal)


@dataclass(frozen=True)
class TreeLifecycle:
    id: str
    phases: tuple[Phase, ...]
    aliases: tuple[Alias, ...] = ()
    ordered_phases: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_name(self.id, what="Lifecycle.id"))
        object.__setattr__(self, "phases", tuple(self.phases))
        object.__setattr__(self, "aliases", tuple(self.aliases))
        if self.ordered_phases is not None:
            object.__setattr__(
                self,
                "ordered_phases",
                tuple(_require_name(n, what="ordered phase") for n in self.ordered_phases),
            )

    def all_phases(self) -> Iterator[Phase]:
        for top in self.phases:
            yield from top.walk()

    def goals(self) -> Mapping[str, str]:
        return MappingProxyType({p.name: p.goal for p in self.all_phases() if p.goal})


@dataclass(frozen=True)
class MapLifecycle:
    """A legacy flat lifecycle: ordered phase names plus default goal bindings."""

    id: str
    phases: tuple[str, ...]
    default_goals: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_name(self.id, what="Lifecycle.id"))
        object.__setattr__(
            self, "phases", tuple(_require_name(n, what="legacy phase") for n in self.phases)
        )
        object.__setattr__(
            self,
            "default_goals",
            MappingProxyType(
                {
                    _require_name(k, what="legacy phase"): str(GoalRef.parse(v))
                    for k, v in dict(self.default_goals).items()
                }
            ),
        )

    def goals(self) -> Mapping[str, str]:
        return self.default_goals


Lifecycle: TypeAlias = TreeLifecycle | MapLifecycle


def lifecycle(
    id: str,
    phases: Iterable[Phase],
    aliases: Iterable[Alias] = (),
    ordered_phases: Iterable[str] | None = None,
) -> TreeLifecycle:
    return TreeLifecycle(
        id=id,
        phases=tuple(phases),
        aliases=tuple(aliases),
        ordered_phases=None if ordered_phases is None else tuple(ordered_phases),
    )

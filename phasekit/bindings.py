"""Phase-to-goal binding plans.

A binding plan pairs each bound phase of a lifecycle's computed order with the
plugin goals attached to it. Phases with no binding are no-ops and are left
out. Nothing here runs a goal.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from phasekit.builtin import DEFAULT
from phasekit.model import GoalRef, MapLifecycle
from phasekit.registry import LifecycleRegistry

MAVEN_INSTALL_PLUGIN_VERSION = "3.0.0-M1"
MAVEN_DEPLOY_PLUGIN_VERSION = "3.0.0-M1"


@dataclass(frozen=True)
class PackagingMapping:
    packaging: str
    lifecycle_id: str
    goals: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.packaging, str) or not self.packaging.strip():
            raise TypeError("PackagingMapping.packaging must be a non-empty string")
        object.__setattr__(self, "packaging", self.packaging.strip())
        normalized: dict[str, tuple[str, ...]] = {}
        for phase_name, coordinates in dict(self.goals).items():
            if isinstance(coordinates, str):
                coordinates = (coordinates,)
            normalized[str(phase_name).strip()] = tuple(str(GoalRef.parse(c)) for c in coordinates)
        object.__setattr__(self, "goals", MappingProxyType(normalized))


POM_PACKAGING = PackagingMapping(
    packaging="pom",
    lifecycle_id=DEFAULT,
    goals={
        "install": f"org.apache.maven.plugins:maven-install-plugin:{MAVEN_INSTALL_PLUGIN_VERSION}:install",
        "deploy": f"org.apache.maven.plugins:maven-deploy-plugin:{MAVEN_DEPLOY_PLUGIN_VERSION}:deploy",
    },
)

BUILTIN_PACKAGINGS: tuple[PackagingMapping, ...] = (POM_PACKAGING,)


def _packaging_goals(
    packaging: str | None,
    lifecycle_id: str,
    mappings: Iterable[PackagingMapping],
) -> Mapping[str, tuple[str, ...]]:
    if packaging is None:
        return {}
    known = [m for m in mappings if m.packaging == packaging.strip()]
    if not known:
        raise ValueError(f"Unknown packaging: {packaging}")
    merged: dict[str, tuple[str, ...]] = {}
    for mapping in known:
        if mapping.lifecycle_id != lifecycle_id:
            continue
        for phase_name, goals in mapping.goals.items():
            merged[phase_name] = merged.get(phase_name, ()) + goals
    return merged


def binding_plan(
    registry: LifecycleRegistry,
    lifecycle_id: str,
    packaging: str | None = None,
    *,
    mappings: Iterable[PackagingMapping] = BUILTIN_PACKAGINGS,
) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Return ``(phase, goals)`` pairs in computed phase order.

    The lifecycle's own default goals come before goals contributed by the
    packaging mapping. Legacy flat lifecycles use their declared phase list.
    """

    target = registry.get(lifecycle_id)
    defaults = target.goals()
    extra = _packaging_goals(packaging, target.id, mappings)

    if isinstance(target, MapLifecycle):
        order = target.phases
    else:
        order = registry.compute_phases(target)

    plan: list[tuple[str, tuple[str, ...]]] = []
    for phase_name in order:
        goals: tuple[str, ...] = ()
        if phase_name in defaults:
            goals += (defaults[phase_name],)
        goals += extra.get(phase_name, ())
        if goals:
            plan.append((phase_name, goals))
    return tuple(plan)

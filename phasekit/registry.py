from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Protocol

from phasekit.builtin import builtin_lifecycles
from phasekit.errors import StructuralError
from phasekit.graph import build_graph
from phasekit.model import Lifecycle, MapLifecycle, TreeLifecycle
from phasekit.ordering import phase_names, topological_order
from phasekit.validation import check_explicit_order, validate_lifecycle

logger = logging.getLogger(__name__)


class LifecycleProvider(Protocol):
    def provides(self) -> Collection[Lifecycle]:
        """Return the lifecycles contributed by this provider."""


@dataclass(frozen=True)
class StaticLifecycleProvider:
    lifecycles: tuple[Lifecycle, ...]

    def provides(self) -> Collection[Lifecycle]:
        return self.lifecycles


@dataclass(frozen=True)
class LegacyLifecycleProvider:
    """Lift legacy flat definitions (``{id: {"phases": [...], "goals": {...}}}``)."""

    definitions: Mapping[str, Mapping[str, Any]]

    def provides(self) -> Collection[Lifecycle]:
        lifted: list[Lifecycle] = []
        for lifecycle_id, definition in self.definitions.items():
            lifted.append(
                MapLifecycle(
                    id=lifecycle_id,
                    phases=tuple(definition.get("phases") or ()),
                    default_goals=dict(definition.get("goals") or {}),
                )
            )
        return tuple(lifted)


@dataclass(frozen=True)
class LifecycleRegistry:
    _by_id: Mapping[str, Lifecycle]

    @classmethod
    def from_lifecycles(cls, lifecycles: Iterable[Lifecycle]) -> "LifecycleRegistry":
        entries: dict[str, Lifecycle] = {}
        for entry in lifecycles:
            if not isinstance(entry, (TreeLifecycle, MapLifecycle)):
                raise TypeError(f"Registered lifecycles must be Lifecycle (type={type(entry).__name__})")
            if entry.id in entries:
                raise StructuralError(entry.id, entry.id, what="lifecycle")
            validate_lifecycle(entry)
            entries[entry.id] = entry
        logger.info("Lifecycle registry ready: %d lifecycles (%s)", len(entries), ", ".join(entries))
        return cls(_by_id=MappingProxyType(entries))

    @classmethod
    def from_providers(
        cls,
        providers: Iterable[LifecycleProvider] = (),
        *,
        include_builtins: bool = True,
    ) -> "LifecycleRegistry":
        lifecycles: list[Lifecycle] = list(builtin_lifecycles()) if include_builtins else []
        for provider in providers:
            provided = tuple(provider.provides())
            logger.debug("Provider %s contributed %d lifecycles", type(provider).__name__, len(provided))
            lifecycles.extend(provided)
        return cls.from_lifecycles(lifecycles)

    def ids(self) -> tuple[str, ...]:
        return tuple(self._by_id.keys())

    def get(self, lifecycle_id: str) -> Lifecycle:
        entry = self._by_id.get((lifecycle_id or "").strip())
        if entry is None:
            available = ", ".join(self._by_id) or "<none>"
            raise ValueError(f"Unknown lifecycle id: {lifecycle_id} (available: {available})")
        return entry

    def __iter__(self) -> Iterator[Lifecycle]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, lifecycle_id: object) -> bool:
        return lifecycle_id in self._by_id

    def compute_phases(self, lifecycle: Lifecycle | str) -> tuple[str, ...]:
        """Return the validated phase order for ``lifecycle`` (an instance or id).

        A new graph is built on every call; the registry itself is never mutated,
        so concurrent calls need no locking.
        """

        target = self.get(lifecycle) if isinstance(lifecycle, str) else lifecycle
        computed = phase_names(topological_order(build_graph(target)))
        result = check_explicit_order(target, computed)
        logger.debug("Computed %d phases for %s", len(result), target.id)
        return result

    def describe(self) -> tuple[dict[str, Any], ...]:
        rows: list[dict[str, Any]] = []
        for entry in self._by_id.values():
            if isinstance(entry, MapLifecycle):
                rows.append(
                    {
                        "id": entry.id,
                        "kind": "legacy",
                        "phases": list(entry.phases),
                        "goals": dict(entry.goals()),
                    }
                )
                continue
            rows.append(
                {
                    "id": entry.id,
                    "kind": "tree",
                    "phases": list(self.compute_phases(entry)),
                    "goals": dict(entry.goals()),
                    "aliases": {a.name: a.target for a in entry.aliases},
                }
            )
        return tuple(rows)


@lru_cache(maxsize=1)
def default_registry() -> LifecycleRegistry:
    return LifecycleRegistry.from_providers()

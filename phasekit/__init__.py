"""Lifecycle phase graph compiler.

Turns nested phase declarations, before/after links and legacy phase aliases
into one validated, deterministic phase order. Executing the goals bound to
those phases is left to the caller.
"""

from phasekit.errors import (
    CyclicOrderError,
    LifecycleError,
    OrderMismatchError,
    StructuralError,
    UnresolvedReferenceError,
    UnsupportedLifecycleError,
)
from phasekit.model import (
    POST,
    PRE,
    RUN,
    Alias,
    AliasPlacement,
    GoalRef,
    Lifecycle,
    Link,
    LinkKind,
    MapLifecycle,
    Phase,
    Pointer,
    PointerScope,
    TreeLifecycle,
    after,
    alias,
    before,
    lifecycle,
    phase,
)
from phasekit.registry import (
    LegacyLifecycleProvider,
    LifecycleProvider,
    LifecycleRegistry,
    StaticLifecycleProvider,
    default_registry,
)

__all__ = [
    "POST",
    "PRE",
    "RUN",
    "Alias",
    "AliasPlacement",
    "CyclicOrderError",
    "GoalRef",
    "LegacyLifecycleProvider",
    "Lifecycle",
    "LifecycleError",
    "LifecycleProvider",
    "LifecycleRegistry",
    "Link",
    "LinkKind",
    "MapLifecycle",
    "OrderMismatchError",
    "Phase",
    "Pointer",
    "PointerScope",
    "StaticLifecycleProvider",
    "StructuralError",
    "TreeLifecycle",
    "UnresolvedReferenceError",
    "UnsupportedLifecycleError",
    "after",
    "alias",
    "before",
    "default_registry",
    "lifecycle",
    "phase",
]

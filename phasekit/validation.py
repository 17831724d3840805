from __future__ import annotations

from collections.abc import Sequence

from phasekit.errors import OrderMismatchError, StructuralError, UnresolvedReferenceError
from phasekit.model import Lifecycle, MapLifecycle


def check_unique_phases(lifecycle: Lifecycle) -> None:
    """Fail on the first phase (or alias) name seen twice in one lifecycle."""

    seen: set[str] = set()
    if isinstance(lifecycle, MapLifecycle):
        for name in lifecycle.phases:
            if name in seen:
                raise StructuralError(lifecycle.id, name)
            seen.add(name)
        return

    for phase in lifecycle.all_phases():
        if phase.name in seen:
            raise StructuralError(lifecycle.id, phase.name)
        seen.add(phase.name)

    for entry in lifecycle.aliases:
        if entry.name in seen:
            raise StructuralError(lifecycle.id, entry.name, what="alias")
        seen.add(entry.name)


def check_references(lifecycle: Lifecycle) -> None:
    if isinstance(lifecycle, MapLifecycle):
        return

    names = {phase.name for phase in lifecycle.all_phases()}
    for phase in lifecycle.all_phases():
        for link in phase.links:
            if link.in_project and link.phase not in names:
                raise UnresolvedReferenceError(
                    lifecycle.id, link.phase, source=f"link '{link.kind}' on phase '{phase.name}'"
                )
    for entry in lifecycle.aliases:
        if entry.phase not in names:
            raise UnresolvedReferenceError(lifecycle.id, entry.phase, source=f"alias '{entry.name}'")


def validate_lifecycle(lifecycle: Lifecycle) -> None:
    check_unique_phases(lifecycle)
    check_references(lifecycle)


def check_explicit_order(lifecycle: Lifecycle, computed: Sequence[str]) -> tuple[str, ...]:
    """Cross-check a declared ordering against the computed one.

    Without a declared ordering the computed one is returned. A declared
    ordering of the same size is authoritative and returned as-is.
    """

    declared = getattr(lifecycle, "ordered_phases", None)
    if declared is None:
        return tuple(computed)

    if len(declared) != len(computed):
        computed_set = set(computed)
        declared_set = set(declared)
        raise OrderMismatchError(
            lifecycle.id,
            expected=len(computed),
            received=len(declared),
            missing=computed_set - declared_set,
            unexpected=declared_set - computed_set,
        )
    return tuple(declared)

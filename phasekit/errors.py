from __future__ import annotations

from collections.abc import Iterable


def _format_names(names: Iterable[str]) -> str:
    return "[" + ", ".join(sorted(names)) + "]"


class LifecycleError(ValueError):
    """Base class for every lifecycle definition or ordering failure."""


class StructuralError(LifecycleError):
    def __init__(self, lifecycle_id: str, name: str, *, what: str = "phase") -> None:
        self.lifecycle_id = lifecycle_id
        self.name = name
        if what == "lifecycle":
            super().__init__(f"Found duplicated lifecycle id '{lifecycle_id}'")
        else:
            super().__init__(f"Found duplicated {what} '{name}' in '{lifecycle_id}' lifecycle")


class OrderMismatchError(LifecycleError):
    def __init__(
        self,
        lifecycle_id: str,
        *,
        expected: int,
        received: int,
        missing: Iterable[str],
        unexpected: Iterable[str],
    ) -> None:
        self.lifecycle_id = lifecycle_id
        self.missing = frozenset(missing)
        self.unexpected = frozenset(unexpected)
        message = (
            f"List of phases differ in size for '{lifecycle_id}' lifecycle: "
            f"expected {expected} but received {received}"
        )
        if self.missing:
            message += f", missing {_format_names(self.missing)}"
        if self.unexpected:
            message += f", unexpected {_format_names(self.unexpected)}"
        super().__init__(message)


class UnresolvedReferenceError(LifecycleError):
    def __init__(self, lifecycle_id: str, reference: str, *, source: str) -> None:
        self.lifecycle_id = lifecycle_id
        self.reference = reference
        self.source = source
        super().__init__(
            f"Unknown phase '{reference}' referenced by {source} in '{lifecycle_id}' lifecycle"
        )


class CyclicOrderError(LifecycleError):
    def __init__(self, cycle: Iterable[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(f"Cyclic phase ordering detected: {' -> '.join(self.cycle)}")


class UnsupportedLifecycleError(LifecycleError):
    def __init__(self, lifecycle_id: str) -> None:
        self.lifecycle_id = lifecycle_id
        super().__init__(
            f"Lifecycle '{lifecycle_id}' is a legacy flat definition; phase tree computation is unsupported"
        )

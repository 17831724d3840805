"""Strict reader over a parsed YAML mapping.

Every key a caller reads is recorded. ``assert_consumed`` then rejects
whatever was left over, naming it by its full dotted path.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

_REQUIRED = object()


@dataclass
class ConfigNamespace:
    data: Mapping[str, Any]
    path: str
    _seen: set[str] = field(default_factory=set, init=False, repr=False)
    _nested: list["ConfigNamespace"] = field(default_factory=list, init=False, repr=False)

    def where(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def keys(self) -> tuple[str, ...]:
        return tuple(str(key) for key in self.data)

    def assert_consumed(self) -> None:
        leftover = sorted(str(key) for key in self.data if key not in self._seen)
        if leftover:
            seen = ", ".join(sorted(self._seen)) or "<none>"
            raise ValueError(
                f"Unknown config keys under {self.path or '<root>'}: {', '.join(leftover)} (consumed: {seen})"
            )
        for child in self._nested:
            child.assert_consumed()

    def _take(self, key: str, default: Any) -> Any:
        self._seen.add(key)
        value = self.data.get(key)
        if value is not None:
            return value
        if default is _REQUIRED:
            raise ValueError(f"Missing required config key: {self.where(key)}")
        return default

    def namespace(self, key: str) -> "ConfigNamespace":
        """Return the nested mapping under ``key``; absent or null reads as empty."""

        raw = self._take(key, {})
        if not isinstance(raw, Mapping):
            raise TypeError(f"{self.where(key)} must be a mapping (type={type(raw).__name__})")
        child = ConfigNamespace(raw, path=self.where(key))
        self._nested.append(child)
        return child

    def get_bool(self, key: str, *, default: bool | object = _REQUIRED) -> bool:
        value = self._take(key, default)
        if not isinstance(value, bool):
            raise TypeError(f"{self.where(key)} must be a boolean (type={type(value).__name__})")
        return value

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _REQUIRED,
        choices: Iterable[str] | None = None,
    ) -> str | None:
        value = self._take(key, default)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"{self.where(key)} must be a string (type={type(value).__name__})")
        value = value.strip()
        if not value:
            raise ValueError(f"{self.where(key)} cannot be empty")
        if choices is not None:
            allowed = sorted(choices)
            if value not in allowed:
                raise ValueError(f"{self.where(key)} must be one of: {', '.join(allowed)} (got {value!r})")
        return value

    def _items(self, key: str, default: Any, allow_empty: bool) -> list[tuple[str, Any]]:
        value = self._take(key, default)
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"{self.where(key)} must be a list (type={type(value).__name__})")
        if not value and not allow_empty:
            raise ValueError(f"{self.where(key)} cannot be empty")
        return [(f"{self.where(key)}[{idx}]", item) for idx, item in enumerate(value)]

    def get_list_str(
        self,
        key: str,
        *,
        default: list[str] | object = _REQUIRED,
        allow_empty: bool = False,
    ) -> list[str]:
        names: list[str] = []
        for where, item in self._items(key, default, allow_empty):
            if not isinstance(item, str) or not item.strip():
                raise TypeError(f"{where} must be a non-empty string")
            names.append(item.strip())
        return names

    def get_optional_list_str(self, key: str) -> list[str] | None:
        if self.data.get(key) is None:
            self._seen.add(key)
            return None
        return self.get_list_str(key)

    def get_list_mapping(
        self,
        key: str,
        *,
        default: list[Mapping[str, Any]] | object = _REQUIRED,
        allow_empty: bool = False,
    ) -> list[dict[str, Any]]:
        mappings: list[dict[str, Any]] = []
        for where, item in self._items(key, default, allow_empty):
            if not isinstance(item, Mapping):
                raise TypeError(f"{where} must be a mapping (type={type(item).__name__})")
            mappings.append(dict(item))
        return mappings

"""YAML lifecycle definitions and config-driven registry assembly.

Definition file layout::

    lifecycles:
      - id: release
        phases:
          - name: stage
            goal: com.example:stage-plugin:1.0:stage
            phases:
              - name: stage-prepare
          - name: publish
            links:
              - after: stage
        aliases:
          - name: pre-publish
            target: pre:publish
        ordered_phases: [stage-prepare, stage, pre-publish, publish]
    legacy:
      housekeeping:
        phases: [tidy, archive]
        goals:
          archive: com.example:archive-plugin:1.0:archive
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any

from phasekit.config_io import load_yaml_mapping
from phasekit.config_namespace import ConfigNamespace
from phasekit.model import (
    Alias,
    Lifecycle,
    Link,
    LinkKind,
    Phase,
    Pointer,
    PointerScope,
    TreeLifecycle,
)
from phasekit.registry import (
    LegacyLifecycleProvider,
    LifecycleProvider,
    LifecycleRegistry,
    StaticLifecycleProvider,
)

logger = logging.getLogger(__name__)

_SCOPES = tuple(scope.value for scope in PointerScope)


def _link_from_mapping(data: Mapping[str, Any], *, path: str) -> Link:
    ns = ConfigNamespace(data, path=path)
    kinds = [kind for kind in LinkKind if kind.value in data]
    if len(kinds) != 1:
        raise ValueError(f"{path} must declare exactly one of: after, before")
    kind = kinds[0]
    target = ns.get_str(kind.value)
    scope = ns.get_str("scope", default=PointerScope.PROJECT.value, choices=_SCOPES)
    ns.assert_consumed()
    return Link(kind, Pointer(str(target), PointerScope(scope)))


def _phase_from_mapping(data: Mapping[str, Any], *, path: str) -> Phase:
    ns = ConfigNamespace(data, path=path)
    name = ns.get_str("name")
    goal = ns.get_str("goal", default=None)
    links = tuple(
        _link_from_mapping(item, path=f"{path}.links[{idx}]")
        for idx, item in enumerate(ns.get_list_mapping("links", default=[], allow_empty=True))
    )
    children = tuple(
        _phase_from_mapping(item, path=f"{path}.phases[{idx}]")
        for idx, item in enumerate(ns.get_list_mapping("phases", default=[], allow_empty=True))
    )
    ns.assert_consumed()
    return Phase(name=str(name), phases=children, links=links, goal=goal)


def lifecycle_from_mapping(data: Mapping[str, Any], *, path: str = "lifecycle") -> TreeLifecycle:
    ns = ConfigNamespace(data, path=path)
    lifecycle_id = ns.get_str("id")
    phases = tuple(
        _phase_from_mapping(item, path=f"{path}.phases[{idx}]")
        for idx, item in enumerate(ns.get_list_mapping("phases"))
    )
    aliases: list[Alias] = []
    for idx, item in enumerate(ns.get_list_mapping("aliases", default=[], allow_empty=True)):
        alias_ns = ConfigNamespace(item, path=f"{path}.aliases[{idx}]")
        aliases.append(Alias(str(alias_ns.get_str("name")), str(alias_ns.get_str("target"))))
        alias_ns.assert_consumed()
    ordered = ns.get_optional_list_str("ordered_phases")
    ns.assert_consumed()
    return TreeLifecycle(
        id=str(lifecycle_id),
        phases=phases,
        aliases=tuple(aliases),
        ordered_phases=None if ordered is None else tuple(ordered),
    )


def _legacy_from_namespace(ns: ConfigNamespace) -> dict[str, dict[str, Any]]:
    definitions: dict[str, dict[str, Any]] = {}
    for lifecycle_id in ns.keys():
        entry = ns.namespace(lifecycle_id)
        phases = entry.get_list_str("phases")
        goals_ns = entry.namespace("goals")
        goals = {name: goals_ns.get_str(name) for name in goals_ns.keys()}
        definitions[lifecycle_id] = {"phases": phases, "goals": goals}
    return definitions


@dataclass(frozen=True)
class DefinitionSet:
    lifecycles: tuple[TreeLifecycle, ...]
    legacy: Mapping[str, Mapping[str, Any]]

    def providers(self) -> tuple[LifecycleProvider, ...]:
        providers: list[LifecycleProvider] = [StaticLifecycleProvider(self.lifecycles)]
        if self.legacy:
            providers.append(LegacyLifecycleProvider(self.legacy))
        return tuple(providers)


def definitions_from_mapping(data: Mapping[str, Any], *, path: str) -> DefinitionSet:
    ns = ConfigNamespace(data, path=path)
    lifecycles = tuple(
        lifecycle_from_mapping(item, path=f"{path}.lifecycles[{idx}]")
        for idx, item in enumerate(ns.get_list_mapping("lifecycles", default=[], allow_empty=True))
    )
    legacy = _legacy_from_namespace(ns.namespace("legacy"))
    ns.assert_consumed()
    return DefinitionSet(lifecycles=lifecycles, legacy=legacy)


def load_definitions(path: str | os.PathLike[str]) -> DefinitionSet:
    resolved = os.path.abspath(os.fspath(path))
    definitions = definitions_from_mapping(load_yaml_mapping(resolved), path=resolved)
    logger.info(
        "Loaded %d lifecycle definitions (%d legacy) from %s",
        len(definitions.lifecycles),
        len(definitions.legacy),
        resolved,
    )
    return definitions


@dataclass(frozen=True)
class YamlLifecycleProvider:
    """Provider backed by one definition file, read when ``provides`` is called."""

    path: str

    def provides(self) -> Collection[Lifecycle]:
        definitions = load_definitions(self.path)
        provided: list[Lifecycle] = []
        for provider in definitions.providers():
            provided.extend(provider.provides())
        return tuple(provided)


@dataclass(frozen=True)
class RegistryConfig:
    include_builtins: bool
    definitions: tuple[str, ...]
    log_level: str

    @staticmethod
    def from_dict(cfg: Mapping[str, Any], *, base_dir: str | None = None) -> "RegistryConfig":
        ns = ConfigNamespace(cfg, path="")
        lifecycles = ns.namespace("lifecycles")
        include_builtins = lifecycles.get_bool("include_builtins", default=True)
        paths = lifecycles.get_list_str("definitions", default=[], allow_empty=True)
        logging_ns = ns.namespace("logging")
        log_level = logging_ns.get_str(
            "level",
            default="INFO",
            choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        )
        ns.assert_consumed()

        root = base_dir or os.getcwd()
        resolved = tuple(
            path if os.path.isabs(path) else os.path.normpath(os.path.join(root, path))
            for path in paths
        )
        return RegistryConfig(
            include_builtins=include_builtins,
            definitions=resolved,
            log_level=str(log_level),
        )


def registry_from_config(config: RegistryConfig) -> LifecycleRegistry:
    providers = [YamlLifecycleProvider(path) for path in config.definitions]
    return LifecycleRegistry.from_providers(providers, include_builtins=config.include_builtins)

"""Locate and read the phasekit YAML configuration.

Resolution order: an explicit path, then the file named by ``PHASEKIT_CONFIG``,
then ``config/config.yaml`` in the working directory or its nearest ancestor
holding one. A discovered base file is overlaid by ``config.local.yaml`` from
the same directory. When nothing is found the configuration is empty.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "PHASEKIT_CONFIG"
CONFIG_DIRNAME = "config"
BASE_CONFIG_NAME = "config.yaml"
LOCAL_CONFIG_NAME = "config.local.yaml"


@dataclass(frozen=True)
class ConfigSource:
    """Where a loaded configuration came from."""

    mode: str
    paths: tuple[str, ...] = ()

    @property
    def base_dir(self) -> str | None:
        return os.path.dirname(self.paths[0]) if self.paths else None


def load_yaml_mapping(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"{path} must hold a YAML mapping (type={type(payload).__name__})")
    return dict(payload)


def find_config_dir(start: str | os.PathLike[str] | None = None) -> str | None:
    here = Path(start or os.getcwd()).resolve()
    if here.is_file():
        here = here.parent
    for candidate in (here, *here.parents):
        config_dir = candidate / CONFIG_DIRNAME
        if (config_dir / BASE_CONFIG_NAME).is_file():
            return str(config_dir)
    return None


def _shape(value: Any) -> str:
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "list"
    return "scalar"


def merge_overlay(base: Mapping[str, Any], overlay: Mapping[str, Any], *, path: str = "") -> dict[str, Any]:
    """Overlay ``overlay`` onto ``base``: mappings merge key by key, anything else is replaced.

    A null overlay value clears the key. Replacing a value with one of a
    different shape (mapping, list or scalar) is rejected.
    """

    merged = dict(base)
    for key, value in overlay.items():
        where = f"{path}.{key}" if path else str(key)
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_overlay(current, value, path=where)
            continue
        if current is not None and value is not None and _shape(current) != _shape(value):
            raise ValueError(
                f"Invalid config overlay at {where}: {LOCAL_CONFIG_NAME} sets a {_shape(value)} "
                f"where {BASE_CONFIG_NAME} has a {_shape(current)}"
            )
        merged[key] = value
    return merged


def load_config(
    config_path: str | os.PathLike[str] | None = None,
    *,
    env_var: str | None = CONFIG_ENV_VAR,
    start_dir: str | os.PathLike[str] | None = None,
) -> tuple[dict[str, Any], ConfigSource]:
    chosen, mode = config_path, "explicit"
    if chosen is None and env_var:
        chosen, mode = os.environ.get(env_var, "").strip() or None, "env"

    if chosen:
        path = os.path.abspath(os.path.expandvars(os.path.expanduser(os.fspath(chosen))))
        return load_yaml_mapping(path), ConfigSource(mode, (path,))

    config_dir = find_config_dir(start_dir)
    if config_dir is None:
        return {}, ConfigSource("none")

    base_path = os.path.join(config_dir, BASE_CONFIG_NAME)
    cfg = load_yaml_mapping(base_path)
    local_path = os.path.join(config_dir, LOCAL_CONFIG_NAME)
    if not os.path.isfile(local_path):
        return cfg, ConfigSource("base", (base_path,))
    return merge_overlay(cfg, load_yaml_mapping(local_path)), ConfigSource("base+local", (base_path, local_path))

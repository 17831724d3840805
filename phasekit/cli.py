from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from phasekit.bindings import binding_plan
from phasekit.config_io import load_config
from phasekit.definitions import RegistryConfig, registry_from_config
from phasekit.model import MapLifecycle
from phasekit.registry import LifecycleRegistry

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(level: str) -> logging.Logger:
    """Route ``phasekit.*`` loggers to stderr at ``level``."""

    logger = logging.getLogger("phasekit")
    logger.setLevel(level)
    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phasekit", add_help=True)
    parser.add_argument("--config", default=None, help="Path to a phasekit YAML config file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Override logging.level from the config",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("lifecycles", help="List registered lifecycles")

    phases = sub.add_parser("phases", help="Print the computed phase order of a lifecycle")
    phases.add_argument("lifecycle")

    bindings = sub.add_parser("bindings", help="Print the phase-to-goal binding plan")
    bindings.add_argument("lifecycle")
    bindings.add_argument("--packaging", default=None)

    return parser


def _load_registry_config(config_path: str | None) -> RegistryConfig:
    cfg, source = load_config(config_path)
    return RegistryConfig.from_dict(cfg, base_dir=source.base_dir)


def _run(args: argparse.Namespace, registry: LifecycleRegistry) -> int:
    if args.command == "lifecycles":
        for entry in registry:
            kind = "legacy" if isinstance(entry, MapLifecycle) else "tree"
            print(f"{entry.id}\t{kind}")
        return 0

    if args.command == "phases":
        for name in registry.compute_phases(args.lifecycle):
            print(name)
        return 0

    if args.command == "bindings":
        for phase_name, goals in binding_plan(registry, args.lifecycle, args.packaging):
            for goal in goals:
                print(f"{phase_name}: {goal}")
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        config = _load_registry_config(args.config)
        setup_logging(args.log_level or config.log_level)
        registry = registry_from_config(config)
        return _run(args, registry)
    except (ValueError, TypeError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))

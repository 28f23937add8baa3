"""Command line interface for siteledger."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import os
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

from siteledger import StageContext, StageRunner, bootstrap, create_default_context, registry
from siteledger.datasets import DatasetLoader, load_catalog
from siteledger.settings import Settings


def load_environment() -> None:
    candidates = []
    if env_file := os.getenv("ENV_FILE"):
        candidates.append(Path(env_file))
    candidates.append(Path(".env"))

    for path in candidates:
        if not path.exists():
            continue
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip().strip('"'))


load_environment()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure logging from a YAML/INI file, or fall back to basic configuration."""

    config_candidates = []
    if config_env := os.getenv("LOGGING_CONFIG"):
        config_candidates.append(Path(config_env))
    config_candidates.extend(
        Path(name) for name in ("logging.yaml", "logging.yml", "logging.ini")
    )

    for config_path in config_candidates:
        if not config_path.exists():
            continue
        try:
            if config_path.suffix.lower() in {".ini", ".cfg"}:
                logging.config.fileConfig(config_path, disable_existing_loggers=False)
            else:
                with config_path.open("r", encoding="utf-8") as handle:
                    logging.config.dictConfig(yaml.safe_load(handle))
            return
        except (OSError, ValueError, TypeError, KeyError, yaml.YAMLError) as exc:
            print(f"Failed to load logging config {config_path}: {exc}. Falling back to basic logging.")
            break

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging()
bootstrap()
runner = StageRunner(registry)


def _context() -> tuple[Settings, StageContext]:
    settings = Settings.load()
    return settings, create_default_context(settings)


def _run_stages(stages: Optional[Iterable[str]]) -> None:
    settings, context = _context()
    try:
        resolved = runner.resolve(None if stages is None else list(stages))
    except ValueError as exc:
        print(f"Error: {exc}")
        raise SystemExit(2) from exc
    logger.info("Running stages %s with data directory %s.", resolved, settings.data_dir)
    for outcome in runner.run(resolved, context):
        print(f"{outcome.name}: {outcome.seconds:.2f}s")


def command_run(args: argparse.Namespace) -> None:
    _run_stages(args.stages or None)


def command_stages(_: argparse.Namespace) -> None:
    print("siteledger stages:")
    for definition in registry:
        print(f"- {definition.name}: {definition.description} ({definition.module})")


def command_load(args: argparse.Namespace) -> None:
    if not args.dataset:
        _run_stages(["load"])
        return
    settings, _ = _context()
    loader = DatasetLoader.from_settings(settings, load_catalog(settings.catalog_path))
    try:
        result = asyncio.run(loader.load(args.dataset, args.variant))
    except KeyError as exc:
        print(f"Error: {exc.args[0]}")
        raise SystemExit(2) from exc
    if args.json:
        print(json.dumps(result.records, indent=2, default=str))
        return
    print(f"{result.dataset} ({result.variant}): {result.record_count} {result.kind} record(s)")
    print(f"source: {result.source}")
    if result.reason:
        print(f"reason: {result.reason}")


def _single_stage(name: str):
    def command(_: argparse.Namespace) -> None:
        _run_stages([name])

    return command


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed, load and benchmark portal datasets.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_run = subparsers.add_parser("run", help="Run every stage, or the ones listed")
    parser_run.add_argument("stages", nargs="*", help="Optional ordered list of stages.")
    parser_run.set_defaults(func=command_run)

    parser_stages = subparsers.add_parser("stages", help="List registered stages")
    parser_stages.set_defaults(func=command_stages)

    parser_load = subparsers.add_parser("load", help="Load all datasets, or a single one")
    parser_load.add_argument("dataset", nargs="?", help="Dataset name, e.g. sites")
    parser_load.add_argument("--variant", help="Source variant, e.g. large")
    parser_load.add_argument("--json", action="store_true", help="Print the records as JSON")
    parser_load.set_defaults(func=command_load)

    for name in ("seed", "seed-large", "benchmark"):
        sub = subparsers.add_parser(name, help=f"Run only the {name} stage")
        sub.set_defaults(func=_single_stage(name))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())

"""Command-line entry point for running audio diagnostics."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from config.controller import ConfigController, ConfigError
from core.logging import enable_file_logging, logger, set_log_level
from diagnostics.aggregator import aggregate
from diagnostics.models import FindingInvariantError
from diagnostics.orchestrator import run_all
from diagnostics.render import format_json, format_text
from probes.context import ProbeContext

EXIT_HEALTHY = 0
EXIT_ISSUES = 1
EXIT_INTERNAL = 3
EXIT_INTERRUPTED = 130


def _positive_float(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return seconds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(
        prog="why-no-sound",
        description="Diagnose why Linux audio isn't working.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Output results as JSON.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Include raw command output for each check.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML override file.",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Per-command timeout in seconds.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, context: ProbeContext | None = None) -> int:
    """Run diagnostics and return an exit code."""

    args = parse_args(argv)

    try:
        ConfigController.reset_instance()
        config = ConfigController.get_instance(override_file=args.config).get_config()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        print(f"why-no-sound: {exc}", file=sys.stderr)
        return EXIT_INTERNAL

    set_log_level(args.log_level or config["logging"]["level"])
    log_file = args.log_file or config["logging"]["file"]
    if log_file:
        try:
            enable_file_logging(Path(log_file))
        except OSError as exc:
            logger.error("Cannot open log file %s: %s", log_file, exc)
            print(f"why-no-sound: cannot open log file {log_file}: {exc}", file=sys.stderr)
            return EXIT_INTERNAL

    if args.timeout is not None:
        config["probes"] = {**config["probes"], "timeout_s": args.timeout}
    as_json = args.json if args.json is not None else config["output"]["format"] == "json"
    debug = args.debug if args.debug is not None else config["output"]["debug"]

    try:
        ctx = context if context is not None else ProbeContext.from_config(config)
        report = aggregate(run_all(ctx))
    except FindingInvariantError as exc:
        logger.error("Internal diagnostic error: %s", exc)
        print(f"why-no-sound: internal error: {exc}", file=sys.stderr)
        return EXIT_INTERNAL
    except KeyboardInterrupt:
        print("why-no-sound: interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    if not debug:
        report = report.without_evidence()

    if as_json:
        print(format_json(report, include_evidence=debug))
    else:
        print(format_text(report, debug=debug))

    return EXIT_HEALTHY if report.healthy else EXIT_ISSUES


def cli() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    cli()

"""Command-line entry point: poll endpoints and print availability forever."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from availability_monitor.config.endpoints import load_endpoints
from availability_monitor.config.settings import MonitorSettings
from availability_monitor.logging_config import configure_logging
from availability_monitor.middleware.error_handler import ConfigurationError
from availability_monitor.services.scheduler import build_scheduler
from availability_monitor.stats.aggregator import AvailabilityAggregator

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="availability-monitor",
        description="Periodically probe HTTP endpoints and report availability per domain",
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="YAML file listing the endpoints (default: $MONITOR_CONFIG_PATH)",
    )
    parser.add_argument(
        "--interval",
        type=_non_negative_float,
        help="seconds to sleep between cycles (default: 15)",
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        help="checks in flight at once within a pass (default: 1, sequential)",
    )
    parser.add_argument(
        "--max-cycles",
        type=_positive_int,
        help="stop after this many cycles (default: run forever)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="log level (default: INFO)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="human-readable logs instead of JSON",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the monitor. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        settings = MonitorSettings()
    except ValidationError as exc:
        print(f"error: invalid MONITOR_ environment settings: {exc}", file=sys.stderr)
        return 1

    overrides = {
        "config_path": args.config,
        "cycle_interval_seconds": args.interval,
        "max_concurrency": args.concurrency,
        "max_cycles": args.max_cycles,
        "log_level": args.log_level,
    }
    if args.plain_logs:
        overrides["log_json"] = False
    settings = settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )

    configure_logging(settings.log_level, settings.log_json)

    try:
        if not settings.config_path:
            raise ConfigurationError(
                "No configuration file given (pass a path or set MONITOR_CONFIG_PATH)"
            )
        endpoints = load_endpoints(settings.config_path)
    except ConfigurationError as exc:
        logger.critical("Cannot start: %s", exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return 1

    aggregator = AvailabilityAggregator()
    scheduler = build_scheduler(settings, endpoints, aggregator)

    try:
        asyncio.run(scheduler.run(settings.max_cycles))
    except KeyboardInterrupt:
        logger.info("Interrupted — stopping")

    return 0

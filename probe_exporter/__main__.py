"""Command-line entry point: run one collection and print the exposition text."""

from __future__ import annotations

import argparse
import logging
import sys

from probe_exporter.collectors.collector import ConfigCollector
from probe_exporter.logging_config import LOG_FORMATS, LOG_LEVELS, configure_logging
from probe_exporter.settings import ExporterSettings

logger = logging.getLogger(__name__)


def _read_base_metrics(source: str | None) -> str:
    if not source:
        return ""
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Render file-defined liveness gauges")
    parser.add_argument("--config-path", help="Directory containing *.yml probe definitions")
    parser.add_argument("--timeout", type=float, help="Per-probe timeout in seconds, 0 disables")
    parser.add_argument("--base-file", help="File with base metrics text to prepend ('-' for stdin)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument("--log-format", choices=LOG_FORMATS, help="Log output format")
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, fmt=args.log_format)

    try:
        base_metric = _read_base_metrics(args.base_file)
    except OSError as e:
        logger.error(f"Cannot read base metrics from {args.base_file}: {e}")
        return 1

    settings = ExporterSettings(config_path=args.config_path, timeout_seconds=args.timeout)
    logger.info(f"Collecting probes from {settings.config_path}")

    output = ConfigCollector(settings=settings).get_config_collector_metrics(base_metric)
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Logging setup for the probe exporter.

Records go to stderr so stdout carries only exposition text. In JSON mode
each line is one object tagged with the current scrape ID and, for probe
records, the file and probe fields passed via ``extra=``.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")

# Probe attributes lifted from a record's ``extra`` into the JSON object
PROBE_FIELDS = ("config_file", "probe_type", "status", "latency_ms")

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

scrape_id_var: ContextVar[str] = ContextVar("scrape_id", default="")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        scrape_id = scrape_id_var.get()
        if scrape_id:
            entry["scrape_id"] = scrape_id

        for field in PROBE_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Install a single stderr handler on the root logger.

    Arguments take precedence over LOG_LEVEL (default INFO) and LOG_FORMAT
    (default json). An unknown level falls back to INFO with a warning.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_format = fmt or os.getenv("LOG_FORMAT") or "json"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JSONFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT)
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name if level_name in LOG_LEVELS else logging.INFO)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    if level_name not in LOG_LEVELS:
        logging.getLogger(__name__).warning(f"Unknown log level {level_name!r}, using INFO")


def new_scrape_id() -> str:
    """Start a new collection run and return its correlation ID."""
    scrape_id = uuid.uuid4().hex[:8]
    scrape_id_var.set(scrape_id)
    return scrape_id

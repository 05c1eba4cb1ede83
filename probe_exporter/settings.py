"""Exporter settings.

Values come from explicit arguments first, then environment variables:
- PROBE_EXPORTER_CONFIG_PATH: directory holding ``*.yml`` probe files
- PROBE_EXPORTER_TIMEOUT_SECONDS: per-probe timeout, ``0`` disables it
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/node_exporter/yml"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _timeout_from_env() -> float:
    raw = os.getenv("PROBE_EXPORTER_TIMEOUT_SECONDS")
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            f"Invalid PROBE_EXPORTER_TIMEOUT_SECONDS {raw!r}, "
            f"using {DEFAULT_TIMEOUT_SECONDS}s"
        )
        return DEFAULT_TIMEOUT_SECONDS


@dataclass
class ExporterSettings:
    """Settings for one ConfigCollector.

    Attributes:
        config_path: Directory scanned for probe definitions
        timeout_seconds: Upper bound for a single probe, None for no bound
    """

    config_path: Optional[Path] = None
    timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        """Initialize values from environment if not provided."""
        if self.config_path is None:
            self.config_path = Path(
                os.getenv("PROBE_EXPORTER_CONFIG_PATH", DEFAULT_CONFIG_PATH)
            )
        else:
            self.config_path = Path(self.config_path)

        if self.timeout_seconds is None:
            self.timeout_seconds = _timeout_from_env()
        if self.timeout_seconds <= 0:
            self.timeout_seconds = None

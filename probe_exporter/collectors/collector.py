"""Config collector - turns a folder of probe definitions into exposition text.

Each collection call re-reads every ``*.yml`` file, runs its probe and renders
one gauge block per file. Files are handled one after another in name order;
a broken file is logged and skipped without affecting the others.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from probe_exporter.collectors.formatter import format_metric, metric_join
from probe_exporter.collectors.probes import create_probe
from probe_exporter.config.loader import ConfigParseError, load_file, scan_config_folder
from probe_exporter.logging_config import new_scrape_id
from probe_exporter.settings import DEFAULT_CONFIG_PATH, ExporterSettings

logger = logging.getLogger(__name__)


class ConfigCollector:
    """Collector for file-defined liveness gauges.

    Example usage:
        ```python
        collector = ConfigCollector(config_path="/etc/node_exporter/yml")
        text = collector.get_config_collector_metrics(base_metrics_text)
        ```
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        timeout_seconds: float | None = None,
        settings: ExporterSettings | None = None,
    ) -> None:
        if settings is None:
            settings = ExporterSettings(
                config_path=Path(config_path) if config_path is not None else None,
                timeout_seconds=timeout_seconds,
            )
        self._settings = settings

    @property
    def settings(self) -> ExporterSettings:
        return self._settings

    @property
    def config_path(self) -> Path:
        return Path(self._settings.config_path or DEFAULT_CONFIG_PATH)

    async def collect_file(self, path: Path) -> str | None:
        """Load, probe and render one file.

        Returns:
            The metric block, or None when the file defines no check

        Raises:
            ConfigParseError: If the file is malformed
        """
        definition = load_file(path)
        alive = definition.spec.alive
        if alive is None:
            raise ConfigParseError(f"parsing YAML file {path}: Missing spec.alive block", path)

        probe = create_probe(
            alive,
            name=definition.metadata.metric,
            timeout_seconds=self._settings.timeout_seconds,
        )
        if probe is None:
            logger.info(
                f"{path} defines no tcp/http/exec check, skipping",
                extra={"config_file": str(path)},
            )
            return None

        result = await probe.check()
        logger.debug(
            f"{path}: {result.message}",
            extra={
                "config_file": str(path),
                "probe_type": result.probe_type.value,
                "status": result.status.value,
                "latency_ms": round(result.latency_ms, 3),
            },
        )
        return format_metric(definition, result.value)

    async def collect(self, base_metric: str) -> str:
        """Collect all file-defined gauges and append them to ``base_metric``."""
        new_scrape_id()
        blocks = [base_metric]
        skipped = 0

        files = scan_config_folder(self.config_path)
        for path in files:
            try:
                block = await self.collect_file(path)
            except ConfigParseError as e:
                logger.error(f"Skipping config file: {e}", extra={"config_file": str(path)})
                skipped += 1
                continue
            except Exception:
                logger.exception(
                    f"Unexpected error collecting {path}, skipping",
                    extra={"config_file": str(path)},
                )
                skipped += 1
                continue
            if block is not None:
                blocks.append(block)

        logger.debug(
            f"Collected {len(blocks) - 1} metrics from {len(files)} files "
            f"in {self.config_path} ({skipped} skipped)"
        )
        return metric_join(*blocks)

    def get_config_collector_metrics(self, base_metric: str) -> str:
        """Synchronous entry point for a host exporter's scrape handler.

        Never raises; on total failure the base metric text is returned as is.
        """
        try:
            return asyncio.run(self.collect(base_metric))
        except Exception:
            logger.exception("Config collection failed")
            return base_metric


def get_config_collector_metrics(
    base_metric: str, config_path: str | Path | None = None
) -> str:
    """Collect file-defined gauges from ``config_path`` after ``base_metric``.

    Never raises, including when the collector itself cannot be set up.
    """
    try:
        collector = ConfigCollector(config_path=config_path)
    except Exception:
        logger.exception("Cannot set up config collector")
        return base_metric
    return collector.get_config_collector_metrics(base_metric)

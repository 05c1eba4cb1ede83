"""
Probe Exporter - file-defined liveness gauges for Prometheus.

Reads a directory of small YAML probe definitions and renders each one as a
gauge reporting whether its target is alive (1) or not (0). Supported checks:

- TCP: bare connect to a local port
- HTTP: one GET/POST/HEAD request expecting a 2xx status
- Exec: local command expected to exit with status 0

The rendered text is appended to metrics supplied by a host exporter.
"""

from probe_exporter.collectors import (
    ConfigCollector,
    ExecProbe,
    HTTPProbe,
    ProbeResult,
    ServiceStatus,
    TCPProbe,
    create_probe,
    format_metric,
    get_config_collector_metrics,
    metric_join,
)
from probe_exporter.config import (
    ConfigError,
    ConfigParseError,
    ProbeDefinition,
    ProbeType,
    load,
    load_file,
    scan_config_folder,
)
from probe_exporter.settings import ExporterSettings

__version__ = "0.1.0"
__all__ = [
    "ConfigCollector",
    "get_config_collector_metrics",
    "ExporterSettings",
    "ProbeDefinition",
    "ProbeType",
    "ProbeResult",
    "ServiceStatus",
    "TCPProbe",
    "HTTPProbe",
    "ExecProbe",
    "create_probe",
    "format_metric",
    "metric_join",
    "load",
    "load_file",
    "scan_config_folder",
    "ConfigError",
    "ConfigParseError",
]

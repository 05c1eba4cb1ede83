"""Collectors - probes, exposition formatting and the config collector.

This module contains:
- Liveness probes (TCP, HTTP, exec)
- Prometheus text-exposition formatting
- ConfigCollector, which ties folder scanning, probing and formatting together
"""

from probe_exporter.collectors.collector import ConfigCollector, get_config_collector_metrics
from probe_exporter.collectors.formatter import format_labels, format_metric, metric_join
from probe_exporter.collectors.probes import (
    ExecProbe,
    HTTPProbe,
    Probe,
    ProbeResult,
    ServiceStatus,
    TCPProbe,
    UnsupportedMethodError,
    create_probe,
    fetch_status,
    format_url,
    http_get,
    http_head,
    http_post,
    http_request,
)

__all__ = [
    "ConfigCollector",
    "get_config_collector_metrics",
    "format_labels",
    "format_metric",
    "metric_join",
    "Probe",
    "ProbeResult",
    "ServiceStatus",
    "TCPProbe",
    "HTTPProbe",
    "ExecProbe",
    "UnsupportedMethodError",
    "create_probe",
    "fetch_status",
    "format_url",
    "http_request",
    "http_get",
    "http_post",
    "http_head",
]

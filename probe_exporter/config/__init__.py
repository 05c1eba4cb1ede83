"""
Probe configuration module.

Exports:
    Models:
        - ProbeDefinition: One parsed configuration file
        - Metadata: Metric name, help text and labels
        - AliveSpec: The ``spec.alive`` block holding one probe variant
        - TCPCheck, HTTPCheck, ExecCheck: Probe variants
        - ProbeType: Probe variant discriminator

    Loader:
        - load, load_file, scan_config_folder
        - ConfigError: Base exception
        - ConfigParseError: Malformed or incomplete configuration
"""

from .loader import (
    ConfigError,
    ConfigParseError,
    load,
    load_file,
    scan_config_folder,
)
from .models import (
    AliveSpec,
    ExecCheck,
    HTTPCheck,
    Metadata,
    ProbeDefinition,
    ProbeType,
    Spec,
    TCPCheck,
    port_in_range,
)

__all__ = [
    # Models
    "ProbeDefinition",
    "Metadata",
    "Spec",
    "AliveSpec",
    "TCPCheck",
    "HTTPCheck",
    "ExecCheck",
    "ProbeType",
    "port_in_range",
    # Loader
    "load",
    "load_file",
    "scan_config_folder",
    "ConfigError",
    "ConfigParseError",
]

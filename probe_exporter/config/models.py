"""
Pydantic models for declarative probe configuration files.

Each ``*.yml`` file in the config directory describes one monitored target:

    kind: probe
    metadata:
      metric: probe_up
      help: svc up
      labels: {env: prod}
    spec:
      alive:
        tcp: {port: 9999}

Exactly one of ``tcp``, ``http`` or ``exec`` is expected under ``spec.alive``.
When several are present the first in priority order TCP > HTTP > Exec wins.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

MIN_PORT = 0
MAX_PORT = 65535


class ProbeType(str, Enum):
    """Type of health probe."""

    TCP = "tcp"
    HTTP = "http"
    EXEC = "exec"


def port_in_range(port: int) -> bool:
    """Return True if ``port`` lies strictly between MIN_PORT and MAX_PORT."""
    return MIN_PORT < port < MAX_PORT


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TCPCheck(_FrozenModel):
    """Bare TCP dial against a local port."""

    port: int = 0
    host: str = "0.0.0.0"


class HTTPCheck(_FrozenModel):
    """Single HTTP request against an endpoint.

    Attributes:
        scheme: URL scheme, e.g. ``http`` or ``https``
        host: Hostname or IP address
        port: TCP port
        path: Request path, may carry a query string
        method: One of GET, POST, HEAD (case-sensitive)
        tls_skip_verify: Disable certificate checks for https URLs
    """

    scheme: str = ""
    host: str = ""
    port: int = 0
    path: str = ""
    method: str = ""
    tls_skip_verify: bool = True


class ExecCheck(_FrozenModel):
    """Local command run in argv form."""

    command: list[str] = Field(default_factory=list)

    @field_validator("command", mode="before")
    @classmethod
    def _stringify_args(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(arg) for arg in value]
        return value


class AliveSpec(_FrozenModel):
    """The ``spec.alive`` block: one probe variant plus unused scheduling hints."""

    tcp: TCPCheck | None = None
    http: HTTPCheck | None = None
    exec: ExecCheck | None = None
    delayseconds: str | None = None

    @field_validator("delayseconds", mode="before")
    @classmethod
    def _stringify_delay(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def selected(self) -> tuple[ProbeType, TCPCheck | HTTPCheck | ExecCheck] | None:
        """Return the populated variant, honouring TCP > HTTP > Exec priority."""
        if self.tcp is not None:
            return ProbeType.TCP, self.tcp
        if self.http is not None:
            return ProbeType.HTTP, self.http
        if self.exec is not None:
            return ProbeType.EXEC, self.exec
        return None


class Spec(_FrozenModel):
    alive: AliveSpec | None = None


class Metadata(_FrozenModel):
    """Metric identity: name, help text and constant labels."""

    metric: str
    help: str = ""
    labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("metric")
    @classmethod
    def _check_metric_name(cls, value: str) -> str:
        if not METRIC_NAME_RE.match(value):
            raise ValueError(f"invalid metric name: {value!r}")
        return value

    @field_validator("help", mode="before")
    @classmethod
    def _stringify_help(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("labels", mode="before")
    @classmethod
    def _normalize_labels(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        labels: dict[str, str] = {}
        for key, label_value in value.items():
            name = str(key)
            if not LABEL_NAME_RE.match(name):
                raise ValueError(f"invalid label name: {name!r}")
            labels[name] = "" if label_value is None else str(label_value)
        return labels


class ProbeDefinition(_FrozenModel):
    """Root of one configuration file."""

    kind: str = ""
    metadata: Metadata
    spec: Spec = Field(default_factory=Spec)

    @field_validator("kind", mode="before")
    @classmethod
    def _stringify_kind(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

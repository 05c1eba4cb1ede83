"""Liveness probes - TCP, HTTP and exec checks.

This module provides:
- A Probe base class whose check() never raises and yields a 0/1 value
- TCP, HTTP and exec probe implementations
- fetch_status(), the request core shared by HTTPProbe and the
  http_get/http_post/http_head single-request helpers
- create_probe() to build the probe for a parsed ``spec.alive`` block
"""

from __future__ import annotations

import asyncio
import logging
import socket
import subprocess
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import aiohttp
from pydantic import BaseModel, Field

from probe_exporter.config.models import (
    AliveSpec,
    ExecCheck,
    HTTPCheck,
    ProbeType,
    TCPCheck,
    port_in_range,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "HEAD")


class ServiceStatus(str, Enum):
    """Outcome of a probe check."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ProbeResult(BaseModel):
    """Result of a single probe check."""

    name: str
    status: ServiceStatus
    probe_type: ProbeType
    latency_ms: float
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def value(self) -> int:
        """Gauge value: 1 when healthy, 0 otherwise."""
        return 1 if self.status == ServiceStatus.HEALTHY else 0


def format_url(scheme: str, host: str, port: int, path: str) -> str:
    """Build a request URL from its parts.

    ``path`` is parsed as a URL so a query string or fragment survives; if it
    cannot be parsed only the raw path is kept. Scheme and ``host:port`` always
    replace whatever ``path`` carried.
    """
    try:
        parts = urlsplit(path)
        url_path, query, fragment = parts.path, parts.query, parts.fragment
    except ValueError:
        url_path, query, fragment = path, "", ""

    if ":" in host and not host.startswith("["):
        netloc = f"[{host}]:{port}"
    else:
        netloc = f"{host}:{port}"
    return urlunsplit((scheme, netloc, url_path, query, fragment))


class UnsupportedMethodError(ValueError):
    """Raised for a request method other than GET, POST or HEAD."""

    pass


def is_success(status: int) -> bool:
    return 200 <= status < 300


async def _send(
    method: str,
    url: str,
    *,
    insecure: bool = False,
    timeout_seconds: float | None = None,
) -> int:
    """Send one request with an empty body, read the full body, return the status."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.request(
            method=method,
            url=url,
            data=b"",
            ssl=not insecure,
        ) as response:
            await response.read()
            return response.status


async def fetch_status(
    method: str,
    url: str,
    *,
    insecure: bool = False,
    timeout_seconds: float | None = None,
) -> int:
    """Return the status of ``method url`` once its body has been read.

    Raises:
        UnsupportedMethodError: Before any I/O, if ``method`` is not supported
        aiohttp.ClientError, TimeoutError: On transport failures
    """
    if method not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(f"Unsupported method {method!r}")
    return await _send(method, url, insecure=insecure, timeout_seconds=timeout_seconds)


async def http_request(
    method: str,
    url: str,
    insecure: bool = False,
    timeout_seconds: float | None = None,
) -> int:
    """Return 1 if ``method url`` answers with a 2xx status, else 0."""
    try:
        status = await fetch_status(
            method, url, insecure=insecure, timeout_seconds=timeout_seconds
        )
    except Exception as e:
        logger.debug(f"{method} {url} failed: {e}")
        return 0
    return 1 if is_success(status) else 0


async def http_get(url: str, insecure: bool = False, timeout_seconds: float | None = None) -> int:
    return await http_request("GET", url, insecure, timeout_seconds)


async def http_post(url: str, insecure: bool = False, timeout_seconds: float | None = None) -> int:
    return await http_request("POST", url, insecure, timeout_seconds)


async def http_head(url: str, insecure: bool = False, timeout_seconds: float | None = None) -> int:
    return await http_request("HEAD", url, insecure, timeout_seconds)


class Probe(ABC):
    """Abstract base class for liveness probes."""

    probe_type: ProbeType

    def __init__(self, name: str, timeout_seconds: float | None = None) -> None:
        self.name = name
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def check(self) -> ProbeResult:
        """Execute the probe check and return result. Never raises."""
        pass

    def healthy(self) -> int:
        """Run the check synchronously and return 1 (healthy) or 0."""
        return asyncio.run(self.check()).value

    def _create_result(
        self,
        status: ServiceStatus,
        latency_ms: float,
        message: str = "",
        details: dict[str, Any] | None = None,
    ) -> ProbeResult:
        if status != ServiceStatus.HEALTHY:
            logger.debug(f"Probe {self.name} unhealthy: {message}")
        return ProbeResult(
            name=self.name,
            status=status,
            probe_type=self.probe_type,
            latency_ms=latency_ms,
            message=message,
            details=details or {},
        )

    def _timeout_ms(self) -> float:
        return (self.timeout_seconds or 0.0) * 1000


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class TCPProbe(Probe):
    """TCP dial health probe."""

    probe_type = ProbeType.TCP

    def __init__(
        self, check: TCPCheck, name: str = "tcp", timeout_seconds: float | None = None
    ) -> None:
        super().__init__(name, timeout_seconds)
        self.check_config = check

    async def check(self) -> ProbeResult:
        """Execute TCP health check."""
        host, port = self.check_config.host, self.check_config.port
        details = {"host": host, "port": port}
        if not port_in_range(port):
            return self._create_result(
                ServiceStatus.UNHEALTHY, 0.0, f"Port {port} out of range", details
            )

        start_time = time.perf_counter()
        try:
            loop = asyncio.get_running_loop()
            await asyncio.wait_for(
                loop.run_in_executor(None, self._tcp_connect, host, port),
                timeout=self.timeout_seconds,
            )
            return self._create_result(
                ServiceStatus.HEALTHY,
                _elapsed_ms(start_time),
                f"TCP connection to {host}:{port} successful",
                details,
            )
        except TimeoutError:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                self._timeout_ms(),
                f"Timeout connecting to {host}:{port}",
                details,
            )
        except OSError as e:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Connection failed: {e}",
                {**details, "error": str(e)},
            )
        except Exception as e:
            logger.warning(f"Unexpected error in TCP probe {self.name}: {e}")
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Unexpected error: {e}",
                {**details, "error": str(e)},
            )

    def _tcp_connect(self, host: str, port: int) -> None:
        """Synchronous IPv4 connect (runs in thread pool); closes immediately."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.settimeout(self.timeout_seconds)
            sock.connect((host, port))
        finally:
            sock.close()


class HTTPProbe(Probe):
    """HTTP endpoint health probe."""

    probe_type = ProbeType.HTTP

    def __init__(
        self, check: HTTPCheck, name: str = "http", timeout_seconds: float | None = None
    ) -> None:
        super().__init__(name, timeout_seconds)
        self.check_config = check

    @property
    def url(self) -> str:
        cfg = self.check_config
        return format_url(cfg.scheme, cfg.host, cfg.port, cfg.path)

    @property
    def insecure(self) -> bool:
        """Whether certificate verification is skipped for this request."""
        return self.check_config.tls_skip_verify and self.url.lower().startswith("https")

    async def check(self) -> ProbeResult:
        """Execute HTTP health check."""
        cfg = self.check_config
        if not port_in_range(cfg.port):
            return self._create_result(
                ServiceStatus.UNHEALTHY, 0.0, f"Port {cfg.port} out of range", {"port": cfg.port}
            )

        url = self.url
        details: dict[str, Any] = {"url": url, "method": cfg.method}
        start_time = time.perf_counter()
        try:
            status = await fetch_status(
                cfg.method, url, insecure=self.insecure, timeout_seconds=self.timeout_seconds
            )
        except UnsupportedMethodError as e:
            return self._create_result(ServiceStatus.UNHEALTHY, 0.0, str(e), details)
        except TimeoutError:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                self._timeout_ms(),
                f"Timeout after {self.timeout_seconds}s",
                details,
            )
        except aiohttp.ClientError as e:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Connection error: {e}",
                {**details, "error": str(e)},
            )
        except Exception as e:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Unexpected error: {e}",
                {**details, "error": str(e)},
            )

        details["status_code"] = status
        if is_success(status):
            return self._create_result(
                ServiceStatus.HEALTHY, _elapsed_ms(start_time), f"HTTP {status}", details
            )
        return self._create_result(
            ServiceStatus.UNHEALTHY,
            _elapsed_ms(start_time),
            f"Unexpected status {status}, expected 2xx",
            details,
        )


class ExecProbe(Probe):
    """Local command health probe."""

    probe_type = ProbeType.EXEC

    def __init__(
        self, check: ExecCheck, name: str = "exec", timeout_seconds: float | None = None
    ) -> None:
        super().__init__(name, timeout_seconds)
        self.check_config = check

    async def check(self) -> ProbeResult:
        """Execute command health check."""
        command = self.check_config.command
        if not command:
            return self._create_result(
                ServiceStatus.UNHEALTHY, 0.0, "No command configured for exec probe"
            )

        details: dict[str, Any] = {"command": command}
        start_time = time.perf_counter()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
            try:
                output, _ = await asyncio.wait_for(
                    process.communicate(), timeout=self.timeout_seconds
                )
            except TimeoutError:
                process.kill()
                await process.wait()
                return self._create_result(
                    ServiceStatus.UNHEALTHY,
                    self._timeout_ms(),
                    f"Command timeout after {self.timeout_seconds}s",
                    details,
                )
        except FileNotFoundError:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Command not found: {command[0]}",
                details,
            )
        except Exception as e:
            return self._create_result(
                ServiceStatus.UNHEALTHY,
                _elapsed_ms(start_time),
                f"Unexpected error: {e}",
                {**details, "error": str(e)},
            )

        details["exit_code"] = process.returncode
        details["output"] = output.decode("utf-8", errors="replace")[:1000]
        if process.returncode == 0:
            return self._create_result(
                ServiceStatus.HEALTHY,
                _elapsed_ms(start_time),
                "Command exited with code 0",
                details,
            )
        return self._create_result(
            ServiceStatus.UNHEALTHY,
            _elapsed_ms(start_time),
            f"Command exited with code {process.returncode}, expected 0",
            details,
        )


def create_probe(
    alive: AliveSpec,
    name: str,
    timeout_seconds: float | None = None,
) -> Probe | None:
    """Build the probe for the variant selected in ``alive``, or None if empty."""
    selected = alive.selected()
    if selected is None:
        return None

    probe_type, check = selected
    if probe_type == ProbeType.TCP:
        return TCPProbe(check, name=name, timeout_seconds=timeout_seconds)  # type: ignore[arg-type]
    if probe_type == ProbeType.HTTP:
        return HTTPProbe(check, name=name, timeout_seconds=timeout_seconds)  # type: ignore[arg-type]
    return ExecProbe(check, name=name, timeout_seconds=timeout_seconds)  # type: ignore[arg-type]

"""Pytest configuration and fixtures for probe exporter tests."""

from __future__ import annotations

import socket
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_exporter_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment settings out of the tests."""
    monkeypatch.delenv("PROBE_EXPORTER_CONFIG_PATH", raising=False)
    monkeypatch.delenv("PROBE_EXPORTER_TIMEOUT_SECONDS", raising=False)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty directory to hold probe definitions."""
    path = tmp_path / "yml"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing a YAML document into ``config_dir``."""

    def _write(name: str, content: str) -> Path:
        path = config_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tcp_listener() -> Iterator[int]:
    """A listening IPv4 socket on 127.0.0.1; yields its port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


@pytest.fixture
def closed_port() -> int:
    """A port on 127.0.0.1 with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port

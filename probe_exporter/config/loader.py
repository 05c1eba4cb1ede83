"""
Loading of probe definitions from YAML.

This module provides:
- load(): parse a YAML document into a ProbeDefinition
- load_file(): read and parse one file, tagging errors with its path
- scan_config_folder(): list candidate ``*.yml`` files in a directory

Note: a file whose ``spec.alive`` block is absent is a parse error, whereas a
present but empty ``spec.alive`` block is valid and simply yields no metric.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ProbeDefinition

logger = logging.getLogger(__name__)

CONFIG_GLOB = "*.yml"


class ConfigError(Exception):
    """Base exception for probe configuration errors."""

    pass


class ConfigParseError(ConfigError):
    """Raised when a configuration document is malformed or incomplete."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def load(content: str) -> ProbeDefinition:
    """Parse a YAML document into a ProbeDefinition.

    Args:
        content: Raw YAML text

    Returns:
        The validated ProbeDefinition

    Raises:
        ConfigParseError: If the YAML is invalid, does not validate against the
            model, or has no ``spec.alive`` block
    """
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigParseError(
            f"Expected a mapping at document root, got {type(raw).__name__}"
        )

    try:
        definition = ProbeDefinition.model_validate(raw)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid configuration: {e}") from e

    if definition.spec.alive is None:
        raise ConfigParseError("Missing spec.alive block")

    return definition


def load_file(path: str | Path) -> ProbeDefinition:
    """Read and parse a single configuration file.

    Raises:
        ConfigParseError: If the file cannot be read or parsed; the message and
            ``path`` attribute identify the offending file
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Cannot read config file {file_path}: {e}", file_path) from e

    try:
        return load(content)
    except ConfigParseError as e:
        raise ConfigParseError(f"parsing YAML file {file_path}: {e}", file_path) from e


def scan_config_folder(folder: str | Path) -> list[Path]:
    """Return the ``*.yml`` files directly inside ``folder``, sorted by name.

    A missing or unreadable directory yields an empty list.
    """
    if isinstance(folder, str):
        folder = folder.rstrip("/") or folder
    folder_path = Path(folder)

    if not folder_path.is_dir():
        logger.warning(f"Config folder {folder_path} does not exist, no probes loaded")
        return []

    try:
        return sorted(folder_path.glob(CONFIG_GLOB))
    except OSError as e:
        logger.warning(f"Cannot scan config folder {folder_path}: {e}")
        return []

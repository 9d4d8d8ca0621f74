"""Configuration file discovery and loading."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from semtrail.config.models import SemtrailConfig
from semtrail.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("semtrail.toml", "pyproject.toml")


def find_config_file(start: Path | None = None) -> Path:
    """Find the nearest configuration file, walking up from ``start``.

    A ``semtrail.toml`` wins over a ``pyproject.toml`` in the same directory.

    Args:
        start: Directory to start searching from (default: current directory)

    Returns:
        Path to the configuration file

    Raises:
        ConfigNotFoundError: If no configuration file exists up to the root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    raise ConfigNotFoundError(f"No {' or '.join(CONFIG_FILENAMES)} found from {current}")


def load_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def extract_semtrail_config(data: dict[str, Any], filename: str = "pyproject.toml") -> dict[str, Any]:
    """Extract the semtrail table from parsed TOML.

    ``semtrail.toml`` holds the configuration at top level, ``pyproject.toml``
    under ``[tool.semtrail]``.
    """
    if filename == "semtrail.toml":
        return data
    return data.get("tool", {}).get("semtrail", {})


def load_config(path: Path | None = None) -> SemtrailConfig:
    """Load configuration for the project at ``path``.

    Falls back to defaults when no configuration file can be found.

    Raises:
        ConfigValidationError: If configuration values are invalid
        ConfigError: If the configuration file cannot be parsed
    """
    start = path if path is None or path.is_dir() else path.parent
    try:
        config_path = path if path is not None and path.is_file() else find_config_file(start)
    except ConfigNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return SemtrailConfig()

    raw = extract_semtrail_config(load_toml(config_path), config_path.name)
    try:
        config = SemtrailConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}:\n{e}") from e

    logger.debug("Loaded configuration from %s", config_path)
    return config

"""Configuration management for semtrail."""

from __future__ import annotations

from semtrail.config.loader import load_config
from semtrail.config.models import (
    ChangelogConfig,
    CommitsConfig,
    SemtrailConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "SemtrailConfig",
    "VersionConfig",
    "load_config",
]

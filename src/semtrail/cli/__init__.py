"""Command-line interface for semtrail."""

from __future__ import annotations

from semtrail.cli.main import app

__all__ = ["app"]

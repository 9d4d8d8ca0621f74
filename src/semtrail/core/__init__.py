"""Core business logic for semtrail.

This package contains the version engine:
- Version parsing, comparison and bumping
- Commit filtering and bump classification
- Changelog range resolution and rendering
- The top-level ``VersionEngine``
"""

from __future__ import annotations

from semtrail.core.calculator import bump_version, calculate_next_version
from semtrail.core.classifier import IncrementClassifier, VersionDecision
from semtrail.core.commits import CommitFilter
from semtrail.core.version import (
    BumpType,
    FourComponent,
    SemVer,
    compare_versions,
    parse_version,
    to_four_component,
)

__all__ = [
    # Version
    "BumpType",
    # Commits
    "CommitFilter",
    "FourComponent",
    "IncrementClassifier",
    "SemVer",
    "VersionDecision",
    "bump_version",
    "calculate_next_version",
    "compare_versions",
    "parse_version",
    "to_four_component",
]

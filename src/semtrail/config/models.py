"""Pydantic models for semtrail configuration.

Configuration lives either in a standalone ``semtrail.toml`` or in the
``[tool.semtrail]`` table of ``pyproject.toml``. Every field has a
default, so an empty table (or no file at all) is a valid configuration.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXCLUDE_AUTHOR_PATTERN = r"\[bot\]$|^dependabot|^github-actions"
DEFAULT_EXCLUDE_COMMITTER_PATTERN = r"\[bot\]$"
DEFAULT_EXCLUDE_SUBJECT_PATTERN = (
    r"^Merge (pull request #\d+|branch '(main|master)'|remote-tracking branch)"
)

DEFAULT_NON_SUBSTANTIVE_PATHS = [
    "*.md",
    "docs/*",
    "*.sln",
    "*.csproj",
    "*.props",
    "*.targets",
    ".github/workflows/*",
    "scripts/*",
    "*.ps1",
]


class VersionConfig(BaseModel):
    """Version calculation settings."""

    model_config = ConfigDict(extra="forbid")

    initial_version: str = Field(
        default="1.0.0",
        description="Version emitted when the repository has no version tags",
    )
    tag_prefix: str = Field(
        default="v",
        description="Prefix used when rendering the tag name of a new version",
    )

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        from semtrail.core.version import is_version_tag, parse_version

        if not is_version_tag(value):
            raise ValueError(f"not a semantic version: {value!r}")
        if parse_version(value).is_prerelease:
            raise ValueError(f"initial version must be a release, not a prerelease: {value!r}")
        return value


class CommitsConfig(BaseModel):
    """Commit exclusion and classification settings."""

    model_config = ConfigDict(extra="forbid")

    exclude_author_pattern: str = DEFAULT_EXCLUDE_AUTHOR_PATTERN
    exclude_committer_pattern: str = DEFAULT_EXCLUDE_COMMITTER_PATTERN
    exclude_subject_pattern: str = DEFAULT_EXCLUDE_SUBJECT_PATTERN
    non_substantive_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NON_SUBSTANTIVE_PATHS),
        description="Pathspecs whose changes alone never count as code changes",
    )

    @field_validator(
        "exclude_author_pattern",
        "exclude_committer_pattern",
        "exclude_subject_pattern",
    )
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class ChangelogConfig(BaseModel):
    """Changelog rendering settings."""

    model_config = ConfigDict(extra="forbid")

    categorize: bool = False
    host: str = Field(default="github.com", description="Host used for author profile links")
    title: str = "# Changelog"
    ignore_markers: list[str] = Field(
        default_factory=lambda: ["Update VERSION to", "[skip ci]"],
        description="Changelog lines containing any of these are dropped",
    )


class SemtrailConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    version: VersionConfig = Field(default_factory=VersionConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)

    @property
    def effective_tag_prefix(self) -> str:
        """Tag prefix for newly rendered tag names."""
        return self.version.tag_prefix

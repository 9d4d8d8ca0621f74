"""Exception hierarchy for semtrail.

Errors raised inside the version engine are caught at the component
boundaries and degrade to a safe default. They only surface to users
through configuration loading and the CLI.
"""

from __future__ import annotations


class SemtrailError(Exception):
    """Base class for all semtrail errors."""


class ConfigError(SemtrailError):
    """Configuration could not be read."""


class ConfigNotFoundError(ConfigError):
    """No configuration file was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


class VersionParseError(SemtrailError):
    """A string is not a recognized version."""


class GitError(SemtrailError):
    """A git command failed.

    Args:
        message: Human readable description
        stderr: Captured stderr of the failing command, if any
    """

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base

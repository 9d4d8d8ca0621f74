"""Semantic version parsing, formatting and comparison.

Two orderings exist and must not be confused:

- ``FourComponent`` is the projection ``(major, minor, patch, prerelease)``
  used for every "is X older/newer than Y" and "is X the same release as Y"
  decision. ``compare_versions`` is the only comparison function built on it.
- ``tag_precedence_key`` orders tag names for listing, ranking a version
  with a prerelease suffix strictly below the same ``major.minor.patch``
  without one (``1.0.0-pre`` sorts before ``1.0.0``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from semtrail.exceptions import VersionParseError

VERSION_TAG_PATTERN = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:-(?P<prerelease>[A-Za-z0-9.-]+))?$"
)

PRERELEASE_LABEL = "pre"


class BumpType(str, Enum):
    """Kind of version increment.

    ``MAJOR > MINOR > PATCH > PRERELEASE`` for precedence. ``INITIAL`` only
    arises when the repository has no version tags and ranks below all others.
    """

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    INITIAL = "initial"

    @property
    def rank(self) -> int:
        return _BUMP_RANK[self]

    def outranks(self, other: BumpType) -> bool:
        """Whether this bump is strictly more significant than ``other``."""
        return self.rank > other.rank

    def __str__(self) -> str:
        return self.value


_BUMP_RANK = {
    BumpType.INITIAL: 0,
    BumpType.PRERELEASE: 1,
    BumpType.PATCH: 2,
    BumpType.MINOR: 3,
    BumpType.MAJOR: 4,
}


class FourComponent(NamedTuple):
    """``(major, minor, patch, prerelease-number-or-0)`` ordering key."""

    major: int
    minor: int
    patch: int
    prerelease: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.{self.prerelease}"


ZERO = FourComponent(0, 0, 0, 0)


@dataclass(frozen=True)
class SemVer:
    """A semantic version.

    ``prerelease_label`` and ``prerelease_number`` are only meaningful when
    ``is_prerelease`` is set. A prerelease suffix without a trailing numeric
    identifier (``1.2.3-beta``) parses with number 0.
    """

    major: int
    minor: int
    patch: int
    is_prerelease: bool = False
    prerelease_label: str = PRERELEASE_LABEL
    prerelease_number: int = 0

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch, self.prerelease_number) < 0:
            raise VersionParseError(f"Version components must not be negative: {self!r}")

    @property
    def four_component(self) -> FourComponent:
        return FourComponent(
            self.major,
            self.minor,
            self.patch,
            self.prerelease_number if self.is_prerelease else 0,
        )

    @property
    def base(self) -> SemVer:
        """The same ``major.minor.patch`` without prerelease."""
        return SemVer(self.major, self.minor, self.patch)

    def with_prerelease(self, number: int, label: str = PRERELEASE_LABEL) -> SemVer:
        return SemVer(
            self.major,
            self.minor,
            self.patch,
            is_prerelease=True,
            prerelease_label=label,
            prerelease_number=number,
        )

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.is_prerelease:
            version = f"{version}-{self.prerelease_label}.{self.prerelease_number}"
        return version


def strip_tag_prefix(value: str) -> str:
    """Remove an optional leading ``v`` from a tag name."""
    return value[1:] if value.startswith("v") else value


def is_version_tag(name: str) -> bool:
    """Whether ``name`` is a recognized version tag (``v`` prefix optional)."""
    return VERSION_TAG_PATTERN.match(strip_tag_prefix(name)) is not None


def _split_prerelease(prerelease: str) -> tuple[str, int]:
    label, _, last = prerelease.rpartition(".")
    if label and last.isdigit():
        return label, int(last)
    return prerelease, 0


def parse_version(value: str) -> SemVer:
    """Parse a version string or version tag name.

    Examples:
        "v1.2.3" -> 1.2.3
        "1.2.3-pre.4" -> 1.2.3-pre.4
        "1.2.3-rc.1" -> 1.2.3-rc.1

    Raises:
        VersionParseError: If ``value`` is not a recognized version
    """
    match = VERSION_TAG_PATTERN.match(strip_tag_prefix(value.strip()))
    if match is None:
        raise VersionParseError(f"Not a semantic version: {value!r}")

    major, minor, patch = (int(match.group(k)) for k in ("major", "minor", "patch"))
    prerelease = match.group("prerelease")
    if prerelease is None:
        return SemVer(major, minor, patch)

    label, number = _split_prerelease(prerelease)
    return SemVer(
        major,
        minor,
        patch,
        is_prerelease=True,
        prerelease_label=label,
        prerelease_number=number,
    )


def normalize(value: str) -> str:
    """Canonical spelling of a version string.

    Drops the ``v`` prefix and gives a counter-less prerelease suffix an
    explicit ``.0`` counter, so ``str(parse_version(s)) == normalize(s)``.
    """
    return str(parse_version(value))


def to_four_component(value: str | SemVer) -> FourComponent:
    """Project a version (or version string) onto its four-component key.

    Raises:
        VersionParseError: If ``value`` is a string that does not parse
    """
    if isinstance(value, SemVer):
        return value.four_component
    return parse_version(value).four_component


def compare_versions(a: str | SemVer, b: str | SemVer) -> int:
    """Compare two versions by their four-component key.

    Returns:
        Negative if ``a`` is older, zero if equal, positive if newer
    """
    left, right = to_four_component(a), to_four_component(b)
    return (left > right) - (left < right)


def _identifier_key(identifier: str) -> tuple[int, int | str]:
    # Numeric identifiers rank below alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


def tag_precedence_key(name: str) -> tuple:
    """Sort key for tag names by version precedence.

    Any prerelease suffix (``-alpha``, ``-beta``, ``-rc``, ``-pre``...) ranks
    strictly below the bare ``major.minor.patch``; prereleases of the same
    release compare identifier by identifier.
    """
    match = VERSION_TAG_PATTERN.match(strip_tag_prefix(name))
    if match is None:
        raise VersionParseError(f"Not a version tag: {name!r}")
    release = tuple(int(match.group(k)) for k in ("major", "minor", "patch"))
    prerelease = match.group("prerelease")
    if prerelease is None:
        return (*release, 1, ())
    identifiers = tuple(_identifier_key(part) for part in re.split(r"[.-]", prerelease))
    return (*release, 0, identifiers)

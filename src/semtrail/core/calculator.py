"""Next version calculation."""

from __future__ import annotations

from semtrail.core.classifier import VersionDecision
from semtrail.core.version import PRERELEASE_LABEL, BumpType, SemVer, parse_version

DEFAULT_INITIAL_VERSION = "1.0.0"
REASON_INITIAL = "no previous version tags found"


def calculate_next_version(
    previous: SemVer | None,
    decision: VersionDecision,
    initial_version: str = DEFAULT_INITIAL_VERSION,
) -> tuple[SemVer, VersionDecision]:
    """Compute the version that follows ``previous``.

    Args:
        previous: Last released version, or None when no tags exist
        decision: Bump decision for the commits since ``previous``
        initial_version: Version used when there is no previous version

    Returns:
        The new version and the effective decision (forced to ``INITIAL``
        when there is no previous version)
    """
    if previous is None:
        return parse_version(initial_version), VersionDecision(BumpType.INITIAL, REASON_INITIAL)

    return bump_version(previous, decision.type), decision


def bump_version(previous: SemVer, bump: BumpType) -> SemVer:
    """Apply a single bump to ``previous``.

    - MAJOR / MINOR reset the lower components and clear prerelease.
    - PATCH on a prerelease releases it: the same ``major.minor.patch``.
    - PRERELEASE continues a prerelease series, or starts ``-pre.1`` on the
      next patch.

    Raises:
        ValueError: For ``INITIAL``, which has no previous version to bump
    """
    if bump is BumpType.MAJOR:
        return SemVer(previous.major + 1, 0, 0)
    if bump is BumpType.MINOR:
        return SemVer(previous.major, previous.minor + 1, 0)
    if bump is BumpType.PATCH:
        if previous.is_prerelease:
            return previous.base
        return SemVer(previous.major, previous.minor, previous.patch + 1)
    if bump is BumpType.PRERELEASE:
        if previous.is_prerelease:
            return previous.with_prerelease(previous.prerelease_number + 1, PRERELEASE_LABEL)
        return SemVer(previous.major, previous.minor, previous.patch + 1).with_prerelease(1)
    raise ValueError(f"Cannot bump {previous} by {bump}")

"""Version bump classification for a commit range.

The decision climbs a ladder, never descending:

1. ``PRERELEASE`` when nothing significant happened.
2. ``PATCH`` when the range has any non-excluded commit.
3. ``MINOR`` when one of those commits touches a substantive path.
4. Inline directives in commit subjects (``[major]``, ``[minor]``,
   ``[patch]``, ``[pre]``), scanned in git log order.

``[major]`` is terminal: the first one seen sets ``MAJOR`` and the scan
stops. Every other directive only applies when it does not lower the
current decision, and replaces the reason with the triggering subject.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semtrail.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from semtrail.core.commits import CommitFilter
    from semtrail.vcs.git import Commit

logger = logging.getLogger(__name__)

REASON_NO_CHANGES = "no significant changes detected"
REASON_COMMITS = "non-merge commits found"
REASON_CODE = "code changes found"

# Tested against each subject in this order.
DIRECTIVES: tuple[tuple[str, BumpType], ...] = (
    ("[minor]", BumpType.MINOR),
    ("[patch]", BumpType.PATCH),
    ("[pre]", BumpType.PRERELEASE),
)
MAJOR_DIRECTIVE = "[major]"


@dataclass(frozen=True)
class VersionDecision:
    """A bump type and a human readable reason for it."""

    type: BumpType
    reason: str

    def __str__(self) -> str:
        return f"{self.type} ({self.reason})"


def raise_to(decision: VersionDecision, bump: BumpType, reason: str) -> VersionDecision:
    """Monotonic join: adopt ``bump`` unless the decision already outranks it."""
    if decision.type.outranks(bump):
        return decision
    return VersionDecision(bump, reason)


def apply_directives(decision: VersionDecision, commits: Iterable[Commit]) -> VersionDecision:
    """Fold commit subject directives into ``decision``.

    Order-sensitive: commits are visited as given and the first
    ``[major]`` ends the scan.
    """
    for commit in commits:
        subject = commit.subject
        if MAJOR_DIRECTIVE in subject:
            logger.debug("%s carries %s, stopping scan", commit.short_sha, MAJOR_DIRECTIVE)
            return VersionDecision(BumpType.MAJOR, subject)
        for directive, bump in DIRECTIVES:
            if directive in subject:
                decision = raise_to(decision, bump, subject)
    return decision


class IncrementClassifier:
    """Decides the bump type for a commit range."""

    def __init__(self, commit_filter: CommitFilter) -> None:
        self.commit_filter = commit_filter

    def classify(self, rev_range: str) -> VersionDecision:
        decision = VersionDecision(BumpType.PRERELEASE, REASON_NO_CHANGES)

        commits = self.commit_filter.commits(rev_range)
        if commits:
            decision = raise_to(decision, BumpType.PATCH, REASON_COMMITS)

        if self.commit_filter.substantive_commits(rev_range):
            decision = raise_to(decision, BumpType.MINOR, REASON_CODE)

        decision = apply_directives(decision, commits)
        logger.info("Range %s classified as %s", rev_range, decision)
        return decision

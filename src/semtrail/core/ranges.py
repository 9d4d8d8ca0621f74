"""Changelog range resolution.

The tag immediately older than a release is not always the right point to
diff against. When ``v1.3.0`` follows a run of ``v1.2.4-pre.N`` tags it should
list everything since ``v1.2.0`` rather than since ``v1.2.4-pre.3``. ``RangeResolver``
guesses the release a tag logically follows from its version numbers, looks
for a tag with that version, and falls back to the nominal previous tag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semtrail.core.version import ZERO, BumpType, FourComponent, is_version_tag, to_four_component
from semtrail.exceptions import GitError
from semtrail.vcs.tags import SENTINEL_TAG_NAME

if TYPE_CHECKING:
    from semtrail.core.classifier import IncrementClassifier
    from semtrail.vcs.git import GitRepository
    from semtrail.vcs.tags import TagRepository

logger = logging.getLogger(__name__)

ZERO_TAG_NAME = "v0.0.0"


@dataclass(frozen=True)
class ResolvedRange:
    """The diff boundary chosen for one changelog section."""

    from_tag: str
    to_tag: str
    to_sha: str
    rev_range: str
    bump_type: BumpType


@dataclass(frozen=True)
class RangeEstimate:
    """First approximation of a section's bump type and predecessor."""

    bump_type: BumpType
    candidate: str | None


def _four_or_zero(name: str) -> FourComponent:
    if is_version_tag(name):
        return to_four_component(name)
    return ZERO


def estimate_predecessor(from_tag: str, to_tag: str) -> RangeEstimate:
    """Guess the bump type of ``to_tag`` and the version it follows.

    The candidate is a four-component string such as ``"1.2.0.0"``; it may
    contain a negative component (``"1.0.-1.0"``) when the guess runs below
    zero, which callers treat as "no candidate". Later checks override
    earlier ones: a major increase wins over a minor increase, which wins
    over a patch increase.
    """
    to = _four_or_zero(to_tag)
    frm = _four_or_zero(from_tag)

    if to.prerelease != 0:
        return RangeEstimate(
            BumpType.PRERELEASE,
            f"{to.major}.{to.minor}.{to.patch}.{to.prerelease - 1}",
        )

    bump_type = BumpType.PATCH
    candidate = None
    if to.patch > frm.patch:
        bump_type, candidate = BumpType.PATCH, f"{to.major}.{to.minor}.{to.patch - 1}.0"
    if to.minor > frm.minor:
        bump_type, candidate = BumpType.MINOR, f"{to.major}.{to.minor - 1}.0.0"
    if to.major > frm.major:
        bump_type, candidate = BumpType.MAJOR, f"{to.major - 1}.0.0.0"

    same_release = (to.major, to.minor, to.patch) == (frm.major, frm.minor, frm.patch)
    if same_release and frm.prerelease != 0:
        # Dropping prerelease status is a patch release.
        bump_type, candidate = BumpType.PATCH, f"{to.major}.{to.minor}.{to.patch - 1}.0"

    return RangeEstimate(bump_type, candidate)


def parse_candidate(candidate: str) -> FourComponent:
    major, minor, patch, prerelease = (int(part) for part in candidate.split("."))
    return FourComponent(major, minor, patch, prerelease)


def is_zero_tag(name: str) -> bool:
    """Whether ``name`` marks "no meaningful prior point"."""
    return name == SENTINEL_TAG_NAME or _four_or_zero(name) == ZERO


class RangeResolver:
    """Maps a nominal ``(from_tag, to_tag)`` pair onto the real diff range."""

    def __init__(
        self,
        repo: GitRepository,
        tags: TagRepository,
        classifier: IncrementClassifier,
    ) -> None:
        self.repo = repo
        self.tags = tags
        self.classifier = classifier

    def find_tag(self, version: FourComponent) -> str | None:
        """Name of the first recognized tag whose version equals ``version``."""
        for tag in self.tags.list_tags():
            if to_four_component(tag.name) == version:
                return tag.name
        return None

    def resolve_sha(self, ref: str) -> str:
        try:
            return self.repo.resolve_ref(ref)
        except GitError as e:
            logger.warning("Could not resolve %s, using it verbatim: %s", ref, e)
            return ref

    def resolve(self, from_tag: str, to_tag: str, to_ref: str | None = None) -> ResolvedRange:
        """Resolve the changelog range for ``to_tag``.

        Args:
            from_tag: Nominal previous tag (the next older tag in the list)
            to_tag: Tag, or prospective tag name, the section describes
            to_ref: Commit to diff up to; defaults to ``to_tag`` itself
        """
        estimate = estimate_predecessor(from_tag, to_tag)

        resolved_from = from_tag
        if estimate.candidate is not None and "-" not in estimate.candidate:
            found = self.find_tag(parse_candidate(estimate.candidate))
            if found is not None:
                resolved_from = found

        to_sha = self.resolve_sha(to_ref or to_tag)
        if is_zero_tag(resolved_from):
            rev_range = to_sha
        else:
            rev_range = f"{resolved_from}...{to_sha}"

        bump_type = estimate.bump_type
        if bump_type is not BumpType.PRERELEASE:
            bump_type = self.classifier.classify(rev_range).type

        if resolved_from != from_tag:
            logger.debug("%s: diffing against %s instead of %s", to_tag, resolved_from, from_tag)
        return ResolvedRange(resolved_from, to_tag, to_sha, rev_range, bump_type)

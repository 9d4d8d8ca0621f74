"""Top-level version resolution.

Composes the engine: resolve tags, classify the commits since the latest
tag, calculate the next version and, on request, build the changelog.
Nothing here writes files or environment variables; ``ci_variables``
returns the values and the caller applies them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semtrail.config.models import SemtrailConfig
from semtrail.core.calculator import calculate_next_version
from semtrail.core.changelog import ChangelogComposer, build_changelog
from semtrail.core.classifier import IncrementClassifier, VersionDecision
from semtrail.core.commits import CommitFilter
from semtrail.core.ranges import RangeResolver
from semtrail.core.version import SemVer, parse_version
from semtrail.exceptions import GitError
from semtrail.vcs.tags import SENTINEL_TAG_NAME, TagRepository, is_sentinel_only

if TYPE_CHECKING:
    from semtrail.vcs.git import GitRepository

logger = logging.getLogger(__name__)

CI_VARIABLES = (
    "VERSION",
    "LAST_VERSION",
    "LAST_VERSION_MAJOR",
    "LAST_VERSION_MINOR",
    "LAST_VERSION_PATCH",
    "LAST_VERSION_PRERELEASE",
    "IS_PRERELEASE",
    "VERSION_INCREMENT",
    "FIRST_COMMIT",
    "LAST_COMMIT",
)


@dataclass(frozen=True)
class VersionInfo:
    """Result of one version computation."""

    new_version: SemVer
    previous_version: SemVer | None
    decision: VersionDecision
    first_commit_hash: str
    last_commit_hash: str
    tag_prefix: str = "v"

    @property
    def version(self) -> str:
        return str(self.new_version)

    @property
    def tag_name(self) -> str:
        return f"{self.tag_prefix}{self.new_version}"

    @property
    def is_prerelease(self) -> bool:
        return self.new_version.is_prerelease


class VersionEngine:
    """Computes version information and changelogs for one repository."""

    def __init__(self, repo: GitRepository, config: SemtrailConfig | None = None) -> None:
        self.repo = repo
        self.config = config or SemtrailConfig()
        self.tags = TagRepository(repo)
        self.commit_filter = CommitFilter.from_config(repo, self.config.commits)
        self.classifier = IncrementClassifier(self.commit_filter)
        self.resolver = RangeResolver(repo, self.tags, self.classifier)
        self.composer = ChangelogComposer(self.commit_filter, self.config.changelog)

    def _resolve_target(self, ref: str) -> tuple[str, str]:
        try:
            last = self.repo.resolve_ref(ref)
        except GitError as e:
            logger.warning("Could not resolve %s, using it verbatim: %s", ref, e)
            return ref, ref
        try:
            first = self.repo.root_commit(last)
        except GitError as e:
            logger.warning("Could not find the root commit of %s: %s", ref, e)
            first = last
        return first, last

    def get_version_info(self, ref: str = "HEAD") -> VersionInfo:
        """Compute the next version for the commit at ``ref``."""
        first, last = self._resolve_target(ref)
        tags = self.tags.list_tags()

        if is_sentinel_only(tags):
            previous = None
            rev_range = f"{first}...{last}"
        else:
            previous = parse_version(tags[0].name)
            rev_range = f"{tags[0].name}...{last}"

        decision = self.classifier.classify(rev_range)
        new_version, decision = calculate_next_version(
            previous, decision, self.config.version.initial_version
        )
        logger.info("Next version %s (%s)", new_version, decision)

        return VersionInfo(
            new_version=new_version,
            previous_version=previous,
            decision=decision,
            first_commit_hash=first,
            last_commit_hash=last,
            tag_prefix=self.config.effective_tag_prefix,
        )

    def generate_changelog(
        self,
        info: VersionInfo | None = None,
        ref: str = "HEAD",
        *,
        categorize: bool | None = None,
    ) -> str:
        """Full changelog: the prospective version first, then every tag."""
        if info is None:
            info = self.get_version_info(ref)
        return build_changelog(
            self.tags.list_tags(),
            self.resolver,
            self.composer,
            prospective_tag=info.tag_name,
            prospective_ref=info.last_commit_hash,
            categorize=categorize,
        )


def ci_variables(info: VersionInfo) -> dict[str, str]:
    """Recommended CI variables for ``info``.

    Without a previous version the ``LAST_VERSION*`` values describe the
    sentinel ``1.0.0-pre.0``.
    """
    last = info.previous_version or parse_version(SENTINEL_TAG_NAME)
    return {
        "VERSION": info.version,
        "LAST_VERSION": str(last),
        "LAST_VERSION_MAJOR": str(last.major),
        "LAST_VERSION_MINOR": str(last.minor),
        "LAST_VERSION_PATCH": str(last.patch),
        "LAST_VERSION_PRERELEASE": str(last.prerelease_number if last.is_prerelease else 0),
        "IS_PRERELEASE": str(info.is_prerelease).lower(),
        "VERSION_INCREMENT": str(info.decision.type),
        "FIRST_COMMIT": info.first_commit_hash,
        "LAST_COMMIT": info.last_commit_hash,
    }

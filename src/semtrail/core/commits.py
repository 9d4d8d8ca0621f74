"""Commit filtering.

Bot commits and merge/PR noise are excluded through predicate objects
(``Commit -> bool``). The defaults are regex predicates built from
``CommitsConfig``; tests and callers can pass any callable instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from semtrail.exceptions import GitError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semtrail.config.models import CommitsConfig
    from semtrail.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


class CommitPredicate(Protocol):
    """Returns True for commits that should be excluded."""

    def __call__(self, commit: Commit) -> bool: ...


@dataclass(frozen=True)
class AuthorMatches:
    pattern: str

    def __call__(self, commit: Commit) -> bool:
        return re.search(self.pattern, commit.author_name) is not None


@dataclass(frozen=True)
class CommitterMatches:
    pattern: str

    def __call__(self, commit: Commit) -> bool:
        return re.search(self.pattern, commit.committer_name) is not None


@dataclass(frozen=True)
class SubjectMatches:
    pattern: str

    def __call__(self, commit: Commit) -> bool:
        return re.search(self.pattern, commit.subject) is not None


def default_exclusions(config: CommitsConfig) -> list[CommitPredicate]:
    """Build the exclusion predicates described by ``config``.

    Empty patterns are skipped rather than matching everything.
    """
    predicates: list[CommitPredicate] = []
    if config.exclude_author_pattern:
        predicates.append(AuthorMatches(config.exclude_author_pattern))
    if config.exclude_committer_pattern:
        predicates.append(CommitterMatches(config.exclude_committer_pattern))
    if config.exclude_subject_pattern:
        predicates.append(SubjectMatches(config.exclude_subject_pattern))
    return predicates


class CommitFilter:
    """Commits of a range minus excluded noise, most recent first.

    Args:
        repo: Repository to query
        exclusions: Predicates; a commit matching any of them is dropped
        non_substantive_paths: Pathspecs ignored by ``substantive_commits``
    """

    def __init__(
        self,
        repo: GitRepository,
        exclusions: Sequence[CommitPredicate] = (),
        non_substantive_paths: Sequence[str] = (),
    ) -> None:
        self.repo = repo
        self.exclusions = list(exclusions)
        self.non_substantive_paths = list(non_substantive_paths)

    @classmethod
    def from_config(cls, repo: GitRepository, config: CommitsConfig) -> CommitFilter:
        return cls(
            repo,
            exclusions=default_exclusions(config),
            non_substantive_paths=config.non_substantive_paths,
        )

    def is_excluded(self, commit: Commit) -> bool:
        return any(predicate(commit) for predicate in self.exclusions)

    def commits(self, rev_range: str) -> list[Commit]:
        """Non-excluded commits in ``rev_range``."""
        return self._query(rev_range, ())

    def substantive_commits(self, rev_range: str) -> list[Commit]:
        """Non-excluded commits touching at least one substantive path."""
        return self._query(rev_range, self.non_substantive_paths)

    def _query(self, rev_range: str, exclude_paths: Sequence[str]) -> list[Commit]:
        try:
            commits = self.repo.log(rev_range, exclude_paths=exclude_paths)
        except GitError as e:
            logger.warning("Could not read commits for %s: %s", rev_range, e)
            return []
        kept = [c for c in commits if not self.is_excluded(c)]
        logger.debug("%s: %d of %d commit(s) kept", rev_range, len(kept), len(commits))
        return kept

"""Version tag discovery and ordering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semtrail.core.version import is_version_tag, tag_precedence_key
from semtrail.exceptions import GitError
from semtrail.vcs.git import Tag

if TYPE_CHECKING:
    from semtrail.vcs.git import GitRepository

logger = logging.getLogger(__name__)

SENTINEL_TAG_NAME = "v1.0.0-pre.0"
SENTINEL_TAG = Tag(name=SENTINEL_TAG_NAME, target_sha="")


class TagRepository:
    """Recognized version tags of a repository, newest version first.

    When no version tag exists the list holds the single sentinel tag
    ``v1.0.0-pre.0`` so "no history" looks the same everywhere downstream.
    """

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    def list_tags(self) -> list[Tag]:
        try:
            tags = self.repo.list_tags()
        except GitError as e:
            logger.warning("Could not list tags, treating repository as untagged: %s", e)
            tags = []

        recognized = [tag for tag in tags if is_version_tag(tag.name)]
        skipped = len(tags) - len(recognized)
        if skipped:
            logger.debug("Ignored %d non-version tag(s)", skipped)

        if not recognized:
            return [SENTINEL_TAG]
        return sorted(recognized, key=lambda t: tag_precedence_key(t.name), reverse=True)


def is_sentinel_only(tags: list[Tag]) -> bool:
    """Whether ``tags`` is the stand-in list for a repository without tags."""
    return len(tags) == 1 and tags[0].name == SENTINEL_TAG_NAME

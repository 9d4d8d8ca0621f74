"""Version control access."""

from __future__ import annotations

from semtrail.vcs.git import Commit, GitRepository, Tag
from semtrail.vcs.tags import SENTINEL_TAG_NAME, TagRepository, is_sentinel_only

__all__ = [
    "SENTINEL_TAG_NAME",
    "Commit",
    "GitRepository",
    "Tag",
    "TagRepository",
    "is_sentinel_only",
]

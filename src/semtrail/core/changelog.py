"""Markdown changelog generation.

Each release gets one section listing the commits of its resolved range:

    ## v1.2.0 (minor)

    Changes since v1.1.0:

    - Add widget ([@octocat](https://github.com/octocat))

Prerelease sections are omitted. In categorized mode the bullets are
grouped under ``### Features``, ``### Bug Fixes`` and so on.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from semtrail.config.models import ChangelogConfig
from semtrail.core.ranges import ZERO_TAG_NAME
from semtrail.core.version import BumpType
from semtrail.vcs.tags import is_sentinel_only

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semtrail.core.commits import CommitFilter
    from semtrail.core.ranges import RangeResolver, ResolvedRange
    from semtrail.vcs.git import Commit, Tag

logger = logging.getLogger(__name__)

CATEGORIES = (
    "Features",
    "Bug Fixes",
    "Documentation",
    "Refactoring",
    "Tests",
    "Other",
)

_CONVENTIONAL_PREFIX = re.compile(
    r"^(feat|fix|docs|style|refactor|test|chore|ci|build|perf)(\([\w-]+\))?!?:\s*"
)


def categorize_subject(subject: str) -> str:
    """Changelog category for a commit subject."""
    msg = subject.strip().lower()
    if msg.startswith(("feat", "add")):
        return "Features"
    if msg.startswith("fix") or "bugfix" in msg or "bug fix" in msg:
        return "Bug Fixes"
    if msg.startswith("doc") or "documentation" in msg:
        return "Documentation"
    if "refactor" in msg:
        return "Refactoring"
    if "test" in msg:
        return "Tests"
    return "Other"


def strip_conventional_prefix(subject: str) -> str:
    """Drop a ``type(scope):`` prefix and capitalize what remains."""
    message = _CONVENTIONAL_PREFIX.sub("", subject.strip())
    return message[:1].upper() + message[1:]


class ChangelogComposer:
    """Renders changelog sections for resolved ranges."""

    def __init__(self, commit_filter: CommitFilter, config: ChangelogConfig | None = None) -> None:
        self.commit_filter = commit_filter
        self.config = config or ChangelogConfig()

    def format_line(self, commit: Commit, *, categorize: bool = False) -> str:
        subject = strip_conventional_prefix(commit.subject) if categorize else commit.subject
        author = commit.author_name
        return f"- {subject} ([@{author}](https://{self.config.host}/{author}))"

    def _keep(self, line: str) -> bool:
        return not any(marker in line for marker in self.config.ignore_markers)

    def _lines(self, commits: Sequence[Commit], categorize: bool) -> dict[str, list[str]]:
        grouped: dict[str, set[str]] = {}
        for commit in commits:
            line = self.format_line(commit, categorize=categorize)
            if not self._keep(line):
                continue
            category = categorize_subject(commit.subject) if categorize else ""
            grouped.setdefault(category, set()).add(line)
        return {category: sorted(lines) for category, lines in grouped.items()}

    def compose_section(self, resolved: ResolvedRange, *, categorize: bool | None = None) -> str:
        """Render one section, or "" for prerelease ranges."""
        if resolved.bump_type is BumpType.PRERELEASE:
            logger.debug("Skipping prerelease section %s", resolved.to_tag)
            return ""

        if categorize is None:
            categorize = self.config.categorize

        commits = self.commit_filter.commits(resolved.rev_range)
        grouped = self._lines(commits, categorize)

        out = [
            f"## {resolved.to_tag} ({resolved.bump_type})",
            "",
            f"Changes since {resolved.from_tag}:",
            "",
        ]
        if categorize:
            for category in CATEGORIES:
                if category in grouped:
                    out.extend([f"### {category}", "", *grouped[category], ""])
        else:
            out.extend(grouped.get("", []))
            out.append("")
        return "\n".join(out)


def build_changelog(
    tags: Sequence[Tag],
    resolver: RangeResolver,
    composer: ChangelogComposer,
    *,
    prospective_tag: str | None = None,
    prospective_ref: str = "HEAD",
    categorize: bool | None = None,
) -> str:
    """Assemble the full changelog, newest section first.

    Args:
        tags: Recognized tags, newest first (as from ``TagRepository``)
        resolver: Resolver used to pick each section's diff boundary
        composer: Section renderer
        prospective_tag: Tag name of the not-yet-tagged next version; its
            section comes first, diffed up to ``prospective_ref``
        prospective_ref: Commit the prospective version will be tagged on
        categorize: Override the configured categorized mode
    """
    history = [] if is_sentinel_only(list(tags)) else list(tags)
    sections = []

    if prospective_tag is not None:
        nominal_from = tags[0].name if tags else ZERO_TAG_NAME
        resolved = resolver.resolve(nominal_from, prospective_tag, prospective_ref)
        sections.append(composer.compose_section(resolved, categorize=categorize))

    for index, tag in enumerate(history):
        nominal_from = history[index + 1].name if index + 1 < len(history) else ZERO_TAG_NAME
        resolved = resolver.resolve(nominal_from, tag.name)
        sections.append(composer.compose_section(resolved, categorize=categorize))

    body = "\n".join(section for section in sections if section)
    title = composer.config.title
    return f"{title}\n\n{body}" if body else f"{title}\n"

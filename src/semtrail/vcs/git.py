"""Read-only git access through the ``git`` executable.

Every query runs ``git`` as a subprocess in the repository directory and
parses its output. Failures raise ``GitError``; callers inside the engine
decide how to degrade.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from semtrail.exceptions import GitError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Unit and record separators keep subjects with tabs or pipes intact.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%cn", "%ct", "%s"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A commit as seen by the version engine."""

    sha: str
    subject: str
    author_name: str
    committer_name: str
    date: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class Tag:
    """A tag name and the commit it points at."""

    name: str
    target_sha: str


class GitRepository:
    """Thin wrapper over the git command line for one repository."""

    def __init__(self, path: Path | str = ".") -> None:
        self.path = Path(path).resolve()
        if not self.path.is_dir():
            raise GitError(f"Repository path does not exist: {self.path}")

    def _git(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: If git is missing or exits non-zero
        """
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout

    def list_tags(self) -> list[Tag]:
        """List every tag with the commit it resolves to.

        Annotated tags are peeled to their commit.
        """
        output = self._git(
            "for-each-ref",
            "--format=%(refname:short)%09%(objectname)%09%(*objectname)",
            "refs/tags",
        )
        tags = []
        for line in output.splitlines():
            if not line.strip():
                continue
            name, obj, peeled = (line.split("\t") + ["", ""])[:3]
            tags.append(Tag(name=name, target_sha=peeled or obj))
        return tags

    def log(self, rev_range: str, exclude_paths: Sequence[str] = ()) -> list[Commit]:
        """List commits in ``rev_range``, most recent first.

        Args:
            rev_range: Any revision range git understands (``a...b``, ``sha``)
            exclude_paths: When given, only commits touching at least one
                path outside these pathspecs are returned. Pathspecs are
                relative to the work tree root, whatever ``path`` points at

        Returns:
            Commits in git log order
        """
        args = ["log", f"--format={_LOG_FORMAT}", rev_range]
        if exclude_paths:
            # Anchored at the top so a subdirectory path sees the whole tree.
            args.extend(["--", ":/", *(f":(top,exclude){p}" for p in exclude_paths)])
        return parse_log(self._git(*args))

    def resolve_ref(self, ref: str) -> str:
        """Resolve a ref (branch, tag, abbreviated sha) to a full commit sha."""
        return self._git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}").strip()

    def root_commit(self, ref: str = "HEAD") -> str:
        """Return the oldest root commit reachable from ``ref``."""
        roots = self._git("rev-list", "--max-parents=0", ref).split()
        if not roots:
            raise GitError(f"No root commit reachable from {ref}")
        return roots[-1]


def parse_log(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with the module's log format."""
    commits = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        fields = record.split(_FIELD_SEP)
        if len(fields) != 5:
            logger.warning("Skipping malformed log record: %r", record)
            continue
        sha, author, committer, timestamp, subject = fields
        commits.append(
            Commit(
                sha=sha,
                subject=subject,
                author_name=author,
                committer_name=committer,
                date=datetime.fromtimestamp(int(timestamp), tz=UTC),
            )
        )
    return commits

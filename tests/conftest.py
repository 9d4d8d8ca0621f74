"""Shared test fixtures."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

import pytest

from semtrail.exceptions import GitError
from semtrail.vcs.git import Commit, Tag

CommitFactory = Callable[..., Commit]


class FakeRepository:
    """In-memory stand-in for ``GitRepository``.

    ``commits`` maps a revision range to what ``git log`` would return for
    it; ``substantive`` does the same for queries that exclude
    non-substantive paths. Unknown ranges log nothing.
    """

    def __init__(
        self,
        tags: Sequence[Tag] = (),
        commits: dict[str, list[Commit]] | None = None,
        substantive: dict[str, list[Commit]] | None = None,
        refs: dict[str, str] | None = None,
        root: str = "0" * 40,
        fail: bool = False,
    ) -> None:
        self.path = Path(".")
        self.tags = list(tags)
        self.commits = commits or {}
        self.substantive = substantive or {}
        self.refs = refs or {}
        self.root = root
        self.fail = fail
        self.log_calls: list[tuple[str, tuple[str, ...]]] = []

    def _check(self) -> None:
        if self.fail:
            raise GitError("git log failed with exit code 128", stderr="fatal: not a git repository")

    def list_tags(self) -> list[Tag]:
        self._check()
        return list(self.tags)

    def log(self, rev_range: str, exclude_paths: Sequence[str] = ()) -> list[Commit]:
        self._check()
        self.log_calls.append((rev_range, tuple(exclude_paths)))
        table = self.substantive if exclude_paths else self.commits
        return list(table.get(rev_range, []))

    def resolve_ref(self, ref: str) -> str:
        self._check()
        return self.refs.get(ref, ref)

    def root_commit(self, ref: str = "HEAD") -> str:
        self._check()
        return self.root


@pytest.fixture
def make_commit() -> CommitFactory:
    """Factory for commits with a sha derived from the subject."""

    def factory(
        subject: str,
        author: str = "alice",
        committer: str | None = None,
        sha: str | None = None,
    ) -> Commit:
        return Commit(
            sha=sha or hashlib.sha1(subject.encode()).hexdigest(),
            subject=subject,
            author_name=author,
            committer_name=committer or author,
            date=datetime(2024, 1, 1, tzinfo=UTC),
        )

    return factory


@pytest.fixture
def fake_repo() -> FakeRepository:
    """An empty fake repository."""
    return FakeRepository()


@pytest.fixture
def repo_factory() -> type[FakeRepository]:
    """The fake repository class, for tests that need populated history."""
    return FakeRepository


@pytest.fixture
def temp_project_with_pyproject(tmp_path: Path) -> Path:
    """Create a project directory with a semtrail section in pyproject.toml."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.semtrail.version]
initial_version = "0.1.0"

[tool.semtrail.changelog]
categorize = true
host = "git.example.com"
"""
    )
    return tmp_path

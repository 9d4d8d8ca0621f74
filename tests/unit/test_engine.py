"""Tests for the version engine and CI variables."""

from __future__ import annotations

from semtrail.config.models import SemtrailConfig, VersionConfig
from semtrail.core.calculator import REASON_INITIAL
from semtrail.core.engine import CI_VARIABLES, VersionEngine, ci_variables
from semtrail.core.version import BumpType
from semtrail.vcs.git import Tag

ROOT = "c0"
HEAD = "c3"


class TestGetVersionInfo:
    """Tests for VersionEngine.get_version_info()."""

    def test_no_tags_gives_initial_version(self, repo_factory, make_commit):
        """A repository without tags starts at the initial version."""
        repo = repo_factory(
            refs={"HEAD": HEAD},
            root=ROOT,
            commits={f"{ROOT}...{HEAD}": [make_commit("first")]},
        )

        info = VersionEngine(repo).get_version_info()

        assert info.version == "1.0.0"
        assert info.previous_version is None
        assert info.decision.type is BumpType.INITIAL
        assert info.decision.reason == REASON_INITIAL
        assert info.first_commit_hash == ROOT
        assert info.last_commit_hash == HEAD

    def test_code_change_bumps_minor(self, repo_factory, make_commit):
        """A substantive commit since the latest tag gives a minor bump."""
        code = make_commit("rework parser")
        repo = repo_factory(
            tags=[Tag("v1.2.3", "c1")],
            refs={"HEAD": HEAD},
            commits={f"v1.2.3...{HEAD}": [code]},
            substantive={f"v1.2.3...{HEAD}": [code]},
        )

        info = VersionEngine(repo).get_version_info()

        assert info.version == "1.3.0"
        assert info.tag_name == "v1.3.0"
        assert str(info.previous_version) == "1.2.3"
        assert not info.is_prerelease

    def test_no_changes_is_prerelease(self, repo_factory):
        """Nothing since the latest tag starts a prerelease series."""
        repo = repo_factory(tags=[Tag("v1.2.3", "c1")], refs={"HEAD": HEAD})

        info = VersionEngine(repo).get_version_info()

        assert info.version == "1.2.4-pre.1"
        assert info.is_prerelease

    def test_prerelease_promoted_by_patch(self, repo_factory, make_commit):
        """A doc-only commit after a prerelease releases it."""
        repo = repo_factory(
            tags=[Tag("v1.2.4-pre.1", "c2"), Tag("v1.2.3", "c1")],
            refs={"HEAD": HEAD},
            commits={f"v1.2.4-pre.1...{HEAD}": [make_commit("docs: readme")]},
        )

        info = VersionEngine(repo).get_version_info()

        assert info.version == "1.2.4"
        assert info.decision.type is BumpType.PATCH

    def test_major_directive(self, repo_factory, make_commit):
        """A [major] subject gives a major bump."""
        repo = repo_factory(
            tags=[Tag("v1.2.3", "c1")],
            refs={"HEAD": HEAD},
            commits={f"v1.2.3...{HEAD}": [make_commit("[major] drop python 3.10")]},
        )

        assert VersionEngine(repo).get_version_info().version == "2.0.0"

    def test_ref_selects_target(self, repo_factory):
        """The target commit can be any ref."""
        repo = repo_factory(tags=[Tag("v1.0.0", "c1")], refs={"feature": "c7"})

        info = VersionEngine(repo).get_version_info("feature")

        assert info.last_commit_hash == "c7"

    def test_configured_initial_version_and_prefix(self, fake_repo):
        """initial_version and tag_prefix come from configuration."""
        config = SemtrailConfig(version=VersionConfig(initial_version="0.1.0", tag_prefix=""))

        info = VersionEngine(fake_repo, config).get_version_info()

        assert info.version == "0.1.0"
        assert info.tag_name == "0.1.0"

    def test_git_failure_degrades(self, repo_factory):
        """A broken repository still yields the initial version."""
        info = VersionEngine(repo_factory(fail=True)).get_version_info()

        assert info.version == "1.0.0"
        assert info.last_commit_hash == "HEAD"


class TestCiVariables:
    """Tests for ci_variables()."""

    def test_without_history(self, repo_factory):
        """Without tags the LAST_VERSION values describe the sentinel."""
        repo = repo_factory(refs={"HEAD": HEAD}, root=ROOT)

        variables = ci_variables(VersionEngine(repo).get_version_info())

        assert tuple(variables) == CI_VARIABLES
        assert variables["VERSION"] == "1.0.0"
        assert variables["LAST_VERSION"] == "1.0.0-pre.0"
        assert variables["LAST_VERSION_MAJOR"] == "1"
        assert variables["LAST_VERSION_PRERELEASE"] == "0"
        assert variables["IS_PRERELEASE"] == "false"
        assert variables["VERSION_INCREMENT"] == "initial"
        assert variables["FIRST_COMMIT"] == ROOT
        assert variables["LAST_COMMIT"] == HEAD

    def test_prerelease_values(self, repo_factory):
        """Prerelease counters and flags are reported."""
        repo = repo_factory(tags=[Tag("v2.1.0-pre.3", "c1")], refs={"HEAD": HEAD})

        variables = ci_variables(VersionEngine(repo).get_version_info())

        assert variables["VERSION"] == "2.1.0-pre.4"
        assert variables["LAST_VERSION"] == "2.1.0-pre.3"
        assert variables["LAST_VERSION_MINOR"] == "1"
        assert variables["LAST_VERSION_PRERELEASE"] == "3"
        assert variables["IS_PRERELEASE"] == "true"
        assert variables["VERSION_INCREMENT"] == "prerelease"


class TestGenerateChangelog:
    """Tests for VersionEngine.generate_changelog()."""

    def test_prospective_section_first(self, repo_factory, make_commit):
        """The next version heads the changelog, followed by tags."""
        feature = make_commit("Add exporter", author="octocat")
        first = make_commit("Initial import")
        repo = repo_factory(
            tags=[Tag("v1.0.0", "c1")],
            refs={"HEAD": "c2", "v1.0.0": "c1"},
            commits={"v1.0.0...c2": [feature], "c1": [first]},
            substantive={"v1.0.0...c2": [feature]},
        )

        text = VersionEngine(repo).generate_changelog()

        assert text.startswith("# Changelog\n\n## v1.1.0 (minor)\n\nChanges since v1.0.0:\n")
        assert "- Add exporter ([@octocat](https://github.com/octocat))" in text
        assert "## v1.0.0 (patch)" in text
        assert "Changes since v0.0.0:" in text

    def test_reuses_given_info(self, repo_factory, make_commit):
        """A precomputed VersionInfo is used as is."""
        repo = repo_factory(tags=[Tag("v1.0.0", "c1")], refs={"HEAD": "c2", "v1.0.0": "c1"})
        engine = VersionEngine(repo)
        info = engine.get_version_info()

        text = engine.generate_changelog(info)

        # A prerelease prospective version gets no section of its own.
        assert info.is_prerelease
        assert info.tag_name not in text

"""Tests for next version calculation."""

from __future__ import annotations

import pytest

from semtrail.core.calculator import bump_version, calculate_next_version
from semtrail.core.classifier import VersionDecision
from semtrail.core.version import BumpType, parse_version


def decision(bump: BumpType) -> VersionDecision:
    return VersionDecision(bump, "test")


class TestCalculateNextVersion:
    """Tests for calculate_next_version()."""

    def test_no_previous_uses_initial_version(self):
        """Without tags the initial version is used and the bump is INITIAL."""
        version, effective = calculate_next_version(None, decision(BumpType.MINOR))

        assert str(version) == "1.0.0"
        assert not version.is_prerelease
        assert effective.type is BumpType.INITIAL

    def test_custom_initial_version(self):
        """The initial version is configurable."""
        version, _ = calculate_next_version(None, decision(BumpType.PATCH), "0.1.0")

        assert str(version) == "0.1.0"

    def test_decision_passes_through(self):
        """With a previous version the decision is returned unchanged."""
        original = VersionDecision(BumpType.MINOR, "code changes found")
        _, effective = calculate_next_version(parse_version("1.0.0"), original)

        assert effective == original


class TestBumpVersion:
    """Tests for bump_version()."""

    @pytest.mark.parametrize(
        ("previous", "bump", "expected"),
        [
            ("1.2.3", BumpType.MAJOR, "2.0.0"),
            ("1.2.3-pre.4", BumpType.MAJOR, "2.0.0"),
            ("1.2.3", BumpType.MINOR, "1.3.0"),
            ("1.2.3-pre.4", BumpType.MINOR, "1.3.0"),
            ("1.2.3", BumpType.PATCH, "1.2.4"),
            ("1.2.3-pre.2", BumpType.PATCH, "1.2.3"),
            ("1.2.3", BumpType.PRERELEASE, "1.2.4-pre.1"),
            ("1.2.3-pre.2", BumpType.PRERELEASE, "1.2.3-pre.3"),
            ("1.2.3-rc.1", BumpType.PRERELEASE, "1.2.3-pre.2"),
            ("1.0.0-pre.0", BumpType.PRERELEASE, "1.0.0-pre.1"),
        ],
    )
    def test_bump(self, previous: str, bump: BumpType, expected: str):
        """Each bump type moves the version as expected."""
        assert str(bump_version(parse_version(previous), bump)) == expected

    def test_prerelease_series_starts_at_one(self):
        """A new prerelease series has counter 1."""
        version = bump_version(parse_version("0.4.9"), BumpType.PRERELEASE)

        assert version.is_prerelease
        assert version.prerelease_number == 1

    def test_initial_cannot_bump(self):
        """INITIAL is not a bump of an existing version."""
        with pytest.raises(ValueError):
            bump_version(parse_version("1.0.0"), BumpType.INITIAL)

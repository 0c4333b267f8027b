"""Tests for semantic version parsing and incrementing."""

from __future__ import annotations

import pytest

from mpci.core.version import (
    BumpType,
    SemanticVersion,
    format_version,
    increment,
    increment_version,
    parse_version,
)


class TestParseVersion:
    """Tests for parse_version()."""

    def test_parse_full_version(self):
        assert parse_version("1.4.2") == SemanticVersion(1, 4, 2)

    def test_non_numeric_component_becomes_zero(self):
        assert parse_version("2.x.1") == SemanticVersion(2, 0, 1)

    def test_missing_components_default_to_zero(self):
        assert parse_version("3") == SemanticVersion(3, 0, 0)
        assert parse_version("3.1") == SemanticVersion(3, 1, 0)

    @pytest.mark.parametrize("text", ["", None, "abc", "..", "-1.-2.-3"])
    def test_garbage_parses_to_zero(self, text):
        assert parse_version(text) == SemanticVersion(0, 0, 0)

    def test_prerelease_suffix_drops_patch(self):
        """A suffix makes the component non-numeric."""
        assert parse_version("1.2.3-beta") == SemanticVersion(1, 2, 0)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_version(" 1. 2 .3 ") == SemanticVersion(1, 2, 3)

    def test_oversized_component_becomes_zero(self):
        assert parse_version("9" * 5000 + ".1.2") == SemanticVersion(0, 1, 2)

    def test_round_trip(self):
        versions = (SemanticVersion(0, 0, 0), SemanticVersion(1, 2, 3), SemanticVersion(10, 0, 7))
        for version in versions:
            assert parse_version(format_version(version)) == version


class TestSemanticVersion:
    """Tests for SemanticVersion."""

    def test_str(self):
        assert str(SemanticVersion(1, 0, 9)) == "1.0.9"

    def test_negative_component_rejected(self):
        with pytest.raises(ValueError):
            SemanticVersion(1, -1, 0)

    def test_ordering(self):
        assert SemanticVersion(1, 2, 3) < SemanticVersion(1, 3, 0)

    def test_bump_method(self):
        assert SemanticVersion(1, 2, 3).bump("minor") == SemanticVersion(1, 3, 0)


class TestIncrement:
    """Tests for increment()."""

    def test_patch(self):
        assert increment(SemanticVersion(1, 2, 3), BumpType.PATCH) == SemanticVersion(1, 2, 4)

    def test_minor_resets_patch(self):
        assert increment(SemanticVersion(1, 2, 3), BumpType.MINOR) == SemanticVersion(1, 3, 0)

    def test_major_resets_minor_and_patch(self):
        assert increment(SemanticVersion(1, 2, 3), BumpType.MAJOR) == SemanticVersion(2, 0, 0)

    def test_default_is_patch(self):
        assert increment(SemanticVersion(0, 0, 0)) == SemanticVersion(0, 0, 1)

    @pytest.mark.parametrize("kind", ["bogus", "", None, "PATCH", "MAJOR", "Minor"])
    def test_unrecognized_kind_is_patch(self, kind):
        assert increment(SemanticVersion(1, 1, 1), kind) == SemanticVersion(1, 1, 2)

    def test_surrounding_whitespace_in_kind_is_ignored(self):
        assert increment(SemanticVersion(1, 1, 1), " major ") == SemanticVersion(2, 0, 0)

    def test_increment_version_strings(self):
        assert increment_version("1.0.0", "minor") == "1.1.0"
        assert increment_version("garbage") == "0.0.1"

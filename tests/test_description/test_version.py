"""Unit tests for Version and VersionRange (initforge.description.version).

Covers:
- Parsing dash and dot qualifiers
- Qualifier ordering (milestone < RC < snapshot < release)
- Range parsing with inclusive/exclusive bounds
- Membership with strings and Version objects
"""

from __future__ import annotations

import pytest

from initforge.description.version import InvalidVersionError, Version, VersionRange

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


class TestVersionParse:
    def test_plain(self):
        version = Version.parse("3.2.1")
        assert (version.major, version.minor, version.patch) == (3, 2, 1)
        assert version.qualifier is None
        assert version.is_release

    def test_missing_patch(self):
        assert Version.parse("3.2") == Version(3, 2, 0)

    def test_dash_qualifier(self):
        version = Version.parse("3.3.0-SNAPSHOT")
        assert version.qualifier == "SNAPSHOT"
        assert not version.is_release
        assert str(version) == "3.3.0-SNAPSHOT"

    def test_dot_qualifier_with_number(self):
        version = Version.parse("2.1.0.M1")
        assert version.qualifier == "M"
        assert version.qualifier_version == 1

    def test_release_qualifier_equals_plain(self):
        assert Version.parse("2.7.0.RELEASE") == Version.parse("2.7.0")
        assert hash(Version.parse("2.7.0.RELEASE")) == hash(Version.parse("2.7.0"))

    @pytest.mark.parametrize("text", ["", "abc", "3", "3.x.1", "3.2.1-"])
    def test_invalid(self, text):
        with pytest.raises(InvalidVersionError):
            Version.parse(text)

    def test_safe_parse(self):
        assert Version.safe_parse("nope") is None
        assert Version.safe_parse(None) is None
        assert Version.safe_parse("3.0.0") == Version(3, 0, 0)


class TestVersionOrdering:
    def test_qualifier_order(self):
        ordered = ["3.2.0-M1", "3.2.0-M2", "3.2.0-RC1", "3.2.0-SNAPSHOT", "3.2.0"]
        versions = [Version.parse(text) for text in ordered]
        assert sorted(reversed(versions)) == versions

    def test_numeric_components(self):
        assert Version.parse("3.10.0") > Version.parse("3.9.9")
        assert Version.parse("3.1.7") < Version.parse("3.2.1")


# ---------------------------------------------------------------------------
# VersionRange
# ---------------------------------------------------------------------------


class TestVersionRange:
    def test_lower_bound_only(self):
        version_range = VersionRange.parse("3.1.0")
        assert "3.1.0" in version_range
        assert "4.0.0" in version_range
        assert "3.0.9" not in version_range

    def test_half_open(self):
        version_range = VersionRange.parse("[3.0.0,3.2.0)")
        assert "3.0.0" in version_range
        assert "3.1.7" in version_range
        assert "3.2.0" not in version_range
        assert "3.2.0-M1" in version_range

    def test_exclusive_lower_inclusive_upper(self):
        version_range = VersionRange.parse("(3.0.0,3.2.0]")
        assert "3.0.0" not in version_range
        assert "3.2.0" in version_range

    def test_between(self):
        version_range = VersionRange.between("3.0.0", "3.2.0")
        assert Version.parse("3.1.0") in version_range
        assert Version.parse("3.2.0") not in version_range
        assert "2.9.0" in VersionRange.between(None, "3.0.0")

    def test_unparsable_member(self):
        assert "garbage" not in VersionRange.parse("3.0.0")
        assert 3 not in VersionRange.parse("3.0.0")

    @pytest.mark.parametrize("text", ["", "[3.0.0", "[3.0.0;3.1.0]", "[3.2.0,3.0.0)"])
    def test_invalid(self, text):
        with pytest.raises(InvalidVersionError):
            VersionRange.parse(text)

    def test_str(self):
        assert str(VersionRange.parse("3.1.0")) == ">=3.1.0"
        assert str(VersionRange.parse("[3.0.0,3.4.0-M1)")) == "[3.0.0,3.4.0-M1)"

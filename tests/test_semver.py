"""Tests for module-version semver primitives."""

import pytest

from versioning import semver


class TestValidity:
    """Validity and canonical forms."""

    @pytest.mark.parametrize("v", [
        "v1", "v1.2", "v1.2.3", "v0.0.0", "v1.2.3-rc.1", "v1.2.3+build.5",
        "v0.0.0-20190311183353-d8887717615a", "v2.0.0-z-",
    ])
    def test_valid(self, v):
        """Shorthands and full versions are valid."""
        assert semver.is_valid(v)

    @pytest.mark.parametrize("v", [
        "", "1.2.3", "v", "v1.x", "v1.0-", "v01.2.3", "v1.2.3-", "latest", "master",
        "v1.2.3\n", "v1\n", "v\u0661.\u0662.\u0663", "v1.\u0662",
    ])
    def test_invalid(self, v):
        """Missing 'v', leading zeros and empty identifiers are rejected."""
        assert not semver.is_valid(v)

    def test_canonical_expands_shorthand_and_drops_build(self):
        assert semver.canonical("v1") == "v1.0.0"
        assert semver.canonical("v1.13") == "v1.13.0"
        assert semver.canonical("v1.2.3+meta") == "v1.2.3"
        assert semver.canonical("bogus") == ""

    def test_parts(self):
        """prerelease/build keep their separators; major/major_minor truncate."""
        assert semver.prerelease("v1.13.0-beta.1") == "-beta.1"
        assert semver.prerelease("v1.13.0") == ""
        assert semver.prerelease("v1.0.0-rc.1+build") == "-rc.1"
        assert semver.build("v1.0.0+incompatible") == "+incompatible"
        assert semver.build("v1.2") == ""
        assert semver.major("v2.3.4") == "v2"
        assert semver.major_minor("v1.13") == "v1.13"
        assert semver.major_minor("nope") == ""


class TestCompare:
    """Precedence comparison."""

    def test_numeric_order(self):
        assert semver.compare("v1.2.0", "v1.11.0") == -1
        assert semver.compare("v1.11.0", "v1.2.0") == 1
        assert semver.compare("v1.2", "v1.2.0") == 0

    def test_prerelease_before_release(self):
        assert semver.compare("v1.0.0-rc.1", "v1.0.0") == -1
        assert semver.compare("v1.0.0-beta.2", "v1.0.0-beta.11") == -1

    def test_build_ignored(self):
        assert semver.compare("v1.0.0+a", "v1.0.0+b") == 0

    def test_invalid_sorts_first(self):
        """Invalid versions are less than valid ones and equal to each other."""
        assert semver.compare("junk", "v0.0.1") == -1
        assert semver.compare("v0.0.1", "junk") == 1
        assert semver.compare("junk", "other") == 0

"""Tests for standard library version resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from common.errors import InvalidArgumentError, NotFoundError
from stdlib import fixtures
from stdlib.gorepo import FixtureGoRepo
from stdlib.resolver import (
    new_pseudo_version,
    resolve_revision,
    resolve_supported_branches,
    semantic_version,
    version_matches_hash,
    versions,
    zip_info,
)
from versioning.models import LATEST


@pytest.fixture
def repo():
    """Fixture backend with the default refs and trees."""
    return FixtureGoRepo()


class TestVersions:
    """Version listing."""

    def test_versions_from_refs(self, repo):
        got = versions(repo)
        assert got == [
            "v1.2.1", "v1.3.2", "v1.4.2", "v1.4.3", "v1.6.0", "v1.6.3", "v1.6.0-beta.1",
            "v1.8.0", "v1.8.0-rc.2", "v1.9.0-rc.1", "v1.11.0", "v1.12.0", "v1.12.1",
            "v1.12.5", "v1.12.9", "v1.13.0", "v1.13.0-beta.1", "v1.14.6", "v1.21.0",
            "dev.fuzz", "master",
        ]

    def test_unrecognized_refs_are_skipped(self):
        repo = FixtureGoRepo(refs=["refs/changes/56/93156/13", "refs/tags/release.r59", "refs/notes/commits"])
        assert versions(repo) == []

    def test_supported_branches(self, repo):
        assert resolve_supported_branches(repo) == {
            "master": fixtures.TEST_MASTER_HASH,
            "dev.fuzz": fixtures.TEST_DEV_FUZZ_HASH,
        }


class TestSemanticVersion:
    """Requested version resolution."""

    def test_latest_is_newest_release(self, repo):
        assert semantic_version(repo, LATEST) == "v1.21.0"

    def test_latest_ignores_prereleases(self):
        repo = FixtureGoRepo(refs=["refs/tags/go1.12", "refs/tags/go1.13beta1", "refs/tags/go1.14.6", "refs/heads/master"])
        assert semantic_version(repo, LATEST) == "v1.14.6"

    def test_latest_without_releases(self):
        repo = FixtureGoRepo(refs=["refs/tags/go1.13beta1", "refs/heads/master"])
        with pytest.raises(NotFoundError):
            semantic_version(repo, LATEST)

    def test_known_version(self, repo):
        assert semantic_version(repo, "v1.13.0-beta.1") == "v1.13.0-beta.1"

    def test_branch_passes_through(self, repo):
        assert semantic_version(repo, "master") == "master"

    def test_unknown_version(self, repo):
        with pytest.raises(NotFoundError) as exc:
            semantic_version(repo, "v1.99.0")
        assert str(exc.value) == "semantic_version('v1.99.0'): requested version unknown: 'v1.99.0'"

    def test_invalid_version(self, repo):
        with pytest.raises(InvalidArgumentError):
            semantic_version(repo, "go1.13")

    def test_zip_info(self, repo):
        assert zip_info(repo, LATEST) == "v1.21.0"


class TestPseudoVersions:
    """Pseudo-version synthesis."""

    def test_format(self):
        got = new_pseudo_version("v0.0.0", fixtures.TEST_COMMIT_TIME, fixtures.TEST_MASTER_HASH)
        assert got == fixtures.TEST_MASTER_VERSION

    def test_converts_to_utc(self):
        tz = timezone(timedelta(hours=-7))
        t = datetime(2019, 9, 3, 18, 2, 3, tzinfo=tz)
        got = new_pseudo_version("v0.0.0", t, fixtures.TEST_MASTER_HASH)
        assert got == fixtures.TEST_MASTER_VERSION

    def test_version_matches_hash(self):
        assert version_matches_hash(fixtures.TEST_MASTER_VERSION, fixtures.TEST_MASTER_HASH)
        assert not version_matches_hash(fixtures.TEST_MASTER_VERSION, fixtures.TEST_DEV_FUZZ_HASH)
        assert not version_matches_hash("v1.21.0", fixtures.TEST_MASTER_HASH)


class TestResolveRevision:
    """Checkout of a concrete revision."""

    def test_revision(self, repo, tmp_path):
        rev = resolve_revision(repo, "v1.14.6", str(tmp_path))
        assert rev.hash == fixtures.TEST_HASHES["v1.14.6"]
        assert rev.commit_time == fixtures.TEST_COMMIT_TIME
        assert rev.directory == str(tmp_path)

    def test_missing_revision(self, repo, tmp_path):
        with pytest.raises(NotFoundError) as exc:
            resolve_revision(repo, "v1.4.2", str(tmp_path))
        assert str(exc.value).startswith("resolve_revision('v1.4.2'): FixtureGoRepo.clone('v1.4.2'): ")

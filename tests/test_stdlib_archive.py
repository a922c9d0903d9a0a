"""Tests for standard library archive materialization."""

import re
import zipfile

import pytest

from common.errors import InvalidArgumentError, NotFoundError
from stdlib import fixtures
from stdlib.archive import add_files, content_dir, zip_stdlib
from stdlib.gorepo import FixtureGoRepo
from versioning.models import LATEST

PSEUDO_RE = re.compile(r"^v0\.0\.0-\d{14}-[0-9a-f]{12}$")


@pytest.fixture
def repo():
    """Fixture backend with the default refs and trees."""
    return FixtureGoRepo()


def _relative(archive):
    prefix = archive.prefix + "/"
    for name in archive.names():
        assert name.startswith(prefix), name
    return {name[len(prefix):] for name in archive.names()}


class TestZipRelease:
    """Materializing tagged releases."""

    def test_latest_resolves_to_newest_release(self):
        """Prereleases and branches never win "latest"."""
        repo = FixtureGoRepo(refs=["refs/tags/go1.12", "refs/tags/go1.13beta1", "refs/tags/go1.14.6", "refs/heads/master"])
        archive = zip_stdlib(repo, LATEST)

        assert archive.resolved_version == "v1.14.6"
        assert archive.prefix == "std@v1.14.6"
        assert "std@v1.14.6/errors/errors.go" in archive.names()
        assert archive.commit_time == fixtures.TEST_COMMIT_TIME

    def test_modern_layout(self, repo):
        archive = zip_stdlib(repo, "v1.12.5")
        files = _relative(archive)

        assert {"LICENSE", "CONTRIBUTING.md", "VERSION", "errors/errors.go", "errors/errors_test.go",
                "builtin/builtin.go", "context/context.go", "cmd/README.vendor", "cmd/go/main.go"} <= files
        # Root READMEs, manifests, testdata, hidden and underscore entries are left out.
        for excluded in ("README.md", "README.vendor", "go.mod", "cmd/go.mod", "errors/testdata/golden.txt",
                         ".gitignore", "_obsolete/old.go", ".hidden/ignored.go"):
            assert excluded not in files
        # Top-level directories of the repository are not part of the module.
        assert not any(f.startswith("api/") for f in files)

    def test_legacy_layout(self, repo):
        """Before v1.4 the library lives under src/pkg."""
        archive = zip_stdlib(repo, "v1.3.2")
        files = _relative(archive)

        assert {"LICENSE", "VERSION", "errors/errors.go", "errors/errors_test.go", "fmt/print.go"} <= files
        assert "README" not in files
        assert "Make.dist" not in files

    def test_entries_carry_commit_time(self, repo):
        archive = zip_stdlib(repo, "v1.21.0")
        info = archive.zip_file.getinfo("std@v1.21.0/errors/errors.go")
        # DOS timestamps have two-second resolution.
        assert info.date_time[:5] == (2019, 9, 4, 1, 2)
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_read(self, repo):
        archive = zip_stdlib(repo, "v1.21.0")
        assert archive.read("VERSION") == b"go1.21.0\n"
        with pytest.raises(NotFoundError):
            archive.read("errors/missing.go")

    def test_unknown_version(self, repo):
        with pytest.raises(NotFoundError) as exc:
            zip_stdlib(repo, "v1.99.0")
        assert str(exc.value).startswith("stdlib.zip('v1.99.0'): semantic_version('v1.99.0'): ")

    def test_invalid_version(self, repo):
        with pytest.raises(InvalidArgumentError):
            zip_stdlib(repo, "1.21")


class TestZipBranch:
    """Materializing branches and pseudo-versions."""

    def test_master_gets_pseudo_version(self, repo):
        archive = zip_stdlib(repo, "master")

        assert PSEUDO_RE.match(archive.resolved_version)
        assert archive.resolved_version == fixtures.TEST_MASTER_VERSION
        assert archive.prefix == "std@master"
        names = archive.names()
        assert "std@master/errors/errors.go" in names
        assert "std@master/cmd/README.vendor" in names
        assert "std@master/README.md" not in names
        assert "std@master/README.vendor" not in names
        assert not any(n.endswith("/go.mod") for n in names)

    def test_dev_fuzz(self, repo):
        archive = zip_stdlib(repo, "dev.fuzz")
        assert archive.resolved_version == fixtures.TEST_DEV_FUZZ_VERSION
        assert "std@dev.fuzz/testing/fuzz.go" in archive.names()

    def test_pseudo_version_request(self, repo):
        archive = zip_stdlib(repo, fixtures.TEST_MASTER_VERSION)
        assert archive.resolved_version == fixtures.TEST_MASTER_VERSION
        assert archive.prefix == f"std@{fixtures.TEST_MASTER_VERSION}"

    def test_pseudo_version_for_other_commit(self, repo):
        """A pseudo-version must name the commit that was fetched."""
        stale = "v0.0.0-20190101000000-0123456789ab"
        repo.trees = dict(repo.trees, **{stale: repo.trees["master"]})
        with pytest.raises(NotFoundError):
            zip_stdlib(repo, stale)


class TestContentDir:
    """Directory view of an archive."""

    def test_view_strips_prefix(self, repo):
        root, resolved, commit_time = content_dir(repo, "v1.21.0")
        assert resolved == "v1.21.0"
        assert commit_time == fixtures.TEST_COMMIT_TIME
        assert (root / "errors" / "errors.go").read_text().startswith("// Package errors")
        assert sorted(p.name for p in root.iterdir() if p.is_dir()) == ["builtin", "cmd", "context", "errors"]

    def test_subdir(self, repo):
        archive = zip_stdlib(repo, "v1.21.0")
        errors = archive.content_dir("errors")
        assert sorted(p.name for p in errors.iterdir()) == ["errors.go", "errors_test.go"]

    def test_missing_subdir(self, repo):
        archive = zip_stdlib(repo, "v1.21.0")
        with pytest.raises(NotFoundError):
            archive.content_dir("net/http")


class TestAddFiles:
    """The directory walk used for both passes."""

    def test_non_recursive_pass(self, tmp_path):
        (tmp_path / "LICENSE").write_text("l")
        (tmp_path / "README.md").write_text("r")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "x.go").write_text("x")
        buf = _zip_with(lambda zf: add_files(zf, str(tmp_path), "std@v1.0.0", False, (2019, 1, 1, 0, 0, 0)))
        assert buf == ["std@v1.0.0/LICENSE"]

    def test_nested_readme_kept(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "README").write_text("r")
        buf = _zip_with(lambda zf: add_files(zf, str(tmp_path), "std@v1.0.0", True, (2019, 1, 1, 0, 0, 0)))
        assert buf == ["std@v1.0.0/a/README"]

    def test_missing_directory(self, tmp_path):
        from common.errors import ResolutionError

        with pytest.raises(ResolutionError):
            _zip_with(lambda zf: add_files(zf, str(tmp_path / "nope"), "std@v1.0.0", True, (2019, 1, 1, 0, 0, 0)))


def _zip_with(fill):
    import io

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        fill(zf)
    return zipfile.ZipFile(io.BytesIO(buf.getvalue())).namelist()

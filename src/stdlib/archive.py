"""Materialization of the standard library as a single module zip.

However the standard library is split into modules for development, it is
presented here as one module named "std". Every file lives under
"std@<version>/" in the archive; go.mod files are omitted.
"""
from __future__ import annotations

import io
import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple

from constants import Constants
from common.errors import InvalidArgumentError, NotFoundError, wrap
from common.logging_utils import extra_context, Timer
from versioning import semver
from versioning.models import LATEST
from versioning.version import is_pseudo

from .gorepo import GoRepo
from .resolver import (
    PSEUDO_BASE_VERSION,
    new_pseudo_version,
    resolve_revision,
    semantic_version,
    version_matches_hash,
)
from .tags import PSEUDO_BRANCH_PREFIX, directory, is_supported_branch

logger = logging.getLogger(__name__)

MANIFEST_FILE = "go.mod"
README_PREFIX = "README"
TESTDATA_DIR = "testdata"


@dataclass
class Archive:
    """A materialized standard library tree.

    ``zip_file`` is open for reading; entry names start with ``prefix + "/"``.
    """

    zip_file: zipfile.ZipFile
    resolved_version: str
    commit_time: datetime
    prefix: str
    data: bytes

    def names(self) -> List[str]:
        """Entry names in archive order."""
        return self.zip_file.namelist()

    def read(self, path: str) -> bytes:
        """Return the content of path, relative to the module root."""
        try:
            return self.zip_file.read(f"{self.prefix}/{path}")
        except KeyError as exc:
            raise NotFoundError(f"{path!r} not in {self.prefix}") from exc

    def content_dir(self, subdir: str = "") -> zipfile.Path:
        """Return a read-only directory view with the module prefix stripped."""
        at = f"{self.prefix}/"
        if subdir:
            at += subdir.strip("/") + "/"
        # zipfile.Path rewrites its ZipFile to list implied directories,
        # so the view gets its own reader.
        root = zipfile.Path(zipfile.ZipFile(io.BytesIO(self.data)), at=at)
        if not root.exists():
            raise NotFoundError(f"{subdir!r} not in {self.prefix}")
        return root


def add_files(zf: zipfile.ZipFile, source_dir: str, dirpath: str, recursive: bool, date_time: Tuple[int, ...]) -> None:
    """Add the files of source_dir to zf under dirpath.

    Hidden and underscore-prefixed entries and go.mod files are skipped.
    README files are skipped only at the module root, where the repository
    README and src/README.vendor would otherwise collide. Subdirectories are
    walked only when recursive is true, and testdata directories never are.
    """
    with wrap("add_files(zip, %r, %r)", dirpath, recursive):
        entries = sorted(os.scandir(source_dir), key=lambda e: e.name)
        for entry in entries:
            name = entry.name
            if name.startswith(".") or name.startswith("_"):
                continue
            if name == MANIFEST_FILE:
                continue
            if name.startswith(README_PREFIX) and "/" not in dirpath:
                continue
            if entry.is_file(follow_symlinks=False):
                _write_file(zf, f"{dirpath}/{name}", entry.path, date_time)
            elif entry.is_dir(follow_symlinks=False):
                if not recursive or name == TESTDATA_DIR:
                    continue
                add_files(zf, entry.path, f"{dirpath}/{name}", recursive, date_time)


def _write_file(zf: zipfile.ZipFile, pathname: str, src: str, date_time: Tuple[int, ...]) -> None:
    with wrap("write_zip_file(zip, %r)", pathname):
        with open(src, "rb") as fh:
            data = fh.read()
        info = zipfile.ZipInfo(pathname, date_time=date_time)
        info.compress_type = zipfile.ZIP_DEFLATED
        zf.writestr(info, data)


def _checkout_version(repo: GoRepo, requested_version: str) -> str:
    """Return the version to check out for requested_version."""
    if requested_version == LATEST:
        return semantic_version(repo, requested_version)
    if is_supported_branch(requested_version):
        return requested_version
    if requested_version.startswith(PSEUDO_BRANCH_PREFIX) and is_pseudo(requested_version):
        return requested_version
    if not semver.is_valid(requested_version):
        raise InvalidArgumentError(f"requested version is not a valid semantic version: {requested_version!r}")
    return semantic_version(repo, requested_version)


def zip_stdlib(repo: GoRepo, requested_version: str) -> Archive:
    """Check out requested_version from repo and package it as an Archive.

    LATEST is resolved to the newest release first. A supported branch
    resolves to a pseudo-version built from the checked-out commit; the
    archive prefix keeps the requested name ("std@master/...").
    """
    with wrap("stdlib.zip(%r)", requested_version):
        checkout = _checkout_version(repo, requested_version)
        buf = io.BytesIO()
        with Timer() as t, tempfile.TemporaryDirectory(prefix="stdresolve-") as tmp:
            rev = resolve_revision(repo, checkout, tmp)
            commit_time = rev.commit_time

            resolved = checkout
            if is_supported_branch(checkout):
                resolved = new_pseudo_version(PSEUDO_BASE_VERSION, commit_time, rev.hash)
            elif is_pseudo(checkout) and not version_matches_hash(checkout, rev.hash):
                raise NotFoundError(f"{checkout!r} does not match the fetched commit {rev.hash[:12]}")

            prefix = f"{Constants.STD_MODULE_PATH}@{checkout}"
            date_time = commit_time.timetuple()[:6]
            with zipfile.ZipFile(buf, "w") as zf:
                # Top-level files, then the library tree.
                add_files(zf, rev.directory, prefix, False, date_time)
                lib_dir = os.path.join(rev.directory, *directory(resolved).split("/"))
                add_files(zf, lib_dir, prefix, True, date_time)

        data = buf.getvalue()
        reader = zipfile.ZipFile(io.BytesIO(data))
        logger.info(
            "Materialized %s as %s",
            requested_version,
            resolved,
            extra=extra_context(
                event="materialize",
                component="stdlib",
                action="zip",
                outcome="success",
                files=len(reader.namelist()),
                bytes=len(data),
                duration_ms=t.duration_ms(),
            ),
        )
        return Archive(zip_file=reader, resolved_version=resolved, commit_time=commit_time, prefix=prefix, data=data)


def content_dir(repo: GoRepo, requested_version: str) -> Tuple[zipfile.Path, str, datetime]:
    """Return (directory view, resolved version, commit time) for the library.

    The view is rooted at the module, so "errors/errors.go" is a direct path.
    """
    with wrap("stdlib.content_dir(%r)", requested_version):
        archive = zip_stdlib(repo, requested_version)
        return archive.content_dir(), archive.resolved_version, archive.commit_time

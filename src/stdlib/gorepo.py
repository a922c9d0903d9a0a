"""Access to a git repository holding the Go standard library.

Three interchangeable backends implement the GoRepo contract:

- RemoteGoRepo: shallow single-ref fetches from the Go repository URL.
- LocalGoRepo: a pre-existing local clone, never modified.
- FixtureGoRepo: canned refs and trees for deterministic tests (no network,
  no git binary).

The backend in use is always passed explicitly to the resolver functions.
"""
from __future__ import annotations

import hashlib
import logging
import os
import subprocess
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from constants import Constants, RepoBackends
from common.errors import (
    InvalidArgumentError,
    NotFoundError,
    UnsupportedError,
    UpstreamError,
    wrap,
)
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.models import MASTER, Ref

from . import fixtures
from .tags import DEV_FUZZ, is_supported_branch, tag_for_version, version_for_tag

logger = logging.getLogger(__name__)


def ref_name_for_version(v: str) -> str:
    """Return the git ref to fetch for version or branch v."""
    if v == MASTER:
        return "HEAD"
    if is_supported_branch(v):
        return "refs/heads/" + v
    tag = tag_for_version(v)
    if tag == MASTER:
        # Branch-tracked pseudo-versions are served from master.
        return "HEAD"
    return "refs/tags/" + tag


def git_output_to_refs(output: str) -> List[Ref]:
    """Parse "<hash> <name>" lines from git ls-remote or git show-ref."""
    refs = []
    for line in output.strip().splitlines():
        fields = line.split()
        if len(fields) != 2:
            raise UpstreamError(
                f"invalid line in output from git ls-remote: {line!r}: should have two fields"
            )
        refs.append(Ref(hash=fields[0], name=fields[1]))
    return refs


class GoRepo:
    """Capability contract for a Go repository backend.

    Backends override what they support; the rest raises UnsupportedError.
    """

    def clone(self, version: str, directory: str) -> str:
        """Check out version into directory and return the commit hash."""
        raise UnsupportedError(f"{type(self).__name__} cannot clone")

    def refs(self) -> List[Ref]:
        """Return every ref known to the backend."""
        raise UnsupportedError(f"{type(self).__name__} cannot list refs")

    def commit_time(self, directory: str, commit: str) -> datetime:
        """Return the author time of commit in a checkout made by clone."""
        raise UnsupportedError(f"{type(self).__name__} cannot read commit times")


class RemoteGoRepo(GoRepo):
    """Fetches single refs at depth 1 from a remote repository."""

    def __init__(self, url: Optional[str] = None, *, git: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url or Constants.GO_REPO_URL
        self.git = git or Constants.GIT_BINARY
        self.timeout = Constants.GIT_TIMEOUT if timeout is None else timeout

    def _run(self, args: Sequence[str], cwd: Optional[str] = None) -> str:
        cmd = [self.git, *args]
        with Timer() as t:
            res = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        if is_debug_enabled(logger):
            logger.debug(
                "git command ok",
                extra=extra_context(
                    event="subprocess",
                    component="gorepo",
                    action=args[0],
                    outcome="success",
                    duration_ms=t.duration_ms(),
                ),
            )
        return res.stdout

    def clone(self, version: str, directory: str) -> str:
        with wrap("%s.clone(%r)", type(self).__name__, version):
            ref_name = ref_name_for_version(version)
            os.makedirs(directory, exist_ok=True)
            self._run(["init", "--quiet"], cwd=directory)
            self._run(["fetch", "-f", "--depth=1", "--", self.url, ref_name], cwd=directory)
            commit = self._run(["rev-parse", "FETCH_HEAD"], cwd=directory).strip()
            self._run(["checkout", "--quiet", "FETCH_HEAD"], cwd=directory)
            logger.info("Fetched %s (%s) at %s", version, ref_name, commit[:12])
            return commit

    def refs(self) -> List[Ref]:
        with wrap("%s.refs()", type(self).__name__):
            return git_output_to_refs(self._run(["ls-remote", "--", self.url]))

    def commit_time(self, directory: str, commit: str) -> datetime:
        with wrap("%s.commit_time(%r)", type(self).__name__, commit):
            out = self._run(
                ["show", "--no-patch", "--no-notes", "--format=%aI", commit],
                cwd=directory,
            ).strip()
            try:
                return datetime.fromisoformat(out.replace("Z", "+00:00"))
            except ValueError as exc:
                raise UpstreamError(f"parsing time output {out!r} from git show: {exc}") from exc


class LocalGoRepo(RemoteGoRepo):
    """A Go repository cloned on the local filesystem.

    Refs come from the clone's own index; checkouts fetch from it into a
    separate directory, leaving the clone untouched.
    """

    def __init__(self, path: str, *, git: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(os.path.abspath(path), git=git, timeout=timeout)
        self.path = self.url

    def refs(self) -> List[Ref]:
        with wrap("LocalGoRepo(%s).refs()", self.path):
            return git_output_to_refs(self._run(["show-ref"], cwd=self.path))


class FixtureGoRepo(GoRepo):
    """Replays canned refs and source trees.

    Passing trees=None gives a refs-only backend whose clone is unsupported.
    """

    def __init__(
        self,
        refs: Optional[Sequence[str]] = None,
        trees: Optional[Mapping[str, Mapping[str, str]]] = fixtures.TEST_TREES,
        hashes: Optional[Mapping[str, str]] = None,
        commit_time: datetime = fixtures.TEST_COMMIT_TIME,
    ):
        self.ref_names = list(fixtures.TEST_REFS if refs is None else refs)
        self.trees = trees
        self.hashes: Dict[str, str] = dict(fixtures.TEST_HASHES if hashes is None else hashes)
        self._commit_time = commit_time

    def _hash_for(self, version: str) -> str:
        if version in self.hashes:
            return self.hashes[version]
        return hashlib.sha1(f"fixture:{version}".encode("utf-8")).hexdigest()

    def clone(self, version: str, directory: str) -> str:
        with wrap("FixtureGoRepo.clone(%r)", version):
            if self.trees is None:
                raise UnsupportedError("fixture repository has no source trees")
            if version == fixtures.TEST_MASTER_VERSION:
                version = MASTER
            elif version == fixtures.TEST_DEV_FUZZ_VERSION:
                version = DEV_FUZZ
            tree = self.trees.get(version)
            if tree is None:
                raise NotFoundError(f"no fixture tree for {version!r}")
            for rel, content in tree.items():
                if rel.startswith("/") or ".." in rel.split("/"):
                    raise InvalidArgumentError(f"bad fixture path {rel!r}")
                dst = os.path.join(directory, *rel.split("/"))
                os.makedirs(os.path.dirname(dst), exist_ok=True)
                with open(dst, "w", encoding="utf-8") as fh:
                    fh.write(content)
            return self._hash_for(version)

    def refs(self) -> List[Ref]:
        refs = []
        for name in self.ref_names:
            short = name.rsplit("/", 1)[-1]
            commit = self.hashes.get(short, "")
            if not commit and name.startswith("refs/tags/"):
                commit = self.hashes.get(version_for_tag(short) or "", "")
            refs.append(Ref(hash=commit, name=name))
        return refs

    def commit_time(self, directory: str, commit: str) -> datetime:
        return self._commit_time.astimezone(timezone.utc)


def repo_from_config(backend: Optional[str] = None, path: Optional[str] = None) -> GoRepo:
    """Build the backend named by configuration."""
    backend = (backend or Constants.REPO_BACKEND).lower()
    if backend == RepoBackends.FIXTURE.value:
        return FixtureGoRepo()
    if backend == RepoBackends.LOCAL.value:
        path = path or Constants.REPO_PATH
        if not path:
            raise InvalidArgumentError("local repository backend requires a path")
        return LocalGoRepo(path)
    if backend == RepoBackends.REMOTE.value:
        return RemoteGoRepo()
    raise InvalidArgumentError(f"unknown repository backend {backend!r}")

"""Resolution of requested standard library versions against a GoRepo."""

import logging
from datetime import datetime, timezone
from typing import Dict, List

from common.errors import InvalidArgumentError, NotFoundError, wrap
from common.logging_utils import extra_context, is_debug_enabled
from versioning import semver
from versioning.models import LATEST, ResolvedRevision
from versioning.version import is_pseudo, newest_release

from .gorepo import GoRepo
from .tags import is_supported_branch, version_for_tag

logger = logging.getLogger(__name__)

PSEUDO_HASH_LEN = 12
PSEUDO_TIME_FORMAT = "%Y%m%d%H%M%S"
PSEUDO_BASE_VERSION = "v0.0.0"

_REF_PREFIXES = ("refs/tags/", "refs/heads/")


def versions(repo: GoRepo) -> List[str]:
    """Return the versions of Go known to repo.

    Tags and branches are converted with version_for_tag; refs that match no
    recognized grammar (change refs, weekly snapshots) are skipped.
    """
    with wrap("stdlib.versions()"):
        result = []
        for ref in repo.refs():
            for prefix in _REF_PREFIXES:
                if ref.name.startswith(prefix):
                    v = version_for_tag(ref.name[len(prefix):])
                    if v:
                        result.append(v)
                    break
        if is_debug_enabled(logger):
            logger.debug(
                "Listed stdlib versions",
                extra=extra_context(
                    event="decision",
                    component="stdlib",
                    action="versions",
                    count=len(result),
                ),
            )
        return result


def resolve_supported_branches(repo: GoRepo) -> Dict[str, str]:
    """Return the current hash of each supported branch present in repo."""
    with wrap("resolve_supported_branches()"):
        branches = {}
        for ref in repo.refs():
            if not ref.name.startswith("refs/heads/"):
                continue
            name = ref.name[len("refs/heads/"):]
            if is_supported_branch(name):
                branches[name] = ref.hash
        return branches


def semantic_version(repo: GoRepo, requested_version: str) -> str:
    """Return the semantic version corresponding to requested_version.

    Supported branches are returned unchanged; they become pseudo-versions
    only once checked out. LATEST resolves to the highest release version.

    Raises:
        InvalidArgumentError: requested_version is not a version or branch
        NotFoundError: no ref corresponds to requested_version
    """
    with wrap("semantic_version(%r)", requested_version):
        if is_supported_branch(requested_version):
            return requested_version
        if requested_version != LATEST and not semver.is_valid(requested_version):
            raise InvalidArgumentError(f"requested version is not a valid semantic version: {requested_version!r}")

        known = versions(repo)
        if requested_version == LATEST:
            latest = newest_release(known)
            if latest is None:
                raise NotFoundError("no release versions")
            return latest
        if requested_version in known:
            return requested_version
        raise NotFoundError(f"requested version unknown: {requested_version!r}")


def zip_info(repo: GoRepo, requested_version: str) -> str:
    """Return the resolved version for requested_version without fetching it."""
    with wrap("stdlib.zip_info(%r)", requested_version):
        return semantic_version(repo, requested_version)


def resolve_revision(repo: GoRepo, version: str, directory: str) -> ResolvedRevision:
    """Check out version (a release, branch or pseudo-version) into directory.

    The returned revision is valid for as long as directory exists.
    """
    with wrap("resolve_revision(%r)", version):
        commit = repo.clone(version, directory)
        return ResolvedRevision(
            hash=commit,
            commit_time=repo.commit_time(directory, commit),
            directory=directory,
        )


def new_pseudo_version(base: str, commit_time: datetime, commit: str) -> str:
    """Return "<base>-<yyyymmddhhmmss>-<first 12 hash chars>" in UTC."""
    if commit_time.tzinfo is not None:
        commit_time = commit_time.astimezone(timezone.utc)
    return f"{base}-{commit_time.strftime(PSEUDO_TIME_FORMAT)}-{commit[:PSEUDO_HASH_LEN]}"


def version_matches_hash(v: str, commit: str) -> bool:
    """Report whether v is a pseudo-version for the commit hash."""
    if not is_pseudo(v):
        return False
    return v[-PSEUDO_HASH_LEN:] == commit[:PSEUDO_HASH_LEN]

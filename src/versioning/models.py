"""Data models for versioning and module resolution."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

# Requested-version literals understood across the engine.
LATEST = "latest"
MASTER = "master"


class VersionType(Enum):
    """Classification of a valid semantic version."""
    RELEASE = "release"
    PRERELEASE = "prerelease"
    PSEUDO = "pseudo"


@dataclass(frozen=True)
class Ref:
    """A named point in a repository's history, as listed by the backend."""
    hash: str
    name: str  # full ref name, e.g. "refs/tags/go1.21.0"


@dataclass(frozen=True)
class ResolvedRevision:
    """A concrete revision checked out for one resolution request."""
    hash: str
    commit_time: datetime
    directory: str  # root of the checked-out tree


@dataclass
class ModuleRequest:
    """Resolution input parsed from a "module@version" token."""
    module_path: str
    requested_version: str  # concrete version, branch, tag or LATEST
    raw_token: Optional[str]


@dataclass
class ResolutionResult:
    """Resolution outcome fed to output/export."""
    module_path: str
    requested_version: str
    resolved_version: Optional[str]
    commit_time: Optional[str]
    archive: Optional[str]
    error: Optional[str]

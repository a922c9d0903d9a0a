"""Go standard library support.

However the standard library has been split into modules for development
and testing, it is treated here as a single module named "std":
- tags.py: Go release tags <-> semantic versions, library directory layout
- gorepo.py: repository backends (remote, local clone, fixture)
- resolver.py: version listing, "latest" and branch resolution, pseudo-versions
- archive.py: materializing a version as a "std@<version>/" zip
- fixtures.py: canned refs and trees for the fixture backend
"""

from .tags import (  # noqa: F401
    DEV_BORING_CRYPTO,
    DEV_FUZZ,
    SUPPORTED_BRANCHES,
    contains,
    directory,
    is_supported_branch,
    major_version_for_version,
    tag_for_version,
    version_for_tag,
)
from .gorepo import (  # noqa: F401
    FixtureGoRepo,
    GoRepo,
    LocalGoRepo,
    RemoteGoRepo,
    repo_from_config,
)
from .resolver import (  # noqa: F401
    new_pseudo_version,
    resolve_revision,
    resolve_supported_branches,
    semantic_version,
    version_matches_hash,
    versions,
    zip_info,
)
from .archive import Archive, content_dir, zip_stdlib  # noqa: F401

__all__ = [
    # Tags
    "DEV_BORING_CRYPTO",
    "DEV_FUZZ",
    "SUPPORTED_BRANCHES",
    "contains",
    "directory",
    "is_supported_branch",
    "major_version_for_version",
    "tag_for_version",
    "version_for_tag",
    # Backends
    "GoRepo",
    "RemoteGoRepo",
    "LocalGoRepo",
    "FixtureGoRepo",
    "repo_from_config",
    # Resolution
    "versions",
    "resolve_supported_branches",
    "semantic_version",
    "zip_info",
    "resolve_revision",
    "new_pseudo_version",
    "version_matches_hash",
    # Materialization
    "Archive",
    "zip_stdlib",
    "content_dir",
]

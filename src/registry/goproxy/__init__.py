"""Go module proxy package.

- client.py: HTTP interactions with a GOPROXY server
- latest.py: latest-version selection for ordinary modules
"""

from .client import ProxyClient, VersionInfo, escape_path, escape_version  # noqa: F401
from .latest import has_manifest_file, latest_module_version  # noqa: F401

__all__ = [
    "ProxyClient",
    "VersionInfo",
    "escape_path",
    "escape_version",
    "has_manifest_file",
    "latest_module_version",
]

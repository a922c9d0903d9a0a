"""Go module proxy client.

Implements the read side of the GOPROXY protocol:
    <proxy>/<module>/@v/list
    <proxy>/<module>/@v/<version>.info|.mod|.zip
    <proxy>/<module>/@latest
"""
from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from typing import List, Optional

import requests

from constants import Constants
from common.errors import InvalidArgumentError, UpstreamError, wrap
from common.http_client import get_bytes, get_json, get_text
from versioning.models import LATEST

_SUFFIXES = ("info", "mod", "zip")


@dataclass
class VersionInfo:
    """Metadata served by the .info endpoint."""
    version: str
    time: Optional[str]


def _escape(s: str, what: str) -> str:
    """Case-encode s: each upper-case letter becomes '!' plus its lower case."""
    if not s:
        raise InvalidArgumentError(f"empty {what}")
    out = []
    for c in s:
        if c == "!":
            raise InvalidArgumentError(f"invalid {what} {s!r}: contains '!'")
        if "A" <= c <= "Z":
            out.append("!" + c.lower())
        else:
            out.append(c)
    return "".join(out)


def escape_path(module_path: str) -> str:
    """Escape a module path for use in proxy URLs."""
    if module_path.startswith("/") or module_path.endswith("/") or "//" in module_path:
        raise InvalidArgumentError(f"malformed module path {module_path!r}")
    return _escape(module_path, "module path")


def escape_version(version: str) -> str:
    """Escape a version for use in proxy URLs."""
    return _escape(version, "version")


class ProxyClient:
    """Lightweight client for a Go module proxy.

    Every call makes exactly one HTTP request; 404/410 surface as NotFoundError.
    """

    def __init__(self, url: Optional[str] = None, *, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """Initialize proxy client.

        Args:
            url: Proxy base URL (defaults to Constants.PROXY_URL)
            timeout: Per-request timeout in seconds
            session: Optional requests session for connection reuse
        """
        self.url = (url or Constants.PROXY_URL).rstrip("/")
        self.timeout = timeout
        self.session = session

    def _kwargs(self):
        return {"timeout": self.timeout, "session": self.session}

    def escaped_url(self, module_path: str, version: str, suffix: str) -> str:
        """Return the proxy URL for a module version endpoint."""
        with wrap("ProxyClient.escaped_url(%r, %r, %r)", module_path, version, suffix):
            if suffix not in _SUFFIXES:
                raise InvalidArgumentError('suffix must be "info", "mod" or "zip"')
            path = escape_path(module_path)
            if version == LATEST:
                if suffix != "info":
                    raise InvalidArgumentError(f"cannot ask for latest with suffix {suffix!r}")
                return f"{self.url}/{path}/@latest"
            return f"{self.url}/{path}/@v/{escape_version(version)}.{suffix}"

    def list_versions(self, module_path: str) -> List[str]:
        """Return the versions listed by <module>/@v/list."""
        with wrap("ProxyClient.list_versions(%r)", module_path):
            url = f"{self.url}/{escape_path(module_path)}/@v/list"
            text = get_text(url, context="goproxy", **self._kwargs())
            return [line.strip() for line in text.splitlines() if line.strip()]

    def get_info(self, module_path: str, requested_version: str) -> VersionInfo:
        """Return the .info metadata; requested_version may be LATEST."""
        with wrap("ProxyClient.get_info(%r, %r)", module_path, requested_version):
            url = self.escaped_url(module_path, requested_version, "info")
            data = get_json(url, context="goproxy", **self._kwargs())
            if not isinstance(data, dict) or not data.get("Version"):
                raise UpstreamError(f"invalid .info response: {data!r}")
            return VersionInfo(version=data["Version"], time=data.get("Time"))

    def get_mod(self, module_path: str, resolved_version: str) -> bytes:
        """Return the raw go.mod served for a resolved version."""
        with wrap("ProxyClient.get_mod(%r, %r)", module_path, resolved_version):
            url = self.escaped_url(module_path, resolved_version, "mod")
            return get_bytes(url, context="goproxy", **self._kwargs())

    def get_zip(self, module_path: str, resolved_version: str) -> zipfile.ZipFile:
        """Return the module zip for a resolved version."""
        with wrap("ProxyClient.get_zip(%r, %r)", module_path, resolved_version):
            url = self.escaped_url(module_path, resolved_version, "zip")
            body = get_bytes(url, context="goproxy", **self._kwargs())
            try:
                return zipfile.ZipFile(io.BytesIO(body))
            except zipfile.BadZipFile as exc:
                raise UpstreamError(f"bad module zip: {exc}") from exc

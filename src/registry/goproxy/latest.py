"""Latest-version lookup for ordinary modules through the proxy."""
from __future__ import annotations

import logging
import zipfile
from typing import Callable, Dict, Optional

from common.errors import NotFoundError, wrap
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import LATEST
from versioning.version import latest_version

from .client import ProxyClient

logger = logging.getLogger(__name__)


def has_manifest_file(zf: zipfile.ZipFile, module_path: str, version: str) -> bool:
    """Report whether a module zip carries a go.mod at its root."""
    name = f"{module_path}@{version}/go.mod"
    return any(n == name for n in zf.namelist())


def latest_module_version(
    module_path: str,
    client: ProxyClient,
    has_manifest: Optional[Callable[[str], bool]] = None,
) -> Optional[str]:
    """Return the latest version of module_path as a module-aware tool sees it.

    The candidates are the proxy's version list plus its @latest answer.
    has_manifest should consult a source other than the proxy (e.g. a
    database) and raise NotFoundError when it cannot tell; the module zip is
    then downloaded and inspected. Returns None when the proxy knows no
    versions, which is a valid state for modules with only old
    pseudo-versions.
    """
    with wrap("latest_module_version(%r)", module_path):
        memo: Dict[str, bool] = {}

        def manifest_check(v: str) -> bool:
            if v in memo:
                return memo[v]
            result = None
            if has_manifest is not None:
                try:
                    result = has_manifest(v)
                except NotFoundError:
                    result = None
            if result is None:
                result = has_manifest_file(client.get_zip(module_path, v), module_path, v)
            memo[v] = result
            return result

        versions = client.list_versions(module_path)
        try:
            versions.append(client.get_info(module_path, LATEST).version)
        except NotFoundError:
            pass
        if not versions:
            return None

        latest = latest_version(versions, manifest_check)
        if is_debug_enabled(logger):
            logger.debug(
                "Selected latest module version",
                extra=extra_context(
                    event="decision",
                    component="goproxy",
                    action="latest_module_version",
                    module=module_path,
                    resolved_version=latest,
                    candidates=len(versions),
                ),
            )
        return latest

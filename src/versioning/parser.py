"""Token parsing utilities for module resolution requests."""

from typing import Optional, Tuple

from .models import LATEST, ModuleRequest


def tokenize_rightmost_at(s: str) -> Tuple[str, Optional[str]]:
    """Return (module path, version or None) using the rightmost-'@' rule."""
    s = s.strip()
    if "@" not in s:
        return s, None
    module_path, spec = s.rsplit("@", 1)
    module_path = module_path.strip()
    spec = spec.strip()
    return module_path, spec or None


def _normalize_module_path(module_path: str) -> str:
    """Trim trailing slashes; module paths are otherwise case-sensitive."""
    return module_path.rstrip("/")


def parse_module_token(token: str) -> ModuleRequest:
    """Parse a CLI/list token such as "std@go1.21.0" into a ModuleRequest.

    A missing version means LATEST. The version itself is kept verbatim so
    tags and branch names survive until the resolver interprets them.
    """
    module_path, spec = tokenize_rightmost_at(token)
    if not module_path:
        raise ValueError(f"missing module path in {token!r}")
    requested = spec if spec is not None else LATEST
    if requested.lower() == LATEST:
        requested = LATEST
    return ModuleRequest(
        module_path=_normalize_module_path(module_path),
        requested_version=requested,
        raw_token=token,
    )

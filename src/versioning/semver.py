"""Semantic version primitives for module versions.

Module versions carry a leading "v" and accept the "vMAJOR" and
"vMAJOR.MINOR" shorthands, which stand for "vMAJOR.0.0" and
"vMAJOR.MINOR.0". Full versions are parsed with semantic_version.
"""

import re
from typing import Optional

import semantic_version

_SHORTHAND_RE = re.compile(r"v([0-9]+)(?:\.([0-9]+))?")
# semantic_version accepts a trailing newline and non-ASCII digits.
_CHARS_RE = re.compile(r"[0-9A-Za-z.+-]+")


def _parse(v: str) -> Optional[semantic_version.Version]:
    """Return the parsed version, or None when v is not valid."""
    if not isinstance(v, str) or not v.startswith("v"):
        return None
    if _CHARS_RE.fullmatch(v[1:]) is None:
        return None
    m = _SHORTHAND_RE.fullmatch(v)
    body = f"{m.group(1)}.{m.group(2) or '0'}.0" if m else v[1:]
    try:
        return semantic_version.Version(body)
    except ValueError:
        return None


def is_valid(v: str) -> bool:
    """Report whether v is a valid semantic version."""
    return _parse(v) is not None


def canonical(v: str) -> str:
    """Return the canonical form of v ("" if invalid).

    Shorthands are expanded and build metadata is dropped:
    "v1.2" => "v1.2.0", "v1.2.3+meta" => "v1.2.3".
    """
    if _parse(v) is None:
        return ""
    m = _SHORTHAND_RE.fullmatch(v)
    if m:
        return f"v{m.group(1)}.{m.group(2) or '0'}.0"
    return v.split("+", 1)[0]


def prerelease(v: str) -> str:
    """Return the prerelease suffix of v including the "-", or ""."""
    c = canonical(v)
    i = c.find("-")
    return c[i:] if i >= 0 else ""


def build(v: str) -> str:
    """Return the build suffix of v including the "+", or ""."""
    if _parse(v) is None or _SHORTHAND_RE.fullmatch(v):
        return ""
    i = v.find("+")
    return v[i:] if i >= 0 else ""


def major(v: str) -> str:
    """Return "vMAJOR" for v, or "" if invalid."""
    c = canonical(v)
    return c.split(".", 1)[0] if c else ""


def major_minor(v: str) -> str:
    """Return "vMAJOR.MINOR" for v, or "" if invalid."""
    c = canonical(v)
    if not c:
        return ""
    parts = c.split(".")
    return f"{parts[0]}.{parts[1]}"


def compare(v: str, w: str) -> int:
    """Compare two versions by semver precedence.

    Returns -1, 0 or 1. An invalid version is less than any valid one, and two
    invalid versions compare equal. Build metadata is ignored.
    """
    pv, pw = _parse(v), _parse(w)
    if pv is None and pw is None:
        return 0
    if pv is None:
        return -1
    if pw is None:
        return 1
    return (pv > pw) - (pv < pw)

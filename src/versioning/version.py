"""Version classification, sort keys and latest-version selection."""

import re
from typing import Callable, Iterable, List, Optional

from common.errors import InvalidArgumentError
from . import semver
from .models import VersionType

INCOMPATIBLE_SUFFIX = "+incompatible"

_PSEUDO_RE = re.compile(
    r"v[0-9]+\.(0\.0-|[0-9]+\.[0-9]+-([^+]*\.)?0\.)[0-9]{14}-[A-Za-z0-9]+(\+incompatible)?"
)
_DIGITS_RE = re.compile(r"[0-9]+")


def is_pseudo(v: str) -> bool:
    """Report whether v is a pseudo-version.

    The hyphen count guards against prereleases that merely resemble the
    pseudo-version grammar.
    """
    return (
        v.count("-") >= 2
        and semver.is_valid(v)
        and _PSEUDO_RE.fullmatch(v) is not None
    )


def is_incompatible(v: str) -> bool:
    """Report whether v carries the +incompatible build suffix."""
    return v.endswith(INCOMPATIBLE_SUFFIX)


def parse_type(v: str) -> VersionType:
    """Return the VersionType of v.

    Raises:
        InvalidArgumentError: v is not a valid semantic version
    """
    if not semver.is_valid(v):
        raise InvalidArgumentError(f"parse_type({v!r}): invalid semantic version")
    if is_pseudo(v):
        return VersionType.PSEUDO
    if semver.prerelease(v):
        return VersionType.PRERELEASE
    return VersionType.RELEASE


def append_numeric_prefix(n: int) -> str:
    """Return the length prefix for a run of n digits.

    The prefix is n-1 written with 'z' for each full 26 and a final letter for
    the remainder, so single digits get no prefix and longer runs sort after
    shorter ones: 1 => "", 2 => "a", 27 => "z", 28 => "za".
    """
    n -= 1
    prefix = "z" * (n // 26)
    rem = n % 26
    if rem:
        prefix += chr(ord("a") + rem - 1)
    return prefix


def _sort_component(part: str) -> str:
    if _DIGITS_RE.fullmatch(part):
        return append_numeric_prefix(len(part)) + part
    return "~" + part


def for_sorting(version: str) -> str:
    """Return a key whose string order matches the semver order of version.

    Components are joined with ",", which sorts before every digit, letter and
    "~". Numbers get a length prefix, non-numbers a "~" prefix, build metadata
    is dropped, and a release ends in "~" so it sorts after its prereleases:

        "v1.2.3"            => "1,2,3~"
        "v12.48.301"        => "a12,a48,b301~"
        "v0.9.3-alpha.1"    => "0,9,3,~alpha,1"
    """
    parts = []
    in_prerelease = False
    start = 1  # skip the leading 'v'
    for i in range(1, len(version)):
        c = version[i]
        if c == "." or c == "+" or (c == "-" and not in_prerelease):
            parts.append(_sort_component(version[start:i]))
            if c == "+":
                break
            if c == "-":
                in_prerelease = True
            start = i + 1
    else:
        parts.append(_sort_component(version[start:]))
    key = ",".join(parts)
    if not in_prerelease:
        key += "~"
    return key


def later(v1: str, v2: str) -> bool:
    """Report whether v1 is later than v2.

    Release versions beat prereleases, which beat pseudo-versions; within a
    tier semver precedence decides.
    """
    rel1 = semver.prerelease(v1) == ""
    rel2 = semver.prerelease(v2) == ""
    if rel1 and rel2:
        return semver.compare(v1, v2) > 0
    if rel1 != rel2:
        return rel1
    pseudo1 = is_pseudo(v1)
    pseudo2 = is_pseudo(v2)
    if pseudo1 == pseudo2:
        return semver.compare(v1, v2) > 0
    return not pseudo1


def latest_of(versions: Iterable[str]) -> str:
    """Return the latest of versions according to later(), or "" if empty."""
    latest = ""
    for v in versions:
        if not latest or later(v, latest):
            latest = v
    return latest


def latest_version(versions: List[str], has_manifest: Callable[[str], bool]) -> str:
    """Return the version a module-aware tool would treat as latest.

    If the overall latest is +incompatible, the latest compatible non-pseudo
    version wins provided has_manifest reports a manifest for it. Errors
    raised by has_manifest propagate.
    """
    latest = latest_of(versions)
    if not is_incompatible(latest):
        return latest
    compatible = [v for v in versions if not is_incompatible(v) and not is_pseudo(v)]
    if not compatible:
        return latest
    latest_compatible = latest_of(compatible)
    if has_manifest(latest_compatible):
        return latest_compatible
    return latest


def remove_if(versions: Iterable[str], predicate: Callable[[str], bool]) -> List[str]:
    """Return versions without the ones for which predicate is true."""
    return [v for v in versions if not predicate(v)]


def newest_release(versions: Iterable[str]) -> Optional[str]:
    """Return the highest release version among versions, or None."""
    best: Optional[str] = None
    for v in versions:
        if not v.startswith("v"):
            continue
        if parse_type(v) != VersionType.RELEASE:
            continue
        if best is None or semver.compare(v, best) > 0:
            best = v
    return best

"""Mapping between Go release tags and semantic versions.

The standard library's repository tags releases as "go1.13", "go1.13.4",
"go1.13beta1" and so on. Pkgsite presents them as ordinary semantic versions
("v1.13.0", "v1.13.4", "v1.13.0-beta.1").
"""

import re
from typing import Optional

from common.errors import InvalidArgumentError, wrap
from versioning import semver
from versioning.models import LATEST, MASTER

# Branch name for fuzzing in beta.
DEV_FUZZ = "dev.fuzz"
# Branch name for dev.boringcrypto.
DEV_BORING_CRYPTO = "dev.boringcrypto"

# Branches of the Go repository accepted as requested versions.
SUPPORTED_BRANCHES = frozenset({MASTER, DEV_BORING_CRYPTO, DEV_FUZZ})

# Groups: 1 major.minor, 2 patch (or ""), 3 whole prerelease,
# 4 prerelease type, 5 prerelease number.
_TAG_RE = re.compile(r"go([0-9]+\.[0-9]+)(\.[0-9]+|)((beta|rc)([0-9]+))?")

# Starting with this version the first patch release of a major Go version
# is tagged with its ".0" suffix.
DOT_ZERO_TAG_VERSION = "v1.21.0"
# Versions before this keep the library under src/pkg.
SRC_DIR_VERSION = "v1.4.0-beta.1"

PSEUDO_BRANCH_PREFIX = "v0.0.0"


def is_supported_branch(name: str) -> bool:
    """Report whether name is a supported branch of the Go repository."""
    return name in SUPPORTED_BRANCHES


def version_for_tag(tag: str) -> Optional[str]:
    """Return the semantic version for a Go tag, or None.

    Examples:
        "go1"         => "v1.0.0"
        "go1.2"       => "v1.2.0"
        "go1.13beta1" => "v1.13.0-beta.1"
        "go1.9rc2"    => "v1.9.0-rc.2"
        "latest"      => "latest"
        "master"      => "master"
    """
    if tag == "go1":
        return "v1.0.0"
    if tag == "go1.0":
        return None
    if tag == LATEST or is_supported_branch(tag):
        return tag
    m = _TAG_RE.fullmatch(tag)
    if m is None:
        return None
    version = "v" + m.group(1)
    version += m.group(2) if m.group(2) else ".0"
    if m.group(3):
        # "beta10" sorts before "beta9"; the dotted form sorts correctly.
        version += f"-{m.group(4)}.{m.group(5)}"
    return version


def _final_digits_index(s: str) -> int:
    """Return the index where the run of digits ending s begins, or -1."""
    i = len(s) - 1
    while i >= 0 and "0" <= s[i] <= "9":
        i -= 1
    if i == len(s) - 1:
        return -1
    return i + 1


def tag_for_version(v: str) -> str:
    """Return the Go repository tag for semantic version v.

    Branch names pass through, any "v0.0.0..." pseudo-version maps to master
    and "v1.0.0" maps to "go1".

    Raises:
        InvalidArgumentError: v is not valid semver, or its prerelease does
            not end in ".N"
    """
    with wrap("tag_for_version(%r)", v):
        if is_supported_branch(v):
            return v
        if v.startswith(PSEUDO_BRANCH_PREFIX):
            return MASTER
        if v == "v1.0.0":
            return "go1"
        if not semver.is_valid(v):
            raise InvalidArgumentError(f"requested version is not a valid semantic version: {v!r}")
        go_version = semver.canonical(v)
        pre = semver.prerelease(go_version)
        without_pre = go_version[: len(go_version) - len(pre)]
        patch = without_pre[len(semver.major_minor(go_version)) + 1:]
        if patch == "0" and (semver.compare(v, DOT_ZERO_TAG_VERSION) < 0 or pre):
            # Prereleases never carry ".0".
            without_pre = without_pre[: -len(".0")]
        tag = "go" + without_pre[1:]
        if pre:
            i = _final_digits_index(pre)
            if i >= 1:
                if pre[i - 1] != ".":
                    raise InvalidArgumentError("final digits in a prerelease must follow a period")
                pre = pre[: i - 1] + pre[i:]
            tag += pre[1:]
        return tag


def major_version_for_version(v: str) -> str:
    """Return the Go major version for v, e.g. "v1.13.3" => "go1".

    This is the tag up to its first '.', or the whole tag when it has none.
    Master is grouped with go1.
    """
    with wrap("major_version_for_version(%r)", v):
        tag = tag_for_version(v)
        if tag == MASTER:
            return "go1"
        return tag.split(".", 1)[0]


def directory(v: str) -> str:
    """Return the library directory relative to the repository root for v."""
    if (
        semver.compare(v, SRC_DIR_VERSION) >= 0
        or is_supported_branch(v)
        or v.startswith(PSEUDO_BRANCH_PREFIX)
    ):
        return "src"
    return "src/pkg"


def contains(import_path: str) -> bool:
    """Report whether import_path could belong to the standard library.

    True when the first path element lacks a '.'.
    """
    first = import_path.split("/", 1)[0]
    return "." not in first

"""Canned Go repository data replayed by FixtureGoRepo.

Trees are keyed by the version string passed to ``clone`` (a semantic
version or a branch name) and map repository-relative paths to contents.
"""

from datetime import datetime, timezone
from typing import Dict

from versioning.models import MASTER

from .tags import DEV_FUZZ

# Commit time used for every fixture revision.
TEST_COMMIT_TIME = datetime(2019, 9, 4, 1, 2, 3, tzinfo=timezone.utc)

TEST_MASTER_HASH = "89fb59e2e920b8c2d5d1a3e6f7091a2b3c4d5e6f"
TEST_DEV_FUZZ_HASH = "12de34af56cb7a8b9c0d1e2f3a4b5c6d7e8f9a0b"
TEST_MASTER_VERSION = "v0.0.0-20190904010203-89fb59e2e920"
TEST_DEV_FUZZ_VERSION = "v0.0.0-20190904010203-12de34af56cb"

# Refs listed by the fixture backend, in ls-remote order.
TEST_REFS = [
    # stdlib versions
    "refs/tags/go1.2.1",
    "refs/tags/go1.3.2",
    "refs/tags/go1.4.2",
    "refs/tags/go1.4.3",
    "refs/tags/go1.6",
    "refs/tags/go1.6.3",
    "refs/tags/go1.6beta1",
    "refs/tags/go1.8",
    "refs/tags/go1.8rc2",
    "refs/tags/go1.9rc1",
    "refs/tags/go1.11",
    "refs/tags/go1.12",
    "refs/tags/go1.12.1",
    "refs/tags/go1.12.5",
    "refs/tags/go1.12.9",
    "refs/tags/go1.13",
    "refs/tags/go1.13beta1",
    "refs/tags/go1.14.6",
    "refs/tags/go1.21.0",
    "refs/heads/dev.fuzz",
    "refs/heads/master",
    # other refs
    "refs/changes/56/93156/13",
    "refs/tags/release.r59",
    "refs/tags/weekly.2011-04-13",
]

TEST_HASHES = {
    MASTER: TEST_MASTER_HASH,
    DEV_FUZZ: TEST_DEV_FUZZ_HASH,
    "v1.3.2": "3e5ad8e3bbb0a1f2c3d4e5f60718293a4b5c6d7e",
    "v1.12.5": "a7c4b1e0d9f8e7d6c5b4a3928170f6e5d4c3b2a1",
    "v1.14.6": "c9f1d2e3a4b5c6d7e8f90a1b2c3d4e5f6a7b8c9d",
    "v1.21.0": "f0e1d2c3b4a5968778695a4b3c2d1e0f1a2b3c4d",
}

_LICENSE = "Copyright (c) 2009 The Go Authors. All rights reserved.\n"
_ROOT_README = "# The Go Programming Language\n"

_ERRORS_GO = """// Package errors implements functions to manipulate errors.
package errors

// New returns an error that formats as the given text.
func New(text string) error {
	return &errorString{text}
}

type errorString struct {
	s string
}

func (e *errorString) Error() string {
	return e.s
}
"""

_ERRORS_TEST_GO = """package errors_test

import "testing"

func TestNew(t *testing.T) {}
"""


def _modern_tree(go_version: str) -> Dict[str, str]:
    return {
        "README.md": _ROOT_README,
        "LICENSE": _LICENSE,
        "CONTRIBUTING.md": "# Contributing to Go\n",
        "VERSION": go_version + "\n",
        ".gitignore": "bin/\n",
        "api/go1.txt": "pkg errors, func New(string) error\n",
        "src/README.vendor": "Vendoring in std and cmd\n",
        "src/go.mod": "module std\n",
        "src/errors/errors.go": _ERRORS_GO,
        "src/errors/errors_test.go": _ERRORS_TEST_GO,
        "src/errors/testdata/golden.txt": "golden\n",
        "src/builtin/builtin.go": "// Package builtin documents predeclared identifiers.\npackage builtin\n",
        "src/cmd/README.vendor": "See src/README.vendor\n",
        "src/cmd/go.mod": "module cmd\n",
        "src/cmd/go/main.go": "package main\n",
        "src/context/context.go": "// Package context defines the Context type.\npackage context\n",
        "src/_obsolete/old.go": "package old\n",
        "src/.hidden/ignored.go": "package hidden\n",
    }


def _legacy_tree(go_version: str) -> Dict[str, str]:
    return {
        "README": "This is the source code repository for the Go programming language.\n",
        "LICENSE": _LICENSE,
        "VERSION": go_version + "\n",
        "src/Make.dist": "include ../Make.inc\n",
        "src/pkg/errors/errors.go": _ERRORS_GO,
        "src/pkg/errors/errors_test.go": _ERRORS_TEST_GO,
        "src/pkg/fmt/print.go": "// Package fmt implements formatted I/O.\npackage fmt\n",
    }


def _dev_fuzz_tree() -> Dict[str, str]:
    tree = _modern_tree("devel +12de34af56 dev.fuzz")
    tree["src/testing/fuzz.go"] = "package testing\n\n// F is a type passed to fuzz tests.\ntype F struct{}\n"
    return tree


TEST_TREES = {
    MASTER: _modern_tree("devel +89fb59e2e9"),
    DEV_FUZZ: _dev_fuzz_tree(),
    "v1.3.2": _legacy_tree("go1.3.2"),
    "v1.12.5": _modern_tree("go1.12.5"),
    "v1.14.6": _modern_tree("go1.14.6"),
    "v1.21.0": _modern_tree("go1.21.0"),
}

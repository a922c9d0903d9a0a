"""Tests for error categories and call-trace wrapping."""

import subprocess

import pytest

from common.errors import (
    InvalidArgumentError,
    NotFoundError,
    ResolutionError,
    UnsupportedError,
    UpstreamError,
    http_status,
    wrap,
)


def _inner():
    with wrap("inner(%r)", "x"):
        raise NotFoundError("no such thing")


def _outer():
    with wrap("outer(%d)", 1):
        _inner()


class TestWrap:
    """Error annotation."""

    def test_frames_read_as_call_trace(self):
        with pytest.raises(NotFoundError) as exc:
            _outer()
        assert str(exc.value) == "outer(1): inner('x'): no such thing"
        assert exc.value.frames == ["outer(1)", "inner('x')"]
        assert exc.value.message == "no such thing"

    def test_same_object_is_reraised(self):
        err = InvalidArgumentError("bad")
        with pytest.raises(InvalidArgumentError) as exc:
            with wrap("f()"):
                raise err
        assert exc.value is err

    def test_called_process_error(self):
        with pytest.raises(UpstreamError) as exc:
            with wrap("run()"):
                raise subprocess.CalledProcessError(1, ["git", "ls-remote"], stderr=b"boom\n")
        assert exc.value.command == "git ls-remote"
        assert exc.value.stderr == "boom"
        assert isinstance(exc.value.__cause__, subprocess.CalledProcessError)
        assert str(exc.value) == "run(): exit status 1: boom"

    def test_upstream_message_without_stderr(self):
        err = UpstreamError("exit status 2", command="git fetch")
        assert str(err) == "exit status 2"

    def test_os_error(self):
        with pytest.raises(ResolutionError) as exc:
            with wrap("open()"):
                raise FileNotFoundError("missing")
        assert type(exc.value) is ResolutionError
        assert isinstance(exc.value.__cause__, FileNotFoundError)

    def test_other_exceptions_untouched(self):
        with pytest.raises(KeyError):
            with wrap("f()"):
                raise KeyError("k")


class TestHttpStatus:
    """Status mapping for collaborators."""

    @pytest.mark.parametrize("exc,want", [
        (InvalidArgumentError("x"), 400),
        (NotFoundError("x"), 404),
        (UnsupportedError("x"), 501),
        (UpstreamError("x"), 502),
        (ResolutionError("x"), 500),
        (ValueError("x"), 500),
    ])
    def test_status(self, exc, want):
        assert http_status(exc) == want

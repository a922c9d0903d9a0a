"""Error categories surfaced to callers of the resolution engine.

Each category maps onto the status a collaborator renders (see
:func:`http_status`). Functions annotate errors passing through them with
their own call signature via :func:`wrap`, so ``str(err)`` reads as a call
trace: ``zip_stdlib('v9.9.9'): semantic_version('v9.9.9'): ...``.
"""
from __future__ import annotations

import subprocess
from contextlib import contextmanager
from typing import Iterator, List, Optional


class ResolutionError(Exception):
    """Base class for all errors raised by this package."""

    status = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.frames: List[str] = []

    def add_frame(self, frame: str) -> None:
        """Record an enclosing call; outermost frames come first."""
        self.frames.insert(0, frame)

    def __str__(self) -> str:
        return ": ".join(self.frames + [self.message])


class InvalidArgumentError(ResolutionError):
    """Malformed version string or prerelease encoding."""

    status = 400


class NotFoundError(ResolutionError):
    """No revision for the requested version, or missing path."""

    status = 404


class UnsupportedError(ResolutionError):
    """Operation not implemented by the selected backend."""

    status = 501


class UpstreamError(ResolutionError):
    """Network or process failure talking to source control or the proxy."""

    status = 502

    def __init__(self, message: str = "", command: Optional[str] = None, stderr: Optional[str] = None) -> None:
        super().__init__(message)
        self.command = command
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr:
            text += f": {self.stderr}"
        return text


def http_status(exc: BaseException) -> int:
    """Return the HTTP-equivalent status for exc."""
    if isinstance(exc, ResolutionError):
        return exc.status
    return 500


@contextmanager
def wrap(fmt: str, *args: object) -> Iterator[None]:
    """Annotate errors leaving the block with ``fmt % args``.

    ResolutionErrors are re-raised as the same object with one more frame.
    Subprocess and OS failures are converted to ResolutionErrors chained to
    the original. Anything else propagates untouched.
    """
    try:
        yield
    except ResolutionError as exc:
        exc.add_frame(fmt % args)
        raise
    except subprocess.TimeoutExpired as exc:
        err = UpstreamError(f"timed out after {exc.timeout}s", command=_command(exc.cmd))
        err.add_frame(fmt % args)
        raise err from exc
    except subprocess.CalledProcessError as exc:
        err = UpstreamError(
            f"exit status {exc.returncode}",
            command=_command(exc.cmd),
            stderr=_text(exc.stderr),
        )
        err.add_frame(fmt % args)
        raise err from exc
    except OSError as exc:
        err = ResolutionError(str(exc))
        err.add_frame(fmt % args)
        raise err from exc


def _command(cmd: object) -> str:
    if isinstance(cmd, (list, tuple)):
        return " ".join(str(c) for c in cmd)
    return str(cmd)


def _text(data: object) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace").strip()
    return str(data).strip()

"""Centralized logging helpers.

Every module obtains its logger with ``logging.getLogger(__name__)`` and
attaches structured fields through ``extra=extra_context(...)``. The root
handler is installed once by :func:`configure_logging`.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "password", "secret", "auth", "key")
_REDACTED = "[REDACTED]"


class _ContextFormatter(logging.Formatter):
    """Formatter that appends structured context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        ctx = getattr(record, "context", None)
        if not ctx:
            return base
        fields = " ".join(f"{k}={v}" for k, v in ctx.items())
        return f"{base} {fields}"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler; safe to call more than once."""
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level_value)
    for handler in root.handlers:
        if getattr(handler, "_stdresolve", False):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    handler._stdresolve = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call.

    None values are dropped; sensitive keys are redacted.
    """
    ctx = {}
    for key, value in fields.items():
        if value is None:
            continue
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            value = _REDACTED
        ctx[key] = value
    return {"context": ctx}


def redact(text: str) -> str:
    """Redact obvious credentials in free text."""
    return re.sub(
        r"(?i)((?:token|password|secret)=)[^&\s]+",
        lambda m: m.group(1) + _REDACTED,
        text,
    )


def safe_url(url: str) -> str:
    """Return url with userinfo and credential-like query values redacted."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = _REDACTED + "@" + netloc.rsplit("@", 1)[1]
    return redact(urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment)))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, live while inside the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)

"""Shared HTTP helpers used by the module proxy client.

Encapsulates request/timeout error handling so callers avoid duplicating
try/except blocks. Requests are made exactly once; retry policy belongs to the
caller. 404 and 410 responses surface as NotFoundError, every other failure as
UpstreamError.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from constants import Constants
from common.errors import NotFoundError, UpstreamError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def get_bytes(
    url: str,
    *,
    context: str,
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> bytes:
    """Perform a GET request and return the body with DEBUG traces.

    Args:
        url: Target URL
        context: Human-readable source tag for logs (e.g., "goproxy")
        timeout: Seconds before the request is abandoned
        headers: Optional request headers
        session: Optional requests session (defaults to module-level requests)

    Returns:
        Response body bytes for a 2xx response
    """
    safe_target = safe_url(url)
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    getter = session.get if session is not None else requests.get
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = getter(url, timeout=timeout, headers=headers)
        except requests.Timeout as exc:
            logger.error("%s request timed out after %s seconds", context, timeout)
            raise UpstreamError(f"GET {safe_target}: timed out after {timeout}s") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise UpstreamError(f"GET {safe_target}: {exc}") from exc

    status = res.status_code
    if 200 <= status < 300:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return res.content

    body = res.text.strip()
    if status in (404, 410):
        logger.debug(
            "HTTP not found",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="not_found",
                status_code=status,
                target=safe_target,
                context=context,
            ),
        )
        raise NotFoundError(f"GET {safe_target}: {status}: {body!r}")

    logger.warning(
        "HTTP non-2xx",
        extra=extra_context(
            event="http_response",
            component="http_client",
            action="GET",
            outcome="unexpected_status",
            status_code=status,
            duration_ms=t.duration_ms(),
            target=safe_target,
            context=context,
        ),
    )
    raise UpstreamError(f"GET {safe_target}: unexpected status {status}: {body!r}")


def get_text(url: str, *, context: str, **kwargs: Any) -> str:
    """GET url and decode the body as UTF-8."""
    return get_bytes(url, context=context, **kwargs).decode("utf-8")


def get_json(url: str, *, context: str, **kwargs: Any) -> Any:
    """GET url and parse the body as JSON.

    Raises:
        UpstreamError: the body is not valid JSON
    """
    text = get_text(url, context=context, **kwargs)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    target=safe_url(url),
                ),
            )
        raise UpstreamError(f"GET {safe_url(url)}: invalid JSON: {exc}") from exc

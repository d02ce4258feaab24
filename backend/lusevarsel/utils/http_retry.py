"""Shared async HTTP retry utility with status-code filtering.

Retries only on transient server errors and rate limits. Never retries
client errors (401, 403, 404, 422) which indicate auth/config problems.
Attempts are strictly sequential, so a caller never has more than one request
in flight per source.

Usage:
    from lusevarsel.utils.http_retry import retry_request

    resp = await retry_request(client.get, url, headers=headers)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

# Status codes safe to retry (transient server issues)
_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# Exceptions that indicate transient network issues
_RETRYABLE_EXCEPTIONS = (httpx.ConnectError, httpx.TimeoutException, OSError)

# Default backoff delays in seconds
DEFAULT_DELAYS: list[float] = [1, 3]


async def retry_request(
    request_fn: Callable[..., Awaitable[httpx.Response]],
    *args: Any,
    delays: list[float] | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Await an httpx request coroutine with automatic retry on transient failures.

    Args:
        request_fn: Bound async method like ``client.get``.
        *args: Positional args forwarded to request_fn (typically the URL).
        delays: List of backoff delays in seconds. Default [1, 3].
        **kwargs: Keyword args forwarded to request_fn (headers, params, etc.).

    Returns:
        httpx.Response on success.

    Raises:
        httpx.HTTPStatusError: On non-retryable HTTP errors (4xx except 429),
            or on a retryable status once retries are exhausted.
        httpx.ConnectError / httpx.TimeoutException: After all retries exhausted.
    """
    if delays is None:
        delays = DEFAULT_DELAYS

    for attempt in range(1 + len(delays)):
        try:
            resp = await request_fn(*args, **kwargs)
        except _RETRYABLE_EXCEPTIONS as exc:
            if attempt >= len(delays):
                raise
            delay = delays[attempt]
            logger.warning(
                "%s for %s — retrying in %.0fs (attempt %d/%d)",
                type(exc).__name__,
                _url_for_log(args),
                delay,
                attempt + 1,
                len(delays),
            )
            await asyncio.sleep(delay)
            continue

        if resp.status_code < 400:
            return resp

        if resp.status_code not in _RETRYABLE_STATUS_CODES or attempt >= len(delays):
            resp.raise_for_status()

        # Parse Retry-After for 429 responses
        delay = delays[attempt]
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    delay = max(delay, float(retry_after))
                except (ValueError, TypeError):
                    pass

        logger.warning(
            "HTTP %d from %s — retrying in %.0fs (attempt %d/%d)",
            resp.status_code,
            _url_for_log(args),
            delay,
            attempt + 1,
            len(delays),
        )
        await asyncio.sleep(delay)

    # Only reachable with a non-raising 4xx/5xx mock
    raise RuntimeError("retry_request exhausted retries without result")


def _url_for_log(args: tuple) -> str:
    """Extract a loggable URL from request args."""
    if args and isinstance(args[0], (str, httpx.URL)):
        return str(args[0])[:120]
    return "<unknown>"

"""Site feed client — fish health locality data (BarentsWatch).

Returns raw locality records; mapping and position correction happen in
``normalize.build_sites``. Accepts both a bare JSON array and a paginated
object with the records under ``items`` or ``data``.

Reference: https://www.barentswatch.no/en/about/open-data-via-barentswatch/
"""
from __future__ import annotations

import logging

import httpx

from lusevarsel.config import settings
from lusevarsel.modules.normalize import unwrap_records
from lusevarsel.utils.http_retry import retry_request

logger = logging.getLogger(__name__)


def _auth_headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def fetch_site_records(
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
    token: str | None = None,
) -> list[dict]:
    """Fetch raw site records from the locality feed.

    Args:
        client: Shared AsyncClient; a short-lived one is created if omitted.
        url: Feed URL (default settings.SITES_FEED_URL).
        token: Bearer token (default settings.FEED_API_TOKEN).

    Raises:
        httpx.HTTPError: network failure or non-success status.
        ValueError: payload is not JSON, has no record list, or is empty.
    """
    url = url or settings.SITES_FEED_URL
    headers = _auth_headers(token or settings.FEED_API_TOKEN)

    if client is None:
        async with httpx.AsyncClient(timeout=settings.FEED_TIMEOUT, follow_redirects=True) as own_client:
            return await fetch_site_records(own_client, url=url, token=token)

    resp = await retry_request(client.get, url, headers=headers, delays=settings.FEED_RETRY_DELAYS)
    records = unwrap_records(resp.json())
    if not records:
        raise ValueError(f"Empty site payload from {url}")

    logger.info("Site feed: received %d records", len(records))
    return records

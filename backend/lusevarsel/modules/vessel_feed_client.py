"""Vessel feed client — latest AIS positions (Kystverket / BarentsWatch live AIS).

Returns raw position records; ``normalize.build_vessels`` maps them and infers
the vessel type from the free-text ship type.

Reference: https://www.kystverket.no/en/navigation-and-monitoring/ais/access-to-ais-data/
"""
from __future__ import annotations

import logging

import httpx

from lusevarsel.config import settings
from lusevarsel.modules.normalize import unwrap_records
from lusevarsel.modules.site_feed_client import _auth_headers
from lusevarsel.utils.http_retry import retry_request

logger = logging.getLogger(__name__)


async def fetch_vessel_records(
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
    token: str | None = None,
) -> list[dict]:
    """Fetch raw vessel position records.

    Raises:
        httpx.HTTPError: network failure or non-success status.
        ValueError: payload is not JSON, has no record list, or is empty.
    """
    url = url or settings.VESSELS_FEED_URL
    headers = _auth_headers(token or settings.FEED_API_TOKEN)

    if client is None:
        async with httpx.AsyncClient(timeout=settings.FEED_TIMEOUT, follow_redirects=True) as own_client:
            return await fetch_vessel_records(own_client, url=url, token=token)

    resp = await retry_request(client.get, url, headers=headers, delays=settings.FEED_RETRY_DELAYS)
    records = unwrap_records(resp.json())
    if not records:
        raise ValueError(f"Empty vessel payload from {url}")

    logger.info("Vessel feed: received %d records", len(records))
    return records

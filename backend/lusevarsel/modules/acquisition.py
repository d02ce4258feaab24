"""Acquisition layer — sites and vessels with cache and fallback.

Per ``acquire_sites()`` call:

  check cache ──fresh──────────────────────────────► return cached
      │ stale / absent
      ▼
  live fetch ──ok──► correct + sort + store ───────► return fresh
      │ failed (network, status, empty payload)
      ▼
  stale cache ──hit────────────────────────────────► return stale
      │ miss
      ▼
  synthetic dataset (never cached) ────────────────► return synthetic

``acquire_vessels()`` has no cache tier: live fetch, else synthetic.

Neither method raises: every ``Exception`` from the feeds is logged and masked
behind the next fallback. Cancellation still propagates, and the cache is only
written after a fetch has fully succeeded.
"""
from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from lusevarsel.config import settings
from lusevarsel.modules import synthetic_data
from lusevarsel.modules.normalize import build_sites, build_vessels
from lusevarsel.modules.position_corrector import PositionCorrector
from lusevarsel.modules.risk_scoring import sort_by_current_score
from lusevarsel.modules.risk_zones import in_risk_zone
from lusevarsel.modules.site_cache import CacheEntry, CacheStore, SiteCache
from lusevarsel.modules.site_feed_client import fetch_site_records
from lusevarsel.modules.vessel_feed_client import fetch_vessel_records
from lusevarsel.schemas.site import Site
from lusevarsel.schemas.vessel import Vessel

logger = logging.getLogger(__name__)

RecordFetcher = Callable[[], Awaitable[list[dict]]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SiteAcquirer:
    """Owns the fallback chain for one cache store.

    Args:
        store: Cache backend (``MemoryCacheStore`` in tests, ``SqlCacheStore`` in the app).
        site_fetcher / vessel_fetcher: Coroutines returning raw feed records.
        corrector: Position corrector applied to every site record.
        clock: Returns the current UTC time.
        ttl: Maximum age of a fresh cache entry.
        rng: Random source the synthetic fallbacks are seeded from. Sites and
            vessels each get their own generator, so one path falling back never
            shifts the other's data.
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        site_fetcher: RecordFetcher = fetch_site_records,
        vessel_fetcher: RecordFetcher = fetch_vessel_records,
        corrector: PositionCorrector | None = None,
        clock: Callable[[], datetime] = _utc_now,
        ttl: timedelta | None = None,
        cache_key: str | None = None,
        rng: random.Random | None = None,
        zone_check: Callable[[float, float], bool] | None = in_risk_zone,
    ) -> None:
        self.cache = SiteCache(store, cache_key or settings.SITE_CACHE_KEY)
        self.site_fetcher = site_fetcher
        self.vessel_fetcher = vessel_fetcher
        self.corrector = corrector or PositionCorrector(settings.CORRECTOR_SEED)
        self.clock = clock
        self.ttl = ttl if ttl is not None else timedelta(seconds=settings.SITE_CACHE_TTL_SECONDS)
        rng = rng or random.Random()
        self.site_rng = random.Random(rng.getrandbits(64))
        self.vessel_rng = random.Random(rng.getrandbits(64))
        self.zone_check = zone_check

    async def acquire_sites(self) -> list[Site]:
        entry = await self._read_cache()
        if entry is not None and not entry.is_stale(self.clock(), self.ttl):
            logger.debug("Site cache fresh (age %s) — skipping fetch", entry.age(self.clock()))
            return entry.sites

        try:
            records = await self.site_fetcher()
            sites = build_sites(records, self.corrector)
            if not sites:
                raise ValueError("Site feed returned no usable records")
        except Exception as exc:
            logger.warning("Site fetch failed: %s", exc)
            if entry is not None:
                logger.warning(
                    "Serving stale site cache (%d sites, fetched %s)",
                    len(entry.sites), entry.fetched_at.isoformat(),
                )
                return entry.sites
            logger.warning("No site cache available — serving synthetic dataset")
            return self._synthetic_sites()

        sites = sort_by_current_score(sites)
        await self._write_cache(sites, self.clock())
        logger.info("Site feed refreshed: %d sites cached", len(sites))
        return sites

    async def acquire_vessels(self) -> list[Vessel]:
        try:
            records = await self.vessel_fetcher()
            vessels = build_vessels(records, self.zone_check)
            if not vessels:
                raise ValueError("Vessel feed returned no usable records")
        except Exception as exc:
            logger.warning("Vessel fetch failed: %s — serving synthetic vessels", exc)
            return synthetic_data.generate_vessels(settings.SYNTHETIC_VESSEL_COUNT, self.vessel_rng)

        logger.info("Vessel feed refreshed: %d vessels", len(vessels))
        return vessels

    async def acquire_all(self) -> tuple[list[Site], list[Vessel]]:
        """Run both acquisitions concurrently; they share no mutable state."""
        sites, vessels = await asyncio.gather(self.acquire_sites(), self.acquire_vessels())
        return sites, vessels

    async def _read_cache(self) -> CacheEntry | None:
        """Read the slot off the event loop. Any store failure counts as a miss."""
        try:
            return await asyncio.to_thread(self.cache.read)
        except Exception as exc:
            logger.warning("Site cache unavailable: %s", exc)
            return None

    async def _write_cache(self, sites: list[Site], fetched_at: datetime) -> None:
        try:
            await asyncio.to_thread(self.cache.write, sites, fetched_at)
        except Exception as exc:
            logger.warning("Site cache write failed: %s", exc)

    def _synthetic_sites(self) -> list[Site]:
        sites = synthetic_data.generate_sites(settings.SYNTHETIC_SITE_COUNT, self.site_rng, self.corrector)
        return sort_by_current_score(sites)

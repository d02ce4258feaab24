"""Site cache — one time-boxed slot holding the last good site collection.

The slot is a single serialized blob ``{"data": [...], "timestamp": ...}`` under
a fixed key. An entry past its TTL is stale, not gone: it is still returned as
a last resort when the live feed fails. Nothing here ever deletes an entry;
a successful fetch simply overwrites it.

Reads and writes are not atomic. Two overlapping refreshes both write a
complete, valid snapshot and the last writer wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lusevarsel.models.cache_slot import CacheSlot
from lusevarsel.schemas.site import CacheEnvelope, Site

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Key-value blob storage backing the cache."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryCacheStore:
    """In-process store. Counts reads and writes so tests can assert on them."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self.reads = 0
        self.writes = 0

    def get(self, key: str) -> str | None:
        self.reads += 1
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self._data[key] = value


class SqlCacheStore:
    """Store backed by the ``cache_slots`` table, one row per key."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        db = self._session_factory()
        try:
            slot = db.get(CacheSlot, key)
            return slot.payload if slot is not None else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self._session_factory()
        try:
            slot = db.get(CacheSlot, key)
            if slot is None:
                db.add(CacheSlot(cache_key=key, payload=value))
            else:
                slot.payload = value
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()


@dataclass(frozen=True)
class CacheEntry:
    sites: list[Site]
    fetched_at: datetime

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_stale(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) >= ttl


class SiteCache:
    """Typed view over a ``CacheStore`` slot."""

    def __init__(self, store: CacheStore, key: str) -> None:
        self.store = store
        self.key = key

    def read(self) -> CacheEntry | None:
        """Return the stored entry, or None if absent or unreadable."""
        try:
            blob = self.store.get(self.key)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Cache read failed for %s: %s", self.key, exc)
            return None
        if blob is None:
            return None
        try:
            envelope = CacheEnvelope.model_validate_json(blob)
        except (ValidationError, ValueError) as exc:
            logger.warning("Discarding unreadable cache entry %s: %s", self.key, exc)
            return None
        fetched_at = envelope.timestamp
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return CacheEntry(sites=list(envelope.data), fetched_at=fetched_at)

    def write(self, sites: list[Site], fetched_at: datetime) -> bool:
        """Overwrite the slot. Returns False (and logs) if the store refused."""
        blob = CacheEnvelope(data=sites, timestamp=fetched_at).model_dump_json()
        try:
            self.store.set(self.key, blob)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Cache write failed for %s: %s", self.key, exc)
            return False
        return True

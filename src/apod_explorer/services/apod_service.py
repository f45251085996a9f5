"""Fetch-and-cache service for APOD records.

This service owns the record store and the rate-limit snapshot, and
coordinates them with the upstream source. One instance is created per
application (see api.dependencies) so tests can build isolated ones.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from apod_explorer.entities import ApodRecord, RateLimitSnapshot
from apod_explorer.protocols import ApodSource, RecordStore
from apod_explorer.repositories import create_record_store
from apod_explorer.utils import today_utc

logger = logging.getLogger(__name__)


class ApodService:
    """Core fetch/cache orchestration service.

    Behaviour of ``fetch``:
    1. Resolve the cache key (requested date, or today's UTC date)
    2. Return the stored record on a hit, with no outbound call
    3. On a miss, join an in-flight request for the same key if one exists
    4. Otherwise call the upstream once, update the rate-limit snapshot,
       and store the record under the provider's date and the requested key

    Upstream failures propagate as ApodFetchError; nothing is retried and
    nothing is cached.

    Example:
        ```python
        service = ApodService(source=NasaApodClient.create(api_key=key),
                              store=InMemoryRecordStore())
        record = await service.fetch("2024-01-01")
        print(service.rate_limit.remaining)
        ```
    """

    def __init__(
        self,
        source: ApodSource,
        store: RecordStore,
        rate_limit: RateLimitSnapshot | None = None,
        today: Callable[[], date] = today_utc,
    ) -> None:
        """Initialize the service.

        Args:
            source: Upstream APOD provider (required).
            store: Record cache (required).
            rate_limit: Initial snapshot. Defaults to the provider's advertised 1000/1000.
            today: Clock returning today's date, used for the default key.
        """
        self._source = source
        self._store = store
        self._rate_limit = rate_limit or RateLimitSnapshot()
        self._today = today
        self._in_flight: dict[str, asyncio.Future[ApodRecord]] = {}
        self._hits = 0
        self._misses = 0
        self._upstream_calls = 0

    @classmethod
    def create(
        cls,
        source: ApodSource,
        max_entries: int = 0,
    ) -> "ApodService":
        """Factory method wiring the record store from a size bound.

        Args:
            source: Upstream APOD provider (required).
            max_entries: 0 for an unbounded store, else an LRU bound.

        Returns:
            Configured ApodService instance
        """
        return cls(source=source, store=create_record_store(max_entries))

    async def fetch(self, date_key: str | None = None) -> ApodRecord:
        """Return the APOD record for a date, from cache when possible.

        Args:
            date_key: ISO date (YYYY-MM-DD); None means today (UTC)

        Returns:
            The cached or freshly fetched record. Repeated calls for a
            cached key return the same object.

        Raises:
            ApodFetchError: If the upstream call fails
        """
        key = date_key or self._today().isoformat()

        cached = self._store.get(key)
        if cached is not None:
            self._hits += 1
            logger.info("Cache hit for %s", key)
            return cached

        self._misses += 1
        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("Joining in-flight request for %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._load(key, date_key))
        self._in_flight[key] = task
        task.add_done_callback(lambda done, k=key: self._forget(k, done))
        # shield: a cancelled caller must not cancel the request other callers share
        return await asyncio.shield(task)

    async def _load(self, key: str, requested: str | None) -> ApodRecord:
        logger.info(
            "Fetching APOD from NASA for %s (last known remaining: %d)",
            key,
            self._rate_limit.remaining,
        )
        self._upstream_calls += 1
        response = await self._source.fetch(requested)

        if self._rate_limit.update_from_headers(response.headers):
            logger.info(
                "Rate limit updated from headers - remaining: %d/%d",
                self._rate_limit.remaining,
                self._rate_limit.limit,
            )

        record = ApodRecord.from_payload(response.payload, fallback_date=key)
        self._store.put(record.date, record)
        if record.date != key:
            # Provider's "today" can differ from ours; keep both keys hitting
            logger.info("Provider reported %s for requested key %s", record.date, key)
            self._store.put(key, record)

        logger.info("Fetched APOD for %s: %s", key, record.title)
        return record

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    @property
    def rate_limit(self) -> RateLimitSnapshot:
        """Get the last-known upstream quota."""
        return self._rate_limit

    @property
    def store(self) -> RecordStore:
        """Get the underlying record store (for testing)."""
        return self._store

    @property
    def source(self) -> ApodSource:
        """Get the underlying upstream source (for testing)."""
        return self._source

    def cached_dates(self) -> list[str]:
        """Return cached date keys, sorted."""
        return sorted(self._store.keys())

    def stats(self) -> dict[str, Any]:
        """Get cache and upstream statistics.

        Returns:
            Dictionary with entry count, hit/miss counters and the rate-limit snapshot
        """
        return {
            "total_entries": len(self._store),
            "cache_hits": self._hits,
            "cache_misses": self._misses,
            "upstream_calls": self._upstream_calls,
            "in_flight": len(self._in_flight),
            "rate_limit": self._rate_limit.to_dict(),
        }

    async def close(self) -> None:
        """Release the upstream client."""
        await self._source.aclose()

"""
Tests for the fetch-and-cache service.
"""

import asyncio
from datetime import date

import pytest

from apod_explorer.errors import ApodFetchError, FetchErrorKind
from apod_explorer.repositories import InMemoryRecordStore, LRURecordStore
from apod_explorer.services import ApodService

from conftest import FakeSource, apod_payload


def make_service(source, today=date(2024, 1, 2), store=None):
    return ApodService(source=source, store=store or InMemoryRecordStore(), today=lambda: today)


def test_cache_hit_returns_same_object_without_upstream_call():
    source = FakeSource()
    service = make_service(source)

    first = asyncio.run(service.fetch("2000-01-01"))
    second = asyncio.run(service.fetch("2000-01-01"))

    assert first is second
    assert source.calls == ["2000-01-01"]
    assert service.stats()["cache_hits"] == 1
    assert service.stats()["upstream_calls"] == 1


def test_today_omits_date_parameter_and_uses_clock_key():
    source = FakeSource(responses={None: apod_payload("2024-01-02")})
    service = make_service(source)

    record = asyncio.run(service.fetch())

    assert source.calls == [None]
    assert record.date == "2024-01-02"
    assert service.cached_dates() == ["2024-01-02"]


def test_provider_date_skew_still_hits_local_today_key():
    # Provider is still on the previous day
    source = FakeSource(responses={None: apod_payload("2024-01-01")})
    service = make_service(source, today=date(2024, 1, 2))

    record = asyncio.run(service.fetch())
    again = asyncio.run(service.fetch())
    by_provider_date = asyncio.run(service.fetch("2024-01-01"))

    assert again is record
    assert by_provider_date is record
    assert source.calls == [None]
    assert service.cached_dates() == ["2024-01-01", "2024-01-02"]


def test_payload_without_date_is_stored_under_requested_key():
    payload = apod_payload()
    del payload["date"]
    source = FakeSource(responses={"2000-01-01": payload})
    service = make_service(source)

    record = asyncio.run(service.fetch("2000-01-01"))

    assert record.date == "2000-01-01"
    assert service.cached_dates() == ["2000-01-01"]


def test_rate_limit_snapshot_updated_from_headers():
    source = FakeSource(headers={"x-ratelimit-limit": "1000", "x-ratelimit-remaining": "950"})
    service = make_service(source)

    asyncio.run(service.fetch("2000-01-01"))

    assert service.rate_limit.limit == 1000
    assert service.rate_limit.remaining == 950
    assert service.rate_limit.updated_at is not None


def test_rate_limit_snapshot_unchanged_without_headers():
    service = make_service(FakeSource())

    asyncio.run(service.fetch("2000-01-01"))

    assert service.rate_limit.remaining == 1000
    assert service.rate_limit.updated_at is None


def test_rate_limit_snapshot_ignores_malformed_headers():
    source = FakeSource(
        headers={"x-ratelimit-limit": "abc", "x-ratelimit-remaining": "9.5"},
    )
    service = make_service(source)

    asyncio.run(service.fetch("2000-01-01"))

    assert service.rate_limit.limit == 1000
    assert service.rate_limit.remaining == 1000
    assert service.rate_limit.updated_at is None


def test_rate_limit_snapshot_ignores_negative_counts():
    source = FakeSource(headers={"x-ratelimit-limit": "1000", "x-ratelimit-remaining": "-1"})
    service = make_service(source)

    asyncio.run(service.fetch("2000-01-01"))

    assert service.rate_limit.limit == 1000
    assert service.rate_limit.remaining == 1000


def test_failed_fetch_propagates_and_caches_nothing():
    error = ApodFetchError("Request failed with status code 503", FetchErrorKind.SERVER_ERROR, 503)
    source = FakeSource(error=error)
    service = make_service(source)

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(service.fetch("2000-01-01"))

    assert exc_info.value is error
    assert len(service.store) == 0

    # No negative caching: the next request goes upstream again
    source.error = None
    record = asyncio.run(service.fetch("2000-01-01"))
    assert record.title == "Picture for 2000-01-01"
    assert source.calls == ["2000-01-01", "2000-01-01"]


def test_concurrent_misses_share_one_upstream_call():
    async def scenario():
        source = FakeSource(gate=asyncio.Event())
        service = make_service(source)
        tasks = [asyncio.ensure_future(service.fetch("2000-01-01")) for _ in range(5)]
        await asyncio.sleep(0)
        source.gate.set()
        results = await asyncio.gather(*tasks)
        return source, service, results

    source, service, results = asyncio.run(scenario())

    assert source.calls == ["2000-01-01"]
    assert all(result is results[0] for result in results)
    assert service.stats()["cache_misses"] == 5
    assert service.stats()["upstream_calls"] == 1
    assert service.stats()["in_flight"] == 0


def test_concurrent_misses_all_receive_the_error():
    async def scenario():
        error = ApodFetchError("timeout of 25s exceeded", FetchErrorKind.TIMEOUT)
        source = FakeSource(error=error, gate=asyncio.Event())
        service = make_service(source)
        tasks = [asyncio.ensure_future(service.fetch("2000-01-01")) for _ in range(3)]
        await asyncio.sleep(0)
        source.gate.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return source, service, results

    source, service, results = asyncio.run(scenario())

    assert len(source.calls) == 1
    assert all(isinstance(r, ApodFetchError) and r.kind is FetchErrorKind.TIMEOUT for r in results)
    assert service.stats()["in_flight"] == 0


def test_different_keys_fetch_independently():
    async def scenario():
        source = FakeSource()
        service = make_service(source)
        await asyncio.gather(service.fetch("2000-01-01"), service.fetch("2000-01-02"))
        return source

    source = asyncio.run(scenario())

    assert sorted(source.calls) == ["2000-01-01", "2000-01-02"]


def test_create_picks_bounded_store():
    service = ApodService.create(source=FakeSource(), max_entries=2)
    assert isinstance(service.store, LRURecordStore)

    service = ApodService.create(source=FakeSource())
    assert isinstance(service.store, InMemoryRecordStore)


def test_close_releases_source():
    source = FakeSource()
    service = make_service(source)

    asyncio.run(service.close())

    assert source.closed

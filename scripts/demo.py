#!/usr/bin/env python3
"""
Demo script for APOD Explorer.

This script calls the real NASA APOD API through the fetch/cache service and
shows cache hits, the rate-limit snapshot, date validation and error
normalization. Requires NASA_API_KEY (DEMO_KEY works, with a low quota).
"""

import asyncio
import time

from apod_explorer import (
    ApodFetchError,
    ApodService,
    DateValidationError,
    NasaApodClient,
    classify,
    random_date,
    settings,
    validate_date,
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_fetch_and_cache(service: ApodService) -> None:
    """Demonstrate cache misses followed by hits."""
    print_section("Fetch and Cache")

    for label in ("first", "second"):
        start = time.time()
        record = await service.fetch()
        duration = (time.time() - start) * 1000
        print(f"\n  Today ({label} call): {record.title}")
        print(f"    Date: {record.date}, Media: {record.media_type}, Time: {duration:.2f}ms")

    picked = random_date()
    print(f"\n🎲 Random date selected: {picked}")
    record = await service.fetch(picked)
    print(f"  {record.title}")

    stats = service.stats()
    print("\n📊 Cache statistics:")
    print(f"  Entries: {stats['total_entries']}")
    print(f"  Hits: {stats['cache_hits']}, Misses: {stats['cache_misses']}")
    print(f"  Upstream calls: {stats['upstream_calls']}")
    print(f"  Rate limit: {service.rate_limit.remaining}/{service.rate_limit.limit} remaining")


async def demo_concurrent_requests(service: ApodService) -> None:
    """Demonstrate that concurrent misses share one upstream call."""
    print_section("Concurrent Requests")

    before = service.stats()["upstream_calls"]
    records = await asyncio.gather(*[service.fetch("2004-10-10") for _ in range(5)])
    after = service.stats()["upstream_calls"]

    print(f"\n  5 concurrent requests for 2004-10-10 -> {after - before} upstream call(s)")
    print(f"  Same record object: {all(r is records[0] for r in records)}")


def demo_validation() -> None:
    """Demonstrate date validation."""
    print_section("Date Validation")

    for value in ("2000-01-01", "2024-13-40", "1990-01-01", "01/02/2003"):
        try:
            validate_date(value)
            print(f"  {value:<12} ✓ valid")
        except DateValidationError as e:
            print(f"  {value:<12} ✗ {e.kind.value}: {e}")


async def demo_error_normalization(service: ApodService) -> None:
    """Demonstrate how an upstream error becomes a user message."""
    print_section("Error Normalization")

    try:
        # Valid format, but no APOD was published before 1995-06-16
        await service.fetch("1990-01-01")
        print("  Unexpected success")
    except ApodFetchError as e:
        message, record = classify(e, "Failed to fetch picture from 1990-01-01.")
        print(f"  Kind: {record.kind.value}, Upstream status: {record.status_code}")
        print(f"  User message: {message}")


async def run() -> None:
    api_key = settings.require_api_key()
    service = ApodService.create(
        source=NasaApodClient.create(api_key=api_key),
        max_entries=settings.cache_max_entries,
    )
    try:
        await demo_fetch_and_cache(service)
        await demo_concurrent_requests(service)
        demo_validation()
        await demo_error_normalization(service)
    finally:
        await service.close()


def main() -> None:
    """Run all demos."""
    print("\n🚀 APOD Explorer Demo")
    print("=" * 70)
    print("This demo fetches NASA's Astronomy Picture of the Day through the cache")

    try:
        asyncio.run(run())

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure NASA_API_KEY is set (see .env.example).")
        print("Get a free key at https://api.nasa.gov/")


if __name__ == "__main__":
    main()

"""Record store protocol.

Defines the capability-limited interface the fetch service uses for
caching APOD records by date key. The service never touches the
underlying mapping, so the eviction policy can change without
touching callers.

Implementations:
- InMemoryRecordStore: unbounded dict, never evicts (default)
- LRURecordStore: bounded, evicts the least recently used key
"""

from typing import Protocol, runtime_checkable

from apod_explorer.entities import ApodRecord


@runtime_checkable
class RecordStore(Protocol):
    """Protocol for APOD record caches keyed by ISO date string."""

    def get(self, key: str) -> ApodRecord | None:
        """Return the record stored under key, or None on a miss.

        Args:
            key: ISO calendar date (YYYY-MM-DD)

        Returns:
            The stored record object, unchanged
        """
        ...

    def put(self, key: str, record: ApodRecord) -> None:
        """Store a record under key.

        Args:
            key: ISO calendar date (YYYY-MM-DD)
            record: The record to store
        """
        ...

    def keys(self) -> list[str]:
        """Return the stored keys in insertion (or recency) order."""
        ...

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed
        """
        ...

    def __len__(self) -> int:
        ...

    def __contains__(self, key: object) -> bool:
        ...

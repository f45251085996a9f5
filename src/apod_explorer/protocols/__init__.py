"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the record store (unbounded dict → bounded LRU → external store)
- Unit testing with fake upstream sources
- Clear separation of concerns

Usage:
    ```python
    from apod_explorer.protocols import ApodSource, RecordStore

    # Type hints work with any implementation
    store: RecordStore = InMemoryRecordStore()
    store: RecordStore = LRURecordStore(max_entries=365)
    ```
"""

from .apod_source import ApodSource, UpstreamResponse
from .record_store import RecordStore

__all__ = [
    "ApodSource",
    "RecordStore",
    "UpstreamResponse",
]

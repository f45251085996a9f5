"""Repository layer for data access.

This layer abstracts external dependencies (the NASA APOD API, the
in-process record cache) behind protocol-based interfaces. This enables:
- Swapping the cache eviction policy without touching the service
- Unit testing with fake upstream sources
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from apod_explorer.protocols import ApodSource, RecordStore

from .memory_store import InMemoryRecordStore, LRURecordStore, create_record_store
from .nasa_apod_client import NasaApodClient

__all__ = [
    "ApodSource",
    "RecordStore",
    "InMemoryRecordStore",
    "LRURecordStore",
    "NasaApodClient",
    "create_record_store",
]

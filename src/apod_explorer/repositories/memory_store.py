"""In-process implementations of RecordStore.

Both stores live in process memory only; everything is lost on restart.
"""

from collections import OrderedDict

from apod_explorer.entities import ApodRecord


class InMemoryRecordStore:
    """Unbounded dict-backed store. Never evicts.

    One record per calendar day keeps this small for short-lived
    processes; use LRURecordStore for long-running deployments.
    """

    def __init__(self) -> None:
        self._records: dict[str, ApodRecord] = {}

    def get(self, key: str) -> ApodRecord | None:
        return self._records.get(key)

    def put(self, key: str, record: ApodRecord) -> None:
        self._records[key] = record

    def keys(self) -> list[str]:
        return list(self._records)

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        return count

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records


class LRURecordStore:
    """Bounded store evicting the least recently used key.

    Both ``get`` hits and ``put`` mark a key as most recently used.
    """

    def __init__(self, max_entries: int) -> None:
        """Initialize the store.

        Args:
            max_entries: Maximum number of keys kept (must be positive)
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._records: OrderedDict[str, ApodRecord] = OrderedDict()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> ApodRecord | None:
        record = self._records.get(key)
        if record is not None:
            self._records.move_to_end(key)
        return record

    def put(self, key: str, record: ApodRecord) -> None:
        self._records[key] = record
        self._records.move_to_end(key)
        while len(self._records) > self._max_entries:
            self._records.popitem(last=False)

    def keys(self) -> list[str]:
        return list(self._records)

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        return count

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records


def create_record_store(max_entries: int = 0) -> InMemoryRecordStore | LRURecordStore:
    """Pick the store for a configured bound (0 = unbounded)."""
    if max_entries > 0:
        return LRURecordStore(max_entries=max_entries)
    return InMemoryRecordStore()

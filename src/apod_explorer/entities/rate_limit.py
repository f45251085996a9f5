"""Rate-limit snapshot domain entity."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

LIMIT_HEADER = "x-ratelimit-limit"
REMAINING_HEADER = "x-ratelimit-remaining"


def _parse_count(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        count = int(value.strip())
    except ValueError:
        return None
    return count if count >= 0 else None


@dataclass
class RateLimitSnapshot:
    """Last-known upstream quota, taken from response headers.

    Advisory only: the provider is the source of truth and the
    snapshot is reset on restart.
    """

    limit: int = 1000
    remaining: int = 1000
    updated_at: datetime | None = None

    def update_from_headers(self, headers: Mapping[str, str]) -> bool:
        """Update counters from rate-limit headers.

        Header lookup is case-insensitive. Missing, negative or non-integer values
        leave the matching counter untouched.

        Args:
            headers: Response headers of the latest upstream call

        Returns:
            True if at least one counter was updated
        """
        normalized = {key.lower(): value for key, value in headers.items()}
        limit = _parse_count(normalized.get(LIMIT_HEADER))
        remaining = _parse_count(normalized.get(REMAINING_HEADER))

        if limit is not None:
            self.limit = limit
        if remaining is not None:
            self.remaining = remaining

        updated = limit is not None or remaining is not None
        if updated:
            self.updated_at = datetime.now(timezone.utc)
        return updated

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "limit": self.limit,
            "remaining": self.remaining,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

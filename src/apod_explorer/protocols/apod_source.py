"""Upstream APOD source protocol.

Anything that can answer "give me the APOD payload for this date"
satisfies it: the NASA HTTP client in production, a fake in tests.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class UpstreamResponse:
    """A successful upstream reply.

    Attributes:
        payload: Decoded JSON object
        headers: Response headers (used for the rate-limit snapshot)
        status_code: HTTP status of the reply
    """

    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int = 200


@runtime_checkable
class ApodSource(Protocol):
    """Protocol for the upstream APOD provider."""

    async def fetch(self, date: str | None = None) -> UpstreamResponse:
        """Fetch the APOD payload.

        Args:
            date: ISO date to request; None asks the provider for "today"

        Returns:
            UpstreamResponse with payload and headers

        Raises:
            ApodFetchError: On transport failure, timeout, non-2xx status,
                or a body that is not a JSON object
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...

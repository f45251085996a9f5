"""
Shared fixtures: a scripted upstream and a test client wired to it.
"""

import asyncio
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from apod_explorer.api.app import create_app
from apod_explorer.config import Settings
from apod_explorer.errors import ApodFetchError
from apod_explorer.protocols import UpstreamResponse
from apod_explorer.repositories import NasaApodClient

API_KEY = "test-key"


def apod_payload(date: str = "2000-01-01", **overrides: Any) -> dict[str, Any]:
    """Build an upstream APOD body."""
    payload = {
        "date": date,
        "title": f"Picture for {date}",
        "explanation": "A galaxy, far away.",
        "url": f"https://apod.nasa.gov/apod/image/{date}.jpg",
        "hdurl": f"https://apod.nasa.gov/apod/image/{date}_hd.jpg",
        "media_type": "image",
        "service_version": "v1",
    }
    payload.update(overrides)
    return payload


class FakeSource:
    """In-process ApodSource recording every call.

    Args:
        responses: Payloads keyed by requested date (None = today)
        headers: Headers attached to every reply
        error: Raised instead of answering, when set
        gate: When set, each call waits for the event before answering
    """

    def __init__(
        self,
        responses: dict[str | None, dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
        error: ApodFetchError | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.responses = responses or {}
        self.headers = headers or {}
        self.error = error
        self.gate = gate
        self.calls: list[str | None] = []
        self.closed = False

    async def fetch(self, date: str | None = None) -> UpstreamResponse:
        self.calls.append(date)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        payload = self.responses.get(date) or apod_payload(date or "2000-01-01")
        return UpstreamResponse(payload=payload, headers=self.headers)

    async def aclose(self) -> None:
        self.closed = True


class MockUpstream:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, respond=None):
        self.requests: list[httpx.Request] = []
        self._respond = respond or self.default_response

    @staticmethod
    def default_response(request: httpx.Request) -> httpx.Response:
        date = request.url.params.get("date", "2024-01-02")
        return httpx.Response(
            200,
            json=apod_payload(date),
            headers={"X-RateLimit-Limit": "1000", "X-RateLimit-Remaining": "950"},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def client(self, timeout: float = 25) -> NasaApodClient:
        return NasaApodClient(
            api_key=API_KEY,
            base_url="https://api.nasa.gov/planetary/apod",
            timeout=timeout,
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(nasa_api_key=API_KEY, cache_max_entries=0)


@pytest.fixture
def upstream() -> MockUpstream:
    return MockUpstream()


@pytest.fixture
def client(test_settings, upstream):
    """Create a test client whose NASA calls hit the mock upstream."""
    app = create_app(test_settings, source=upstream.client())
    with TestClient(app) as test_client:
        yield test_client

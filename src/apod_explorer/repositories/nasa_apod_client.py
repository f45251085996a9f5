"""NASA APOD API client.

Thin async wrapper around ``GET https://api.nasa.gov/planetary/apod``.
It performs exactly one request per call (no retries) and converts every
failure into an ApodFetchError so callers deal with a single exception type.

Response shape (success):
    {"date": "2024-01-01", "title": "...", "explanation": "...",
     "url": "...", "hdurl": "...", "media_type": "image",
     "service_version": "v1"}

Response shape (errors):
    {"code": 400, "msg": "Date must be between Jun 16, 1995 and ...",
     "service_version": "v1"}
    {"error": {"code": "OVER_RATE_LIMIT", "message": "You have exceeded ..."}}
"""

import logging
from typing import Any

import httpx

from apod_explorer.config import settings
from apod_explorer.errors import ApodFetchError, FetchErrorKind
from apod_explorer.protocols import UpstreamResponse

logger = logging.getLogger(__name__)


def extract_provider_message(body: Any) -> str | None:
    """Pull a human-readable message out of an upstream error body.

    Args:
        body: Parsed JSON body (or raw text) of the failed response

    Returns:
        The ``msg`` field, else ``error.message``, else None
    """
    if not isinstance(body, dict):
        return None

    msg = body.get("msg")
    if isinstance(msg, str) and msg:
        return msg

    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message

    return None


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class NasaApodClient:
    """httpx-based implementation of the ApodSource protocol.

    This class satisfies the ApodSource protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        client = NasaApodClient.create(api_key="DEMO_KEY")
        response = await client.fetch("2024-01-01")
        print(response.payload["title"])
        await client.aclose()
        ```
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: NASA API key sent as the ``api_key`` query parameter.
            base_url: APOD endpoint URL. Defaults to settings.apod_api_url.
            timeout: Request timeout in seconds. Defaults to settings.apod_timeout.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._api_key = api_key
        self._base_url = base_url or settings.apod_api_url
        self._timeout = timeout or settings.apod_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> "NasaApodClient":
        """Factory method to create NasaApodClient with defaults from settings.

        Args:
            api_key: NASA API key.
            base_url: Endpoint URL. If None, uses settings.
            timeout: Timeout in seconds. If None, uses settings.

        Returns:
            Configured NasaApodClient
        """
        return cls(api_key=api_key, base_url=base_url, timeout=timeout)

    @property
    def timeout(self) -> float:
        return self._timeout

    async def fetch(self, date: str | None = None) -> UpstreamResponse:
        """Fetch one APOD payload.

        Args:
            date: ISO date; omitted from the query when None ("today")

        Returns:
            UpstreamResponse with decoded payload and response headers

        Raises:
            ApodFetchError: Classified as TIMEOUT for timeouts,
                RATE_LIMITED / SERVER_ERROR / OTHER for error statuses,
                OTHER for other transport failures and malformed bodies
        """
        params = {"api_key": self._api_key}
        if date:
            params["date"] = date

        try:
            response = await self.client.get(self._base_url, params=params)
        except httpx.TimeoutException as e:
            raise ApodFetchError(
                f"timeout of {self._timeout:g}s exceeded",
                kind=FetchErrorKind.TIMEOUT,
            ) from e
        except httpx.HTTPError as e:
            raise ApodFetchError(
                str(e) or type(e).__name__,
                kind=FetchErrorKind.OTHER,
            ) from e

        if response.is_error:
            body = _decode_body(response)
            # Built by hand: httpx's own message embeds the URL and the API key
            raise ApodFetchError(
                f"Request failed with status code {response.status_code}",
                kind=ApodFetchError.kind_for_status(response.status_code),
                status_code=response.status_code,
                provider_message=extract_provider_message(body),
                body=body,
            )

        body = _decode_body(response)
        if not isinstance(body, dict):
            raise ApodFetchError(
                "Unexpected response format from APOD API",
                kind=FetchErrorKind.OTHER,
                status_code=response.status_code,
                body=body,
            )

        return UpstreamResponse(
            payload=body,
            headers=dict(response.headers.items()),
            status_code=response.status_code,
        )

    async def aclose(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

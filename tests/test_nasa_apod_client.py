"""
Tests for the NASA APOD HTTP client, using httpx.MockTransport.
"""

import asyncio

import httpx
import pytest

from apod_explorer.errors import ApodFetchError, FetchErrorKind
from apod_explorer.repositories.nasa_apod_client import extract_provider_message

from conftest import API_KEY, MockUpstream, apod_payload


def test_fetch_sends_key_and_date():
    upstream = MockUpstream()
    client = upstream.client()

    response = asyncio.run(client.fetch("2000-01-01"))

    request = upstream.requests[0]
    assert request.method == "GET"
    assert request.url.params["api_key"] == API_KEY
    assert request.url.params["date"] == "2000-01-01"
    assert response.payload["title"] == "Picture for 2000-01-01"


def test_fetch_today_omits_date():
    upstream = MockUpstream()

    asyncio.run(upstream.client().fetch())

    assert "date" not in upstream.requests[0].url.params


def test_rate_limit_headers_are_returned():
    upstream = MockUpstream()

    response = asyncio.run(upstream.client().fetch("2000-01-01"))

    headers = {key.lower(): value for key, value in response.headers.items()}
    assert headers["x-ratelimit-limit"] == "1000"
    assert headers["x-ratelimit-remaining"] == "950"


@pytest.mark.parametrize(
    ("status_code", "kind"),
    [
        (429, FetchErrorKind.RATE_LIMITED),
        (500, FetchErrorKind.SERVER_ERROR),
        (503, FetchErrorKind.SERVER_ERROR),
        (400, FetchErrorKind.OTHER),
        (403, FetchErrorKind.OTHER),
    ],
)
def test_error_status_classification(status_code, kind):
    upstream = MockUpstream(lambda request: httpx.Response(status_code, json={"code": status_code}))

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client().fetch("2000-01-01"))

    error = exc_info.value
    assert error.kind is kind
    assert error.status_code == status_code
    assert error.body == {"code": status_code}
    assert API_KEY not in str(error)


def test_error_body_message_is_extracted():
    body = {"code": 400, "msg": "Date must be between Jun 16, 1995 and Jan 02, 2024.", "service_version": "v1"}
    upstream = MockUpstream(lambda request: httpx.Response(400, json=body))

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client().fetch("2030-01-01"))

    assert exc_info.value.provider_message == body["msg"]


def test_timeout_is_classified_without_status():
    def respond(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream = MockUpstream(respond)

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client(timeout=5).fetch("2000-01-01"))

    assert exc_info.value.kind is FetchErrorKind.TIMEOUT
    assert exc_info.value.status_code is None
    assert str(exc_info.value) == "timeout of 5s exceeded"


def test_connection_error_is_other():
    def respond(request):
        raise httpx.ConnectError("Name or service not known", request=request)

    upstream = MockUpstream(respond)

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client().fetch("2000-01-01"))

    assert exc_info.value.kind is FetchErrorKind.OTHER
    assert exc_info.value.status_code is None


def test_non_object_body_is_rejected():
    upstream = MockUpstream(lambda request: httpx.Response(200, json=[apod_payload()]))

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client().fetch("2000-01-01"))

    assert exc_info.value.kind is FetchErrorKind.OTHER


def test_html_error_body_kept_as_text():
    upstream = MockUpstream(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(ApodFetchError) as exc_info:
        asyncio.run(upstream.client().fetch("2000-01-01"))

    assert exc_info.value.kind is FetchErrorKind.SERVER_ERROR
    assert exc_info.value.body == "<html>Bad Gateway</html>"
    assert exc_info.value.provider_message is None


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"msg": "bad date"}, "bad date"),
        ({"error": {"code": "OVER_RATE_LIMIT", "message": "slow down"}}, "slow down"),
        ({"code": 500}, None),
        ("plain text", None),
        (None, None),
    ],
)
def test_extract_provider_message(body, expected):
    assert extract_provider_message(body) == expected

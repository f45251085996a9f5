"""Maps failed upstream calls to user-facing messages and log records."""

import logging
from dataclasses import dataclass
from typing import Any

from apod_explorer.errors import ApodFetchError, FetchErrorKind

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "API rate limit exceeded! Get your free personal API key at https://api.nasa.gov/"
SERVER_ERROR_MESSAGE = "NASA servers are experiencing issues. Please try again later."
TIMEOUT_MESSAGE = "Connection timed out. NASA servers are slow to respond."

_FIXED_MESSAGES = {
    FetchErrorKind.RATE_LIMITED: RATE_LIMITED_MESSAGE,
    FetchErrorKind.SERVER_ERROR: SERVER_ERROR_MESSAGE,
    FetchErrorKind.TIMEOUT: TIMEOUT_MESSAGE,
}

_RESPONSE_STATUS = {
    FetchErrorKind.RATE_LIMITED: 429,
    FetchErrorKind.SERVER_ERROR: 502,
    FetchErrorKind.TIMEOUT: 504,
}


@dataclass(frozen=True)
class ErrorLogRecord:
    """What gets logged about an upstream failure.

    Attributes:
        kind: Failure classification
        error: Raw error text
        status_code: Upstream HTTP status, None for transport failures
        body: Raw upstream body, if any
    """

    kind: FetchErrorKind
    error: str
    status_code: int | None = None
    body: Any = None

    @property
    def response_status(self) -> int:
        """HTTP status this service answers with for the failure."""
        if self.kind in _RESPONSE_STATUS:
            return _RESPONSE_STATUS[self.kind]
        if self.status_code is not None and 400 <= self.status_code < 500:
            return self.status_code
        return 502

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "error": self.error,
            "status_code": self.status_code,
            "body": self.body,
        }


def classify(error: BaseException, default_message: str) -> tuple[str, ErrorLogRecord]:
    """Turn a failed fetch into a user message and a log record.

    Pure function: nothing is logged here, see log_error_record.

    Args:
        error: The exception raised by the fetch
        default_message: Context message used for unclassified failures

    Returns:
        Tuple of (user message, log record)
    """
    if isinstance(error, ApodFetchError):
        kind = error.kind
        status_code = error.status_code
        provider_message = error.provider_message
        body = error.body
    else:
        kind = FetchErrorKind.OTHER
        status_code = None
        provider_message = None
        body = None

    record = ErrorLogRecord(kind=kind, error=str(error), status_code=status_code, body=body)

    if kind in _FIXED_MESSAGES:
        return _FIXED_MESSAGES[kind], record

    if provider_message:
        return provider_message, record
    return f"{default_message} {error}".strip(), record


def log_error_record(record: ErrorLogRecord, context: str = "") -> None:
    """Write an upstream failure to the log at ERROR level."""
    logger.error(
        "APOD API error%s: %s (kind=%s, status=%s)",
        f" [{context}]" if context else "",
        record.error,
        record.kind.value,
        record.status_code,
    )
    if record.body is not None:
        logger.error("Error details: %s", record.body)

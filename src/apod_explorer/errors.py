"""Exception types shared across layers.

Two families:
    - DateValidationError: user input rejected before any network call
    - ApodFetchError: the upstream APOD call failed, classified by kind
"""

from enum import Enum
from typing import Any


class ValidationErrorKind(str, Enum):
    FORMAT_ERROR = "FORMAT_ERROR"
    RANGE_ERROR = "RANGE_ERROR"


class FetchErrorKind(str, Enum):
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    TIMEOUT = "TIMEOUT"
    OTHER = "OTHER"


class ApodExplorerError(Exception):
    """Base exception for the application."""


class MissingConfigurationError(ApodExplorerError):
    """A required environment variable is not set."""

    def __init__(self, variable: str):
        super().__init__(f"{variable} not found in environment variables")
        self.variable = variable


class DateValidationError(ApodExplorerError):
    """A user-supplied date was rejected."""

    def __init__(self, kind: ValidationErrorKind, message: str, value: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.value = value


class ApodFetchError(ApodExplorerError):
    """The outbound APOD request failed.

    Attributes:
        kind: Classification of the failure
        status_code: Upstream HTTP status, None for transport failures
        provider_message: Message extracted from the upstream error body, if any
        body: Raw upstream body (parsed JSON when possible, else text)
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind,
        status_code: int | None = None,
        provider_message: str | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.provider_message = provider_message
        self.body = body

    @staticmethod
    def kind_for_status(status_code: int) -> FetchErrorKind:
        """Classify a non-2xx upstream status."""
        if status_code == 429:
            return FetchErrorKind.RATE_LIMITED
        if status_code >= 500:
            return FetchErrorKind.SERVER_ERROR
        return FetchErrorKind.OTHER

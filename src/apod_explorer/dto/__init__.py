"""Data Transfer Objects for API contracts.

These Pydantic models define the external JSON API contract.
They are used for response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    ApodResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    RateLimitResponse,
)

__all__ = [
    "ApodResponse",
    "CacheStatsResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "RateLimitResponse",
]

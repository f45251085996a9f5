"""Domain entities for internal representation.

These are plain dataclasses used internally by services and
repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .apod_record import ApodRecord
from .rate_limit import RateLimitSnapshot

__all__ = ["ApodRecord", "RateLimitSnapshot"]

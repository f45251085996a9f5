"""Service layer for business logic.

This layer contains the fetch/cache orchestration and the upstream error
normalizer. Services depend on protocols (interfaces), not concrete
implementations, making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (NASA client / record store)

Usage:
    ```python
    from apod_explorer.repositories import NasaApodClient
    from apod_explorer.services import ApodService

    service = ApodService.create(source=NasaApodClient.create(api_key="DEMO_KEY"))
    record = await service.fetch()              # today
    record = await service.fetch("2000-01-01")  # specific day
    ```
"""

from .apod_service import ApodService
from .error_normalizer import ErrorLogRecord, classify, log_error_record

__all__ = [
    "ApodService",
    "ErrorLogRecord",
    "classify",
    "log_error_record",
]

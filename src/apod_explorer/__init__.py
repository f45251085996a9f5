"""APOD Explorer - NASA Astronomy Picture of the Day front end.

This package provides a layered architecture around a single upstream call:

Layers:
    - protocols: Interface contracts (ApodSource, RecordStore)
    - repositories: Data access implementations (NASA client, record stores)
    - services: Business logic (fetch/cache, error normalization)
    - handlers: HTTP endpoint handlers (pages and JSON API)
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)
    - utils: Date validation and random archive dates

Usage:
    ```python
    from apod_explorer.repositories import NasaApodClient
    from apod_explorer.services import ApodService

    service = ApodService.create(source=NasaApodClient.create(api_key="DEMO_KEY"))
    record = await service.fetch("2000-01-01")
    ```

For HTTP API:
    ```python
    from apod_explorer.api.app import app
    ```
"""

from apod_explorer.config import Settings, get_settings, settings
from apod_explorer.entities import ApodRecord, RateLimitSnapshot
from apod_explorer.errors import (
    ApodExplorerError,
    ApodFetchError,
    DateValidationError,
    FetchErrorKind,
    MissingConfigurationError,
    ValidationErrorKind,
)
from apod_explorer.handlers import ApodHandler
from apod_explorer.protocols import ApodSource, RecordStore
from apod_explorer.repositories import InMemoryRecordStore, LRURecordStore, NasaApodClient
from apod_explorer.services import ApodService, classify
from apod_explorer.utils import random_date, validate_date

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    # Protocols (interfaces)
    "ApodSource",
    "RecordStore",
    # Services (business logic)
    "ApodService",
    "classify",
    # Handlers (HTTP)
    "ApodHandler",
    # Repositories (data access)
    "NasaApodClient",
    "InMemoryRecordStore",
    "LRURecordStore",
    # Entities (domain models)
    "ApodRecord",
    "RateLimitSnapshot",
    # Errors
    "ApodExplorerError",
    "ApodFetchError",
    "DateValidationError",
    "FetchErrorKind",
    "MissingConfigurationError",
    "ValidationErrorKind",
    # Utilities
    "random_date",
    "validate_date",
]

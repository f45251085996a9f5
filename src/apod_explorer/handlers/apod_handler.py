"""HTTP handlers for APOD pages and the JSON API.

Handlers convert between service calls and HTTP responses: rendered
pages for the browser front end, DTOs for the JSON API. Input validation
happens here, before any network call.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from apod_explorer.dto import (
    ApodResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    RateLimitResponse,
)
from apod_explorer.entities import ApodRecord
from apod_explorer.errors import ApodFetchError, DateValidationError
from apod_explorer.services import ApodService, classify, log_error_record
from apod_explorer.utils import random_date, validate_date

logger = logging.getLogger(__name__)

INDEX_TEMPLATE = "index.html"
ABOUT_TEMPLATE = "about.html"


class ApodHandler:
    """HTTP handlers for APOD operations.

    Example:
        ```python
        service = ApodService.create(source=NasaApodClient.create(api_key=key))
        handler = ApodHandler(apod_service=service, templates=templates)

        @app.get("/")
        async def index(request: Request):
            return await handler.today_page(request)
        ```
    """

    def __init__(self, apod_service: ApodService, templates: Jinja2Templates) -> None:
        """Initialize the handler.

        Args:
            apod_service: The fetch/cache service (required).
            templates: Jinja2 environment holding index.html and about.html.
        """
        self._service = apod_service
        self._templates = templates

    # Rendered pages

    async def today_page(self, request: Request) -> HTMLResponse:
        """Handle GET / requests."""
        return await self._render_fetch(request, None, "Failed to fetch today's picture.")

    async def date_page(self, request: Request, selected_date: str | None) -> HTMLResponse:
        """Handle POST /get-date-picture requests.

        Args:
            request: The incoming request
            selected_date: The ``date`` form field
        """
        logger.info("Picture requested for date: %s", selected_date)
        try:
            validate_date(selected_date)
        except DateValidationError as e:
            logger.info("Rejected date %r: %s", selected_date, e.kind.value)
            return self._render(request, error=str(e), status_code=status.HTTP_400_BAD_REQUEST)

        return await self._render_fetch(
            request, selected_date, f"Failed to fetch picture from {selected_date}."
        )

    async def random_page(self, request: Request) -> HTMLResponse:
        """Handle GET /random requests."""
        picked = random_date()
        logger.info("Random date selected: %s", picked)
        return await self._render_fetch(request, picked, "Failed to fetch random picture.")

    def about_page(self, request: Request) -> HTMLResponse:
        """Handle GET /about requests."""
        return self._templates.TemplateResponse(
            request,
            ABOUT_TEMPLATE,
            {"page_title": "About - NASA APOD Explorer"},
        )

    async def _render_fetch(
        self, request: Request, date_key: str | None, default_message: str
    ) -> HTMLResponse:
        try:
            record = await self._service.fetch(date_key)
        except ApodFetchError as e:
            message, log_record = classify(e, default_message)
            log_error_record(log_record, context=request.url.path)
            return self._render(request, error=message, status_code=log_record.response_status)
        return self._render(request, record=record)

    def _render(
        self,
        request: Request,
        record: ApodRecord | None = None,
        error: str | None = None,
        status_code: int = status.HTTP_200_OK,
    ) -> HTMLResponse:
        context: dict[str, Any] = {
            "data": record,
            "error": error,
            "rate_limit": self._service.rate_limit,
            "page_title": "NASA APOD Explorer",
        }
        return self._templates.TemplateResponse(
            request, INDEX_TEMPLATE, context, status_code=status_code
        )

    # JSON API

    async def today_json(self) -> ApodResponse | JSONResponse:
        """Handle GET /api/today requests."""
        return await self._fetch_json(None, "Failed to fetch today's picture.")

    async def date_json(self, selected_date: str) -> ApodResponse | JSONResponse:
        """Handle GET /api/date/{date} requests."""
        try:
            validate_date(selected_date)
        except DateValidationError as e:
            logger.info("Rejected date %r: %s", selected_date, e.kind.value)
            return self._error_json(str(e), e.kind.value, status.HTTP_400_BAD_REQUEST)

        return await self._fetch_json(selected_date, f"Failed to fetch picture from {selected_date}.")

    async def random_json(self) -> ApodResponse | JSONResponse:
        """Handle GET /api/random requests."""
        return await self._fetch_json(random_date(), "Failed to fetch random picture.")

    def rate_limit(self) -> RateLimitResponse:
        """Handle GET /api/rate-limit requests."""
        return RateLimitResponse.from_entity(self._service.rate_limit)

    def stats(self) -> CacheStatsResponse:
        """Handle GET /api/stats requests."""
        stats = self._service.stats()
        return CacheStatsResponse(
            total_entries=stats["total_entries"],
            cache_hits=stats["cache_hits"],
            cache_misses=stats["cache_misses"],
            upstream_calls=stats["upstream_calls"],
            cached_dates=self._service.cached_dates(),
            rate_limit=RateLimitResponse.from_entity(self._service.rate_limit),
        )

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        return HealthCheckResponse(status="healthy", cached_entries=len(self._service.store))

    async def _fetch_json(self, date_key: str | None, default_message: str) -> ApodResponse | JSONResponse:
        try:
            record = await self._service.fetch(date_key)
        except ApodFetchError as e:
            message, log_record = classify(e, default_message)
            log_error_record(log_record, context=date_key or "today")
            return self._error_json(
                message, log_record.kind.value, log_record.response_status, log_record.status_code
            )
        return ApodResponse.from_entity(record)

    @staticmethod
    def _error_json(
        message: str, kind: str, status_code: int, upstream_status: int | None = None
    ) -> JSONResponse:
        body = ErrorResponse(error=message, kind=kind, status_code=upstream_status)
        return JSONResponse(body.model_dump(), status_code=status_code)

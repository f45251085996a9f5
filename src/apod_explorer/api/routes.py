"""Routes: server-rendered pages plus a JSON API over the same service."""

from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse

from apod_explorer.api.dependencies import HandlerDep
from apod_explorer.dto import (
    ApodResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    RateLimitResponse,
)

pages = APIRouter()
api = APIRouter(prefix="/api")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@pages.get("/", response_class=HTMLResponse)
async def index(request: Request, handler: HandlerDep):
    """Render today's picture."""
    return await handler.today_page(request)


@pages.post("/get-date-picture", response_class=HTMLResponse)
async def get_date_picture(
    request: Request,
    handler: HandlerDep,
    date: Annotated[str | None, Form()] = None,
):
    """Render the picture for a user-selected date."""
    return await handler.date_page(request, date)


@pages.get("/random", response_class=HTMLResponse)
async def random_picture(request: Request, handler: HandlerDep):
    """Render the picture for a random archive date."""
    return await handler.random_page(request)


@pages.get("/about", response_class=HTMLResponse)
async def about(request: Request, handler: HandlerDep):
    return handler.about_page(request)


@pages.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Lightweight health check, no upstream calls."""
    return handler.health_check()


@api.get("/today", response_model=ApodResponse, responses=_ERROR_RESPONSES)
async def api_today(handler: HandlerDep):
    return await handler.today_json()


@api.get("/date/{date}", response_model=ApodResponse, responses=_ERROR_RESPONSES)
async def api_date(date: str, handler: HandlerDep):
    return await handler.date_json(date)


@api.get("/random", response_model=ApodResponse, responses=_ERROR_RESPONSES)
async def api_random(handler: HandlerDep):
    return await handler.random_json()


@api.get("/rate-limit", response_model=RateLimitResponse)
async def api_rate_limit(handler: HandlerDep) -> RateLimitResponse:
    """Last-known upstream quota, taken from NASA's response headers."""
    return handler.rate_limit()


@api.get("/stats", response_model=CacheStatsResponse)
async def api_stats(handler: HandlerDep) -> CacheStatsResponse:
    return handler.stats()

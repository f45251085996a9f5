"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state: the record cache and the
      rate-limit snapshot belong to the ApodService on app.state
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.templating import Jinja2Templates

from apod_explorer.config import Settings
from apod_explorer.handlers import ApodHandler
from apod_explorer.protocols import ApodSource
from apod_explorer.repositories import NasaApodClient
from apod_explorer.services import ApodService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def get_handler(request: Request) -> ApodHandler:
    """Dependency injection for ApodHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ApodHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "apod_handler", None)
    if handler is None:
        raise RuntimeError("ApodHandler not initialized. Check lifespan setup.")
    return handler


def create_lifespan(app_settings: Settings, source: ApodSource | None = None):
    """Build the lifespan context manager for an app.

    Args:
        app_settings: Settings used to build the upstream client and store
        source: Upstream override (tests); defaults to a NasaApodClient

    Returns:
        An async context manager factory suitable for FastAPI(lifespan=...)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Upstream client (data access) - refuses to start without an API key
        2. Service (fetch/cache) - stored in app.state.apod_service
        3. Handler (HTTP) - stored in app.state.apod_handler
        """
        api_key = app_settings.require_api_key()

        upstream = source or NasaApodClient(
            api_key=api_key,
            base_url=app_settings.apod_api_url,
            timeout=app_settings.apod_timeout,
        )
        apod_service = ApodService.create(source=upstream, max_entries=app_settings.cache_max_entries)
        apod_handler = ApodHandler(
            apod_service=apod_service,
            templates=Jinja2Templates(directory=str(TEMPLATES_DIR)),
        )

        app.state.apod_service = apod_service
        app.state.apod_handler = apod_handler

        logger.info("APOD service initialized (upstream: %s)", app_settings.apod_api_url)
        logger.info(
            "Record cache: %s",
            f"LRU, max {app_settings.cache_max_entries} entries"
            if app_settings.cache_max_entries
            else "unbounded",
        )

        yield

        await apod_service.close()
        del app.state.apod_handler
        del app.state.apod_service
        logger.info("APOD service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ApodHandler, Depends(get_handler)]

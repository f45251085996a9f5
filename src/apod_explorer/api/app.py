"""FastAPI application entry point for APOD Explorer."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from apod_explorer.api.dependencies import create_lifespan
from apod_explorer.api.routes import api, pages
from apod_explorer.config import Settings, configure_logging, settings
from apod_explorer.errors import MissingConfigurationError
from apod_explorer.protocols import ApodSource

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "0",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register the catch-all exception handler on the FastAPI app."""

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        # Served by ServerErrorMiddleware, outside the security header middleware
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
            headers=SECURITY_HEADERS,
        )


def create_app(app_settings: Settings | None = None, source: ApodSource | None = None) -> FastAPI:
    """Build the application.

    Args:
        app_settings: Settings to use. Defaults to the environment-loaded settings.
        source: Upstream override, used by tests.

    Returns:
        Configured FastAPI app (services are created on startup)
    """
    app_settings = app_settings or settings
    configure_logging(app_settings)

    app = FastAPI(
        title="NASA APOD Explorer",
        description="Server-rendered front end and JSON API for NASA's Astronomy Picture of the Day",
        version="0.1.0",
        lifespan=create_lifespan(app_settings, source),
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    register_error_handlers(app)

    app.include_router(pages)
    app.include_router(api)

    return app


app = create_app()


def main() -> None:
    """Run the server with uvicorn; exit with status 1 if the API key is missing."""
    configure_logging(settings)
    try:
        settings.require_api_key()
    except MissingConfigurationError as e:
        logger.error("%s", e)
        logger.error("Please create a .env file with your NASA API key (see .env.example)")
        sys.exit(1)

    logger.info("Server is running on http://localhost:%d", settings.api_port)
    uvicorn.run(
        "apod_explorer.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        server_header=False,
    )


if __name__ == "__main__":
    main()

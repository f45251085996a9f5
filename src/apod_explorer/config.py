import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from apod_explorer.errors import MissingConfigurationError

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # NASA APOD
    nasa_api_key: str | None = os.getenv("NASA_API_KEY")
    apod_api_url: str = os.getenv("APOD_API_URL", "https://api.nasa.gov/planetary/apod")
    apod_timeout: float = float(os.getenv("APOD_TIMEOUT", "25"))

    # Cache (0 = unbounded)
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "0"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("PORT", "3000"))

    # Logging
    environment: str = os.getenv("ENVIRONMENT", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.apod_timeout <= 0:
            raise ValueError("APOD_TIMEOUT must be a positive number of seconds")

        if self.cache_max_entries < 0:
            raise ValueError("CACHE_MAX_ENTRIES must be 0 (unbounded) or a positive integer")

        if not 0 < self.api_port < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.api_port}")

    def require_api_key(self) -> str:
        """Return the NASA API key, or raise if it is not configured.

        Raises:
            MissingConfigurationError: If NASA_API_KEY is unset or blank
        """
        if not self.nasa_api_key or not self.nasa_api_key.strip():
            raise MissingConfigurationError("NASA_API_KEY")
        return self.nasa_api_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(app_settings: Settings | None = None) -> None:
    """Configure root logging: JSON lines for production, human-readable for local."""
    app_settings = app_settings or settings
    level = getattr(logging, app_settings.log_level.upper(), logging.INFO)

    if app_settings.is_production:
        logging.basicConfig(
            level=level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

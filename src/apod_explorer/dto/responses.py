"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from apod_explorer.entities import ApodRecord, RateLimitSnapshot


class ApodResponse(BaseModel):
    """Response DTO for a single APOD record."""

    date: str = Field(..., description="ISO date of the entry (YYYY-MM-DD)")
    title: str = Field(..., description="Title of the picture or video")
    explanation: str = Field(..., description="Description from the APOD editors")
    url: str | None = Field(None, description="Media URL")
    media_type: str = Field(..., description="'image', 'video' or 'other'")
    hdurl: str | None = Field(None, description="High resolution image URL")
    copyright: str | None = Field(None, description="Credit line, if any")
    thumbnail_url: str | None = Field(None, description="Video thumbnail URL, if any")

    @classmethod
    def from_entity(cls, record: ApodRecord) -> "ApodResponse":
        return cls(
            date=record.date,
            title=record.title,
            explanation=record.explanation,
            url=record.url,
            media_type=record.media_type,
            hdurl=record.hdurl,
            copyright=record.copyright,
            thumbnail_url=record.thumbnail_url,
        )


class RateLimitResponse(BaseModel):
    """Response DTO for the last-known upstream quota."""

    limit: int = Field(..., description="Requests allowed per window", ge=0)
    remaining: int = Field(..., description="Requests left in the current window", ge=0)
    updated_at: datetime | None = Field(
        None,
        description="When the headers were last seen (UTC), null before the first call",
    )

    @classmethod
    def from_entity(cls, snapshot: RateLimitSnapshot) -> "RateLimitResponse":
        return cls(
            limit=snapshot.limit,
            remaining=snapshot.remaining,
            updated_at=snapshot.updated_at,
        )


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Number of cached date keys", ge=0)
    cache_hits: int = Field(..., ge=0)
    cache_misses: int = Field(..., ge=0)
    upstream_calls: int = Field(..., description="Outbound APOD requests issued", ge=0)
    cached_dates: list[str] = Field(default_factory=list, description="Cached keys, sorted")
    rate_limit: RateLimitResponse


class ErrorResponse(BaseModel):
    """Response DTO for validation and upstream errors."""

    error: str = Field(..., description="User-facing message")
    kind: str = Field(..., description="Error classification, e.g. RANGE_ERROR or RATE_LIMITED")
    status_code: int | None = Field(None, description="Upstream HTTP status, if any")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy'")
    cached_entries: int = Field(..., ge=0)

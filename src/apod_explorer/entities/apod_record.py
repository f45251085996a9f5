"""APOD record domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ApodRecord:
    """One day's Astronomy Picture of the Day as returned by NASA.

    Attributes:
        date: ISO calendar date reported by the provider (YYYY-MM-DD)
        title: Title of the picture or video
        explanation: Description written by the APOD editors
        url: Media URL (image or embeddable video)
        media_type: "image", "video", or "other"
        hdurl: High resolution image URL, images only
        copyright: Credit line, absent for public-domain entries
        thumbnail_url: Video thumbnail, only when requested from the provider
        service_version: Provider API version string
        raw: The full upstream JSON object
    """

    date: str
    title: str
    explanation: str
    url: str | None
    media_type: str
    hdurl: str | None = None
    copyright: str | None = None
    thumbnail_url: str | None = None
    service_version: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], fallback_date: str = "") -> "ApodRecord":
        """Build a record from the upstream JSON object.

        Args:
            payload: Decoded APOD response body
            fallback_date: Used when the payload carries no date

        Returns:
            ApodRecord with unknown fields kept in ``raw``
        """
        return cls(
            date=payload.get("date") or fallback_date,
            title=payload.get("title") or "",
            explanation=payload.get("explanation") or "",
            url=payload.get("url"),
            media_type=payload.get("media_type") or "image",
            hdurl=payload.get("hdurl"),
            copyright=(payload.get("copyright") or "").strip() or None,
            thumbnail_url=payload.get("thumbnail_url"),
            service_version=payload.get("service_version"),
            raw=dict(payload),
        )

    @property
    def is_video(self) -> bool:
        return self.media_type == "video"

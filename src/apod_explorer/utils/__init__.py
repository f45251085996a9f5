"""Utility modules for APOD Explorer."""

from .dates import FIRST_APOD_DATE, random_date, today_utc, validate_date

__all__ = [
    "FIRST_APOD_DATE",
    "random_date",
    "today_utc",
    "validate_date",
]

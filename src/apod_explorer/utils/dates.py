"""Date helpers: "today", user input validation, random archive dates.

All day boundaries use UTC, matching the provider's date keys and the
cache keys derived from them.
"""

import math
import random
import re
from datetime import date, datetime, timedelta, timezone

from apod_explorer.errors import DateValidationError, ValidationErrorKind

# First published APOD entry
FIRST_APOD_DATE = date(1995, 6, 16)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

FORMAT_ERROR_MESSAGE = "Invalid date format. Please use YYYY-MM-DD."
RANGE_ERROR_MESSAGE = "Date must be between June 16, 1995 and today."

_EPOCH_START = datetime(FIRST_APOD_DATE.year, FIRST_APOD_DATE.month, FIRST_APOD_DATE.day, tzinfo=timezone.utc)


def today_utc() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def validate_date(value: str | None, today: date | None = None) -> date:
    """Validate a user-supplied ISO date.

    Args:
        value: Raw input, expected as YYYY-MM-DD
        today: Upper bound override (defaults to today's UTC date)

    Returns:
        The parsed date

    Raises:
        DateValidationError: FORMAT_ERROR if the input is missing, does not
            match YYYY-MM-DD, or is not a real calendar date; RANGE_ERROR if
            it falls outside [1995-06-16, today]
    """
    # re.match with $ accepts a trailing newline, fullmatch does not
    if not value or not DATE_PATTERN.fullmatch(value):
        raise DateValidationError(ValidationErrorKind.FORMAT_ERROR, FORMAT_ERROR_MESSAGE, value)

    try:
        parsed = date.fromisoformat(value)
    except ValueError as e:
        raise DateValidationError(ValidationErrorKind.FORMAT_ERROR, FORMAT_ERROR_MESSAGE, value) from e

    upper = today or today_utc()
    if parsed < FIRST_APOD_DATE or parsed > upper:
        raise DateValidationError(ValidationErrorKind.RANGE_ERROR, RANGE_ERROR_MESSAGE, value)

    return parsed


def random_date(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Pick a uniformly distributed archive date.

    Interpolates linearly over the milliseconds elapsed between the first
    APOD (midnight UTC) and now. Not suitable for anything security related.

    Args:
        now: Upper bound instant (defaults to the current UTC time)
        rng: Random source (defaults to the module-level generator)

    Returns:
        ISO date string in [1995-06-16, today]
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    fraction = (rng or random).random()

    elapsed_ms = max(0, int((now - _EPOCH_START) / timedelta(milliseconds=1)))
    offset_ms = math.floor(fraction * elapsed_ms)
    picked = _EPOCH_START + timedelta(milliseconds=offset_ms)
    return picked.date().isoformat()

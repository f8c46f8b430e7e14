"""Birth date conversions between the form and the Users API.

The form holds a plain calendar date (``YYYY-MM-DD``) while the Users API
stores a full ISO-8601 timestamp. Values coming from the API are treated as
instants: they are converted to UTC before the date part is taken, and
values without an offset are read as UTC.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone


class BirthDateError(ValueError):
    """Raised when a birth date value cannot be interpreted."""


def parse_instant(value: str) -> datetime:
    """Parse a date or date-time string into an aware UTC datetime."""
    text = (value or "").strip()
    if not text:
        raise BirthDateError("Empty birth date")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            parsed = datetime.combine(date.fromisoformat(text), time.min)
        else:
            parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise BirthDateError(f"Invalid birth date: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_display_date(value: str | None) -> str:
    """``"1990-05-14T00:00:00.000Z"`` -> ``"1990-05-14"``; missing -> ``""``."""
    if not value:
        return ""
    return parse_instant(value).date().isoformat()


def to_timestamp(display_date: str) -> str:
    """``"1990-05-14"`` -> ``"1990-05-14T00:00:00.000Z"``."""
    instant = parse_instant(display_date)
    millis = instant.microsecond // 1000
    return instant.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"

"""Timestamp helpers shared by the store, ingestion and services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Optional

Clock = Callable[[], datetime]

# Date layouts the AI has been seen to return besides ISO 8601.
_FALLBACK_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a date or date-time string into an aware UTC datetime.

    Returns None when the value is empty or not a recognizable date.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return to_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def normalize_timestamp(value: Any, clock: Clock = utc_now) -> datetime:
    """Canonical clinical timestamp: the parsed value, or now when unparseable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return to_utc(clock())
    return parsed

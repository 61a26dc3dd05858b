"""Time utilities for feed timestamps."""
from datetime import datetime, timezone
from typing import Any, Optional
from email.utils import parsedate_to_datetime


# Common feed date formats tried after RFC 2822 and ISO 8601
FEED_DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %z",      # RFC 2822
    "%a, %d %b %Y %H:%M:%S %Z",      # RFC 2822 with zone name
    "%Y-%m-%dT%H:%M:%S.%f%z",        # ISO 8601 with fraction
    "%Y-%m-%d %H:%M:%S",             # Simple datetime
    "%Y-%m-%d",                      # Date only
    "%d/%m/%Y %H:%M",                # Indonesian portals
    "%d/%m/%Y",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y",
]


def utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_feed_date(value: Any) -> Optional[datetime]:
    """
    Parse a raw feed timestamp permissively.

    Accepts datetime objects, RFC 2822 strings (RSS pubDate), ISO 8601
    strings (Atom, rss-parser isoDate) and a few local formats.

    Returns:
        Aware UTC datetime or None when nothing matches
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        try:
            return as_utc(value)
        except (OverflowError, OSError):
            return None

    if not isinstance(value, str):
        return None

    date_str = value.strip()
    if not date_str:
        return None

    try:
        return as_utc(parsedate_to_datetime(date_str))
    except (ValueError, TypeError, IndexError, OverflowError, OSError):
        pass

    iso = date_str[:-1] + "+00:00" if date_str.endswith(("Z", "z")) else date_str
    try:
        return as_utc(datetime.fromisoformat(iso))
    except (ValueError, OverflowError, OSError):
        pass

    for fmt in FEED_DATE_FORMATS:
        try:
            return as_utc(datetime.strptime(date_str, fmt))
        except (ValueError, OverflowError, OSError):
            continue

    return None


def coerce_feed_date(value: Any, fallback: datetime) -> datetime:
    """Parse a timestamp, substituting `fallback` when it is missing or invalid."""
    parsed = parse_feed_date(value)
    if parsed is None:
        return as_utc(fallback)
    return parsed


def to_iso(dt: datetime) -> str:
    """ISO 8601 UTC with millisecond precision and a Z suffix."""
    return as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")

"""Timestamp helpers shared by the engine, the stores and the API schemas."""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime read from storage to aware UTC.

    SQLite hands back naive datetimes even for timezone-aware columns; every
    timestamp we write is UTC, so a naive value is interpreted as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_rfc3339(value: Optional[datetime]) -> Optional[str]:
    """Format a timestamp as RFC 3339 with second precision, e.g. 2025-01-31T12:00:00Z."""
    if value is None:
        return None
    return to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")

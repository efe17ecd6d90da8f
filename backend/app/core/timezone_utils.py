# backend/app/core/timezone_utils.py
"""
Timezone utilities for session instants.

Sessions are stored and compared in UTC. Naive datetimes (SQLite returns
them, some clients send them) are read as UTC.
"""

from datetime import datetime, timezone
from typing import Optional, overload


@overload
def ensure_utc(dt: datetime) -> datetime:
    ...


@overload
def ensure_utc(dt: None) -> None:
    ...


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to an aware UTC instant.

    Args:
        dt: Aware or naive datetime

    Returns:
        The same instant with tzinfo=UTC, or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(timezone.utc)

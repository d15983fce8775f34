"""
Datetime utility functions for handling timezone-aware datetimes and the
check-in calendar day.
"""
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """
    Return the current datetime in UTC timezone.

    Using this function instead of datetime.now(timezone.utc) directly
    enables easier testing through mocking.

    Returns:
        A timezone-aware datetime object representing the current time in UTC.
    """
    return datetime.now(timezone.utc)


def local_today(tz_name: str, now: Optional[datetime] = None) -> date:
    """
    Return the calendar date in the given IANA timezone.

    A check-in submitted at 23:30 in Sao Paulo belongs to that day even
    though it is already the next day in UTC.

    Args:
        tz_name: IANA timezone name (e.g. "America/Sao_Paulo")
        now: Reference instant; defaults to utc_now(). Naive values are
            treated as UTC.

    Returns:
        The local calendar date
    """
    reference = ensure_timezone_aware(now) if now is not None else utc_now()
    return reference.astimezone(ZoneInfo(tz_name)).date()


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Ensure a datetime object is timezone-aware (UTC).
    SQLite may return timezone-naive datetimes even when stored as timezone-aware.

    Args:
        dt: The datetime to ensure is timezone-aware

    Returns:
        A timezone-aware datetime object in UTC

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

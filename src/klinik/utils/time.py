"""Time utilities for UTC storage and clinic-local day boundaries."""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """
    Current UTC time without tzinfo.

    Timestamp columns store naive UTC; this is their default factory.
    """
    return utc_now().replace(tzinfo=None)


def to_storage_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to the naive UTC form used in timestamp columns.

    Naive input is read as server-local wall-clock time, the same way
    ``datetime.astimezone`` treats it.
    """
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC tzinfo to a naive timestamp read back from storage."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=timezone.utc)


def local_today(tz: Optional[tzinfo] = None) -> date:
    """Today's calendar date in ``tz`` (server-local zone when None)."""
    if tz is None:
        return datetime.now().astimezone().date()
    return datetime.now(tz).date()


def local_midnight(tz: Optional[tzinfo] = None) -> datetime:
    """
    Start of the current day as an aware datetime.

    Args:
        tz: Clinic time zone; None means the server's local zone

    Returns:
        Aware datetime at 00:00 of today in that zone
    """
    today = local_today(tz)
    if tz is None:
        return datetime.combine(today, time.min).astimezone()
    return datetime.combine(today, time.min, tzinfo=tz)


def to_date_string(value: date) -> str:
    """Format a date for TEXT date columns (YYYY-MM-DD)."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date_string(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD column value; None stays None."""
    if not value:
        return None
    return date.fromisoformat(value[:10])

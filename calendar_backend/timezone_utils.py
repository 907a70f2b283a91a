"""
Timezone utilities for CRM Calendar.

Task timestamps arrive either timezone-aware (usually UTC from the CRM export)
or naive. Naive values are taken to be local wall-clock time already. All
calendar arithmetic happens on naive local datetimes.
"""

from datetime import datetime, date, time as dt_time
import time as _time
from typing import Optional
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "America/Sao_Paulo"

# Neutral time of day used for day-level anchors
NOON = dt_time(hour=12)


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured local timezone.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback: try system timezone name
        try:
            return pytz.timezone(_time.tzname[0])
        except pytz.UnknownTimeZoneError:
            # Last resort: fixed offset of the running system
            is_dst = _time.localtime().tm_isdst
            if is_dst:
                offset_seconds = -_time.altzone
            else:
                offset_seconds = -_time.timezone
            return pytz.FixedOffset(offset_seconds // 60)


def to_local_datetime(dt: datetime) -> datetime:
    """
    Convert an aware datetime to the local timezone.

    Naive input is returned unchanged.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(get_local_timezone())
    return dt


def utc_to_local_naive(dt: datetime) -> datetime:
    """
    Convert a datetime to a naive local wall-clock datetime.

    Args:
        dt: An aware datetime (any zone) or a naive local datetime.

    Returns:
        A naive datetime (tzinfo=None) representing local time.
    """
    if dt.tzinfo is not None:
        return to_local_datetime(dt).replace(tzinfo=None)
    return dt


def instant(dt: datetime) -> float:
    """
    POSIX timestamp of dt. Naive values are read as local wall-clock time;
    an ambiguous fall-back hour resolves to standard time.
    """
    if dt.tzinfo is None:
        dt = get_local_timezone().localize(dt)
    return dt.timestamp()


def local_day(dt: datetime) -> date:
    """Calendar day of a timestamp in local wall-clock time."""
    return utc_to_local_naive(dt).date()


def at_noon(d: date) -> datetime:
    """Naive local datetime for the given day at 12:00."""
    return datetime.combine(d, NOON)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp from the CRM export (2024-02-15T12:30:00.000Z).

    Raises ValueError for malformed input.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_iso_date(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD string, returning None when malformed."""
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None

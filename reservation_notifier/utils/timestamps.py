"""Timestamp utilities for UTC handling and datetime parsing.

This module provides utilities for working with timestamps in UTC:
- Getting current UTC time
- Parsing ISO 8601 datetime strings (as found in reservation events)
- Converting timezone-naive to timezone-aware UTC
- Formatting timestamps for CLI output and health reports
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2026-10-19T12:00:00Z
    - 2026-10-19T12:00:00.123Z
    - 2026-10-19T12:00:00+02:00
    - 2026-10-19

    Args:
        iso_string: ISO 8601 formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    # fromisoformat() only accepts the 'Z' suffix from Python 3.11 onwards
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        try:
            return ensure_utc(datetime.strptime(cleaned, "%Y-%m-%d"))
        except ValueError:
            return None


def format_timestamp(dt: datetime, include_microseconds: bool = False) -> str:
    """Format a datetime as ISO 8601 string in UTC.

    Args:
        dt: Datetime to format
        include_microseconds: Whether to include microseconds in output

    Returns:
        ISO 8601 formatted string with 'Z' suffix

    Example:
        >>> from datetime import datetime, timezone
        >>> dt = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        >>> format_timestamp(dt)
        '2026-10-19T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")

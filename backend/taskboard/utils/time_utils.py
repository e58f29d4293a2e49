# backend/taskboard/utils/time_utils.py
"""
Pure time utilities.

Everything stored by this backend is an absolute UTC instant; conversions to
an owner's wall clock go through timezone_utils.TimezoneClock.
"""

from datetime import datetime, timezone
from typing import Optional

# Constant for UTC timezone to avoid hardcoded timezone.utc references
UTC_TIMEZONE = timezone.utc


def utc_now() -> datetime:
    """Get the current instant as an aware UTC datetime"""
    return datetime.now(UTC_TIMEZONE)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to an aware UTC instant.

    Naive values are interpreted as UTC, which is how timestamptz columns are
    written by this backend.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC_TIMEZONE)
    return dt.astimezone(UTC_TIMEZONE)


def format_iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """Format as ISO-8601 in UTC with a trailing 'Z', as the frontend expects."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


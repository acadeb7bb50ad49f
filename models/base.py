"""
Base utilities for database models.
"""

from datetime import datetime
from typing import Optional


def format_utc_datetime(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a UTC datetime to ISO format with 'Z' suffix.

    Timestamps in the opportunities table are stored as naive UTC, so 'Z' is
    appended to let the browser convert them to local time.

    Args:
        dt: Datetime object (assumed to be UTC)

    Returns:
        ISO format string with 'Z' suffix (e.g., "2025-11-15T09:33:00Z") or None
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.isoformat()
    return dt.isoformat() + 'Z'

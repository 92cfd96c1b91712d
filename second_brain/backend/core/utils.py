"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_epoch_millis(value: datetime) -> int:
    """Convert a naive UTC datetime to integer milliseconds since the epoch."""
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000)

"""Shared helpers for service modules (timestamps)"""

from datetime import datetime, timezone


def format_utc(value: datetime) -> str:
    """ISO-8601 with milliseconds and a Z suffix; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_timestamp() -> str:
    """Current UTC time, e.g. 2024-05-01T12:00:00.000Z."""
    return format_utc(datetime.now(timezone.utc))

"""
Parsing and formatting helpers

Small conversions shared by the collectors and the presentation layer.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a trailing Z

    Example:
        2025-01-15T10:00:00.123Z
    """
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def format_age(created: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Format the age of a resource the way kubectl prints it

    Args:
        created: creationTimestamp of the resource
        now: reference time (default: current UTC time)

    Returns:
        "42s", "7m", "5h", "12d", or "unknown" when no timestamp is known
    """
    if created is None:
        return "unknown"

    now = now or utc_now()
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - created).total_seconds()))
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def parse_label_selector(selector: str) -> Tuple[str, str]:
    """Split a single ``key=value`` label selector

    Only the first ``=`` separates key and value, so values may contain ``=``.

    Raises:
        ValueError: selector has no ``=`` or an empty key
    """
    key, sep, value = selector.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"invalid label selector: {selector!r}")
    return key, value.strip()

"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import re
from datetime import datetime, timedelta, timezone

_RFC3339_PATTERN = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase and simplifies database storage.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC. Naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_rfc3339_nano(value: datetime) -> str:
    """
    Format a datetime as RFC 3339 with nine fractional digits.

    Python datetimes carry microseconds, so the last three digits are
    always zero. Output is always UTC with a ``Z`` suffix, e.g.
    ``2024-05-01T12:30:45.123456000Z``.
    """
    value = to_naive_utc(value)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond:06d}000Z"


def parse_rfc3339_nano(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into a naive UTC datetime.

    Accepts zero to nine fractional digits and either ``Z`` or a numeric
    offset. Digits past microsecond resolution are truncated.

    Raises:
        ValueError: If the value is not an RFC 3339 timestamp
    """
    match = _RFC3339_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid RFC 3339 timestamp: {value!r}")

    base = match["base"]
    parsed = datetime.strptime(f"{base[:10]}T{base[11:]}", "%Y-%m-%dT%H:%M:%S")

    fraction = match["fraction"]
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))

    offset = match["offset"]
    if offset not in ("Z", "z"):
        sign = 1 if offset[0] == "+" else -1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        parsed -= sign * timedelta(hours=hours, minutes=minutes)

    return parsed

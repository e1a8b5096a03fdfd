"""Calendar date parsing and formatting.

Everything here works in UTC with fixed English month names so the output does
not depend on the locale or timezone of the machine running the build.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from typing import Any

from .errors import FormatError

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def parse_date(value: Any) -> date:
    """Parse a date, datetime or ISO-8601 string into a calendar date.

    Aware datetimes (including strings with a ``Z`` suffix or offset) are
    converted to UTC before the date is taken; naive ones are read as UTC.

    Raises:
        FormatError: If the value cannot be read as a calendar date.
    """
    if isinstance(value, datetime):
        return _utc(value).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise FormatError(f"Unsupported date value: {value!r}")

    raw = value.strip()
    if not raw:
        raise FormatError("Empty date value")
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    if raw.endswith(("Z", "z")):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise FormatError(f"Invalid date: {value!r}") from exc
    return _utc(parsed).date()


def format_date(value: Any) -> str:
    """Format a date for display, e.g. ``"June 15, 2024"``."""
    day = parse_date(value)
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def rfc822_date(value: Any) -> str:
    """Format a date as an RFC 822 timestamp at midnight UTC for RSS."""
    return format_datetime(_midnight_utc(parse_date(value)))


def iso_datetime(value: Any) -> str:
    """Format a date as an RFC 3339 timestamp at midnight UTC."""
    return _midnight_utc(parse_date(value)).isoformat()


def _midnight_utc(day: date) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

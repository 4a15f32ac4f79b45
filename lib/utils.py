# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Date, time and money helpers used across services.
#
# Schedules are stored as plain dates in the business timezone, so any
# timestamp coming from a browser has to be converted before it is compared
# against the schedules table.
# =============================================================================

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

DAYS_OF_WEEK = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


# =============================================================================
# Dates
# =============================================================================

def parse_date(value: str | date | datetime) -> date:
    """
    Parse a YYYY-MM-DD (or full ISO timestamp) into a date.

    Raises:
        ValueError: If the value is not a valid ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return parse_timestamp(text).date()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def to_business_date(value: str | date | datetime, timezone: str) -> date:
    """
    Resolve a client-supplied date or timestamp to the calendar date in the
    business timezone.

    A bare date is taken as-is. A timezone-aware timestamp is converted. A
    naive timestamp is treated as UTC.
    """
    if isinstance(value, str) and len(value.strip()) == 10:
        return date.fromisoformat(value.strip())
    if isinstance(value, date) and not isinstance(value, datetime):
        return value

    moment = parse_timestamp(value) if isinstance(value, str) else value
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(ZoneInfo(timezone)).date()


def day_of_week(value: date) -> str:
    """Full English weekday name, e.g. 'Sunday'."""
    return DAYS_OF_WEEK[value.weekday()]


def last_sunday(value: date) -> date:
    """The Sunday on or before `value`."""
    # weekday(): Monday=0 ... Sunday=6
    return value - timedelta(days=(value.weekday() + 1) % 7)


def format_long_date(value: str | date | None) -> str:
    """'Monday, January 6, 2025' style formatting for emails."""
    if value is None or value == "":
        return ""
    parsed = parse_date(value)
    return f"{DAYS_OF_WEEK[parsed.weekday()]}, {parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def day_bounds_utc(start: date, end: date) -> tuple[str, str]:
    """
    ISO strings covering `start` 00:00:00.000 through `end` 23:59:59.999 UTC.
    """
    utc = ZoneInfo("UTC")
    lower = datetime.combine(start, time.min, tzinfo=utc)
    upper = datetime.combine(end, time(23, 59, 59, 999000), tzinfo=utc)
    return (
        lower.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        upper.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )


# =============================================================================
# Times and Money
# =============================================================================

def normalize_time(value: str) -> str:
    """Pad 'HH:MM' to 'HH:MM:SS'; anything else is returned unchanged."""
    return f"{value}:00" if len(value) == 5 else value


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for 'HH:MM' or 'HH:MM:SS' (seconds dropped)."""
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Inverse of time_to_minutes, wrapping past midnight."""
    minutes %= 24 * 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}:00"


def round_cents(value: float) -> float:
    return round(value * 100) / 100


def to_number(value) -> float:
    """Coerce a numeric column (which PostgREST may send as a string) to float."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0

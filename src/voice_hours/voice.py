"""Formatting helpers for spoken responses.

Voice agents read these strings aloud, so dates use ordinals
("March 3rd") and times use a 12-hour clock with the zone abbreviation
("5:00 PM EST") unless a 24-hour clock is requested.
"""

from datetime import date, datetime, time, timedelta


def ordinal(n: int) -> str:
    """Return n with its English ordinal suffix (1st, 2nd, 11th, 23rd)."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_clock(value: time | datetime, hour_format: str = "12") -> str:
    """Format a wall-clock time without a zone, e.g. '8:00 AM' or '08:00'."""
    if hour_format == "24":
        return f"{value.hour:02d}:{value.minute:02d}"
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def format_time(value: datetime, hour_format: str = "12") -> str:
    """Format an aware datetime as '5:00 PM EST' (or '17:00 EST')."""
    return f"{format_clock(value, hour_format)} {value.tzname()}"


def format_long_date(value: date) -> str:
    """'Tuesday, March 3rd 2026'."""
    return f"{value:%A}, {value:%B} {ordinal(value.day)} {value.year}"


def format_medium_date(value: date) -> str:
    """'Mar 3, 2026'."""
    return f"{value:%b} {value.day}, {value.year}"


def format_full_date(value: date) -> str:
    """'Tuesday, March 3, 2026'."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_month_day(value: date) -> str:
    """'March 3rd'."""
    return f"{value:%B} {ordinal(value.day)}"


def format_date_time(value: datetime) -> str:
    """'Tuesday, March 3rd 2026 at 5:00 PM EST'."""
    return f"{format_long_date(value)} at {format_time(value)}"


def format_utc_offset(offset: timedelta | None) -> str:
    """Format a UTC offset as '+HH:MM' / '-HH:MM'."""
    if offset is None:
        return "+00:00"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"

"""Postal code to timezone resolution.

Region prefixes map to IANA zone identifiers through static tables. All
offset and DST arithmetic is left to the zone database via ``zoneinfo``.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from voice_hours.errors import TimezoneError
from voice_hours.postal import PostalKind, classify
from voice_hours.voice import format_utc_offset

# Keyed by the first digit of the ZIP code.
US_ZIP_TIMEZONES = MappingProxyType(
    {
        "0": "America/New_York",  # New England, Puerto Rico
        "1": "America/New_York",  # New York, Pennsylvania, Delaware
        "2": "America/New_York",  # DC, Maryland, Virginia, the Carolinas
        "3": "America/New_York",  # Florida, Georgia, Alabama, Tennessee
        "4": "America/New_York",  # Indiana, Kentucky, Michigan, Ohio
        "5": "America/Chicago",  # Iowa, Minnesota, the Dakotas, Wisconsin
        "6": "America/Chicago",  # Illinois, Kansas, Missouri, Nebraska
        "7": "America/Chicago",  # Arkansas, Louisiana, Oklahoma, Texas
        "8": "America/Denver",  # Mountain states
        "9": "America/Los_Angeles",  # Pacific states
    }
)

# Keyed by the first letter of the postal code.
CA_POSTAL_TIMEZONES = MappingProxyType(
    {
        "A": "America/St_Johns",  # Newfoundland and Labrador
        "B": "America/Halifax",  # Nova Scotia
        "C": "America/Halifax",  # Prince Edward Island
        "E": "America/Halifax",  # New Brunswick
        "G": "America/Toronto",  # Eastern Quebec
        "H": "America/Toronto",  # Montreal
        "J": "America/Toronto",  # Western Quebec
        "K": "America/Toronto",  # Eastern Ontario
        "L": "America/Toronto",  # Central Ontario
        "M": "America/Toronto",  # Toronto
        "N": "America/Toronto",  # Southwestern Ontario
        "P": "America/Toronto",  # Northern Ontario
        "R": "America/Winnipeg",  # Manitoba
        "S": "America/Regina",  # Saskatchewan
        "T": "America/Edmonton",  # Alberta
        "V": "America/Vancouver",  # British Columbia
        "X": "America/Edmonton",  # Northwest Territories, Nunavut
        "Y": "America/Whitehorse",  # Yukon
    }
)

_TABLES = {
    PostalKind.US: US_ZIP_TIMEZONES,
    PostalKind.CA: CA_POSTAL_TIMEZONES,
}


@dataclass(frozen=True)
class TimezoneMapping:
    """Timezone resolved from a postal code."""

    timezone_id: str
    abbreviation: str
    country: str
    postal_code: str


@dataclass(frozen=True)
class ZoneSnapshot:
    """State of a zone at one instant."""

    timezone_id: str
    local: datetime
    abbreviation: str
    utc_offset: str
    is_dst: bool


@dataclass(frozen=True)
class DateDetails:
    """Calendar breakdown of a local date."""

    day_of_week: str
    month: str
    day_of_month: int
    year: int
    quarter: int
    week_of_year: int
    day_of_year: int

    def to_dict(self) -> dict[str, object]:
        return {
            "dayOfWeek": self.day_of_week,
            "month": self.month,
            "dayOfMonth": self.day_of_month,
            "year": self.year,
            "quarter": self.quarter,
            "weekOfYear": self.week_of_year,
            "dayOfYear": self.day_of_year,
        }


def load_zone(timezone_id: str) -> ZoneInfo:
    """Load a zone from the IANA database.

    Raises:
        TimezoneError: If the identifier is not known.
    """
    try:
        return ZoneInfo(timezone_id)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimezoneError(f"Invalid timezone identifier: {timezone_id}") from e


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_time(timezone_id: str, at: datetime | None = None) -> datetime:
    """Convert an instant (default: now) to wall-clock time in a zone."""
    return (at or utc_now()).astimezone(load_zone(timezone_id))


def timezone_for_prefix(kind: PostalKind, prefix: str) -> str:
    """Look up the zone identifier for a classified prefix.

    Raises:
        TimezoneError: If the prefix has no table entry.
    """
    timezone_id = _TABLES[kind].get(prefix)
    if timezone_id is None:
        label = "US ZIP code" if kind is PostalKind.US else "Canadian postal code"
        raise TimezoneError(f"Unable to determine timezone for {label} prefix: {prefix}")
    return timezone_id


def resolve(code: str, at: datetime | None = None) -> TimezoneMapping:
    """Resolve a US ZIP or Canadian postal code to its timezone.

    Args:
        code: Postal code as typed or spoken by the caller.
        at: Instant used for the abbreviation (EST vs EDT). Defaults to now.

    Returns:
        TimezoneMapping with the IANA identifier and current abbreviation.

    Raises:
        ValidationError: If the code is malformed.
        TimezoneError: If the code cannot be mapped to a known zone.
    """
    postal = classify(code)
    timezone_id = timezone_for_prefix(postal.kind, postal.prefix)
    local = local_time(timezone_id, at)
    return TimezoneMapping(
        timezone_id=timezone_id,
        abbreviation=local.tzname() or timezone_id,
        country=postal.kind.value,
        postal_code=postal.normalized,
    )


def zone_snapshot(timezone_id: str, at: datetime | None = None) -> ZoneSnapshot:
    """Report offset and DST state of a zone at an instant."""
    local = local_time(timezone_id, at)
    dst = local.dst()
    return ZoneSnapshot(
        timezone_id=timezone_id,
        local=local,
        abbreviation=local.tzname() or timezone_id,
        utc_offset=format_utc_offset(local.utcoffset()),
        is_dst=bool(dst),
    )


def week_of_year(day: date) -> int:
    """Week number with Sunday-start weeks where week 1 contains January 1st."""
    week_start = day - timedelta(days=(day.weekday() + 1) % 7)
    if week_start + timedelta(days=6) >= date(day.year + 1, 1, 1):
        return 1
    jan1 = date(day.year, 1, 1)
    first_week_start = jan1 - timedelta(days=(jan1.weekday() + 1) % 7)
    return (week_start - first_week_start).days // 7 + 1


def date_details(day: date) -> DateDetails:
    """Break a date into the fields voice agents ask about."""
    return DateDetails(
        day_of_week=f"{day:%A}",
        month=f"{day:%B}",
        day_of_month=day.day,
        year=day.year,
        quarter=(day.month - 1) // 3 + 1,
        week_of_year=week_of_year(day),
        day_of_year=day.timetuple().tm_yday,
    )

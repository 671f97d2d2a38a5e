"""Business-hours availability engine.

Each business type has a fixed weekly schedule. Availability is a pure
function of the current instant, that schedule and the holiday calendar:
nothing here is cached or mutated between calls.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from voice_hours.errors import ValidationError
from voice_hours.holiday_calendar import Holiday, HolidayCalendar
from voice_hours.timezones import load_zone
from voice_hours.voice import (
    format_clock,
    format_date_time,
    format_long_date,
    format_month_day,
    format_time,
)

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Look-ahead caps. A cluster of holidays next to a weekend fits within two
# weeks; appointment searches cover a month.
NEXT_OPEN_SCAN_DAYS = 14
NEXT_BUSINESS_DAY_SCAN_DAYS = 30
UPCOMING_HOLIDAY_DAYS = 30
HOLIDAY_NOTICE_DAYS = 7


class BusinessType(str, Enum):
    """Kinds of business with their own weekly schedule."""

    DENTAL = "dental"
    MEDICAL = "medical"
    GENERAL = "general"


@dataclass(frozen=True)
class DayHours:
    """Opening window for one day of the week.

    Closed days still carry hours so the flag can be flipped without
    inventing a window.
    """

    open: time
    close: time
    closed: bool = False

    def __post_init__(self) -> None:
        if not self.closed and self.open >= self.close:
            raise ValueError(
                f"Opening time {self.open} must be before closing time {self.close}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "open": self.open.strftime("%H:%M"),
            "close": self.close.strftime("%H:%M"),
            "closed": self.closed,
        }


@dataclass(frozen=True)
class WeeklySchedule:
    """Opening windows for Monday through Sunday."""

    days: tuple[DayHours, ...]

    def __post_init__(self) -> None:
        if len(self.days) != 7:
            raise ValueError(f"A weekly schedule needs 7 days, got {len(self.days)}")

    @classmethod
    def from_mapping(cls, hours: Mapping[str, Mapping[str, Any]]) -> "WeeklySchedule":
        """Build a schedule from ``{"monday": {"open": "08:00", "close": "17:00"}, ...}``."""
        days = []
        for name in DAY_NAMES:
            entry = hours[name]
            days.append(
                DayHours(
                    open=time.fromisoformat(entry["open"]),
                    close=time.fromisoformat(entry["close"]),
                    closed=bool(entry.get("closed", False)),
                )
            )
        return cls(days=tuple(days))

    def for_date(self, day: date) -> DayHours:
        return self.days[day.weekday()]

    def is_closed_on(self, day: date) -> bool:
        return self.for_date(day).closed


SCHEDULES: Mapping[BusinessType, WeeklySchedule] = MappingProxyType(
    {
        BusinessType.DENTAL: WeeklySchedule.from_mapping(
            {
                "monday": {"open": "08:00", "close": "17:00"},
                "tuesday": {"open": "08:00", "close": "17:00"},
                "wednesday": {"open": "08:00", "close": "17:00"},
                "thursday": {"open": "08:00", "close": "17:00"},
                "friday": {"open": "08:00", "close": "17:00"},
                "saturday": {"open": "09:00", "close": "13:00", "closed": True},
                "sunday": {"open": "09:00", "close": "13:00", "closed": True},
            }
        ),
        BusinessType.MEDICAL: WeeklySchedule.from_mapping(
            {
                "monday": {"open": "07:00", "close": "19:00"},
                "tuesday": {"open": "07:00", "close": "19:00"},
                "wednesday": {"open": "07:00", "close": "19:00"},
                "thursday": {"open": "07:00", "close": "19:00"},
                "friday": {"open": "07:00", "close": "19:00"},
                "saturday": {"open": "08:00", "close": "16:00"},
                "sunday": {"open": "10:00", "close": "14:00", "closed": True},
            }
        ),
        BusinessType.GENERAL: WeeklySchedule.from_mapping(
            {
                "monday": {"open": "09:00", "close": "18:00"},
                "tuesday": {"open": "09:00", "close": "18:00"},
                "wednesday": {"open": "09:00", "close": "18:00"},
                "thursday": {"open": "09:00", "close": "18:00"},
                "friday": {"open": "09:00", "close": "18:00"},
                "saturday": {"open": "10:00", "close": "15:00"},
                "sunday": {"open": "12:00", "close": "16:00", "closed": True},
            }
        ),
    }
)


def parse_business_type(value: "str | BusinessType | None") -> BusinessType:
    """Turn user input into a BusinessType, defaulting to dental.

    Raises:
        ValidationError: If the value names no known business type.
    """
    if value is None or value == "":
        return BusinessType.DENTAL
    if isinstance(value, BusinessType):
        return value
    try:
        return BusinessType(str(value).strip().lower())
    except ValueError as e:
        choices = ", ".join(t.value for t in BusinessType)
        raise ValidationError(
            f"Unknown business type: {value}. Must be one of: {choices}."
        ) from e


def get_schedule(business_type: "str | BusinessType") -> WeeklySchedule:
    """Get the weekly schedule for a business type."""
    return SCHEDULES[parse_business_type(business_type)]


def _plural_day(day: date) -> str:
    return f"{day:%A}s"


@dataclass(frozen=True)
class HolidayInfo:
    """Whether a date is a holiday, and which one."""

    is_holiday: bool
    name: str | None = None
    date: "date | None" = None
    reason: str | None = None

    @classmethod
    def none(cls) -> "HolidayInfo":
        return cls(is_holiday=False)

    @classmethod
    def of(cls, holiday: Holiday) -> "HolidayInfo":
        return cls(
            is_holiday=True,
            name=holiday.name,
            date=holiday.date,
            reason=f"We are closed for {holiday.name}.",
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"isHoliday": self.is_holiday}
        if self.is_holiday:
            data["name"] = self.name
            data["date"] = self.date.isoformat() if self.date else None
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class UpcomingHoliday:
    """A holiday some whole number of calendar days ahead."""

    name: str
    date: date
    days_from_now: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "date": self.date.isoformat(),
            "spokenDate": format_long_date(self.date),
            "daysFromNow": self.days_from_now,
        }


@dataclass(frozen=True)
class AvailabilityResult:
    """Open/closed status of a business at one instant."""

    is_open: bool
    reasoning: str
    business_type: BusinessType
    timezone_id: str
    checked_at: datetime
    today_hours: DayHours
    next_open: datetime | None = None
    next_close: datetime | None = None
    holiday_info: HolidayInfo | None = None
    upcoming_holidays: tuple[UpcomingHoliday, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isOpen": self.is_open,
            "reasoning": self.reasoning,
            "businessType": self.business_type.value,
            "timezone": self.timezone_id,
            "currentTime": format_time(self.checked_at),
            "currentDate": format_long_date(self.checked_at),
            "currentDateTime": format_date_time(self.checked_at),
            "nextOpenInstant": self.next_open.isoformat() if self.next_open else None,
            "nextOpenDateTime": format_date_time(self.next_open) if self.next_open else None,
            "nextCloseInstant": self.next_close.isoformat() if self.next_close else None,
            "nextCloseDateTime": format_date_time(self.next_close) if self.next_close else None,
            "todayHours": self.today_hours.to_dict(),
            "holidayInfo": self.holiday_info.to_dict() if self.holiday_info else None,
            "upcomingHolidays": [h.to_dict() for h in self.upcoming_holidays],
        }


@dataclass(frozen=True)
class DateAvailability:
    """Whether appointments can be booked on a date."""

    is_available: bool
    reason: str | None = None
    holiday_info: HolidayInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "isAvailable": self.is_available,
            "reason": self.reason,
            "holidayInfo": self.holiday_info.to_dict() if self.holiday_info else None,
        }


@dataclass(frozen=True)
class NextBusinessDay:
    """The first bookable day found by a forward search."""

    date: date
    open_time: datetime
    close_time: datetime
    days_from_now: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "spokenDate": format_long_date(self.date),
            "openTime": format_time(self.open_time),
            "closeTime": format_time(self.close_time),
            "openInstant": self.open_time.isoformat(),
            "closeInstant": self.close_time.isoformat(),
            "daysFromNow": self.days_from_now,
        }


class BusinessHoursEngine:
    """Answers open/closed and appointment-day questions for a jurisdiction."""

    def __init__(
        self,
        holiday_calendar: HolidayCalendar,
        schedules: Mapping[BusinessType, WeeklySchedule] = SCHEDULES,
    ) -> None:
        """Initialize the engine.

        Args:
            holiday_calendar: Source of public holidays for the jurisdiction.
            schedules: Weekly schedule per business type.
        """
        self.holiday_calendar = holiday_calendar
        self.schedules = schedules

    def schedule_for(self, business_type: "str | BusinessType") -> WeeklySchedule:
        return self.schedules[parse_business_type(business_type)]

    def check_holiday(self, day: date) -> HolidayInfo:
        """Check whether a calendar date is a public holiday."""
        for holiday in self.holiday_calendar.holidays_for_year(day.year):
            if holiday.date == day:
                return HolidayInfo.of(holiday)
        return HolidayInfo.none()

    def upcoming_holidays(
        self, now: datetime, days_ahead: int = UPCOMING_HOLIDAY_DAYS
    ) -> list[UpcomingHoliday]:
        """List holidays from today through ``days_ahead`` days out, soonest first."""
        today = now.date()
        candidates = self.holiday_calendar.holidays_for_year(
            today.year
        ) + self.holiday_calendar.holidays_for_year(today.year + 1)

        upcoming = []
        for holiday in candidates:
            days_from_now = (holiday.date - today).days
            if 0 <= days_from_now <= days_ahead:
                upcoming.append(
                    UpcomingHoliday(
                        name=holiday.name, date=holiday.date, days_from_now=days_from_now
                    )
                )
        return sorted(upcoming, key=lambda h: h.days_from_now)

    def _open_instant(self, day: date, hours: DayHours, zone_id: str) -> datetime:
        return datetime.combine(day, hours.open, tzinfo=load_zone(zone_id))

    def _close_instant(self, day: date, hours: DayHours, zone_id: str) -> datetime:
        return datetime.combine(day, hours.close, tzinfo=load_zone(zone_id))

    def find_next_open(
        self, timezone_id: str, business_type: "str | BusinessType", after: date
    ) -> datetime | None:
        """Find the opening instant of the first business day after ``after``.

        Looks at most NEXT_OPEN_SCAN_DAYS days ahead; returns None when every
        day in that span is closed or a holiday.
        """
        schedule = self.schedule_for(business_type)
        for offset in range(1, NEXT_OPEN_SCAN_DAYS + 1):
            day = after + timedelta(days=offset)
            hours = schedule.for_date(day)
            if hours.closed or self.check_holiday(day).is_holiday:
                continue
            return self._open_instant(day, hours, timezone_id)
        return None

    def check_availability(
        self,
        timezone_id: str,
        business_type: "str | BusinessType",
        now: datetime,
    ) -> AvailabilityResult:
        """Work out whether the business is open at ``now``.

        A holiday today takes precedence over the weekly schedule, so a
        holiday falling on a Sunday is reported as the holiday.

        Args:
            timezone_id: IANA zone of the business.
            business_type: Which weekly schedule applies.
            now: Aware instant to evaluate; converted to ``timezone_id``.

        Returns:
            AvailabilityResult with the status, the next transition and
            upcoming holidays.
        """
        btype = parse_business_type(business_type)
        local_now = now.astimezone(load_zone(timezone_id))
        today = local_now.date()
        today_hours = self.schedules[btype].for_date(today)
        holiday_info = self.check_holiday(today)

        is_open = False
        next_open: datetime | None = None
        next_close: datetime | None = None

        if holiday_info.is_holiday:
            next_open = self.find_next_open(timezone_id, btype, today)
            reasoning = holiday_info.reason or f"We are closed for {holiday_info.name}."
            reasoning += self._reopening_sentence(next_open)
        elif today_hours.closed:
            next_open = self.find_next_open(timezone_id, btype, today)
            reasoning = f"We are closed on {_plural_day(today)}."
            reasoning += self._reopening_sentence(next_open)
        else:
            open_at = self._open_instant(today, today_hours, timezone_id)
            close_at = self._close_instant(today, today_hours, timezone_id)

            if local_now < open_at:
                next_open = open_at
                reasoning = (
                    f"We are currently closed. We open today ({format_long_date(today)}) "
                    f"at {format_time(open_at)}."
                )
            elif local_now > close_at:
                next_open = self.find_next_open(timezone_id, btype, today)
                reasoning = f"We are currently closed. We closed today at {format_time(close_at)}."
                reasoning += self._reopening_sentence(next_open)
            else:
                is_open = True
                next_close = close_at
                reasoning = (
                    f"We are currently open! We close today ({format_month_day(today)}) "
                    f"at {format_time(close_at)}."
                )

        return AvailabilityResult(
            is_open=is_open,
            reasoning=reasoning,
            business_type=btype,
            timezone_id=timezone_id,
            checked_at=local_now,
            today_hours=today_hours,
            next_open=next_open,
            next_close=next_close,
            holiday_info=holiday_info if holiday_info.is_holiday else None,
            upcoming_holidays=tuple(self.upcoming_holidays(local_now)),
        )

    @staticmethod
    def _reopening_sentence(next_open: datetime | None) -> str:
        if next_open is None:
            return " Please contact us directly to find out when we reopen."
        return f" We will be open next on {format_date_time(next_open)}."

    def is_business_day(
        self, day: date, business_type: "str | BusinessType"
    ) -> tuple[bool, str | None]:
        """Check a date against the weekly schedule, then the holiday calendar.

        Returns:
            Tuple of (is_business_day, reason). The weekly closure reason is
            reported when a closed weekday is also a holiday.
        """
        if self.schedule_for(business_type).is_closed_on(day):
            return False, f"We are closed on {_plural_day(day)}."

        holiday_info = self.check_holiday(day)
        if holiday_info.is_holiday:
            return False, holiday_info.reason

        return True, None

    def is_date_available(
        self, day: date, timezone_id: str, business_type: "str | BusinessType"
    ) -> DateAvailability:
        """Check whether appointments can be booked on a date."""
        load_zone(timezone_id)
        available, reason = self.is_business_day(day, business_type)
        if available:
            return DateAvailability(is_available=True)

        holiday_info = self.check_holiday(day)
        return DateAvailability(
            is_available=False,
            reason=reason,
            holiday_info=holiday_info if holiday_info.is_holiday else None,
        )

    def next_available_business_day(
        self,
        timezone_id: str,
        business_type: "str | BusinessType",
        start: date,
    ) -> NextBusinessDay | None:
        """Find the first business day from ``start`` (inclusive).

        Only the day's schedule and holiday status are considered, so today
        qualifies even after closing time. Returns None when nothing is
        found within NEXT_BUSINESS_DAY_SCAN_DAYS days.
        """
        schedule = self.schedule_for(business_type)
        for offset in range(NEXT_BUSINESS_DAY_SCAN_DAYS + 1):
            day = start + timedelta(days=offset)
            available, _ = self.is_business_day(day, business_type)
            if not available:
                continue
            hours = schedule.for_date(day)
            return NextBusinessDay(
                date=day,
                open_time=self._open_instant(day, hours, timezone_id),
                close_time=self._close_instant(day, hours, timezone_id),
                days_from_now=offset,
            )
        return None

    def weekly_hours_text(self, business_type: "str | BusinessType") -> str:
        """List every day's hours, e.g. 'Monday: 8:00 AM to 5:00 PM, ...'."""
        schedule = self.schedule_for(business_type)
        parts = []
        for name, hours in zip(DAY_NAMES, schedule.days):
            if hours.closed:
                parts.append(f"{name.capitalize()}: Closed")
            else:
                parts.append(
                    f"{name.capitalize()}: {format_clock(hours.open)} to {format_clock(hours.close)}"
                )
        return ", ".join(parts)

    def hours_summary(
        self,
        business_type: "str | BusinessType",
        now: datetime | None = None,
        notice_days: int = HOLIDAY_NOTICE_DAYS,
    ) -> str:
        """Describe typical hours, optionally prefixed with today's context.

        Args:
            business_type: Which weekly schedule to describe.
            now: Local instant for date and holiday context. Omit for a
                context-free summary.
            notice_days: Mention a holiday at most this many days ahead.
        """
        schedule = self.schedule_for(business_type)
        context = ""

        if now is not None:
            context = (
                f"Today is {format_long_date(now)} and it's currently {format_time(now)}. "
            )
            today_holiday = self.check_holiday(now.date())
            upcoming = self.upcoming_holidays(now, notice_days)
            if today_holiday.is_holiday:
                context += f"Today is {today_holiday.name}, so we are closed today. "
            elif upcoming:
                nxt = upcoming[0]
                context += (
                    f"Please note: {nxt.name} is coming up on {format_long_date(nxt.date)}, "
                    "and we will be closed that day. "
                )

        weekday = schedule.days[0]
        summary = (
            f"{context}Our typical hours are Monday through Friday, "
            f"{format_clock(weekday.open)} to {format_clock(weekday.close)}."
        )

        for label, hours in (("Saturday", schedule.days[5]), ("Sunday", schedule.days[6])):
            if hours.closed:
                summary += f" We are closed on {label}s."
            else:
                summary += f" {label}: {format_clock(hours.open)} to {format_clock(hours.close)}."

        return summary

"""Business time and hours tools for voice agents.

Each tool resolves the caller's postal code to a timezone, evaluates the
question against the local wall clock and answers with a sentence that
can be read aloud, plus the structured data behind it.
"""

import re
from datetime import date, datetime
from typing import Callable

from voice_hours.config import Settings, get_settings
from voice_hours.errors import ValidationError
from voice_hours.holiday_calendar import HolidayCalendar, get_holiday_calendar
from voice_hours.hours import (
    AvailabilityResult,
    BusinessHoursEngine,
    BusinessType,
    DAY_NAMES,
)
from voice_hours.timezones import (
    TimezoneMapping,
    date_details,
    local_time,
    resolve,
    utc_now,
    zone_snapshot,
)
from voice_hours.tools.registry import Tool, ToolOutput, ToolParameter
from voice_hours.voice import (
    format_full_date,
    format_long_date,
    format_medium_date,
    format_time,
)

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

BUSINESS_TYPES = [t.value for t in BusinessType]


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string.

    Raises:
        ValidationError: If the string is not a real date in that format.
    """
    text = str(value).strip()
    if ISO_DATE_PATTERN.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise ValidationError(f"Invalid date: {value}. Please use the YYYY-MM-DD format.")


def answer_availability(result: AvailabilityResult) -> str:
    """Turn an availability result into a yes/no spoken answer."""
    if result.is_open:
        return f"Yes, {result.reasoning[0].lower()}{result.reasoning[1:]}"
    reasoning = result.reasoning.removeprefix("We are currently closed. ")
    return f"No, we are currently closed. {reasoning}"


class BusinessTools:
    """The tool surface: postal code in, spoken answer out."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
        holiday_calendar_for: Callable[[str], HolidayCalendar] | None = None,
    ) -> None:
        """Initialize the toolset.

        Args:
            settings: Application settings. If None, uses get_settings().
            clock: Returns the current aware instant. Defaults to UTC now.
            holiday_calendar_for: Maps a country code ("US", "CA") to its
                holiday calendar. Defaults to the public holiday database.
        """
        self.settings = settings or get_settings()
        self.clock = clock or utc_now
        self.holiday_calendar_for = holiday_calendar_for or self._public_holidays

    def _public_holidays(self, country: str) -> HolidayCalendar:
        if self.settings.holiday_country:
            return get_holiday_calendar(
                self.settings.holiday_country, self.settings.holiday_subdivision
            )
        return get_holiday_calendar(country)

    def _locate(self, zip_code: str) -> tuple[TimezoneMapping, BusinessHoursEngine, datetime]:
        """Resolve a postal code to its zone, engine and local time."""
        now = self.clock()
        mapping = resolve(zip_code, now)
        engine = BusinessHoursEngine(self.holiday_calendar_for(mapping.country))
        return mapping, engine, local_time(mapping.timezone_id, now)

    async def get_business_time(self, zipCode: str, format: str = "12") -> ToolOutput:
        mapping, engine, now = self._locate(zipCode)
        snapshot = zone_snapshot(mapping.timezone_id, now)
        details = date_details(now.date())
        holiday = engine.check_holiday(now.date())
        upcoming = engine.upcoming_holidays(now, self.settings.upcoming_holiday_days)

        current_time = format_time(now, format)
        text = (
            f"It is currently {current_time} on {details.day_of_week}, "
            f"{format_medium_date(now)} in the {mapping.postal_code} area."
        )
        if holiday.is_holiday:
            text += f" Today is {holiday.name}."

        return ToolOutput(
            text=text,
            data={
                "currentTime": current_time,
                "timezone": mapping.timezone_id,
                "timezoneName": snapshot.abbreviation,
                "isDST": snapshot.is_dst,
                "utcOffset": snapshot.utc_offset,
                "zipCode": mapping.postal_code,
                "formatted": text,
                "currentDate": format_medium_date(now),
                **details.to_dict(),
                "holidayInfo": holiday.to_dict() if holiday.is_holiday else None,
                "upcomingHolidays": [h.to_dict() for h in upcoming],
            },
        )

    async def check_business_hours(self, zipCode: str, businessType: str = "dental") -> ToolOutput:
        mapping, engine, now = self._locate(zipCode)
        result = engine.check_availability(mapping.timezone_id, businessType, now)

        text = answer_availability(result)
        notice = [
            h
            for h in result.upcoming_holidays
            if not (result.holiday_info and h.date == result.holiday_info.date)
        ]
        if notice and notice[0].days_from_now <= self.settings.holiday_callout_days:
            nxt = notice[0]
            text += (
                f" Please note: {nxt.name} is coming up on {format_long_date(nxt.date)}, "
                "and we will be closed that day."
            )

        data = result.to_dict()
        data["zipCode"] = mapping.postal_code
        data["formatted"] = text
        return ToolOutput(text=text, data=data)

    async def get_timezone_info(self, zipCode: str) -> ToolOutput:
        mapping, engine, now = self._locate(zipCode)
        snapshot = zone_snapshot(mapping.timezone_id, now)
        details = date_details(now.date())
        holiday = engine.check_holiday(now.date())
        upcoming = engine.upcoming_holidays(now, self.settings.upcoming_holiday_days)

        dst_status = (
            "observing daylight saving time" if snapshot.is_dst else "on standard time"
        )
        text = (
            f"The {mapping.postal_code} area is in the {snapshot.abbreviation} timezone "
            f"({mapping.timezone_id}), currently {dst_status}. "
            f"Today is {format_full_date(now)}. "
            f"The local time is {format_time(now)} (UTC{snapshot.utc_offset}). "
            f"Additional details: It's day {details.day_of_year} of the year, "
            f"week {details.week_of_year}, in {details.month}, "
            f"quarter {details.quarter} of {details.year}."
        )
        if holiday.is_holiday:
            text += f" Today is {holiday.name}."

        later = [h for h in upcoming if h.days_from_now > 0]
        if later and later[0].days_from_now <= self.settings.timezone_info_holiday_days:
            nxt = later[0]
            text += (
                f" Upcoming holiday: {nxt.name} on {format_long_date(nxt.date)} "
                f"({nxt.days_from_now} days from now)."
            )

        return ToolOutput(
            text=text,
            data={
                "timezone": mapping.timezone_id,
                "timezoneName": snapshot.abbreviation,
                "currentTime": format_time(now),
                "isDST": snapshot.is_dst,
                "utcOffset": snapshot.utc_offset,
                "zipCode": mapping.postal_code,
                "currentDate": format_full_date(now),
                **details.to_dict(),
                "holidayInfo": holiday.to_dict() if holiday.is_holiday else None,
                "upcomingHolidays": [h.to_dict() for h in upcoming],
            },
        )

    async def check_date_availability(
        self, zipCode: str, date: str, businessType: str = "dental"
    ) -> ToolOutput:
        day = parse_iso_date(date)
        mapping, engine, _ = self._locate(zipCode)
        availability = engine.is_date_available(day, mapping.timezone_id, businessType)

        spoken = format_long_date(day)
        if availability.is_available:
            text = f"Yes, {spoken} is available for appointments."
        else:
            text = f"No, {spoken} is not available for appointments. {availability.reason}"

        data = availability.to_dict()
        data.update(date=day.isoformat(), zipCode=mapping.postal_code, businessType=businessType)
        return ToolOutput(text=text, data=data)

    async def get_next_available_day(self, zipCode: str, businessType: str = "dental") -> ToolOutput:
        mapping, engine, now = self._locate(zipCode)
        next_day = engine.next_available_business_day(mapping.timezone_id, businessType, now.date())

        if next_day is None:
            return ToolOutput(
                text=(
                    "I couldn't find an available appointment day in the next 30 days. "
                    "Please contact us directly."
                ),
                data={"found": False, "zipCode": mapping.postal_code},
            )

        hours = f"We're open from {format_time(next_day.open_time)} to {format_time(next_day.close_time)}."
        spoken = format_long_date(next_day.date)
        if next_day.days_from_now == 0:
            text = f"Today is available for appointments. {hours}"
        elif next_day.days_from_now == 1:
            text = f"Tomorrow ({spoken}) is available for appointments. {hours}"
        else:
            text = (
                f"The next available day for appointments is {spoken} "
                f"({next_day.days_from_now} days from now). {hours}"
            )

        data = next_day.to_dict()
        data.update(found=True, zipCode=mapping.postal_code)
        return ToolOutput(text=text, data=data)

    async def get_business_hours_summary(
        self, businessType: str = "dental", zipCode: str | None = None
    ) -> ToolOutput:
        if zipCode:
            mapping, engine, now = self._locate(zipCode)
            summary = engine.hours_summary(businessType, now, self.settings.holiday_callout_days)
        else:
            engine = BusinessHoursEngine(self.holiday_calendar_for(self.settings.holiday_country or "US"))
            summary = engine.hours_summary(businessType)

        schedule = engine.schedule_for(businessType)
        return ToolOutput(
            text=summary,
            data={
                "businessType": businessType,
                "summary": summary,
                "weeklyHours": {
                    name: hours.to_dict() for name, hours in zip(DAY_NAMES, schedule.days)
                },
                "hoursText": engine.weekly_hours_text(businessType),
            },
        )

    async def get_holidays(self, zipCode: str, year: int | None = None) -> ToolOutput:
        mapping, engine, now = self._locate(zipCode)
        if year is None:
            target_year = now.year
        else:
            try:
                target_year = int(year)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid year: {year}") from e

        holidays = engine.holiday_calendar.holidays_for_year(target_year)
        if not holidays:
            text = f"I don't have any public holidays on record for {target_year}."
        else:
            listed = ", ".join(f"{h.name} on {format_long_date(h.date)}" for h in holidays)
            text = f"There are {len(holidays)} public holidays in {target_year}: {listed}."

        return ToolOutput(
            text=text,
            data={
                "year": target_year,
                "country": mapping.country,
                "zipCode": mapping.postal_code,
                "holidays": [
                    {"name": h.name, "date": h.date.isoformat(), "spokenDate": format_long_date(h.date)}
                    for h in holidays
                ],
            },
        )

    def get_tools(self) -> list[Tool]:
        """Get all business tools bound to this toolset."""
        zip_param = ToolParameter(
            name="zipCode",
            type="string",
            description="US ZIP code (e.g. '33067') or Canadian postal code (e.g. 'M5V 3L9')",
        )
        business_type_param = ToolParameter(
            name="businessType",
            type="string",
            description="Type of business for hours calculation",
            required=False,
            enum=BUSINESS_TYPES,
            default=self.settings.default_business_type.value,
        )

        return [
            Tool(
                name="getBusinessTime",
                title="Get Current Business Time",
                description=(
                    "Get the current local time and date for a business location using ZIP code "
                    "or postal code. Perfect for 'What time is it there?' questions."
                ),
                parameters=[
                    zip_param,
                    ToolParameter(
                        name="format",
                        type="string",
                        description="Time format: 12-hour or 24-hour",
                        required=False,
                        enum=["12", "24"],
                        default="12",
                    ),
                ],
                handler=self.get_business_time,
                apology="I'm sorry, I couldn't determine the time for that location.",
                action="get business time",
            ),
            Tool(
                name="checkBusinessHours",
                title="Check Business Hours Status",
                description=(
                    "Determine if a business is currently open based on location and business "
                    "type. Answers 'Are you open now?' questions with detailed reasoning "
                    "including holiday awareness."
                ),
                parameters=[zip_param, business_type_param],
                handler=self.check_business_hours,
                apology="I'm sorry, I couldn't check our hours for that location.",
                action="check business hours",
            ),
            Tool(
                name="getTimezoneInfo",
                title="Get Timezone Information",
                description=(
                    "Get comprehensive timezone details for a location including DST status, "
                    "UTC offset, timezone name, detailed date information, and holiday awareness."
                ),
                parameters=[zip_param],
                handler=self.get_timezone_info,
                apology="I'm sorry, I couldn't get timezone information for that location.",
                action="get timezone information",
            ),
            Tool(
                name="checkDateAvailability",
                title="Check Date Availability",
                description=(
                    "Check if a specific date is available for appointments, considering "
                    "business hours, weekends, and holidays."
                ),
                parameters=[
                    zip_param,
                    ToolParameter(
                        name="date",
                        type="string",
                        description="Date to check in YYYY-MM-DD format",
                    ),
                    business_type_param,
                ],
                handler=self.check_date_availability,
                apology="I'm sorry, I couldn't check availability for that date.",
                action="check date availability",
            ),
            Tool(
                name="getNextAvailableDay",
                title="Get Next Available Business Day",
                description=(
                    "Find the next available business day for appointments, automatically "
                    "excluding weekends and holidays."
                ),
                parameters=[zip_param, business_type_param],
                handler=self.get_next_available_day,
                apology="I'm sorry, I couldn't find the next available day.",
                action="get next available day",
            ),
            Tool(
                name="getBusinessHoursSummary",
                title="Get Business Hours Summary",
                description=(
                    "Summarize typical weekly hours for a business type. With a ZIP or postal "
                    "code, also mentions today's date and any holiday closure this week."
                ),
                parameters=[
                    business_type_param,
                    ToolParameter(
                        name="zipCode",
                        type="string",
                        description="Optional US ZIP code or Canadian postal code for date context",
                        required=False,
                    ),
                ],
                handler=self.get_business_hours_summary,
                apology="I'm sorry, I couldn't look up our hours.",
                action="get business hours summary",
            ),
            Tool(
                name="getHolidays",
                title="List Public Holidays",
                description=(
                    "List the public holidays for a year in the location's country. "
                    "Defaults to the current year."
                ),
                parameters=[
                    zip_param,
                    ToolParameter(
                        name="year",
                        type="integer",
                        description="Calendar year, e.g. 2026",
                        required=False,
                    ),
                ],
                handler=self.get_holidays,
                apology="I'm sorry, I couldn't look up the holidays for that location.",
                action="list holidays",
            ),
        ]


def get_business_tools() -> list[Tool]:
    """Get all business tools with default settings and the system clock."""
    return BusinessTools().get_tools()

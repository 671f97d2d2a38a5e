"""Public holiday lookup.

The business-hours engine only needs one capability from a holiday
source: the list of holidays for a year. ``PublicHolidays`` answers it
from the ``holidays`` package; ``FixedHolidays`` answers it from a fixed
list so tests never depend on the real calendar.
"""

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Iterable, Protocol

import holidays

from voice_hours.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Holiday:
    """A named public holiday."""

    name: str
    date: date


class HolidayCalendar(Protocol):
    """Anything that can list the holidays of a year."""

    def holidays_for_year(self, year: int) -> list[Holiday]: ...


class PublicHolidays:
    """Holidays observed in a country (and optionally a subdivision)."""

    def __init__(self, country: str, subdivision: str | None = None) -> None:
        self.country = country.upper()
        self.subdivision = subdivision
        self._years: dict[int, list[Holiday]] = {}

    def holidays_for_year(self, year: int) -> list[Holiday]:
        if year not in self._years:
            try:
                calendar = holidays.country_holidays(
                    self.country, subdiv=self.subdivision, years=year
                )
            except NotImplementedError as e:
                raise ValidationError(
                    f"No holiday calendar available for {self.country}"
                ) from e
            # Several holidays on one day come back as a single "; "-joined name.
            self._years[year] = sorted(
                (Holiday(name=name, date=day) for day, name in calendar.items()),
                key=lambda h: h.date,
            )
            logger.debug(
                "Loaded %d %s holidays for %d", len(self._years[year]), self.country, year
            )
        return list(self._years[year])

    def __repr__(self) -> str:
        return f"PublicHolidays({self.country!r}, subdivision={self.subdivision!r})"


class FixedHolidays:
    """A holiday calendar backed by an explicit list."""

    def __init__(self, entries: Iterable[Holiday] = ()) -> None:
        self._entries = sorted(entries, key=lambda h: h.date)

    def holidays_for_year(self, year: int) -> list[Holiday]:
        return [h for h in self._entries if h.date.year == year]


@lru_cache
def get_holiday_calendar(country: str, subdivision: str | None = None) -> PublicHolidays:
    """Get a shared holiday calendar for a jurisdiction."""
    return PublicHolidays(country, subdivision)

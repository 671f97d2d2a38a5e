"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone
from typing import Any, Callable

import pytest

from voice_hours.config import Settings
from voice_hours.holiday_calendar import FixedHolidays, Holiday
from voice_hours.hours import BusinessHoursEngine
from voice_hours.tools.business import BusinessTools
from voice_hours.tools.registry import ToolRegistry

# A deterministic holiday set. Easter Sunday is not a US public holiday; it
# is here to exercise a holiday that lands on a closed weekday.
HOLIDAYS = [
    Holiday("New Year's Day", date(2026, 1, 1)),
    Holiday("Easter Sunday", date(2026, 4, 5)),
    Holiday("Memorial Day", date(2026, 5, 25)),
    Holiday("Independence Day (observed)", date(2026, 7, 3)),
    Holiday("Labor Day", date(2026, 9, 7)),
    Holiday("Thanksgiving Day", date(2026, 11, 26)),
    Holiday("Christmas Day", date(2026, 12, 25)),
    Holiday("New Year's Day", date(2027, 1, 1)),
]


def fixed_clock(instant: datetime) -> Callable[[], datetime]:
    """A clock that always returns the same instant (as UTC)."""
    utc = instant.astimezone(timezone.utc)
    return lambda: utc


@pytest.fixture
def holiday_calendar() -> FixedHolidays:
    """Deterministic holiday calendar for 2026 and New Year 2027."""
    return FixedHolidays(HOLIDAYS)


@pytest.fixture
def engine(holiday_calendar: FixedHolidays) -> BusinessHoursEngine:
    """Business-hours engine backed by the fixed holidays."""
    return BusinessHoursEngine(holiday_calendar)


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def make_tools(
    settings: Settings, holiday_calendar: FixedHolidays
) -> Callable[..., BusinessTools]:
    """Factory for business tools frozen at a given Eastern wall-clock time."""

    def factory(now: datetime, calendar: Any = None) -> BusinessTools:
        return BusinessTools(
            settings=settings,
            clock=fixed_clock(now),
            holiday_calendar_for=lambda country: calendar or holiday_calendar,
        )

    return factory


@pytest.fixture
def make_registry(make_tools: Callable[..., BusinessTools]) -> Callable[..., ToolRegistry]:
    """Factory for a registry holding business tools frozen at a given time."""

    def factory(now: datetime, calendar: Any = None) -> ToolRegistry:
        registry = ToolRegistry()
        for tool in make_tools(now, calendar).get_tools():
            registry.register(tool)
        return registry

    return factory


# Skip markers for different test types
def pytest_configure(config: Any) -> None:
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that exercise the HTTP/MCP layers")
    config.addinivalue_line("markers", "slow: marks tests as slow")

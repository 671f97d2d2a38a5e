"""Unit tests for configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from voice_hours.config import Settings
from voice_hours.hours import BusinessType


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self) -> None:
        """Settings have sensible defaults when no env vars are set."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(
                _env_file=None,  # Disable .env loading
            )

        assert settings.server_name == "voice-hours"
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.cors_origins == ["*"]
        assert settings.holiday_country is None
        assert settings.upcoming_holiday_days == 30
        assert settings.holiday_callout_days == 7
        assert settings.timezone_info_holiday_days == 14
        assert settings.default_business_type == "dental"

    def test_loads_from_env(self) -> None:
        """Settings load from environment variables."""
        env = {
            "PORT": "8080",
            "LOG_LEVEL": "DEBUG",
            "HOLIDAY_COUNTRY": "CA",
            "HOLIDAY_SUBDIVISION": "ON",
            "CORS_ORIGINS": '["https://example.com"]',
            "DEFAULT_BUSINESS_TYPE": "medical",
        }

        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.holiday_country == "CA"
        assert settings.holiday_subdivision == "ON"
        assert settings.cors_origins == ["https://example.com"]
        assert settings.default_business_type == "medical"

    def test_unrelated_env_vars_ignored(self) -> None:
        """Unknown variables do not break loading."""
        with patch.dict(os.environ, {"GEMINI_API_KEY": "x"}, clear=True):
            settings = Settings(_env_file=None)
        assert not hasattr(settings, "gemini_api_key")

    def test_default_business_type_is_case_insensitive(self) -> None:
        """Mixed-case business types load as the enum member."""
        with patch.dict(os.environ, {"DEFAULT_BUSINESS_TYPE": "Medical"}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.default_business_type is BusinessType.MEDICAL

    def test_unknown_default_business_type_fails_at_load(self) -> None:
        """An unknown business type is rejected when settings load."""
        with patch.dict(os.environ, {"DEFAULT_BUSINESS_TYPE": "spa"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

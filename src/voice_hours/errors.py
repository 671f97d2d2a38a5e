"""Error types raised by the domain layer."""


class VoiceHoursError(Exception):
    """Base class for errors reported back to the caller."""


class ValidationError(VoiceHoursError):
    """Input could not be understood (postal code, date, business type)."""


class TimezoneError(VoiceHoursError):
    """Input was well-formed but the timezone could not be resolved."""

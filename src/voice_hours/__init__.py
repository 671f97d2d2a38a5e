"""Voice Hours - business hours and timezone tools for voice agents."""

__version__ = "1.0.0"

from __future__ import annotations


class WaktuSholatError(Exception):
    """Base class for every error the notifier reports."""


class ConfigurationError(WaktuSholatError):
    """Missing or conflicting flags, malformed input or an invalid config file."""


class CityNotFoundError(WaktuSholatError, LookupError):
    def __init__(self, city: str) -> None:
        super().__init__(f"City '{city}' not found in the local database.")
        self.city = city


class CalculationError(WaktuSholatError):
    """The prayer time provider could not produce a schedule."""


class AmbiguousLocalTime(CalculationError):
    """A wall-clock time is ambiguous or does not exist in the local zone."""


class NotificationError(WaktuSholatError):
    """Delivering the desktop alert failed."""


class StatusOutputError(WaktuSholatError):
    """The status line could not be written, usually because the reader went away."""

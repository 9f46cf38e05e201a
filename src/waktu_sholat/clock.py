"""Clock abstraction so the scheduler can run against a fixed instant."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Protocol

from .timeutils import localize, parse_hhmm


class Clock(Protocol):
    is_fixed: bool

    def now(self) -> datetime: ...


class RealClock:
    """Current local time, sampled on every call."""

    is_fixed = False

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)


class FixedClock:
    """Always reports the same instant; a scheduler driven by it runs one cycle."""

    is_fixed = True

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware instant")
        self.instant = instant

    @classmethod
    def at_time_of_day(cls, value: str, *, today: date | None = None, tz: tzinfo | None = None) -> "FixedClock":
        moment = parse_hhmm(value)
        if today is None:
            today = RealClock(tz).now().date()
        return cls(localize(datetime.combine(today, moment), tz))

    def now(self) -> datetime:
        return self.instant

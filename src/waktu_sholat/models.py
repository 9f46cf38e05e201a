from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Union

from .errors import CalculationError


class PrayerKind(str, Enum):
    FAJR = "Fajr"
    DHUHR = "Dhuhr"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"


CANONICAL_ORDER: tuple[PrayerKind, ...] = tuple(PrayerKind)


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float

    def as_tuple(self) -> tuple[float, float]:
        return self.latitude, self.longitude


@dataclass(frozen=True, slots=True)
class DailySchedule:
    """The five prayer instants of one calendar date, in canonical order."""

    day: date
    entries: tuple[tuple[PrayerKind, datetime], ...]

    def __post_init__(self) -> None:
        kinds = tuple(kind for kind, _ in self.entries)
        if kinds != CANONICAL_ORDER:
            raise CalculationError(
                f"Schedule for {self.day} must list {', '.join(k.value for k in CANONICAL_ORDER)} in order"
            )
        instants = [moment for _, moment in self.entries]
        for earlier, later in zip(instants, instants[1:]):
            if not earlier < later:
                raise CalculationError(
                    f"Prayer times for {self.day} are not strictly increasing: {earlier:%H:%M} >= {later:%H:%M}"
                )

    @classmethod
    def from_instants(cls, day: date, instants: Iterable[datetime]) -> "DailySchedule":
        values = tuple(instants)
        if len(values) != len(CANONICAL_ORDER):
            raise CalculationError(f"Expected five prayer times for {day}, got {len(values)}")
        return cls(day=day, entries=tuple(zip(CANONICAL_ORDER, values)))

    def time_of(self, kind: PrayerKind) -> datetime:
        for entry_kind, moment in self.entries:
            if entry_kind is kind:
                return moment
        raise KeyError(kind)  # pragma: no cover - entries always hold every kind


@dataclass(frozen=True, slots=True)
class PrayerEvent:
    kind: PrayerKind
    instant: datetime


@dataclass(frozen=True, slots=True)
class RolloverEvent:
    instant: datetime


NextEvent = Union[PrayerEvent, RolloverEvent]


@dataclass(frozen=True, slots=True)
class StatusRecord:
    fajr: str
    dhuhr: str
    asr: str
    maghrib: str
    isha: str
    next: str

    def to_dict(self) -> dict[str, str]:
        return {
            "Fajr": self.fajr,
            "Dhuhr": self.dhuhr,
            "Asr": self.asr,
            "Maghrib": self.maghrib,
            "Isha": self.isha,
            "next": self.next,
        }

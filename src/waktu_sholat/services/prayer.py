from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
import logging
from typing import Protocol

from pyIslam.praytimes import LIST_FAJR_ISHA_METHODS, Prayer as PyIslamPrayer, PrayerConf  # type: ignore[import]

from ..config import CalculationSettings
from ..errors import CalculationError
from ..models import DailySchedule, Coordinates
from ..timeutils import localize, utc_offset_hours

LOGGER = logging.getLogger(__name__)

PYISLAM_METHODS = {
    "muslimworldleague": 2,
    "mwl": 2,
    "islamicsocietyofnorthamerica": 5,
    "isna": 5,
    "northamerica": 5,
    "egyptiangeneralauthority": 3,
    "egyptian": 3,
    "karachi": 1,
    "universityofislamicscienceskarachi": 1,
    "ummalqura": 4,
    "makkah": 4,
    "diyanet": 4,
    "turkey": 4,
    "shiaithnaansari": 2,
    "jafari": 2,
    "tehran": 2,
    "singapore": 7,
    "islamicreligiouscouncilofsingapore": 7,
    "muis": 7,
    "jakim": 7,
    "kemenag": 7,
    "frenchmuslims": 6,
    "uoif": 6,
    "spiritualadministrationofmuslimsofrussia": 8,
    "russia": 8,
    "fixedishaatimeinterval90min": 9,
}


class PrayerTimeProvider(Protocol):
    name: str

    def compute(
        self,
        day: date,
        coordinates: Coordinates,
        settings: CalculationSettings,
        tz: tzinfo | None = None,
    ) -> DailySchedule:
        ...


class PyIslamProvider:
    name = "pyislam"

    def compute(
        self,
        day: date,
        coordinates: Coordinates,
        settings: CalculationSettings,
        tz: tzinfo | None = None,
    ) -> DailySchedule:
        if not (-90.0 <= coordinates.latitude <= 90.0 and -180.0 <= coordinates.longitude <= 180.0):
            raise CalculationError(f"Unsupported coordinates: {coordinates.latitude},{coordinates.longitude}")
        conf = PrayerConf(
            longitude=coordinates.longitude,
            latitude=coordinates.latitude,
            timezone=utc_offset_hours(day, tz),
            angle_ref=_map_pyislam_method(settings.method),
            asr_madhab=2 if settings.madhab.lower() == "hanafi" else 1,
            # the offset above already includes daylight saving
            enable_summer_time=False,
        )
        try:
            calculator = PyIslamPrayer(conf, datetime(day.year, day.month, day.day))
            raw_times = [
                calculator.fajr_time(),
                calculator.dohr_time(),
                calculator.asr_time(),
                calculator.maghreb_time(),
                calculator.ishaa_time(),
            ]
        except (ArithmeticError, ValueError, TypeError) as exc:
            raise CalculationError(f"Prayer time calculation failed for {day}: {exc}") from exc

        instants = _to_instants(day, [_as_time(value) for value in raw_times], tz)
        schedule = DailySchedule.from_instants(day, instants)
        LOGGER.debug(
            "Computed %s schedule for %s: %s",
            settings.method,
            day,
            ", ".join(f"{kind.value}={moment:%H:%M}" for kind, moment in schedule.entries),
        )
        return schedule


def _normalize_method_key(method_name: str) -> str:
    return "".join(ch for ch in method_name.lower() if ch.isalnum())


def _map_pyislam_method(method_name: str | None) -> int:
    if not method_name:
        raise CalculationError("No calculation method configured")
    try:
        method_id = int(method_name)
    except (TypeError, ValueError):
        method_id = None
    if method_id is not None:
        if 1 <= method_id <= len(LIST_FAJR_ISHA_METHODS):
            return method_id
        raise CalculationError(f"Unknown calculation method id: {method_id}")
    key = _normalize_method_key(method_name)
    if key not in PYISLAM_METHODS:
        raise CalculationError(f"Unknown calculation method: {method_name}")
    return PYISLAM_METHODS[key]


def _as_time(value: time | datetime | str | None) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return time.fromisoformat(value.strip())
        except ValueError as exc:
            raise CalculationError(f"Unreadable prayer time {value!r}") from exc
    raise CalculationError(f"Provider returned no time: {value!r}")


def _to_instants(day: date, moments: list[time], tz: tzinfo | None) -> list[datetime]:
    naive = [datetime.combine(day, moment.replace(tzinfo=None)) for moment in moments]
    # Isha can fall after midnight at high latitudes
    if len(naive) > 1 and naive[-1] <= naive[-2]:
        naive[-1] += timedelta(days=1)
    return [localize(value, tz) for value in naive]

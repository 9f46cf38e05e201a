from __future__ import annotations

from datetime import date, datetime, time, timedelta
import unittest
from unittest.mock import patch
from zoneinfo import ZoneInfo

from waktu_sholat.config import CalculationSettings
from waktu_sholat.errors import CalculationError
from waktu_sholat.models import CANONICAL_ORDER, Coordinates, PrayerKind
from waktu_sholat.services.prayer import PyIslamProvider, _map_pyislam_method

SINGAPORE = ZoneInfo("Asia/Singapore")


class FakeCalculator:
    """Stands in for pyIslam's Prayer with fixed times."""

    times = {
        "fajr_time": time(5, 10),
        "dohr_time": time(13, 30),
        "asr_time": time(17, 45),
        "maghreb_time": time(22, 15),
        "ishaa_time": time(0, 40),
    }

    def __init__(self, conf, day) -> None:
        self.conf = conf
        self.day = day

    def __getattr__(self, name):
        if name in self.times:
            return lambda: self.times[name]
        raise AttributeError(name)


class PyIslamProviderTest(unittest.TestCase):
    def setUp(self) -> None:
        self.provider = PyIslamProvider()
        self.settings = CalculationSettings(method="Singapore", madhab="Shafi")
        self.coords = Coordinates(1.35, 103.8)
        self.day = date(2024, 6, 1)

    def test_schedule_is_in_canonical_order_and_increasing(self) -> None:
        schedule = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)

        self.assertEqual(tuple(kind for kind, _ in schedule.entries), CANONICAL_ORDER)
        instants = [moment for _, moment in schedule.entries]
        self.assertEqual(instants, sorted(instants))
        self.assertEqual(len(set(instants)), 5)
        for moment in instants:
            self.assertEqual(moment.date(), self.day)
            self.assertEqual(moment.utcoffset(), timedelta(hours=8))

    def test_singapore_fajr_is_after_four_am(self) -> None:
        schedule = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)

        fajr = schedule.time_of(PrayerKind.FAJR)
        self.assertGreater(fajr, datetime(2024, 6, 1, 4, 0, tzinfo=SINGAPORE))
        self.assertLess(schedule.time_of(PrayerKind.ISHA), datetime(2024, 6, 1, 23, 50, tzinfo=SINGAPORE))

    def test_repeated_computation_is_deterministic(self) -> None:
        first = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)
        second = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)
        self.assertEqual(first, second)

    def test_hanafi_asr_is_later_than_shafi(self) -> None:
        shafi = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)
        hanafi = self.provider.compute(
            self.day, self.coords, CalculationSettings(method="Singapore", madhab="Hanafi"), SINGAPORE
        )
        self.assertGreater(hanafi.time_of(PrayerKind.ASR), shafi.time_of(PrayerKind.ASR))
        self.assertEqual(hanafi.time_of(PrayerKind.FAJR), shafi.time_of(PrayerKind.FAJR))

    def test_unknown_method_is_a_calculation_error(self) -> None:
        with self.assertRaises(CalculationError):
            self.provider.compute(self.day, self.coords, CalculationSettings(method="Atlantis"), SINGAPORE)

    def test_out_of_range_coordinates_are_rejected(self) -> None:
        with self.assertRaises(CalculationError):
            self.provider.compute(self.day, Coordinates(123.0, 10.0), self.settings, SINGAPORE)

    def test_isha_after_midnight_moves_to_next_day(self) -> None:
        with patch("waktu_sholat.services.prayer.PyIslamPrayer", FakeCalculator):
            schedule = self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)

        self.assertEqual(schedule.time_of(PrayerKind.ISHA), datetime(2024, 6, 2, 0, 40, tzinfo=SINGAPORE))

    def test_calculator_failure_is_wrapped(self) -> None:
        class Broken(FakeCalculator):
            def fajr_time(self):
                raise ValueError("math domain error")

        with patch("waktu_sholat.services.prayer.PyIslamPrayer", Broken):
            with self.assertRaises(CalculationError):
                self.provider.compute(self.day, self.coords, self.settings, SINGAPORE)


class MethodMappingTest(unittest.TestCase):
    def test_names_are_normalized(self) -> None:
        self.assertEqual(_map_pyislam_method("Singapore"), 7)
        self.assertEqual(_map_pyislam_method("Muslim World League"), 2)
        self.assertEqual(_map_pyislam_method("umm al-qura"), 4)

    def test_numeric_ids_are_accepted(self) -> None:
        self.assertEqual(_map_pyislam_method("3"), 3)

    def test_numeric_id_out_of_range(self) -> None:
        with self.assertRaises(CalculationError):
            _map_pyislam_method("99")

    def test_empty_method(self) -> None:
        with self.assertRaises(CalculationError):
            _map_pyislam_method("")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

from __future__ import annotations

from datetime import timedelta
import threading
import time
import unittest

from waktu_sholat.waiter import Waiter


class WaiterTest(unittest.TestCase):
    def test_zero_and_negative_durations_return_immediately(self) -> None:
        waiter = Waiter()
        self.assertTrue(waiter.wait(timedelta()))
        self.assertTrue(waiter.wait(timedelta(seconds=-5)))

    def test_short_wait_completes(self) -> None:
        self.assertTrue(Waiter().wait(timedelta(milliseconds=10)))

    def test_stop_cuts_a_long_wait_short(self) -> None:
        waiter = Waiter()
        timer = threading.Timer(0.05, waiter.stop)
        timer.start()
        started = time.monotonic()

        completed = waiter.wait(timedelta(hours=1))

        self.assertFalse(completed)
        self.assertLess(time.monotonic() - started, 5)

    def test_stopped_waiter_does_not_block(self) -> None:
        waiter = Waiter()
        waiter.stop()
        self.assertFalse(waiter.wait(timedelta(hours=1)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

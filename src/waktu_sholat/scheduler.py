from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
import logging
import sys
from typing import TextIO

from .clock import Clock
from .config import NotifierConfig
from .errors import CalculationError, NotificationError
from .models import Coordinates, DailySchedule, NextEvent, PrayerEvent, RolloverEvent, StatusRecord
from .services.notifier import Notifier
from .services.prayer import PrayerTimeProvider
from .status import StatusEmitter, build_status
from .timeutils import format_duration, local_midnight
from .waiter import Waiter

LOGGER = logging.getLogger(__name__)

# keeps the rollover target clear of the provider's own midnight
ROLLOVER_GRACE = timedelta(seconds=1)


@dataclass(slots=True)
class CycleResult:
    now: datetime
    schedule: DailySchedule
    event: NextEvent
    status: StatusRecord
    wait: timedelta
    notified: bool = False
    completed: bool = True


def select_next_event(schedule: DailySchedule, now: datetime, tz: tzinfo | None = None) -> NextEvent:
    for kind, moment in schedule.entries:
        if moment > now:
            return PrayerEvent(kind=kind, instant=moment)
    tomorrow = schedule.day + timedelta(days=1)
    return RolloverEvent(instant=local_midnight(tomorrow, tz, grace=ROLLOVER_GRACE))


def wait_duration(target: datetime, now: datetime) -> timedelta:
    return max(target - now, timedelta())


class Scheduler:
    """Compute the day's schedule, wait for the next prayer, notify, repeat.

    A scheduler driven by a fixed clock runs exactly one cycle; with a real
    clock it loops until the waiter is stopped.
    """

    def __init__(
        self,
        config: NotifierConfig,
        coordinates: Coordinates,
        provider: PrayerTimeProvider,
        clock: Clock,
        notifier: Notifier,
        *,
        emitter: StatusEmitter | None = None,
        waiter: Waiter | None = None,
        diagnostics: TextIO | None = None,
    ) -> None:
        self.config = config
        self.coordinates = coordinates
        self.provider = provider
        self.clock = clock
        self.notifier = notifier
        self.emitter = emitter or StatusEmitter()
        self.waiter = waiter or Waiter()
        self._diagnostics = diagnostics
        self.tz = config.location.zone()

    @property
    def single_shot(self) -> bool:
        return self.clock.is_fixed

    def compute_schedule(self, now: datetime) -> DailySchedule:
        day = now.date()
        try:
            return self.provider.compute(day, self.coordinates, self.config.calculation, self.tz)
        except CalculationError:
            raise
        except Exception as exc:
            raise CalculationError(f"Could not compute prayer times for {day}: {exc}") from exc

    def run_cycle(self) -> CycleResult:
        now = self.clock.now()
        schedule = self.compute_schedule(now)
        event = select_next_event(schedule, now, self.tz)
        status = build_status(schedule, event)
        self.emitter.emit(status)

        wait = wait_duration(event.instant, now)
        result = CycleResult(now=now, schedule=schedule, event=event, status=status, wait=wait)
        self._report_wait(event, wait)
        if not self.waiter.wait(wait):
            result.completed = False
            return result

        if isinstance(event, PrayerEvent):
            result.notified = self._notify(event)
            if not self.waiter.wait(self.config.notifications.cooldown):
                result.completed = False
        return result

    def run(self) -> int:
        """Run cycles until single-shot completion or a stop request."""
        cycles = 0
        while True:
            result = self.run_cycle()
            cycles += 1
            if not result.completed:
                LOGGER.info("Stopped while waiting for %s", _event_label(result.event))
                return cycles
            if self.single_shot:
                return cycles

    def _notify(self, event: PrayerEvent) -> bool:
        try:
            self.notifier.notify(event.kind)
        except NotificationError as exc:
            # a missed alert must not stop the following days
            LOGGER.warning("%s", exc)
            return False
        return True

    def _report_wait(self, event: NextEvent, wait: timedelta) -> None:
        LOGGER.info(
            "Next event %s at %s, waiting %s",
            _event_label(event),
            event.instant.isoformat(timespec="seconds"),
            format_duration(wait),
        )
        if not self.single_shot:
            return
        stream = self._diagnostics or sys.stderr
        if isinstance(event, RolloverEvent):
            stream.write(f"[TEST MODE] No more prayers today. Sleeping for {format_duration(wait)}.\n")
        else:
            stream.write(f"[TEST MODE] Sleeping for {format_duration(wait)} until {event.kind.value}.\n")
        stream.flush()


def _event_label(event: NextEvent) -> str:
    if isinstance(event, PrayerEvent):
        return event.kind.value
    return "rollover"

from __future__ import annotations

import json
import sys
from typing import TextIO

from .errors import StatusOutputError
from .models import CANONICAL_ORDER, DailySchedule, NextEvent, PrayerEvent, PrayerKind, StatusRecord
from .timeutils import format_hhmm


def build_status(schedule: DailySchedule, event: NextEvent) -> StatusRecord:
    # after Isha the label wraps to the first prayer, tomorrow's schedule is not known yet
    next_kind = event.kind if isinstance(event, PrayerEvent) else CANONICAL_ORDER[0]
    return StatusRecord(
        fajr=format_hhmm(schedule.time_of(PrayerKind.FAJR)),
        dhuhr=format_hhmm(schedule.time_of(PrayerKind.DHUHR)),
        asr=format_hhmm(schedule.time_of(PrayerKind.ASR)),
        maghrib=format_hhmm(schedule.time_of(PrayerKind.MAGHRIB)),
        isha=format_hhmm(schedule.time_of(PrayerKind.ISHA)),
        next=next_kind.value,
    )


class StatusEmitter:
    """Write one compact JSON line per cycle for status bar widgets."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # resolved lazily so a redirected sys.stdout is honoured
        return self._stream or sys.stdout

    def emit(self, record: StatusRecord) -> None:
        stream = self.stream
        try:
            stream.write(json.dumps(record.to_dict(), separators=(",", ":")) + "\n")
            stream.flush()
        except OSError as exc:
            raise StatusOutputError(f"Cannot write status line: {exc}") from exc

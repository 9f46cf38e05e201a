from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo

from .errors import AmbiguousLocalTime


def parse_hhmm(value: str) -> time:
    value = value.strip()
    parts = value.split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Unsupported time format: {value}")
    hour = int(parts[0])
    minute = int(parts[1])
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time value: {value}")
    return time(hour=hour, minute=minute)


def format_hhmm(value: datetime | time) -> str:
    return value.strftime("%H:%M")


def format_duration(value: timedelta) -> str:
    total_seconds = int(value.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}h{minutes:02d}m{seconds:02d}s"


def localize(naive: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach the local zone to ``naive``, refusing ambiguous or missing times.

    ``tz`` is an IANA zone; ``None`` means the system local zone. Both fold
    values must agree on the UTC offset, otherwise the wall-clock time falls
    in a daylight-saving overlap or gap.
    """
    early = naive.replace(fold=0)
    late = naive.replace(fold=1)
    if tz is None:
        early = early.astimezone()
        late = late.astimezone()
    else:
        early = early.replace(tzinfo=tz)
        late = late.replace(tzinfo=tz)
    if early.utcoffset() != late.utcoffset():
        raise AmbiguousLocalTime(
            f"Local time {naive.isoformat(sep=' ')} is ambiguous or does not exist"
        )
    return early


def local_midnight(day: date, tz: tzinfo | None = None, *, grace: timedelta = timedelta()) -> datetime:
    return localize(datetime.combine(day, time()) + grace, tz)


def utc_offset_hours(day: date, tz: tzinfo | None = None) -> float:
    """Offset of the local zone from UTC at noon of ``day``, in hours."""
    noon = datetime.combine(day, time(12, 0))
    aware = noon.astimezone() if tz is None else noon.replace(tzinfo=tz)
    offset = aware.utcoffset() or timedelta()
    return offset.total_seconds() / 3600

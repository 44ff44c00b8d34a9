from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

def parse_iso(ts: str | None, tz: str) -> datetime | None:
    """Parse an ISO-8601 timestamp string.
    If naive, attach the provided tz. Returns None if ts is falsy or unparseable.
    """
    if not ts:
        return None
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(tz))
    return dt

def start_of_day(day: date, tz: str) -> datetime:
    return datetime.combine(day, time.min, tzinfo=ZoneInfo(tz))

def end_of_day(day: date, tz: str) -> datetime:
    return datetime.combine(day, time.max, tzinfo=ZoneInfo(tz))

def timestamp_or_zero(ts: str | None, tz: str) -> float:
    dt = parse_iso(ts, tz)
    return dt.timestamp() if dt else 0.0

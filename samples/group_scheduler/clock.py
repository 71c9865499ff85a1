# clock.py
from __future__ import annotations
from datetime import date, datetime
from typing import Iterator, Tuple
from dateutil.rrule import rrule, DAILY

MINUTES_PER_DAY = 24 * 60

def parse_hhmm(value: str) -> int:
    """'09:30' -> 570. '24:00' is accepted as the end of the day."""
    try:
        h, m = value.strip().split(":")
        hours, minutes = int(h), int(m)
    except (AttributeError, ValueError):
        raise ValueError(f"invalid time {value!r}, expected HH:MM")
    if not (0 <= minutes < 60) or not (0 <= hours <= 24) or (hours == 24 and minutes):
        raise ValueError(f"invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes

def format_hhmm(minute: int) -> str:
    return f"{minute // 60:02d}:{minute % 60:02d}"

def work_window(start_hour: int, end_hour: int) -> Tuple[int, int]:
    if not (0 <= start_hour < end_hour <= 24):
        raise ValueError(f"invalid work window {start_hour}-{end_hour}")
    return start_hour * 60, end_hour * 60

def days(start: date, end: date) -> Iterator[date]:
    # inclusive; empty when end < start
    if end < start:
        return iter(())
    until = datetime.combine(end, datetime.min.time())
    return (d.date() for d in rrule(DAILY, dtstart=datetime.combine(start, datetime.min.time()), until=until))

# slots.py
from __future__ import annotations
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from clock import days
from models import AvailabilitySlot, CalendarEvent, Classification
from occupancy import OccupancyMinute, build

logger = logging.getLogger(__name__)

def classify(minute: OccupancyMinute) -> Classification:
    # a rigid conflict wins over any number of movable ones
    if minute.rigid:
        return "blocked"
    if minute.movable:
        return "negotiable"
    return "available"

def merge(occupancy: List[OccupancyMinute], window_start: int, day: date, min_duration: int) -> List[AvailabilitySlot]:
    """Collapse an occupancy table into maximal same-classification runs.

    Blocked runs and runs shorter than ``min_duration`` are dropped. A
    negotiable slot carries every owner with a movable conflict on any of
    its minutes.
    """
    if min_duration < 1:
        raise ValueError("min_duration must be at least 1 minute")
    out: List[AvailabilitySlot] = []
    run_start: Optional[int] = None
    run_kind: Optional[Classification] = None
    conflicts: Set[str] = set()

    def close(end: int) -> None:
        if run_start is None or run_kind == "blocked":
            return
        if end - run_start >= min_duration:
            out.append(AvailabilitySlot(
                date=day,
                start=window_start + run_start,
                end=window_start + end,
                classification=run_kind,
                conflicting_members=sorted(conflicts) if run_kind == "negotiable" else [],
            ))

    for i, minute in enumerate(occupancy):
        kind = classify(minute)
        if kind != run_kind:
            close(i)
            run_kind = kind
            run_start = None if kind == "blocked" else i
            conflicts = set()
        if kind == "negotiable":
            conflicts |= minute.movable
    close(len(occupancy))
    return out

def find_slots(
    events: Iterable[CalendarEvent],
    start_date: date,
    end_date: date,
    window_start: int,
    window_end: int,
    min_duration: int,
) -> List[AvailabilitySlot]:
    """Run build + merge for every date in [start_date, end_date], in date order."""
    by_date: Dict[date, List[CalendarEvent]] = defaultdict(list)
    for ev in events:
        by_date[ev.date].append(ev)
    out: List[AvailabilitySlot] = []
    for day in days(start_date, end_date):
        table = build(by_date.get(day, []), window_start, window_end)
        day_slots = merge(table, window_start, day, min_duration)
        logger.debug(f"{day}: {len(day_slots)} slot(s)")
        out.extend(day_slots)
    return out

# occupancy.py
from __future__ import annotations
from typing import Iterable, List, Set

from clock import MINUTES_PER_DAY
from models import CalendarEvent

class OccupancyMinute:
    __slots__ = ("rigid", "movable")

    def __init__(self):
        self.rigid: Set[str] = set()
        self.movable: Set[str] = set()

    def __eq__(self, other) -> bool:
        if not isinstance(other, OccupancyMinute):
            return NotImplemented
        return self.rigid == other.rigid and self.movable == other.movable

    def __repr__(self) -> str:
        return f"OccupancyMinute(rigid={sorted(self.rigid)}, movable={sorted(self.movable)})"

def event_span(ev: CalendarEvent) -> tuple:
    if ev.all_day:
        return 0, MINUTES_PER_DAY
    return ev.start, ev.end

def build(events: Iterable[CalendarEvent], window_start: int, window_end: int) -> List[OccupancyMinute]:
    """Minute-by-minute occupancy for one date over [window_start, window_end).

    Every event is clipped to the window. Events with start >= end, or lying
    entirely outside the window, contribute nothing.
    """
    if not (0 <= window_start < window_end <= MINUTES_PER_DAY):
        raise ValueError(f"invalid window {window_start}-{window_end}")
    table = [OccupancyMinute() for _ in range(window_end - window_start)]
    for ev in events:
        s, e = event_span(ev)
        s, e = max(s, window_start), min(e, window_end)
        if s >= e:
            continue
        for m in range(s - window_start, e - window_start):
            minute = table[m]
            (minute.rigid if ev.rigidity == "rigid" else minute.movable).add(ev.owner)
    return table

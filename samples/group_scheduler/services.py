# services.py
from __future__ import annotations
import itertools
import logging
import threading
from datetime import date
from typing import Dict, List, Optional, Protocol

from clock import MINUTES_PER_DAY
from models import CalendarEvent

logger = logging.getLogger(__name__)

class EventStoreError(Exception):
    pass

class EventReadError(EventStoreError):
    pass

class EventWriteError(EventStoreError):
    pass

class GroupNotFound(LookupError):
    pass

class ScheduleUnavailable(Exception):
    """A member's events could not be read, so availability is unknown."""

    def __init__(self, member_id: str, cause: Exception):
        super().__init__(f"could not read events for {member_id}: {cause}")
        self.member_id = member_id

def _clamp(minute: int) -> int:
    return max(0, min(MINUTES_PER_DAY, minute))

class EventStore(Protocol):
    def get_events(self, member_id: str, start: date, end: date) -> List[CalendarEvent]: ...

    def create_event(self, member_id: str, day: date, start: int, end: int, title: str,
                     location: Optional[str] = None, *, description: Optional[str] = None,
                     is_fixed: bool = True, group_id: Optional[str] = None) -> str: ...

class InMemoryEventStore:
    """Raw event rows keyed by member. ``is_fixed`` rows read back as rigid."""

    def __init__(self):
        self._rows: Dict[str, List[Dict]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, member_id: str, day: date, start: int, end: int, *, is_fixed: bool = False,
            is_all_day: bool = False, title: str = "", **extra) -> str:
        with self._lock:
            event_id = f"E-{next(self._ids)}"
            self._rows.setdefault(member_id, []).append({
                "id": event_id, "event_date": day, "start": start, "end": end,
                "is_fixed": is_fixed, "is_all_day": is_all_day, "title": title, **extra,
            })
        return event_id

    def rows(self, member_id: str) -> List[Dict]:
        return list(self._rows.get(member_id, []))

    def get_events(self, member_id: str, start: date, end: date) -> List[CalendarEvent]:
        return [self._to_event(member_id, r) for r in self.rows(member_id) if start <= r["event_date"] <= end]

    @staticmethod
    def _to_event(member_id: str, r: Dict) -> CalendarEvent:
        # rows outside the day are clamped, never rejected
        s, e = _clamp(r["start"]), _clamp(r["end"])
        if (s, e) != (r["start"], r["end"]):
            logger.warning(f"Event {r['id']} for {member_id} has out-of-day times "
                           f"{r['start']}-{r['end']}, clamped to {s}-{e}")
        return CalendarEvent(
            owner=member_id, date=r["event_date"], start=s, end=e,
            rigidity="rigid" if r["is_fixed"] else "movable",
            all_day=r["is_all_day"], title=r["title"],
        )

    def create_event(self, member_id: str, day: date, start: int, end: int, title: str,
                     location: Optional[str] = None, *, description: Optional[str] = None,
                     is_fixed: bool = True, group_id: Optional[str] = None) -> str:
        return self.add(member_id, day, start, end, is_fixed=is_fixed, title=title,
                        location=location, description=description, group_id=group_id)

class GroupService:
    def __init__(self):
        self._groups: Dict[str, Dict] = {}

    def save(self, group_id: str, name: str, members: List[str]) -> None:
        self._groups[group_id] = {"group_id": group_id, "name": name, "members": list(members)}

    def get(self, group_id: str) -> Dict:
        try:
            return self._groups[group_id]
        except KeyError:
            raise GroupNotFound(group_id) from None

    def members(self, group_id: str) -> List[str]:
        return list(self.get(group_id)["members"])

# avm.py
from __future__ import annotations
import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

from clock import format_hhmm, parse_hhmm, work_window
from config import SchedulerSettings
from materializer import MeetingMaterializer
from models import (
    AvailabilitySlot, AvailableSlotsIn, AvailableSlotsOut, CalendarEvent,
    CreateMeetingIn, CreateMeetingOut, DateRange, FindMeetingTimeIn, FindMeetingTimeOut,
    GroupMatchSlot, MaterializationResult, MeetingRequest, MeetingSummary, Recommendation,
)
from services import EventStore, EventStoreError, GroupService, ScheduleUnavailable
from slots import find_slots

logger = logging.getLogger(__name__)

def to_match_slot(s: AvailabilitySlot) -> GroupMatchSlot:
    return GroupMatchSlot(
        date=s.date.isoformat(),
        start_time=format_hhmm(s.start),
        end_time=format_hhmm(s.end),
        type=s.classification,
        conflicting_members=s.conflicting_members or None,
    )

def recommend(slots: List[AvailabilitySlot], limit: int = 3) -> List[Recommendation]:
    best = [s for s in slots if s.classification == "available"][:limit]
    alternatives = [s for s in slots if s.classification == "negotiable"][:limit]
    out = [Recommendation(**to_match_slot(s).model_dump(), recommendation_type="best",
                          reason="All members available") for s in best]
    out += [Recommendation(**to_match_slot(s).model_dump(), recommendation_type="alternative",
                           reason=f"{len(s.conflicting_members)} member(s) have flexible schedules")
            for s in alternatives]
    return out

class GroupViewModel:
    def __init__(self, events: EventStore, groups: GroupService, settings: SchedulerSettings,
                 today: Optional[Callable[[], date]] = None):
        self.events = events
        self.groups = groups
        self.settings = settings
        self.today = today or date.today
        self.materializer = MeetingMaterializer(events, fanout=settings.write_fanout)

    def default_range(self) -> Tuple[date, date]:
        start = self.today()
        return start, start + timedelta(days=self.settings.default_range_days)

    async def read_events(self, members: List[str], start: date, end: date) -> List[CalendarEvent]:
        async def read(member_id: str) -> List[CalendarEvent]:
            try:
                return await asyncio.to_thread(self.events.get_events, member_id, start, end)
            except EventStoreError as e:
                logger.error(f"Event read failed for member {member_id}: {e}")
                raise ScheduleUnavailable(member_id, e) from e

        per_member = await asyncio.gather(*(read(m) for m in members))
        return [ev for evs in per_member for ev in evs]

    async def find_slots(self, members: List[str], start: date, end: date,
                         min_duration: Optional[int] = None, work_start: Optional[int] = None,
                         work_end: Optional[int] = None) -> List[AvailabilitySlot]:
        s = self.settings
        window_start, window_end = work_window(
            s.work_start_hour if work_start is None else work_start,
            s.work_end_hour if work_end is None else work_end,
        )
        min_duration = s.min_slot_minutes if min_duration is None else min_duration
        if not members or end < start:
            return []
        logger.info(f"Matching {len(members)} member(s) over {start}..{end}, "
                    f"window {format_hhmm(window_start)}-{format_hhmm(window_end)}, min {min_duration}m")
        events = await self.read_events(members, start, end)
        slots = find_slots(events, start, end, window_start, window_end, min_duration)
        logger.info(f"Found {len(slots)} slot(s)")
        return slots

    async def group_available_slots(self, a: AvailableSlotsIn) -> AvailableSlotsOut:
        members = self.groups.members(a.group_id)
        default_start, default_end = self.default_range()
        start = a.start_date or default_start
        end = a.end_date or default_end
        slots = await self.find_slots(members, start, end, a.min_duration, a.work_start, a.work_end)
        return AvailableSlotsOut(
            slots=[to_match_slot(s) for s in slots],
            member_count=len(members),
            date_range=DateRange(start=start.isoformat(), end=end.isoformat()),
        )

    async def find_meeting_time(self, a: FindMeetingTimeIn) -> FindMeetingTimeOut:
        members = self.groups.members(a.group_id)
        start, end = self.default_range()
        if a.preferred_dates:
            start, end = a.preferred_dates[0], a.preferred_dates[-1]
        slots = await self.find_slots(members, start, end, min_duration=a.duration)
        return FindMeetingTimeOut(
            recommendations=recommend(slots),
            total_available=sum(1 for s in slots if s.classification == "available"),
            total_negotiable=sum(1 for s in slots if s.classification == "negotiable"),
        )

    def meeting_request(self, a: CreateMeetingIn) -> MeetingRequest:
        group = self.groups.get(a.group_id)
        return MeetingRequest(
            title=f"[{group['name']}] {a.title}",
            date=a.date,
            start=parse_hhmm(a.start_time),
            end=parse_hhmm(a.end_time) if a.end_time else None,
            location=a.location,
            description=a.description or f"{group['name']} group meeting",
            members=group["members"],
            group_id=a.group_id,
        )

    async def create_meeting(self, a: CreateMeetingIn, cancel: Optional[asyncio.Event] = None) -> CreateMeetingOut:
        req = self.meeting_request(a)
        result: MaterializationResult = await self.materializer.materialize(req, cancel=cancel)
        total = len(result.outcomes)
        if result.failed_count:
            message = f"{result.succeeded_count} of {total} members added - retry failed ones"
        else:
            message = f"Event added to {result.succeeded_count} member(s)' calendars."
        return CreateMeetingOut(
            ok=result.failed_count == 0,
            message=message,
            meeting=MeetingSummary(
                title=req.title,
                date=req.date.isoformat(),
                time=f"{format_hhmm(req.start)} - {format_hhmm(req.end)}",
                location=req.location,
            ),
            created_for=result.succeeded_count,
            failed_for=result.failed_count,
            failed_members=result.failed_members or None,
            events={o.member_id: o.event_id for o in result.succeeded},
        )

from datetime import date as Date
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional, Dict, List

from clock import parse_hhmm

Rigidity = Literal["rigid", "movable"]
Classification = Literal["available", "negotiable", "blocked"]

# ---- Calendar ----
class CalendarEvent(BaseModel):
    owner: str
    date: Date
    start: int = Field(ge=0, le=1440)
    end: int = Field(ge=0, le=1440)
    rigidity: Rigidity
    all_day: bool = False
    title: str = ""

class AvailabilitySlot(BaseModel):
    date: Date
    start: int
    end: int
    classification: Literal["available", "negotiable"]
    conflicting_members: List[str] = []

    @property
    def duration(self) -> int:
        return self.end - self.start

# ---- Meetings ----
class MeetingRequest(BaseModel):
    title: str
    date: Date
    start: int = Field(ge=0, lt=1440)
    end: Optional[int] = Field(default=None, gt=0, le=1440)
    location: Optional[str] = None
    description: Optional[str] = None
    members: List[str]
    group_id: Optional[str] = None

    @model_validator(mode="after")
    def _default_end(self) -> "MeetingRequest":
        if self.end is None:
            self.end = min(self.start + 60, 1440)
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

class MemberOutcome(BaseModel):
    member_id: str
    event_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.event_id is not None

class MaterializationResult(BaseModel):
    outcomes: List[MemberOutcome]

    @property
    def succeeded(self) -> List[MemberOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.outcomes) - self.succeeded_count

    @property
    def failed_members(self) -> List[str]:
        return [o.member_id for o in self.outcomes if not o.ok]

# ---- Intents ----
class GroupMatchSlot(BaseModel):
    date: str
    start_time: str
    end_time: str
    type: Literal["available", "negotiable"]
    conflicting_members: Optional[List[str]] = None

class DateRange(BaseModel):
    start: str
    end: str

class AvailableSlotsIn(BaseModel):
    group_id: str
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    min_duration: Optional[int] = Field(default=None, ge=1)
    work_start: Optional[int] = Field(default=None, ge=0, le=23)
    work_end: Optional[int] = Field(default=None, ge=1, le=24)

class AvailableSlotsOut(BaseModel):
    slots: List[GroupMatchSlot]
    member_count: int
    date_range: DateRange

class FindMeetingTimeIn(BaseModel):
    group_id: str
    duration: Optional[int] = Field(default=None, ge=1)
    preferred_dates: List[Date] = []

class Recommendation(GroupMatchSlot):
    recommendation_type: Literal["best", "alternative"]
    reason: str

class FindMeetingTimeOut(BaseModel):
    recommendations: List[Recommendation]
    total_available: int
    total_negotiable: int

class CreateMeetingIn(BaseModel):
    group_id: str
    title: str = Field(min_length=1)
    date: Date
    start_time: str
    end_time: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_hhmm(v)
        return v

class MeetingSummary(BaseModel):
    title: str
    date: str
    time: str
    location: Optional[str] = None

class CreateMeetingOut(BaseModel):
    ok: bool
    message: str
    meeting: MeetingSummary
    created_for: int
    failed_for: int
    failed_members: Optional[List[str]] = None
    events: Dict[str, str] = {}

# server.py
import logging
from fastapi import FastAPI, HTTPException
from models import (
    AvailableSlotsIn, AvailableSlotsOut, FindMeetingTimeIn, FindMeetingTimeOut,
    CreateMeetingIn, CreateMeetingOut,
)
from avm import GroupViewModel
from config import get_settings
from services import InMemoryEventStore, GroupService, GroupNotFound, ScheduleUnavailable

settings = get_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("group_scheduler")

app = FastAPI(title="AVM – Group Scheduler")
events = InMemoryEventStore()
groups = GroupService()
avm = GroupViewModel(events, groups, settings)

def _fail(e: Exception) -> HTTPException:
    if isinstance(e, GroupNotFound):
        return HTTPException(status_code=404, detail=f"Group not found: {e}")
    if isinstance(e, ScheduleUnavailable):
        return HTTPException(status_code=503, detail="Could not check schedules, try again")
    return HTTPException(status_code=422, detail=str(e))

@app.post("/intents/group.available_slots", response_model=AvailableSlotsOut)
async def group_available_slots(args: AvailableSlotsIn):
    try:
        return await avm.group_available_slots(args)
    except (GroupNotFound, ScheduleUnavailable, ValueError) as e:
        raise _fail(e) from e

@app.post("/intents/group.find_meeting_time", response_model=FindMeetingTimeOut)
async def group_find_meeting_time(args: FindMeetingTimeIn):
    try:
        return await avm.find_meeting_time(args)
    except (GroupNotFound, ScheduleUnavailable, ValueError) as e:
        raise _fail(e) from e

@app.post("/intents/group.create_meeting", response_model=CreateMeetingOut)
async def group_create_meeting(args: CreateMeetingIn):
    try:
        return await avm.create_meeting(args)
    except (GroupNotFound, ValueError) as e:
        raise _fail(e) from e

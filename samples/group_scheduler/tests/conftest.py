from datetime import date

import pytest

from clock import parse_hhmm
from config import SchedulerSettings
from models import CalendarEvent
from services import GroupService, InMemoryEventStore

DAY = date(2025, 9, 3)


def ev(owner, start, end, rigid=False, day=DAY, all_day=False):
    return CalendarEvent(
        owner=owner,
        date=day,
        start=parse_hhmm(start),
        end=parse_hhmm(end),
        rigidity="rigid" if rigid else "movable",
        all_day=all_day,
    )


@pytest.fixture
def settings():
    return SchedulerSettings()


@pytest.fixture
def store():
    return InMemoryEventStore()


@pytest.fixture
def groups():
    g = GroupService()
    g.save("g1", "Design", ["alice", "bob", "carol"])
    g.save("empty", "Nobody", [])
    return g

import random
from datetime import timedelta

import pytest

from clock import parse_hhmm
from conftest import DAY, ev
from models import CalendarEvent
from occupancy import build
from slots import find_slots, merge


def slots_for(events, start="09:00", end="21:00", min_duration=60):
    ws, we = parse_hhmm(start), parse_hhmm(end)
    return merge(build(events, ws, we), ws, DAY, min_duration)


def spans(slots):
    return [(s.start, s.end, s.classification, s.conflicting_members) for s in slots]


def test_rigid_then_movable_overlap():
    slots = slots_for([
        ev("alice", "09:00", "10:00", rigid=True),
        ev("bob", "09:30", "10:30"),
    ], end="12:00", min_duration=30)
    assert spans(slots) == [
        (600, 630, "negotiable", ["bob"]),
        (630, 720, "available", []),
    ]


def test_no_events_gives_whole_window():
    slots = slots_for([])
    assert spans(slots) == [(540, 1260, "available", [])]
    assert slots[0].date == DAY


def test_short_negotiable_run_is_dropped_between_available_runs():
    slots = slots_for([ev("alice", "10:00", "10:05")])
    assert spans(slots) == [(540, 600, "available", []), (605, 1260, "available", [])]


def test_short_available_runs_are_dropped_too():
    slots = slots_for([ev("alice", "09:20", "09:25")])
    assert spans(slots) == [(565, 1260, "available", [])]


def test_conflicting_members_accumulate_across_run():
    slots = slots_for([ev("alice", "09:00", "09:10"), ev("bob", "09:05", "09:15")], end="10:00", min_duration=10)
    assert spans(slots) == [
        (540, 555, "negotiable", ["alice", "bob"]),
        (555, 600, "available", []),
    ]


def test_rigid_dominates_movable():
    slots = slots_for([
        ev("alice", "10:00", "11:00", rigid=True),
        ev("bob", "09:00", "12:00"),
        ev("carol", "09:00", "12:00"),
    ], end="12:00", min_duration=30)
    assert spans(slots) == [
        (540, 600, "negotiable", ["bob", "carol"]),
        (660, 720, "negotiable", ["bob", "carol"]),
    ]


def test_fully_blocked_day_emits_nothing():
    assert slots_for([ev("alice", "00:00", "00:00", rigid=True, all_day=True)]) == []


def test_min_duration_must_be_positive():
    with pytest.raises(ValueError):
        slots_for([], min_duration=0)


def test_find_slots_walks_dates_in_order():
    day2 = DAY + timedelta(days=1)
    events = [
        ev("alice", "09:00", "20:00", rigid=True, day=day2),
        ev("bob", "09:00", "10:00", day=DAY),
        ev("bob", "09:00", "21:00", rigid=True, day=DAY + timedelta(days=5)),
    ]
    slots = find_slots(events, DAY, day2, 540, 1260, 60)
    assert [(s.date, s.start, s.end, s.classification) for s in slots] == [
        (DAY, 540, 600, "negotiable"),
        (DAY, 600, 1260, "available"),
        (day2, 1200, 1260, "available"),
    ]


def test_find_slots_empty_range():
    assert find_slots([], DAY, DAY - timedelta(days=1), 540, 1260, 60) == []


def test_find_slots_is_idempotent():
    events = [ev("alice", "09:00", "10:00", rigid=True), ev("bob", "11:00", "13:00")]
    first = [s.model_dump_json() for s in find_slots(events, DAY, DAY, 540, 1260, 30)]
    second = [s.model_dump_json() for s in find_slots(events, DAY, DAY, 540, 1260, 30)]
    assert first == second


@pytest.mark.parametrize("seed", range(20))
def test_random_schedules_hold_slot_properties(seed):
    rng = random.Random(seed)
    members = ["alice", "bob", "carol", "dave"]
    events = []
    for _ in range(rng.randint(0, 12)):
        start = rng.randrange(480, 1300)
        events.append(CalendarEvent(
            owner=rng.choice(members), date=DAY, start=start,
            end=min(1440, start + rng.randint(-10, 120)),
            rigidity=rng.choice(["rigid", "movable"]),
        ))
    min_duration = rng.choice([1, 15, 30, 60])
    slots = find_slots(events, DAY, DAY, 540, 1260, min_duration)

    def rigid_at(m):
        return {e.owner for e in events if e.rigidity == "rigid" and e.start <= m < e.end}

    def movable_at(m):
        return {e.owner for e in events if e.rigidity == "movable" and e.start <= m < e.end}

    for s in slots:
        assert s.end - s.start >= min_duration
        minutes = range(s.start, s.end)
        assert all(not rigid_at(m) for m in minutes)
        union = set().union(*(movable_at(m) for m in minutes))
        if s.classification == "available":
            assert not union
            assert s.conflicting_members == []
        else:
            assert all(movable_at(m) for m in minutes)
            assert set(s.conflicting_members) == union
    for a, b in zip(slots, slots[1:]):
        assert a.end <= b.start
        if a.end == b.start:
            assert a.classification != b.classification

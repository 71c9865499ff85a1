# materializer.py
from __future__ import annotations
import asyncio
import logging
from typing import Optional

from models import MaterializationResult, MeetingRequest, MemberOutcome
from services import EventStore

logger = logging.getLogger(__name__)

class MaterializationCancelled(asyncio.CancelledError):
    """Raised when the materializing task is cancelled; carries the partial result."""

    def __init__(self, result: MaterializationResult):
        super().__init__(f"{result.succeeded_count} of {len(result.outcomes)} member(s) added before cancellation")
        self.result = result

class MeetingMaterializer:
    """Writes one rigid event per roster member.

    Each member's write succeeds or fails on its own; nothing is rolled back.
    No availability check happens here.

    Setting ``cancel`` stops new writes and returns the partial result.
    Cancelling the task itself does the same, but lets in-flight writes
    finish and raises ``MaterializationCancelled`` with the result.
    """

    def __init__(self, store: EventStore, fanout: int = 4):
        if fanout < 1:
            raise ValueError("fanout must be at least 1")
        self.store = store
        self.fanout = fanout

    async def materialize(self, req: MeetingRequest, cancel: Optional[asyncio.Event] = None) -> MaterializationResult:
        sem = asyncio.Semaphore(self.fanout)
        stop = asyncio.Event()

        def stopped() -> bool:
            return stop.is_set() or (cancel is not None and cancel.is_set())

        async def write(member_id: str) -> MemberOutcome:
            async with sem:
                if stopped():
                    return MemberOutcome(member_id=member_id, error="cancelled")
                try:
                    event_id = await asyncio.to_thread(
                        self.store.create_event, member_id, req.date, req.start, req.end, req.title,
                        req.location, description=req.description, is_fixed=True, group_id=req.group_id,
                    )
                except Exception as e:
                    logger.error(f"Failed to create event for member {member_id}: {e}")
                    return MemberOutcome(member_id=member_id, error=str(e) or type(e).__name__)
                return MemberOutcome(member_id=member_id, event_id=event_id)

        batch = asyncio.ensure_future(asyncio.gather(*(write(m) for m in req.members)))
        try:
            outcomes = await asyncio.shield(batch)
        except asyncio.CancelledError:
            stop.set()
            result = MaterializationResult(outcomes=list(await batch))
            logger.warning(f"Materializing '{req.title}' cancelled: "
                           f"{result.succeeded_count} of {len(result.outcomes)} member(s) added")
            raise MaterializationCancelled(result) from None
        result = MaterializationResult(outcomes=list(outcomes))
        logger.info(f"Materialized '{req.title}' on {req.date}: "
                    f"{result.succeeded_count} of {len(outcomes)} member(s) added")
        return result

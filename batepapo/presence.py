"""Participant liveness: registration, heartbeats and eviction of stale participants."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from . import BROADCAST
from .clock import clock_time, now_ms
from .errors import Conflict, NotFound
from .models import STATUS_TYPE, Message, Participant

logger = logging.getLogger("batepapo.presence")

JOIN_TEXT = "entra na sala..."
LEAVE_TEXT = "sai da sala..."


@dataclass
class SweepReport:
    evicted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


def status_message(name: str, text: str, ms: int) -> dict:
    return Message(frm=name, to=BROADCAST, text=text, type=STATUS_TYPE, time=clock_time(ms)).model_dump(by_alias=True)


class PresenceTracker:
    def __init__(self, db: AsyncIOMotorDatabase, stale_after_ms: int, clock: Callable[[], int] = now_ms):
        self.participants = db["participants"]
        self.messages = db["messages"]
        self.stale_after_ms = stale_after_ms
        self.clock = clock

    async def register(self, name: str) -> dict:
        # check-then-insert is not atomic; two concurrent registrations may both pass
        if await self.participants.find_one({"name": name}) is not None:
            raise Conflict(f"participant {name} already exists")
        ts = self.clock()
        doc = Participant(name=name, lastStatus=ts).model_dump()
        await self.participants.insert_one(dict(doc))
        await self.messages.insert_one(status_message(name, JOIN_TEXT, ts))
        logger.info("participant %s joined", name)
        return doc

    async def list_participants(self) -> List[dict]:
        docs = await self.participants.find({}, {"_id": 0}).to_list(length=None)
        return [Participant.model_validate(d).model_dump() for d in docs]

    async def heartbeat(self, name: str) -> None:
        res = await self.participants.update_one({"name": name}, {"$set": {"lastStatus": self.clock()}})
        if res.matched_count == 0:
            raise NotFound(f"participant {name} not found")

    async def _evict(self, doc: Dict[str, Any], cutoff: int, ts: int) -> bool:
        # departure notice goes in first; it is withdrawn if the participant stays
        note = await self.messages.insert_one(status_message(doc["name"], LEAVE_TEXT, ts))
        try:
            # re-check staleness at delete time so a fresh heartbeat keeps the participant
            res = await self.participants.delete_one({"_id": doc["_id"], "lastStatus": {"$lt": cutoff}})
        except Exception:
            await self.messages.delete_one({"_id": note.inserted_id})
            raise
        if res.deleted_count == 0:
            await self.messages.delete_one({"_id": note.inserted_id})
            return False
        return True

    async def sweep(self, now: Optional[int] = None) -> SweepReport:
        """Evict every participant whose lastStatus precedes ``now - stale_after_ms``."""
        ts = self.clock() if now is None else now
        cutoff = ts - self.stale_after_ms
        stale = await self.participants.find({"lastStatus": {"$lt": cutoff}}).to_list(length=None)
        report = SweepReport()
        if not stale:
            return report

        results = await asyncio.gather(
            *(self._evict(doc, cutoff, ts) for doc in stale), return_exceptions=True
        )
        for doc, result in zip(stale, results):
            name = doc["name"]
            if isinstance(result, BaseException):
                logger.warning("failed to evict %s: %s", name, result)
                report.failed[name] = str(result) or type(result).__name__
            elif result:
                report.evicted.append(name)
        if report.evicted:
            logger.info("evicted %d participant(s): %s", len(report.evicted), ", ".join(report.evicted))
        return report


class Sweeper:
    """Runs ``PresenceTracker.sweep`` every ``interval`` seconds until stopped."""

    def __init__(self, tracker: PresenceTracker, interval: float):
        self.tracker = tracker
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.last_report: Optional[SweepReport] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> Optional[SweepReport]:
        try:
            self.last_report = await self.tracker.sweep()
        except Exception:
            # never let a failed pass kill the timer
            logger.exception("presence sweep failed")
            return None
        return self.last_report

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info("presence sweeper started (every %ss, stale after %sms)", self.interval, self.tracker.stale_after_ms)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("presence sweeper stopped")

"""Reminder sweeper — notify RSVP'd users shortly before their event starts.

One sweep:
1. Select events starting in ``(now + lower, now + upper]``.
2. For each event, in its own session: fetch RSVPs with reminders enabled and
   not yet sent, dispatch once with all their user ids, then mark exactly
   those rows as sent in one batch.
3. A failure while handling one event is logged and rolled back; the sweep
   moves on to the next event.

The persisted ``reminder_sent`` flag is the only memory between sweeps. The
window gap (upper - lower) matches the sweep interval, so an event is a
candidate in exactly one sweep. A failed dispatch is therefore not retried:
that reminder is lost.

Sweeps must not overlap, or the same rows could be dispatched twice.
``run_once`` holds a non-blocking lock and returns a skipped result if a sweep
is already in flight.
"""
import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.database import utcnow
from app.models.event import Event
from app.schemas.reminder import SweepResult
from app.services import attendance_ledger
from app.services.reminder_dispatch import ReminderDispatcher

logger = logging.getLogger(__name__)


class ReminderSweeper:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        dispatcher: ReminderDispatcher,
        lower: timedelta = timedelta(minutes=settings.REMINDER_WINDOW_LOWER_MINUTES),
        upper: timedelta = timedelta(minutes=settings.REMINDER_WINDOW_UPPER_MINUTES),
    ):
        if lower >= upper:
            raise ValueError("Reminder window lower bound must be below the upper bound")
        self.session_factory = session_factory
        self.dispatcher = dispatcher
        self.lower = lower
        self.upper = upper
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run_once(self, now: Optional[datetime] = None) -> SweepResult:
        """Run one sweep unless another is already in flight."""
        now = now or utcnow()
        if not self._lock.acquire(blocking=False):
            logger.warning("Reminder sweep already running, skipping this tick")
            return SweepResult(started_at=now, skipped=True)
        try:
            return self._sweep(now)
        finally:
            self._lock.release()

    def _sweep(self, now: datetime) -> SweepResult:
        logger.info("Running event reminder sweep...")
        result = SweepResult(started_at=now)

        db = self.session_factory()
        try:
            event_ids = [
                e.event_id
                for e in attendance_ledger.events_starting_within(db, self.lower, self.upper, now=now)
            ]
        finally:
            db.close()

        result.events_considered = len(event_ids)
        if not event_ids:
            logger.debug("No events starting soon")
            return result

        for event_id in event_ids:
            try:
                sent = self._process_event(event_id)
            except Exception:
                logger.exception("Failed to process reminders for event %s", event_id)
                result.failed_event_ids.append(event_id)
                continue
            if sent:
                result.events_notified += 1
                result.reminders_sent += sent

        logger.info(
            "Event reminder sweep complete: %d events, %d reminders sent, %d failed",
            result.events_considered, result.reminders_sent, len(result.failed_event_ids),
        )
        return result

    def _process_event(self, event_id: str) -> int:
        """Dispatch and mark one event's pending reminders. Returns reminders sent."""
        db = self.session_factory()
        try:
            event = db.query(Event).filter(Event.event_id == event_id).first()
            if event is None:
                # Deleted between selection and processing.
                return 0

            rsvps = attendance_ledger.pending_reminders(db, event_id)
            if not rsvps:
                return 0

            user_ids = {r.user_id for r in rsvps}
            rsvp_ids = [r.rsvp_id for r in rsvps]

            if not self.dispatcher.dispatch(user_ids, event):
                raise RuntimeError(f"Reminder dispatch rejected for event {event_id}")

            attendance_ledger.mark_reminders_sent(db, rsvp_ids)
            logger.info('Sent %d reminders for event "%s" (%s)', len(user_ids), event.title, event_id)
            return len(user_ids)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def run_periodically(self, interval_seconds: float) -> None:
        """Sweep every ``interval_seconds`` until cancelled.

        Ticks run at a fixed rate measured from the loop's start, and each
        sweep is handed its planned ``now`` rather than the wall clock at the
        moment it runs. Consecutive windows therefore tile exactly however
        long a sweep takes. A late tick still sweeps its own window; a tick
        whose window has already passed entirely is dropped.

        Each sweep runs in a worker thread; a sweep that errors out entirely
        (e.g. the candidate query fails) is logged and the loop keeps going.
        """
        loop = asyncio.get_running_loop()
        interval = timedelta(seconds=interval_seconds)
        planned_now = utcnow()
        next_tick = loop.time()
        logger.info("Reminder sweeper started (every %ss)", interval_seconds)
        while True:
            if planned_now + self.upper > utcnow():
                try:
                    await asyncio.to_thread(self.run_once, planned_now)
                except Exception:
                    logger.exception("Reminder sweep failed")
            else:
                logger.warning("Dropping stale reminder tick planned for %s", planned_now.isoformat())
            planned_now += interval
            next_tick += interval_seconds
            await asyncio.sleep(max(0.0, next_tick - loop.time()))

"""Attendance ledger — RSVP rows and the event's denormalized attendee_count.

Invariant: ``events.attendee_count`` equals the number of ``event_rsvps`` rows
referencing the event.

Every create/remove inserts or deletes the row and adjusts the counter in the
same transaction, and the adjustment is a relative SQL update
(``attendee_count = attendee_count + 1``), never a read-modify-write of a
value loaded earlier, so the database's row lock on the event serialises
concurrent writers. The (event_id, user_id) uniqueness constraint is what
rejects a duplicate RSVP that slipped past the pre-check in a race.

The ledger does not retry. Store conflicts roll back and surface as
TransientStoreError; callers may retry the whole operation.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.database import utcnow
from app.errors import AlreadyExistsError, InvalidStateError, NotFoundError, TransientStoreError
from app.models.event import Event
from app.models.rsvp import EventRSVP
from app.schemas.event import RSVPOut
from app.schemas.pagination import Page, PageParams

logger = logging.getLogger(__name__)


def _get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def _find_rsvp(db: Session, event_id: str, user_id: str) -> Optional[EventRSVP]:
    return (
        db.query(EventRSVP)
        .filter(EventRSVP.event_id == event_id, EventRSVP.user_id == user_id)
        .first()
    )


def _adjust_count(db: Session, event_id: str, delta: int) -> None:
    if delta > 0:
        new_value = Event.attendee_count + delta
    else:
        # Clamped so prior drift can never push the counter negative.
        new_value = case(
            (Event.attendee_count + delta > 0, Event.attendee_count + delta),
            else_=0,
        )
    db.query(Event).filter(Event.event_id == event_id).update(
        {Event.attendee_count: new_value}, synchronize_session=False
    )


def create_rsvp(
    db: Session,
    event_id: str,
    user_id: str,
    reminder_enabled: Optional[bool] = None,
) -> EventRSVP:
    """RSVP ``user_id`` to an upcoming event and bump its attendee count."""
    event = _get_event(db, event_id)

    # Re-evaluated on every call: an event that was upcoming when the request
    # was queued may have started since.
    if event.start_time <= utcnow():
        raise InvalidStateError("Cannot RSVP to an event that has already started")

    if _find_rsvp(db, event_id, user_id):
        raise AlreadyExistsError("Already RSVP'd to this event")

    rsvp = EventRSVP(
        event_id=event_id,
        user_id=user_id,
        reminder_enabled=True if reminder_enabled is None else reminder_enabled,
        reminder_sent=False,
    )
    try:
        db.add(rsvp)
        db.flush()
        _adjust_count(db, event_id, +1)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if db.query(Event).filter(Event.event_id == event_id).first() is None:
            raise NotFoundError("Event not found") from exc
        raise AlreadyExistsError("Already RSVP'd to this event") from exc
    except OperationalError as exc:
        db.rollback()
        logger.warning("Transient store failure creating RSVP %s/%s: %s", event_id, user_id, exc)
        raise TransientStoreError("Storage conflict, retry the RSVP") from exc

    db.refresh(rsvp)
    logger.info("User %s RSVP'd to event %s", user_id, event_id)
    return rsvp


def remove_rsvp(db: Session, event_id: str, user_id: str) -> None:
    """Cancel ``user_id``'s RSVP and decrement the attendee count (floored at zero)."""
    rsvp = _find_rsvp(db, event_id, user_id)
    if not rsvp:
        raise NotFoundError("RSVP not found")

    try:
        deleted = (
            db.query(EventRSVP)
            .filter(EventRSVP.rsvp_id == rsvp.rsvp_id)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            # Removed by a concurrent cancel; that call owns the decrement.
            db.rollback()
            raise NotFoundError("RSVP not found")
        _adjust_count(db, event_id, -1)
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.warning("Transient store failure removing RSVP %s/%s: %s", event_id, user_id, exc)
        raise TransientStoreError("Storage conflict, retry the cancellation") from exc

    db.expunge(rsvp)
    logger.info("User %s cancelled RSVP to event %s", user_id, event_id)


def get_rsvp(db: Session, event_id: str, user_id: str) -> EventRSVP:
    rsvp = _find_rsvp(db, event_id, user_id)
    if not rsvp:
        raise NotFoundError("RSVP not found")
    return rsvp


def set_reminder_enabled(db: Session, event_id: str, user_id: str, enabled: bool) -> EventRSVP:
    """Toggle reminders on an existing RSVP. The attendee count is untouched.

    Re-enabling after the reminder already went out does not send it again.
    """
    rsvp = get_rsvp(db, event_id, user_id)
    rsvp.reminder_enabled = enabled
    db.commit()
    db.refresh(rsvp)
    logger.info("User %s set reminders %s for event %s", user_id, "on" if enabled else "off", event_id)
    return rsvp


def list_attendees(db: Session, event_id: str, params: PageParams) -> Page[RSVPOut]:
    """RSVPs for an event in the order they were made."""
    _get_event(db, event_id)

    query = db.query(EventRSVP).filter(EventRSVP.event_id == event_id)
    total = query.count()
    rows = (
        query.order_by(EventRSVP.created_at, EventRSVP.rsvp_id)
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return Page[RSVPOut].build([RSVPOut.model_validate(r) for r in rows], total, params)


def count_rsvps(db: Session, event_id: str) -> int:
    """Live row count, the value attendee_count must track."""
    return db.query(EventRSVP).filter(EventRSVP.event_id == event_id).count()


# ---------------------------------------------------------------------------
# Reminder sweep support
# ---------------------------------------------------------------------------
def events_starting_within(
    db: Session,
    lower: timedelta,
    upper: timedelta,
    now: Optional[datetime] = None,
) -> list[Event]:
    """Events with ``now + lower < start_time <= now + upper``."""
    now = now or utcnow()
    return (
        db.query(Event)
        .filter(Event.start_time > now + lower, Event.start_time <= now + upper)
        .order_by(Event.start_time, Event.event_id)
        .all()
    )


def pending_reminders(db: Session, event_id: str) -> list[EventRSVP]:
    """RSVPs that want a reminder and have not been sent one yet."""
    return (
        db.query(EventRSVP)
        .filter(
            EventRSVP.event_id == event_id,
            EventRSVP.reminder_enabled.is_(True),
            EventRSVP.reminder_sent.is_(False),
        )
        .order_by(EventRSVP.created_at, EventRSVP.rsvp_id)
        .all()
    )


def mark_reminders_sent(db: Session, rsvp_ids: Sequence[str]) -> int:
    """Flip reminder_sent on the given rows in one batched update; returns rows changed."""
    if not rsvp_ids:
        return 0
    updated = (
        db.query(EventRSVP)
        .filter(EventRSVP.rsvp_id.in_(list(rsvp_ids)), EventRSVP.reminder_sent.is_(False))
        .update({EventRSVP.reminder_sent: True}, synchronize_session=False)
    )
    db.commit()
    return updated

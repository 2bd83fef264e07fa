"""Event service — artist-owned event CRUD and the follower feed.

Responsibilities:
- Temporal validation: start must be in the future at creation, end after start
- Authorization hook: only the owning artist may edit or delete
- Stable ordering for every listing (start_time, then event_id)
- Feed short-circuit: an empty followed-artist set never reaches the database
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Query, Session

from app.database import as_utc, utcnow
from app.errors import ForbiddenError, InvalidStateError, NotFoundError
from app.models.event import Event, EventCategory
from app.schemas.event import EventOut
from app.schemas.pagination import Page, PageParams

logger = logging.getLogger(__name__)

# Fields an owner may edit. attendee_count belongs to the attendance ledger.
EDITABLE_FIELDS = frozenset({
    "title", "description", "category", "start_time", "end_time",
    "venue", "stream_url", "ticket_url", "is_virtual",
})
NULLABLE_FIELDS = frozenset({"end_time", "venue", "stream_url", "ticket_url"})


def _check_owner(event: Event, actor_artist_id: str) -> None:
    if event.artist_id != actor_artist_id:
        raise ForbiddenError("Only the owning artist may modify this event")


def _check_time_order(start_time: datetime, end_time: Optional[datetime]) -> None:
    if end_time is not None and end_time <= start_time:
        raise InvalidStateError("End time must be after start time")


def _paginate(query: Query, params: PageParams) -> Page[EventOut]:
    total = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.limit).all()
    return Page[EventOut].build([EventOut.model_validate(e) for e in rows], total, params)


def create_event(
    db: Session,
    artist_id: str,
    title: str,
    category: EventCategory,
    start_time: datetime,
    end_time: Optional[datetime] = None,
    description: str = "",
    venue: Optional[str] = None,
    stream_url: Optional[str] = None,
    ticket_url: Optional[str] = None,
    is_virtual: bool = False,
) -> Event:
    """Create an event owned by ``artist_id``."""
    start_time = as_utc(start_time)
    end_time = as_utc(end_time) if end_time is not None else None
    if start_time <= utcnow():
        raise InvalidStateError("Event start time must be in the future")
    _check_time_order(start_time, end_time)

    event = Event(
        artist_id=artist_id,
        title=title,
        description=description,
        category=category,
        start_time=start_time,
        end_time=end_time,
        venue=venue,
        stream_url=stream_url,
        ticket_url=ticket_url,
        is_virtual=is_virtual,
        attendee_count=0,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) for artist %s", title, event.event_id, artist_id)
    return event


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def list_events_by_artist(db: Session, artist_id: str, params: PageParams) -> Page[EventOut]:
    query = (
        db.query(Event)
        .filter(Event.artist_id == artist_id)
        .order_by(Event.start_time, Event.event_id)
    )
    return _paginate(query, params)


def update_event(
    db: Session,
    event_id: str,
    actor_artist_id: str,
    updates: dict[str, Any],
) -> Event:
    """Apply a partial edit; start/end ordering is re-checked against the merged values."""
    event = get_event(db, event_id)
    _check_owner(event, actor_artist_id)

    updates = {
        k: v for k, v in updates.items()
        if k in EDITABLE_FIELDS and (v is not None or k in NULLABLE_FIELDS)
    }
    for key in ("start_time", "end_time"):
        if updates.get(key) is not None:
            updates[key] = as_utc(updates[key])
    start_time = updates.get("start_time", event.start_time)
    end_time = updates["end_time"] if "end_time" in updates else event.end_time
    _check_time_order(start_time, end_time)

    for field, value in updates.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(updates)) or "no fields")
    return event


def delete_event(db: Session, event_id: str, actor_artist_id: str) -> None:
    """Delete an event and, by cascade, all of its RSVPs."""
    event = get_event(db, event_id)
    _check_owner(event, actor_artist_id)

    db.delete(event)
    db.commit()
    logger.info("Deleted event %s by artist %s", event_id, actor_artist_id)


def get_feed(db: Session, followed_artist_ids: Iterable[str], params: PageParams) -> Page[EventOut]:
    """Upcoming events from the given artists, soonest first.

    An empty artist set means "nothing": an empty IN () is either invalid or
    unfiltered depending on the backend, so it is answered without a query.
    """
    artist_ids = set(followed_artist_ids)
    if not artist_ids:
        return Page[EventOut].build([], 0, params)

    query = (
        db.query(Event)
        .filter(Event.artist_id.in_(artist_ids), Event.start_time > utcnow())
        .order_by(Event.start_time, Event.event_id)
    )
    return _paginate(query, params)

"""Event API routes — delegates to event_service and the attendance ledger."""
import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.event import EventCreate, EventUpdate, EventOut, RSVPCreate, RSVPUpdate, RSVPOut
from app.schemas.pagination import Page, PageParams, page_params
from app.services import attendance_ledger, event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create a new event owned by ``artist_id``."""
    return event_service.create_event(db=db, **payload.model_dump())


@router.get("/feed", response_model=Page[EventOut])
def get_feed(
    artist_id: list[str] = Query(default=[], description="Followed artist IDs, already resolved by the caller"),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    """Upcoming events from the followed artists, soonest first."""
    return event_service.get_feed(db, artist_id, params)


@router.get("/artist/{artist_id}", response_model=Page[EventOut])
def list_artist_events(
    artist_id: str,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    """List an artist's events by start time."""
    return event_service.list_events_by_artist(db, artist_id, params)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    actor_artist_id: str = Query(..., description="ID of the artist performing the update"),
    db: Session = Depends(get_db),
):
    """Edit an event (owning artist only)."""
    return event_service.update_event(
        db=db,
        event_id=event_id,
        actor_artist_id=actor_artist_id,
        updates=payload.model_dump(exclude_unset=True),
    )


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    actor_artist_id: str = Query(..., description="ID of the artist deleting the event"),
    db: Session = Depends(get_db),
):
    """Delete an event and its RSVPs (owning artist only)."""
    event_service.delete_event(db, event_id, actor_artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# RSVPs
# ---------------------------------------------------------------------------
@router.post("/{event_id}/rsvp", response_model=RSVPOut, status_code=status.HTTP_201_CREATED)
def create_rsvp(event_id: str, payload: RSVPCreate, db: Session = Depends(get_db)):
    """RSVP to an upcoming event."""
    return attendance_ledger.create_rsvp(
        db, event_id, payload.user_id, reminder_enabled=payload.reminder_enabled,
    )


@router.get("/{event_id}/rsvp", response_model=RSVPOut)
def get_rsvp(event_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    return attendance_ledger.get_rsvp(db, event_id, user_id)


@router.patch("/{event_id}/rsvp", response_model=RSVPOut)
def update_rsvp(
    event_id: str,
    payload: RSVPUpdate,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
):
    """Turn event reminders on or off."""
    return attendance_ledger.set_reminder_enabled(db, event_id, user_id, payload.reminder_enabled)


@router.delete("/{event_id}/rsvp", status_code=status.HTTP_204_NO_CONTENT)
def remove_rsvp(event_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    """Cancel an RSVP."""
    attendance_ledger.remove_rsvp(db, event_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/attendees", response_model=Page[RSVPOut])
def list_attendees(
    event_id: str,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    """Attendees in RSVP order."""
    return attendance_ledger.list_attendees(db, event_id, params)

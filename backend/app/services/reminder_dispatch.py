"""Reminder dispatch — the channel the sweeper hands eligible attendees to.

The sweeper only depends on the ``ReminderDispatcher`` protocol. A dispatcher
returns True when the reminder was accepted for every recipient and False (or
raises) when it was not; the sweeper never retries within a sweep.

``NotificationReminderDispatcher`` is the built-in channel: it records one
in-app ``Notification`` per recipient in a single transaction.
"""
import logging
from typing import Callable, Protocol

from sqlalchemy.orm import Session

from app.models.event import Event
from app.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


class ReminderDispatcher(Protocol):
    def dispatch(self, user_ids: set[str], event: Event) -> bool:
        ...


def reminder_payload(event: Event) -> dict:
    """JSON-safe event summary attached to every reminder."""
    return {
        "event_id": event.event_id,
        "artist_id": event.artist_id,
        "title": event.title,
        "category": event.category.value,
        "start_time": event.start_time.isoformat(),
        "venue": event.venue,
        "stream_url": event.stream_url,
        "ticket_url": event.ticket_url,
        "is_virtual": event.is_virtual,
    }


class NotificationReminderDispatcher:
    """Deliver reminders as in-app notifications."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def dispatch(self, user_ids: set[str], event: Event) -> bool:
        payload = reminder_payload(event)
        title = "Event starting soon"
        message = f'"{event.title}" starts at {event.start_time.strftime("%H:%M UTC")}.'

        db = self._session_factory()
        try:
            for user_id in sorted(user_ids):
                db.add(Notification(
                    user_id=user_id,
                    type=NotificationType.event_reminder,
                    title=title,
                    message=message,
                    data=payload,
                ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info("Queued %d reminder notifications for event %s", len(user_ids), event.event_id)
        return True

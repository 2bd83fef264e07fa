"""Notification inbox — list, count unread, mark read."""
import logging

from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.models.notification import Notification
from app.schemas.notification import NotificationOut
from app.schemas.pagination import Page, PageParams

logger = logging.getLogger(__name__)


def list_notifications(db: Session, user_id: str, params: PageParams) -> Page[NotificationOut]:
    """A user's notifications, newest first."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    total = query.count()
    rows = (
        query.order_by(Notification.created_at.desc(), Notification.notification_id)
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return Page[NotificationOut].build([NotificationOut.model_validate(n) for n in rows], total, params)


def unread_count(db: Session, user_id: str) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .count()
    )


def mark_as_read(db: Session, notification_id: str, user_id: str) -> Notification:
    notification = (
        db.query(Notification)
        .filter(
            Notification.notification_id == notification_id,
            Notification.user_id == user_id,
        )
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    logger.info("Marked %d notifications read for user %s", updated, user_id)
    return updated

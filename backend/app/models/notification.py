"""Notification ORM model — in-app notifications, where event reminders land."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, JSON, Index, Enum as SAEnum
from app.database import Base, UTCDateTime, utcnow


class NotificationType(str, enum.Enum):
    event_reminder = "event_reminder"


class Notification(Base):
    __tablename__ = "notifications"

    notification_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False)
    type = Column(SAEnum(NotificationType, name="notification_type"), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )

"""EventRSVP ORM model — one row per (event, user), source of truth for attendee_count."""
import uuid
from sqlalchemy import Column, String, Boolean, ForeignKey, Index, UniqueConstraint, and_
from sqlalchemy.orm import relationship
from app.database import Base, UTCDateTime, utcnow


class EventRSVP(Base):
    __tablename__ = "event_rsvps"

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    reminder_enabled = Column(Boolean, nullable=False, default=True)
    reminder_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    event = relationship("Event", back_populates="rsvps")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_rsvps_event_user"),
        Index(
            "ix_event_rsvps_pending_reminder",
            "reminder_enabled",
            "reminder_sent",
            postgresql_where=and_(reminder_enabled.is_(True), reminder_sent.is_(False)),
            sqlite_where=and_(reminder_enabled.is_(True), reminder_sent.is_(False)),
        ),
    )

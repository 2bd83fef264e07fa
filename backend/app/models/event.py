"""Event ORM model — artist-owned scheduled events with a denormalized RSVP counter."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, Integer, Index, CheckConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database import Base, UTCDateTime, utcnow


class EventCategory(str, enum.Enum):
    live_stream = "live_stream"
    concert = "concert"
    meet_greet = "meet_greet"
    album_release = "album_release"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    artist_id = Column(String(36), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(SAEnum(EventCategory, name="event_category"), nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=True)
    venue = Column(String(500), nullable=True)
    stream_url = Column(String(2048), nullable=True)
    ticket_url = Column(String(2048), nullable=True)
    is_virtual = Column(Boolean, nullable=False, default=False)
    # Only ever adjusted relatively by the attendance ledger.
    attendee_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    rsvps = relationship("EventRSVP", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_events_artist_start", "artist_id", "start_time"),
        Index("ix_events_start_time", "start_time"),
        CheckConstraint("attendee_count >= 0", name="ck_events_attendee_count_non_negative"),
    )

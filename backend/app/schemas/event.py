"""Pydantic schemas for Events and RSVPs."""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter

from app.models.event import EventCategory

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    _http_url.validate_python(value)
    return value


Url = Annotated[str, AfterValidator(_check_http_url)]


class EventCreate(BaseModel):
    artist_id: str
    title: str = Field(max_length=255)
    description: str = ""
    category: EventCategory
    start_time: datetime
    end_time: Optional[datetime] = None
    venue: Optional[str] = Field(default=None, max_length=500)
    stream_url: Optional[Url] = Field(default=None, max_length=2048)
    ticket_url: Optional[Url] = Field(default=None, max_length=2048)
    is_virtual: bool = False


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    venue: Optional[str] = Field(default=None, max_length=500)
    stream_url: Optional[Url] = Field(default=None, max_length=2048)
    ticket_url: Optional[Url] = Field(default=None, max_length=2048)
    is_virtual: Optional[bool] = None


class EventOut(BaseModel):
    event_id: str
    artist_id: str
    title: str
    description: str
    category: EventCategory
    start_time: datetime
    end_time: Optional[datetime] = None
    venue: Optional[str] = None
    stream_url: Optional[str] = None
    ticket_url: Optional[str] = None
    is_virtual: bool
    attendee_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RSVPCreate(BaseModel):
    user_id: str
    reminder_enabled: Optional[bool] = None  # defaults to True in the ledger


class RSVPUpdate(BaseModel):
    reminder_enabled: bool


class RSVPOut(BaseModel):
    rsvp_id: str
    event_id: str
    user_id: str
    reminder_enabled: bool
    reminder_sent: bool
    created_at: datetime

    model_config = {"from_attributes": True}

"""Pydantic schemas for reminder sweeps."""
from datetime import datetime
from pydantic import BaseModel


class SweepResult(BaseModel):
    started_at: datetime
    skipped: bool = False
    events_considered: int = 0
    events_notified: int = 0
    reminders_sent: int = 0
    failed_event_ids: list[str] = []

"""Pydantic schemas for Notifications."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel

from app.models.notification import NotificationType


class NotificationOut(BaseModel):
    notification_id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UnreadCount(BaseModel):
    count: int

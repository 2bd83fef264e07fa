"""Notification inbox routes."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.notification import NotificationOut, UnreadCount
from app.schemas.pagination import Page, PageParams, page_params
from app.services import notification_service

router = APIRouter()


@router.get("/", response_model=Page[NotificationOut])
def list_notifications(
    user_id: str = Query(...),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return notification_service.list_notifications(db, user_id, params)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(user_id: str = Query(...), db: Session = Depends(get_db)):
    return UnreadCount(count=notification_service.unread_count(db, user_id))


@router.post("/read-all")
def mark_all_read(user_id: str = Query(...), db: Session = Depends(get_db)):
    updated = notification_service.mark_all_as_read(db, user_id)
    return {"status": "ok", "updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_read(notification_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    return notification_service.mark_as_read(db, notification_id, user_id)

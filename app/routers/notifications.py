from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.exceptions import ValidationError
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user
from app.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from app.services.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])

@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return NotificationService.list_for_user(db, current_user.id, unread_only=unread_only)

@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    request: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not (request.user_id and request.title and request.message and request.type):
        raise ValidationError("Missing required fields")
    return NotificationService.create_notification(
        db,
        user_id=request.user_id,
        title=request.title,
        message=request.message,
        type=request.type,
        link=request.link,
    )

@router.post("/mark-read", response_model=MarkReadResponse)
def mark_notifications_as_read(
    request: MarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = NotificationService.mark_read(db, current_user.id, request.notification_ids)
    return {"message": f"{count} notifications marked as read", "count": count}

@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"unread_count": NotificationService.unread_count(db, current_user.id)}

from datetime import datetime
from typing import Any, Dict, List, Optional
from app.schemas.common import CamelModel

class NotificationResponse(CamelModel):
    id: int
    title: str
    message: str
    type: Optional[str] = None
    link: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: Optional[datetime] = None

class NotificationCreate(CamelModel):
    user_id: Optional[int] = None
    title: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    link: Optional[str] = None

class MarkReadRequest(CamelModel):
    notification_ids: Optional[List[int]] = None

class MarkReadResponse(CamelModel):
    message: str
    count: int

class UnreadCountResponse(CamelModel):
    unread_count: int

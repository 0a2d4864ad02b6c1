from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Optional
from app.schemas.common import CamelModel, Toast

class LeaveRequestCreate(BaseModel):
    # Presence is checked by the service so the error message stays uniform
    leave_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None

class LeaveDecisionRequest(BaseModel):
    approver_comments: Optional[str] = None

class LeaveRequestResponse(BaseModel):
    id: int
    user_id: int
    leave_type: str
    start_date: date
    end_date: date
    days_count: float
    reason: Optional[str] = None
    status: str
    approver_id: Optional[int] = None
    approver_comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LeaveListItem(CamelModel):
    id: int
    user_id: int
    name: str
    start_date: date
    end_date: date
    leave_type: str
    status: str
    reason: Optional[str] = None
    approver_comments: Optional[str] = None
    days_count: float
    created_at: Optional[datetime] = None

class LeaveCreatedResponse(BaseModel):
    message: str
    leave: LeaveRequestResponse

class LeaveDecisionResponse(BaseModel):
    message: str
    leave: LeaveRequestResponse
    toast: Toast

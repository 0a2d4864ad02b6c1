from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.core.permissions import Capability
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user, require_capability
from app.schemas.attendance import AttendanceRecordResponse, CheckInResponse, CheckOutResponse
from app.services import attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/check-in", response_model=CheckInResponse)
@limiter.limit(settings.checkin_rate_limit)
def check_in(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    record = attendance_service.check_in(db, current_user)
    return {"message": "Check-in successful", "check_in_time": record.check_in}


@router.post("/check-out", response_model=CheckOutResponse)
@limiter.limit(settings.checkin_rate_limit)
def check_out(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    record = attendance_service.check_out(db, current_user)
    return {"message": "Check-out successful", "check_out_time": record.check_out}


@router.get("", response_model=List[AttendanceRecordResponse])
def list_attendance(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.VIEW_ALL_RECORDS)),
):
    """All employees' attendance (hr/admin), optionally narrowed to one user and a date range."""
    return attendance_service.list_attendance(db, user_id=user_id, date_from=date_from, date_to=date_to)


@router.get("/me", response_model=List[AttendanceRecordResponse])
def list_my_attendance(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return attendance_service.list_attendance(db, user_id=current_user.id, date_from=date_from, date_to=date_to)


@router.get("/today", response_model=Optional[AttendanceRecordResponse])
def get_today(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    day = attendance_service.today()
    records = attendance_service.list_attendance(db, user_id=current_user.id, date_from=day, date_to=day)
    return records[0] if records else None

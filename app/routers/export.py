"""
CSV download endpoints. Files are generated in full, then sent.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.permissions import Capability
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user, require_capability
from app.services import attendance_service, export_service, leave_service

router = APIRouter(prefix="/export", tags=["export"])


def _csv_response(content: str, kind: str) -> Response:
    filename = export_service.export_filename(kind, attendance_service.today())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/attendance")
def export_attendance(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.VIEW_ALL_RECORDS)),
):
    records = attendance_service.list_attendance(db, user_id=user_id, date_from=date_from, date_to=date_to)
    return _csv_response(export_service.attendance_csv(records), "attendance")


@router.get("/attendance/me")
def export_my_attendance(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    records = attendance_service.list_attendance(db, user_id=current_user.id, date_from=date_from, date_to=date_to)
    return _csv_response(export_service.attendance_csv(records), "attendance")


@router.get("/leave")
def export_leave(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Same visibility as the leave listing: own rows for employees, all rows for hr/admin."""
    leaves = leave_service.list_leaves(db, current_user)
    return _csv_response(export_service.leave_csv(leaves), "leave")

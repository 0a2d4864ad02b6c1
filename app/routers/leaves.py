from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.permissions import Capability
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user, require_capability
from app.schemas.leave import (
    LeaveCreatedResponse,
    LeaveDecisionRequest,
    LeaveDecisionResponse,
    LeaveListItem,
    LeaveRequestCreate,
)
from app.services import leave_service

router = APIRouter(prefix="/leaves", tags=["leave"])


@router.get("", response_model=List[LeaveListItem])
def list_leaves(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Employees get their own requests; hr/admin get every request."""
    return leave_service.list_leaves(db, current_user)


@router.post("", response_model=LeaveCreatedResponse)
def submit_leave_request(
    request: LeaveRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    leave = leave_service.create_leave(
        db,
        current_user,
        leave_type=request.leave_type,
        start_date=request.start_date,
        end_date=request.end_date,
        reason=request.reason,
    )
    return {"message": "Leave request submitted successfully", "leave": leave}


@router.post("/{leave_id}/approve", response_model=LeaveDecisionResponse)
def approve_leave(
    leave_id: int,
    decision: Optional[LeaveDecisionRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPROVE_LEAVE)),
):
    comments = decision.approver_comments if decision else None
    leave, toast = leave_service.approve_leave(db, current_user, leave_id, comments)
    return {"message": "Leave approved successfully", "leave": leave, "toast": toast}


@router.post("/{leave_id}/reject", response_model=LeaveDecisionResponse)
def reject_leave(
    leave_id: int,
    decision: Optional[LeaveDecisionRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPROVE_LEAVE)),
):
    comments = decision.approver_comments if decision else None
    leave, toast = leave_service.reject_leave(db, current_user, leave_id, comments)
    return {"message": "Leave rejected", "leave": leave, "toast": toast}

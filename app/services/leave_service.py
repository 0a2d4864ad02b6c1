"""
Leave Service

Leave requests move pending -> approved | rejected exactly once. Approval
notifies the owner and backfills the attendance ledger for every day of the
leave; the status change, the notification and the backfill commit together.
"""
import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, InvalidStateError, NotFoundError, ValidationError
from app.core.permissions import Capability, is_allowed
from app.models.attendance import AttendanceStatus
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.models.user import User
from app.services import attendance_service
from app.services.audit import AuditService
from app.services.notification import NotificationService

logger = logging.getLogger(__name__)


def calculate_days_count(start_date: date, end_date: date) -> int:
    """Inclusive day span: 2024-01-01..2024-01-03 is 3 days."""
    return math.ceil((end_date - start_date).total_seconds() / 86400) + 1


def iter_leave_dates(start_date: date, end_date: date):
    day = start_date
    while day <= end_date:
        yield day
        day += timedelta(days=1)


def create_leave(
    db: Session,
    user: User,
    leave_type: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    reason: Optional[str] = None,
) -> LeaveRequest:
    if not leave_type or not start_date or not end_date:
        raise ValidationError("Leave type, start date, and end date are required")
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date")

    leave = LeaveRequest(
        user_id=user.id,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        days_count=calculate_days_count(start_date, end_date),
        reason=reason,
        status=LeaveStatus.PENDING.value,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    logger.info(f"Leave request {leave.id} submitted by user {user.id}", extra={"days": leave.days_count})
    return leave


def list_leaves(db: Session, requester: User) -> List[Dict[str, Any]]:
    """
    Employees see their own requests; hr/admin see everyone's. Newest first,
    each row carrying the owner's display name from the same query.
    """
    query = db.query(LeaveRequest, User).outerjoin(User, LeaveRequest.user_id == User.id)
    if not is_allowed(requester.role, Capability.VIEW_ALL_RECORDS):
        query = query.filter(LeaveRequest.user_id == requester.id)

    rows = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all()
    return [
        {
            "id": leave.id,
            "user_id": leave.user_id,
            "name": f"{(owner.first_name if owner else None) or 'Unknown'} {(owner.last_name if owner else None) or ''}".strip(),
            "start_date": leave.start_date,
            "end_date": leave.end_date,
            "leave_type": leave.leave_type,
            "status": leave.status,
            "reason": leave.reason,
            "approver_comments": leave.approver_comments,
            "days_count": float(leave.days_count),
            "created_at": leave.created_at,
        }
        for leave, owner in rows
    ]


def backfill_leave_attendance(db: Session, leave: LeaveRequest) -> int:
    """
    Upsert a ``leave`` attendance row for each day of the request. Safe to
    re-run: the (user, date) key keeps one row per day. Does not commit.
    """
    note = f"Leave approved: {leave.leave_type}"
    days = 0
    for day in iter_leave_dates(leave.start_date, leave.end_date):
        attendance_service.upsert_status(db, leave.user_id, day, AttendanceStatus.LEAVE.value, note)
        days += 1
    return days


def approve_leave(
    db: Session, approver: User, leave_id: int, comments: Optional[str] = None
) -> Tuple[LeaveRequest, Dict[str, Any]]:
    return _decide(db, approver, leave_id, comments, LeaveStatus.APPROVED)


def reject_leave(
    db: Session, approver: User, leave_id: int, comments: Optional[str] = None
) -> Tuple[LeaveRequest, Dict[str, Any]]:
    return _decide(db, approver, leave_id, comments, LeaveStatus.REJECTED)


def _decide(
    db: Session,
    approver: User,
    leave_id: int,
    comments: Optional[str],
    decision: LeaveStatus,
) -> Tuple[LeaveRequest, Dict[str, Any]]:
    if not is_allowed(approver.role, Capability.APPROVE_LEAVE):
        raise AccessDeniedError("Insufficient permissions")

    leave = db.get(LeaveRequest, leave_id)
    if leave is None:
        raise NotFoundError("Leave request not found")
    if leave.status != LeaveStatus.PENDING.value:
        raise InvalidStateError("Leave request already processed")

    try:
        # Claim the row only while it is still pending; a concurrent decision leaves 0 rows
        claimed = (
            db.query(LeaveRequest)
            .filter(LeaveRequest.id == leave_id, LeaveRequest.status == LeaveStatus.PENDING.value)
            .update(
                {
                    LeaveRequest.status: decision.value,
                    LeaveRequest.approver_id: approver.id,
                    LeaveRequest.approver_comments: comments,
                },
                synchronize_session=False,
            )
        )
        if not claimed:
            raise InvalidStateError("Leave request already processed")
        db.refresh(leave)

        toast = NotificationService.notify_leave_decision(db, leave, approver, decision.value)

        backfilled = 0
        if decision == LeaveStatus.APPROVED:
            backfilled = backfill_leave_attendance(db, leave)

        AuditService.log(
            db,
            action="approve_leave" if decision == LeaveStatus.APPROVED else "reject_leave",
            entity_type="leave_request",
            entity_id=leave.id,
            user_id=approver.id,
            user_role=approver.role,
            details={"owner_id": leave.user_id, "comments": comments, "attendance_days": backfilled},
        )
        db.commit()
    except InvalidStateError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"Failed to {decision.value} leave {leave_id}")
        raise

    db.refresh(leave)
    logger.info(f"Leave {leave.id} {decision.value} by user {approver.id}")
    return leave, toast

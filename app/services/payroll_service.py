"""
Payroll Service

Business logic for payroll records. Records are append-only: created by
hr/admin, never edited. Creation notifies the employee in the same
transaction.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from app.core.permissions import Capability, is_allowed
from app.models.payroll import PayrollRecord
from app.models.user import User
from app.services.audit import AuditService
from app.services.notification import NotificationService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "user_id",
    "pay_period_start",
    "pay_period_end",
    "gross_salary",
    "total_deductions",
    "net_salary",
    "payable_days",
)


def _ensure_payroll_access(user: User):
    if not is_allowed(user.role, Capability.MANAGE_PAYROLL):
        raise AccessDeniedError("Forbidden")


def _serialize(record: PayrollRecord, owner: Optional[User]) -> Dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "pay_period_start": record.pay_period_start,
        "pay_period_end": record.pay_period_end,
        "gross_salary": record.gross_salary,
        "total_deductions": record.total_deductions,
        "net_salary": record.net_salary,
        "payable_days": record.payable_days,
        "payslip_url": record.payslip_url,
        "created_at": record.created_at,
        "user": {
            "first_name": owner.first_name,
            "last_name": owner.last_name,
            "email": owner.email,
            "employee_id": owner.employee_id,
        } if owner else None,
    }


def list_payroll(db: Session, requester: User) -> List[Dict[str, Any]]:
    """All payroll records with their owner's display fields, latest period first."""
    _ensure_payroll_access(requester)
    rows = (
        db.query(PayrollRecord, User)
        .outerjoin(User, PayrollRecord.user_id == User.id)
        .order_by(PayrollRecord.pay_period_start.desc(), PayrollRecord.id.desc())
        .all()
    )
    return [_serialize(record, owner) for record, owner in rows]


def list_payroll_for_user(db: Session, user: User) -> List[Dict[str, Any]]:
    records = (
        db.query(PayrollRecord)
        .filter(PayrollRecord.user_id == user.id)
        .order_by(PayrollRecord.pay_period_start.desc(), PayrollRecord.id.desc())
        .all()
    )
    return [_serialize(record, user) for record in records]


def create_payroll(db: Session, requester: User, data: Dict[str, Any]) -> Tuple[PayrollRecord, Dict[str, Any]]:
    """
    Persist a payroll record and notify its owner.

    A field counts as missing only when it is absent or None; zero
    deductions are a legitimate value.
    """
    _ensure_payroll_access(requester)

    missing = [field for field in REQUIRED_FIELDS if data.get(field) is None]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})
    if data["pay_period_end"] < data["pay_period_start"]:
        raise ValidationError("Pay period end cannot be before its start")

    target = db.get(User, data["user_id"])
    if target is None:
        raise NotFoundError("User not found")

    try:
        record = PayrollRecord(
            user_id=target.id,
            pay_period_start=data["pay_period_start"],
            pay_period_end=data["pay_period_end"],
            gross_salary=float(data["gross_salary"]),
            total_deductions=float(data["total_deductions"]),
            net_salary=float(data["net_salary"]),
            payable_days=int(data["payable_days"]),
            payslip_url=data.get("payslip_url"),
            generated_by=requester.id,
        )
        db.add(record)
        db.flush()

        toast = NotificationService.notify_payroll_generated(db, record)

        AuditService.log(
            db,
            action="create_payroll",
            entity_type="payroll",
            entity_id=record.id,
            user_id=requester.id,
            user_role=requester.role,
            details={
                "employee_id": target.id,
                "period": [record.pay_period_start, record.pay_period_end],
                "net_salary": record.net_salary,
            },
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to create payroll for user {data.get('user_id')}")
        raise

    db.refresh(record)
    logger.info(f"Payroll {record.id} generated for user {target.id} by {requester.id}")
    return record, toast

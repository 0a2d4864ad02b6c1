import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDeniedError, InvalidStateError, NotFoundError, ValidationError
from app.core.permissions import Capability, is_allowed
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.user import User, UserRole
from app.services import auth as auth_service
from app.services.audit import AuditService

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "address",
    "job_title",
    "department",
    "profile_picture_url",
)


def generate_unique_employee_id(db: Session, year: Optional[int] = None) -> str:
    """
    Next ID in the ``EMP-YYYY-NNNN`` sequence for ``year`` (default: current).
    Serials restart at 0001 each year.
    """
    year = year or datetime.now(timezone.utc).year
    prefix = f"{settings.employee_id_prefix}-{year}-"
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    serials = []
    for (emp_id,) in db.query(User.employee_id).filter(User.employee_id.like(f"{prefix}%")):
        match = pattern.match(emp_id or "")
        if match:
            serials.append(int(match.group(1)))
    return f"{prefix}{max(serials, default=0) + 1:04d}"


def create_user(
    db: Session,
    email: str,
    password: str,
    role: UserRole = UserRole.EMPLOYEE,
    **profile,
) -> User:
    """Create an account with a fresh employee ID. Used by seeding and bootstrap."""
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("Email already in use")

    user = User(
        email=email,
        hashed_password=auth_service.get_password_hash(password),
        role=role,
        employee_id=generate_unique_employee_id(db),
        is_active=True,
        **{k: v for k, v in profile.items() if k in PROFILE_FIELDS},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created {role.value} account {email} ({user.employee_id})")
    return user


def list_directory(db: Session, requester: User, day: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Active users other than the requester, each with their attendance status
    for ``day`` (``absent`` when there is no row).
    """
    if not is_allowed(requester.role, Capability.VIEW_ALL_RECORDS):
        raise AccessDeniedError("Insufficient permissions")

    day = day or datetime.now(timezone.utc).date()
    rows = (
        db.query(User, AttendanceRecord.status)
        .outerjoin(
            AttendanceRecord,
            and_(AttendanceRecord.user_id == User.id, AttendanceRecord.date == day),
        )
        .filter(User.is_active.is_(True), User.id != requester.id)
        .order_by(User.first_name, User.last_name, User.id)
        .all()
    )
    return [
        {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "role": user.role.value,
            "phone": user.phone,
            "job_title": user.job_title,
            "department": user.department,
            "employee_id": user.employee_id,
            "profile_picture_url": user.profile_picture_url,
            "is_active": user.is_active,
            "created_at": user.created_at,
            "status": status or AttendanceStatus.ABSENT.value,
        }
        for user, status in rows
    ]


def update_profile(db: Session, user: User, changes: Dict[str, Any]) -> User:
    applied = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
    for field, value in applied.items():
        setattr(user, field, value)

    AuditService.log(
        db,
        action="update_profile",
        entity_type="user",
        entity_id=user.id,
        user_id=user.id,
        user_role=user.role,
        details={"fields": sorted(applied)},
    )
    db.commit()
    db.refresh(user)
    return user


def deactivate_user(db: Session, admin: User, user_id: int) -> User:
    """Soft-deactivate an account. Users are never deleted."""
    if not is_allowed(admin.role, Capability.MANAGE_USERS):
        raise AccessDeniedError("Insufficient permissions")
    if admin.id == user_id:
        raise InvalidStateError("You cannot deactivate your own account")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not user.is_active:
        raise InvalidStateError("User is already inactive")

    user.is_active = False
    AuditService.log(
        db,
        action="deactivate_user",
        entity_type="user",
        entity_id=user.id,
        user_id=admin.id,
        user_role=admin.role,
        details={"email": user.email},
    )
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} deactivated by {admin.id}")
    return user

"""
Attendance Service

Daily check-in/check-out against the (user, date) ledger, read-time work hour
calculations, and the upsert used by leave approval to backfill rows.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidStateError
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.user import User

logger = logging.getLogger(__name__)

EMPTY_DURATION = "00:00"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    """Calendar day used for the attendance key (UTC)."""
    return utcnow().date()


def _naive_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; freshly assigned values are aware.
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def compute_work_hours(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    standard_hours: Optional[int] = None,
) -> Tuple[str, str]:
    """
    Return ``(work_hours, extra_hours)`` as ``HH:MM`` strings.

    Extra hours reuse the minute component of the total worked time rather
    than the remainder above the threshold (9h30 worked -> extra ``01:30``,
    8h30 worked -> extra ``00:00``).
    """
    if not check_in or not check_out:
        return EMPTY_DURATION, EMPTY_DURATION

    threshold = settings.standard_work_hours if standard_hours is None else standard_hours
    diff_seconds = int((_naive_utc(check_out) - _naive_utc(check_in)).total_seconds())
    diff_hours = diff_seconds // 3600
    diff_minutes = (diff_seconds % 3600) // 60

    work_hours = f"{diff_hours:02d}:{diff_minutes:02d}"
    extra_hours = EMPTY_DURATION
    if diff_hours > threshold:
        extra_hours = f"{diff_hours - threshold:02d}:{diff_minutes:02d}"
    return work_hours, extra_hours


def get_record(db: Session, user_id: int, day: date) -> Optional[AttendanceRecord]:
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.user_id == user_id,
        AttendanceRecord.date == day,
    ).first()


def check_in(db: Session, user: User, now: Optional[datetime] = None) -> AttendanceRecord:
    now = now or utcnow()
    day = now.date()

    record = get_record(db, user.id, day)
    if record is not None and record.check_in is not None:
        raise ConflictError("Already checked in today")

    if record is None:
        record = AttendanceRecord(
            user_id=user.id,
            date=day,
            check_in=now,
            status=AttendanceStatus.PRESENT.value,
        )
        db.add(record)
    else:
        record.check_in = now
        record.status = AttendanceStatus.PRESENT.value

    try:
        db.commit()
    except IntegrityError:
        # Concurrent check-in won the (user, date) key
        db.rollback()
        raise ConflictError("Already checked in today")

    db.refresh(record)
    logger.info(f"User {user.id} checked in", extra={"user_id": user.id, "date": day.isoformat()})
    return record


def check_out(db: Session, user: User, now: Optional[datetime] = None) -> AttendanceRecord:
    now = now or utcnow()
    day = now.date()

    record = get_record(db, user.id, day)
    if record is None or record.check_in is None:
        raise InvalidStateError("No check-in record found for today")
    if record.check_out is not None:
        raise ConflictError("Already checked out today")

    record.check_out = now
    db.commit()
    db.refresh(record)
    logger.info(f"User {user.id} checked out", extra={"user_id": user.id, "date": day.isoformat()})
    return record


def upsert_status(db: Session, user_id: int, day: date, status: str, notes: Optional[str]) -> None:
    """
    Insert or update the (user, date) row with ``status`` and ``notes``.
    Existing check-in/check-out stamps are left as they are. Does not commit.
    """
    dialect = db.get_bind().dialect.name
    values = {"user_id": user_id, "date": day, "status": status, "notes": notes}
    update = {"status": status, "notes": notes, "updated_at": func.now()}

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(AttendanceRecord).values(**values).on_conflict_do_update(
            index_elements=[AttendanceRecord.user_id, AttendanceRecord.date],
            set_=update,
        )
        db.execute(stmt)
        return

    record = get_record(db, user_id, day)
    if record is None:
        db.add(AttendanceRecord(**values))
    else:
        record.status = status
        record.notes = notes
    db.flush()


def list_attendance(
    db: Session,
    user_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Attendance rows joined with minimal user display fields, oldest first.
    The date range applies only when both bounds are given.
    """
    query = db.query(AttendanceRecord, User).outerjoin(User, AttendanceRecord.user_id == User.id)

    if user_id is not None:
        query = query.filter(AttendanceRecord.user_id == user_id)
    if date_from and date_to:
        query = query.filter(AttendanceRecord.date >= date_from, AttendanceRecord.date <= date_to)

    rows = query.order_by(AttendanceRecord.date.asc(), AttendanceRecord.id.asc()).all()
    return [_serialize(record, owner) for record, owner in rows]


def _serialize(record: AttendanceRecord, owner: Optional[User]) -> Dict[str, Any]:
    work_hours, extra_hours = compute_work_hours(record.check_in, record.check_out)
    return {
        "id": record.id,
        "date": record.date,
        "check_in": record.check_in,
        "check_out": record.check_out,
        "work_hours": work_hours,
        "extra_hours": extra_hours,
        "status": record.status,
        "notes": record.notes,
        "user": {
            "id": owner.id,
            "first_name": owner.first_name,
            "last_name": owner.last_name,
            "email": owner.email,
            "employee_id": owner.employee_id,
        } if owner else None,
    }

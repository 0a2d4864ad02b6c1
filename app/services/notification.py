from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models.notification import Notification
from app.models.user import User


class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: int,
        title: str,
        message: str,
        type: str = "info",
        link: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        commit: bool = True,
    ) -> Notification:
        """
        Internal utility for creating notifications.

        With ``commit=False`` the row is only flushed so it can share the
        caller's transaction (leave decisions, payroll generation).
        """
        if db.get(User, user_id) is None:
            raise NotFoundError("User not found")

        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            link=link,
            payload=payload,
            is_read=False,
        )
        db.add(notification)
        if commit:
            db.commit()
            db.refresh(notification)
        else:
            db.flush()
        return notification

    @staticmethod
    def list_for_user(db: Session, user_id: int, unread_only: bool = False) -> List[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    @staticmethod
    def mark_read(db: Session, user_id: int, notification_ids: Any) -> int:
        """
        Mark the given notifications as read. Only rows owned by ``user_id``
        are touched; ids belonging to other users are silently skipped.
        """
        if not isinstance(notification_ids, list) or not notification_ids:
            raise ValidationError("Invalid notification IDs")

        count = db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.id.in_(notification_ids),
        ).update({Notification.is_read: True}, synchronize_session=False)
        db.commit()
        return count

    @staticmethod
    def unread_count(db: Session, user_id: int) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        ).count()

    # --- Workflow notifications -------------------------------------------

    @staticmethod
    def notify_leave_decision(db: Session, leave, approver: User, action: str) -> Dict[str, Any]:
        """
        Notify the leave owner of an approval or rejection. Returns the toast
        payload shown to the approver.
        """
        approved = action == "approved"
        title = "Leave Approved" if approved else "Leave Rejected"
        approver_name = approver.full_name or approver.email
        NotificationService.create_notification(
            db,
            user_id=leave.user_id,
            title=title,
            message=(
                f"Your leave from {leave.start_date} to {leave.end_date} "
                f"has been {action} by {approver_name}."
            ),
            type="leave_status",
            link="/leave",
            payload={"leaveId": leave.id, "action": action, "approver": approver_name},
            commit=False,
        )
        return {
            "userId": leave.user_id,
            "title": title,
            "message": f"Your leave from {leave.start_date} to {leave.end_date} has been {action}.",
            "type": "success" if approved else "info",
        }

    @staticmethod
    def notify_payroll_generated(db: Session, payroll) -> Dict[str, Any]:
        title = "Payroll Generated"
        message = (
            f"Your payslip for {payroll.pay_period_start} to {payroll.pay_period_end} "
            f"is ready. Net salary: {payroll.net_salary:.2f}."
        )
        NotificationService.create_notification(
            db,
            user_id=payroll.user_id,
            title=title,
            message=message,
            type="payroll",
            link="/payroll",
            payload={"payrollId": payroll.id},
            commit=False,
        )
        return {
            "userId": payroll.user_id,
            "title": title,
            "message": message,
            "type": "success",
        }

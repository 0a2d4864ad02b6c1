# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, attendance, leave_request, payroll, notification, audit_log
)

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .attendance import AttendanceRecord, AttendanceStatus
from .leave_request import LeaveRequest, LeaveStatus
from .payroll import PayrollRecord
from .notification import Notification
from .audit_log import AuditLog

__all__ = [
    "User",
    "UserRole",
    "AttendanceRecord",
    "AttendanceStatus",
    "LeaveRequest",
    "LeaveStatus",
    "PayrollRecord",
    "Notification",
    "AuditLog",
]

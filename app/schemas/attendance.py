from datetime import date, datetime
from typing import Optional
from app.schemas.common import CamelModel

class AttendanceUser(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None

class AttendanceRecordResponse(CamelModel):
    id: int
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    work_hours: str
    extra_hours: str
    status: str
    notes: Optional[str] = None
    user: Optional[AttendanceUser] = None

class CheckInResponse(CamelModel):
    message: str
    check_in_time: datetime

class CheckOutResponse(CamelModel):
    message: str
    check_out_time: datetime

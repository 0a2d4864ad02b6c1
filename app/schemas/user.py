from datetime import datetime
from typing import Optional
from app.schemas.common import CamelModel

class DirectoryEntry(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: str
    phone: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    profile_picture_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    status: str

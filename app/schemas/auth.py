from pydantic import BaseModel, EmailStr
from typing import Optional
from app.models.user import UserRole
from app.schemas.common import CamelModel
from datetime import datetime

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserProfile(CamelModel):
    id: int
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    manager_id: Optional[int] = None
    profile_picture_url: Optional[str] = None
    employee_id: Optional[str] = None
    is_active: bool
    email_verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

class LoginResponse(BaseModel):
    message: str
    user: UserProfile

class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    profile_picture_url: Optional[str] = None

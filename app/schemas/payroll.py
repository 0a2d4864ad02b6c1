from datetime import date, datetime
from typing import Optional
from app.schemas.common import CamelModel, Toast

class PayrollCreate(CamelModel):
    # All optional here; the service reports which ones are missing
    user_id: Optional[int] = None
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    gross_salary: Optional[float] = None
    total_deductions: Optional[float] = None
    net_salary: Optional[float] = None
    payable_days: Optional[int] = None
    payslip_url: Optional[str] = None

class PayrollUser(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None

class PayrollResponse(CamelModel):
    id: int
    user_id: int
    pay_period_start: date
    pay_period_end: date
    gross_salary: float
    total_deductions: float
    net_salary: float
    payable_days: int
    payslip_url: Optional[str] = None
    created_at: Optional[datetime] = None
    user: Optional[PayrollUser] = None

class PayrollCreatedResponse(CamelModel):
    payroll: PayrollResponse
    toast: Toast

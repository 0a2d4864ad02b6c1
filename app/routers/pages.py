"""
Server-rendered pages.

Pages authenticate with the same session cookie as the JSON API and call the
service layer directly. Form posts redirect back to the page (post/redirect/get)
carrying either a ``msg`` or an ``error`` query parameter.
"""
import calendar
import logging
from datetime import date
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDeniedError, AppException, AuthenticationError
from app.core.permissions import Capability, is_allowed
from app.database import get_db
from app.models.user import User
from app.routers.auth import authenticate, set_session_cookie
from app.routers.auth_deps import resolve_user
from app.services import attendance_service, leave_service, payroll_service, user_service
from app.services.notification import NotificationService

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(include_in_schema=False)


class LoginRequired(Exception):
    """Raised by page dependencies; the app turns it into a redirect to /login."""


def get_page_user(request: Request, db: Session = Depends(get_db)) -> User:
    try:
        return resolve_user(request.cookies.get(settings.auth_cookie_name), db)
    except (AuthenticationError, AccessDeniedError):
        raise LoginRequired()


def _redirect(path: str, **params) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    return RedirectResponse(f"{path}?{query}" if query else path, status_code=303)


def _render(request: Request, name: str, db: Session, user: User, **context):
    context.update(
        user=user,
        msg=request.query_params.get("msg"),
        error=request.query_params.get("error"),
        is_staff=is_allowed(user.role, Capability.VIEW_ALL_RECORDS),
        unread_count=NotificationService.unread_count(db, user.id),
    )
    return templates.TemplateResponse(request, name, context)


def _form_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _form_number(value: str, cast=float):
    try:
        return cast(value) if value not in (None, "") else None
    except ValueError:
        return None


def _month_bounds(month: Optional[str]):
    today = attendance_service.today()
    try:
        year, mon = (int(part) for part in month.split("-")) if month else (today.year, today.month)
        first = date(year, mon, 1)
    except ValueError:
        first = date(today.year, today.month, 1)
    last = date(first.year, first.month, calendar.monthrange(first.year, first.month)[1])
    return first, last


# --- Session -------------------------------------------------------------

@router.get("/")
def home():
    return RedirectResponse("/attendance", status_code=303)


@router.get("/login")
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"error": request.query_params.get("error")})


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    try:
        user = authenticate(db, email, password)
    except AuthenticationError as e:
        return templates.TemplateResponse(
            request, "login.html", {"error": e.message, "email": email}, status_code=401
        )
    response = RedirectResponse("/attendance", status_code=303)
    set_session_cookie(response, user)
    return response


@router.post("/logout")
def logout_submit():
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return response


# --- Attendance ----------------------------------------------------------

@router.get("/attendance")
def attendance_page(
    request: Request,
    month: Optional[str] = None,
    employee: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_page_user),
):
    first, last = _month_bounds(month)
    staff = is_allowed(user.role, Capability.VIEW_ALL_RECORDS)
    day = attendance_service.today()
    today_rows = attendance_service.list_attendance(db, user_id=user.id, date_from=day, date_to=day)

    records = attendance_service.list_attendance(
        db,
        user_id=employee if staff else user.id,
        date_from=first,
        date_to=last,
    )
    stats = {
        status: sum(1 for r in records if r["status"] == status)
        for status in ("present", "absent", "half_day", "leave")
    }
    return _render(
        request,
        "attendance.html",
        db,
        user,
        today=today_rows[0] if today_rows else None,
        records=records,
        stats=stats,
        month=first.strftime("%Y-%m"),
        month_end=last.isoformat(),
        employees=user_service.list_directory(db, user) if staff else [],
        selected_employee=employee,
    )


@router.post("/attendance/check-in")
def attendance_check_in(db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    try:
        attendance_service.check_in(db, user)
    except AppException as e:
        return _redirect("/attendance", error=e.message)
    return _redirect("/attendance", msg="Checked in")


@router.post("/attendance/check-out")
def attendance_check_out(db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    try:
        attendance_service.check_out(db, user)
    except AppException as e:
        return _redirect("/attendance", error=e.message)
    return _redirect("/attendance", msg="Checked out")


# --- Leave ---------------------------------------------------------------

@router.get("/leave")
def leave_page(request: Request, db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    return _render(request, "leave.html", db, user, leaves=leave_service.list_leaves(db, user))


@router.post("/leave")
def leave_submit(
    leave_type: str = Form(""),
    start_date: str = Form(""),
    end_date: str = Form(""),
    reason: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_page_user),
):
    try:
        leave_service.create_leave(
            db, user, leave_type, _form_date(start_date), _form_date(end_date), reason or None
        )
    except AppException as e:
        return _redirect("/leave", error=e.message)
    return _redirect("/leave", msg="Leave request submitted")


@router.post("/leave/{leave_id}/{action}")
def leave_decide(
    leave_id: int,
    action: str,
    approver_comments: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_page_user),
):
    decide = {"approve": leave_service.approve_leave, "reject": leave_service.reject_leave}.get(action)
    if decide is None:
        return _redirect("/leave", error="Unknown action")
    try:
        leave, _ = decide(db, user, leave_id, approver_comments or None)
    except AppException as e:
        return _redirect("/leave", error=e.message)
    return _redirect("/leave", msg=f"Leave {leave.status}")


# --- Payroll -------------------------------------------------------------

@router.get("/payroll")
def payroll_page(request: Request, db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    if is_allowed(user.role, Capability.MANAGE_PAYROLL):
        records = payroll_service.list_payroll(db, user)
        employees = user_service.list_directory(db, user)
    else:
        records = payroll_service.list_payroll_for_user(db, user)
        employees = []
    return _render(request, "payroll.html", db, user, records=records, employees=employees)


@router.post("/payroll")
def payroll_submit(
    user_id: str = Form(""),
    pay_period_start: str = Form(""),
    pay_period_end: str = Form(""),
    gross_salary: str = Form(""),
    total_deductions: str = Form(""),
    net_salary: str = Form(""),
    payable_days: str = Form(""),
    db: Session = Depends(get_db),
    user: User = Depends(get_page_user),
):
    data = {
        "user_id": _form_number(user_id, int),
        "pay_period_start": _form_date(pay_period_start),
        "pay_period_end": _form_date(pay_period_end),
        "gross_salary": _form_number(gross_salary),
        "total_deductions": _form_number(total_deductions),
        "net_salary": _form_number(net_salary),
        "payable_days": _form_number(payable_days, int),
    }
    try:
        _, toast = payroll_service.create_payroll(db, user, data)
    except AppException as e:
        return _redirect("/payroll", error=e.message)
    return _redirect("/payroll", msg=toast["message"])


# --- Notifications -------------------------------------------------------

@router.get("/notifications")
def notifications_page(request: Request, db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    notifications = NotificationService.list_for_user(db, user.id)
    return _render(request, "notifications.html", db, user, notifications=notifications)


@router.post("/notifications/mark-read")
def notifications_mark_read(db: Session = Depends(get_db), user: User = Depends(get_page_user)):
    unread = [n.id for n in NotificationService.list_for_user(db, user.id, unread_only=True)]
    if not unread:
        return _redirect("/notifications", msg="Nothing to mark")
    count = NotificationService.mark_read(db, user.id, unread)
    return _redirect("/notifications", msg=f"{count} notifications marked as read")

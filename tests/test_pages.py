from datetime import date

from fastapi import status

from app.core.config import settings
from app.models.leave_request import LeaveRequest
from app.services import leave_service

PASSWORD = "Password123!"


def test_pages_redirect_to_login_without_session(client):
    for path in ("/attendance", "/leave", "/payroll", "/notifications"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/login"


def test_login_page_renders(client):
    response = client.get("/login")
    assert response.status_code == status.HTTP_200_OK
    assert "Sign in" in response.text


def test_login_form_sets_cookie(client, employee):
    response = client.post(
        "/login", data={"email": employee.email, "password": PASSWORD}, follow_redirects=False
    )
    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/attendance"
    assert settings.auth_cookie_name in response.cookies


def test_login_form_bad_password(client, employee):
    response = client.post("/login", data={"email": employee.email, "password": "nope"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "Incorrect email or password" in response.text


def test_attendance_page_check_in(client, employee, login_as):
    login_as(employee)
    response = client.post("/attendance/check-in", follow_redirects=False)
    assert response.status_code == status.HTTP_303_SEE_OTHER

    page = client.get("/attendance")
    assert page.status_code == status.HTTP_200_OK
    assert "Checked in at" in page.text
    assert "Check out" in page.text


def test_leave_page_submit_and_error(client, db_session, employee, login_as):
    login_as(employee)
    ok = client.post(
        "/leave",
        data={"leave_type": "paid", "start_date": "2024-05-06", "end_date": "2024-05-08", "reason": ""},
        follow_redirects=False,
    )
    assert "msg=" in ok.headers["location"]
    assert db_session.query(LeaveRequest).count() == 1

    bad = client.post(
        "/leave",
        data={"leave_type": "paid", "start_date": "2024-05-08", "end_date": "2024-05-06"},
        follow_redirects=False,
    )
    assert "error=" in bad.headers["location"]

    page = client.get("/leave")
    assert "Jane Doe" in page.text


def test_leave_page_staff_approves(client, db_session, employee, hr_user, login_as):
    leave = leave_service.create_leave(db_session, employee, "paid", date(2024, 5, 6), date(2024, 5, 6))
    response = login_as(hr_user).post(f"/leave/{leave.id}/approve", data={"approver_comments": "ok"}, follow_redirects=False)
    assert response.status_code == status.HTTP_303_SEE_OTHER
    db_session.refresh(leave)
    assert leave.status == "approved"


def test_payroll_page_hides_form_from_employee(client, employee, login_as):
    page = login_as(employee).get("/payroll")
    assert page.status_code == status.HTTP_200_OK
    assert "Record payroll" not in page.text


def test_notifications_page(client, employee, login_as):
    page = login_as(employee).get("/notifications")
    assert page.status_code == status.HTTP_200_OK
    assert "all caught up" in page.text

from datetime import date

import pytest
from fastapi import status

from app.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from app.models.notification import Notification
from app.models.payroll import PayrollRecord
from app.services import payroll_service


def _payload(user_id, **overrides):
    data = {
        "user_id": user_id,
        "pay_period_start": date(2024, 1, 1),
        "pay_period_end": date(2024, 1, 31),
        "gross_salary": 5000.0,
        "total_deductions": 0,
        "net_salary": 5000.0,
        "payable_days": 22,
    }
    data.update(overrides)
    return data


def test_create_payroll_notifies_owner(db_session, hr_user, employee):
    record, toast = payroll_service.create_payroll(db_session, hr_user, _payload(employee.id))

    assert record.id is not None
    assert record.generated_by == hr_user.id
    assert record.total_deductions == 0
    assert toast["userId"] == employee.id

    notification = db_session.query(Notification).filter(Notification.user_id == employee.id).one()
    assert notification.type == "payroll"
    assert notification.link == "/payroll"
    assert notification.payload == {"payrollId": record.id}


def test_zero_deductions_are_not_missing(db_session, hr_user, employee):
    record, _ = payroll_service.create_payroll(db_session, hr_user, _payload(employee.id, total_deductions=0.0))
    assert record.total_deductions == 0.0


def test_missing_fields(db_session, hr_user, employee):
    with pytest.raises(ValidationError) as exc:
        payroll_service.create_payroll(db_session, hr_user, _payload(employee.id, net_salary=None, payable_days=None))
    assert exc.value.message == "Missing required fields"
    assert exc.value.details["missing"] == ["net_salary", "payable_days"]


def test_reversed_period(db_session, hr_user, employee):
    with pytest.raises(ValidationError):
        payroll_service.create_payroll(
            db_session, hr_user, _payload(employee.id, pay_period_end=date(2023, 12, 31))
        )


def test_unknown_target(db_session, hr_user):
    with pytest.raises(NotFoundError):
        payroll_service.create_payroll(db_session, hr_user, _payload(999))
    assert db_session.query(PayrollRecord).count() == 0


def test_employee_cannot_create(db_session, employee):
    with pytest.raises(AccessDeniedError):
        payroll_service.create_payroll(db_session, employee, _payload(employee.id))
    assert db_session.query(PayrollRecord).count() == 0


def test_listing_order_and_owner(db_session, hr_user, employee):
    payroll_service.create_payroll(db_session, hr_user, _payload(employee.id))
    payroll_service.create_payroll(
        db_session,
        hr_user,
        _payload(employee.id, pay_period_start=date(2024, 2, 1), pay_period_end=date(2024, 2, 29)),
    )

    rows = payroll_service.list_payroll(db_session, hr_user)
    assert [r["pay_period_start"] for r in rows] == [date(2024, 2, 1), date(2024, 1, 1)]
    assert rows[0]["user"]["email"] == employee.email

    own = payroll_service.list_payroll_for_user(db_session, employee)
    assert len(own) == 2


def _api_body(user_id):
    return {
        "userId": user_id,
        "payPeriodStart": "2024-01-01",
        "payPeriodEnd": "2024-01-31",
        "grossSalary": 5000,
        "totalDeductions": 250,
        "netSalary": 4750,
        "payableDays": 22,
    }


def test_api_create_payroll(client, hr_user, employee, login_as):
    response = login_as(hr_user).post("/api/payroll", json=_api_body(employee.id))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["payroll"]["netSalary"] == 4750
    assert data["payroll"]["userId"] == employee.id
    assert data["toast"]["title"] == "Payroll Generated"

    listed = client.get("/api/payroll").json()
    assert len(listed) == 1
    assert listed[0]["user"]["employeeId"] == employee.employee_id


def test_api_employee_forbidden(client, db_session, employee, login_as):
    login_as(employee)
    assert client.post("/api/payroll", json=_api_body(employee.id)).status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/api/payroll").status_code == status.HTTP_403_FORBIDDEN
    assert db_session.query(PayrollRecord).count() == 0


def test_api_missing_fields(client, hr_user, login_as):
    response = login_as(hr_user).post("/api/payroll", json={"userId": 1})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Missing required fields"}


def test_api_unknown_user(client, hr_user, login_as):
    response = login_as(hr_user).post("/api/payroll", json=_api_body(4242))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "User not found"}


def test_api_own_payroll(client, db_session, hr_user, employee, login_as):
    payroll_service.create_payroll(db_session, hr_user, _payload(employee.id))
    response = login_as(employee).get("/api/payroll/me")
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 1


def test_failed_notification_rolls_back_payroll(db_session, hr_user, employee, monkeypatch):
    from app.services.notification import NotificationService

    def broken_notify(db, payroll):
        raise RuntimeError("notification store unavailable")

    monkeypatch.setattr(NotificationService, "notify_payroll_generated", broken_notify)

    with pytest.raises(RuntimeError):
        payroll_service.create_payroll(db_session, hr_user, _payload(employee.id))

    assert db_session.query(PayrollRecord).count() == 0
    assert db_session.query(Notification).count() == 0

from fastapi import status

from app.core.config import settings
from app.models.audit_log import AuditLog
from app.models.user import UserRole
from app.services import auth as auth_service

PASSWORD = "Password123!"


def test_login_success_sets_cookie(client, employee):
    response = client.post("/api/auth/login", json={"email": employee.email, "password": PASSWORD})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["email"] == employee.email
    assert data["user"]["employeeId"] == employee.employee_id
    assert settings.auth_cookie_name in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == employee.id


def test_login_invalid_credentials(client, employee, db_session):
    response = client.post("/api/auth/login", json={"email": employee.email, "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Incorrect email or password"}
    assert db_session.query(AuditLog).filter(AuditLog.action == "failed_login").count() == 1


def test_login_malformed_body_is_bad_request(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_me_without_cookie(client):
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "No authentication token found"}


def test_me_with_invalid_token(client):
    client.cookies.set(settings.auth_cookie_name, "garbage")
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid token"}


def test_role_is_read_from_store_not_token(client, employee):
    # A token claiming "admin" does not grant an employee staff access
    forged = auth_service.create_access_token({"sub": str(employee.id), "role": UserRole.ADMIN.value})
    client.cookies.set(settings.auth_cookie_name, forged)
    response = client.get("/api/users")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_inactive_user_is_refused(client, employee, db_session, login_as):
    employee.is_active = False
    db_session.commit()
    response = login_as(employee).get("/api/auth/me")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_logout_clears_cookie(client, employee):
    client.post("/api/auth/login", json={"email": employee.email, "password": PASSWORD})
    response = client.post("/api/auth/logout")
    assert response.status_code == status.HTTP_200_OK
    assert client.get("/api/auth/me").status_code == status.HTTP_401_UNAUTHORIZED


def test_update_profile(client, employee, login_as):
    response = login_as(employee).patch("/api/auth/profile", json={"phone": "555-0100", "jobTitle": "Engineer"})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["phone"] == "555-0100"
    assert data["jobTitle"] == "Engineer"
    assert data["firstName"] == "Jane"

from datetime import timedelta

import jwt

from app.core.config import settings
from app.services import auth as auth_service


def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = auth_service.get_password_hash(password)
    assert hashed != password
    assert auth_service.verify_password(password, hashed)
    assert not auth_service.verify_password("WrongPassword", hashed)


def test_verify_password_with_malformed_hash():
    assert auth_service.verify_password("anything", "not-a-bcrypt-hash") is False


def test_session_token_round_trip(employee):
    token = auth_service.create_session_token(employee)
    claims = auth_service.decode_access_token(token)
    assert claims["sub"] == str(employee.id)
    assert claims["role"] == "employee"
    assert claims["email"] == employee.email
    assert claims["type"] == "access"


def test_expired_token_is_reported():
    token = auth_service.create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-5))
    assert auth_service.decode_access_token(token) == {"error": "TOKEN_EXPIRED"}


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "1", "type": "access"}, "some-other-secret", algorithm=settings.jwt_algorithm)
    assert auth_service.decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert auth_service.decode_access_token("not.a.token") is None

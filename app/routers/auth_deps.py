"""
Auth Dependencies.
Resolves the session cookie to a stored User and gates endpoints by capability.
"""
import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDeniedError, AuthenticationError
from app.core.permissions import Capability, is_allowed
from app.database import get_db
from app.models.user import User
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

cookie_scheme = APIKeyCookie(name=settings.auth_cookie_name, auto_error=False)


def resolve_user(token: Optional[str], db: Session) -> User:
    """
    Verify a session token and load its user.

    The role used for authorization is the one stored on the User row; the
    role claim inside the token is never trusted.
    """
    if not token:
        raise AuthenticationError("No authentication token found")

    payload = auth_service.decode_access_token(token)
    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise AuthenticationError("Invalid token")

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise AuthenticationError("Session expired")

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise AuthenticationError("Invalid token type")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning("Authentication failed: Missing subject in token")
        raise AuthenticationError("Missing subject in token")

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Authentication failed: User {user_id} not found in database")
        raise AuthenticationError("User not found")
    if not user.is_active:
        logger.warning(f"Authentication failed: User {user_id} is inactive")
        raise AccessDeniedError("User is inactive")
    return user


def get_current_user(
    token: Optional[str] = Depends(cookie_scheme),
    db: Session = Depends(get_db),
) -> User:
    return resolve_user(token, db)


def require_capability(capability: Capability) -> Callable:
    """
    Dependency factory that checks the current user's stored role.

    Usage:
        @router.get("/payroll")
        def list_payroll(user: User = Depends(require_capability(Capability.MANAGE_PAYROLL))):
            ...
    """
    def capability_checker(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, capability):
            raise AccessDeniedError("Access denied")
        return current_user
    return capability_checker

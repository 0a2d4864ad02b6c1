import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.limiter import limiter
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user
from app.schemas.auth import LoginRequest, LoginResponse, ProfileUpdate, UserProfile
from app.schemas.common import MessageResponse
from app.services import auth as auth_service
from app.services import user_service
from app.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def set_session_cookie(response: Response, user: User):
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=auth_service.create_session_token(user),
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not auth_service.verify_password(password, user.hashed_password):
        AuditService.log(
            db,
            action="failed_login",
            entity_type="user",
            entity_id=None,
            user_id=None,
            user_role=None,
            details={"email": email, "reason": "invalid_credentials"},
        )
        db.commit()
        raise AuthenticationError("Incorrect email or password")
    if not user.is_active:
        raise AuthenticationError("User is inactive")

    AuditService.log(
        db,
        action="login",
        entity_type="user",
        entity_id=user.id,
        user_id=user.id,
        user_role=user.role,
        details={"email": user.email},
    )
    db.commit()
    return user


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, response: Response, login_data: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, login_data.email, login_data.password)
    set_session_cookie(response, user)
    logger.info(f"User {user.id} logged in")
    return {"message": "Login successful", "user": user}


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserProfile)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/profile", response_model=UserProfile)
def update_profile(
    update_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update current user's profile information."""
    return user_service.update_profile(db, current_user, update_data.model_dump(exclude_unset=True))

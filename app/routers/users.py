from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.permissions import Capability
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import require_capability
from app.schemas.auth import UserProfile
from app.schemas.user import DirectoryEntry
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[DirectoryEntry])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.VIEW_ALL_RECORDS)),
):
    """Active users other than the caller, with today's attendance status."""
    return user_service.list_directory(db, current_user)


@router.patch("/{user_id}/deactivate", response_model=UserProfile)
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_USERS)),
):
    return user_service.deactivate_user(db, current_user, user_id)

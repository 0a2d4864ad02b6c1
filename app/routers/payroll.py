"""
Payroll Router

Handles HTTP endpoints for payroll operations.
All business logic is delegated to the payroll service layer.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import Capability
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user, require_capability
from app.schemas.payroll import PayrollCreate, PayrollCreatedResponse, PayrollResponse
from app.services import payroll_service

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get("", response_model=List[PayrollResponse])
def list_payroll(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_PAYROLL)),
):
    """All payroll records, most recent pay period first."""
    return payroll_service.list_payroll(db, current_user)


@router.post("", response_model=PayrollCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_payroll(
    request: PayrollCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_PAYROLL)),
):
    """
    Record a payroll entry for an employee and notify them.
    The response embeds the toast so the UI can confirm without refetching.
    """
    record, toast = payroll_service.create_payroll(db, current_user, request.model_dump())
    return {"payroll": record, "toast": toast}


@router.get("/me", response_model=List[PayrollResponse])
def list_my_payroll(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payroll_service.list_payroll_for_user(db, current_user)

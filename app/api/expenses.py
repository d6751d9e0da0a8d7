# app/api/expenses.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.auth import get_current_user
from app.core.permissions import require_roles
from app.core.roles import ROLE_MANAGER
from app.db.session import get_db
from app.models.expense import ExpenseStatus
from app.models.user import User
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseFilters,
    ExpenseListOut,
    ExpenseOut,
    ExpenseUpdate,
    RejectRequest,
)
from app.services import expense_service

router = APIRouter(tags=["Expenses"])


# --------------------------------------------------
# SUBMIT
# --------------------------------------------------
@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_service.create_expense(db, current_user, payload)


# --------------------------------------------------
# LIST (EMPLOYEES: OWN ONLY)
# --------------------------------------------------
@router.get("", response_model=ExpenseListOut)
def list_expenses(
    status_filter: Optional[ExpenseStatus] = Query(None, alias="status"),
    category_id: Optional[int] = None,
    user_id: Optional[int] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    filters = ExpenseFilters(
        status=status_filter,
        category_id=category_id,
        user_id=user_id,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
        offset=offset,
    )
    return expense_service.list_expenses(db, current_user, filters)


@router.get("/pending", response_model=ExpenseListOut)
def list_pending(
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles([ROLE_MANAGER])),
):
    return expense_service.list_pending(db, current_user, limit=limit, offset=offset)


# --------------------------------------------------
# GET / UPDATE / DELETE ONE
# --------------------------------------------------
@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_service.get_expense(db, current_user, expense_id)


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_service.update_expense(db, current_user, expense_id, payload)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense_service.delete_expense(db, current_user, expense_id)
    return None


# --------------------------------------------------
# REVIEW (MANAGERS)
# --------------------------------------------------
@router.post("/{expense_id}/approve", response_model=ExpenseOut)
def approve_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles([ROLE_MANAGER])),
):
    return expense_service.approve_expense(db, current_user, expense_id)


@router.post("/{expense_id}/reject", response_model=ExpenseOut)
def reject_expense(
    expense_id: int,
    payload: RejectRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles([ROLE_MANAGER])),
):
    return expense_service.reject_expense(db, current_user, expense_id, payload.reason)

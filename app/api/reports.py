from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.auth import get_current_user
from app.core.permissions import require_roles
from app.core.roles import ROLE_MANAGER
from app.db.session import get_db
from app.models.user import User
from app.schemas.report import CategorySummary, StatusSummary, UserSummary
from app.services import report_service

router = APIRouter(tags=["Reports"])


@router.get("/summary", response_model=CategorySummary)
def summary_by_category(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_service.summary_by_category(db, current_user, from_date, to_date)


@router.get("/by-user", response_model=UserSummary)
def summary_by_user(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles([ROLE_MANAGER])),
):
    return report_service.summary_by_user(db, current_user, from_date, to_date)


@router.get("/by-status", response_model=StatusSummary)
def summary_by_status(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_service.summary_by_status(db, current_user, from_date, to_date)

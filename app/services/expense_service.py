"""Expense lifecycle: submission, edits, and the pending -> approved/rejected review.

Every mutation of an existing expense is applied with a conditional update on
``status = 'pending'``. A caller that lost a race against another review (or
an edit against a review) sees zero affected rows and gets InvalidOperation
instead of silently overwriting a terminal expense.
"""

import logging
import math
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core import policies
from app.core.errors import InvalidInput, InvalidOperation
from app.core.roles import ROLE_EMPLOYEE
from app.models.category import Category
from app.models.expense import Expense, ExpenseStatus
from app.models.user import User
from app.schemas.expense import ExpenseCreate, ExpenseFilters, ExpenseUpdate

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


# --------------------------------------------------
# LOOKUPS
# --------------------------------------------------
def _get_expense(db: Session, expense_id: int) -> Optional[Expense]:
    return db.query(Expense).filter(Expense.id == expense_id).first()


def _get_category(db: Session, category_id: Optional[int]) -> Optional[Category]:
    if category_id is None:
        return None
    return db.query(Category).filter(Category.id == category_id).first()


def _check_values(amount: float, description: str, receipt_date: date) -> None:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidInput("Amount must be positive")
    if not description or not description.strip():
        raise InvalidInput("Description is required")
    if receipt_date is None or receipt_date > date.today():
        raise InvalidInput("Valid receipt date is required and cannot be in the future")


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    # psycopg2 exposes the SQLSTATE, sqlite only the message
    if getattr(exc.orig, "pgcode", None) == "23503":
        return True
    return "FOREIGN KEY" in str(exc.orig).upper()


def _raise_integrity_error(db: Session, exc: IntegrityError) -> None:
    db.rollback()
    # the category can vanish between the lookup and the write
    if _is_foreign_key_violation(exc):
        raise InvalidInput("Invalid category") from exc
    raise exc


def _apply_if_pending(db: Session, expense_id: int, values: dict, message: str) -> None:
    try:
        changed = (
            db.query(Expense)
            .filter(Expense.id == expense_id, Expense.status == ExpenseStatus.pending)
            .update(values, synchronize_session=False)
        )
    except IntegrityError as exc:
        _raise_integrity_error(db, exc)

    if changed == 0:
        db.rollback()
        raise InvalidOperation(message)


def _commit_or_invalid_category(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        _raise_integrity_error(db, exc)


# --------------------------------------------------
# SUBMITTER OPERATIONS
# --------------------------------------------------
def create_expense(db: Session, user: User, payload: ExpenseCreate) -> Expense:
    category = _get_category(db, payload.category_id)
    policies.create_expense(user, category).enforce()
    _check_values(payload.amount, payload.description, payload.receipt_date)

    now = datetime.utcnow()
    expense = Expense(
        user_id=user.id,
        category_id=category.id,
        amount=payload.amount,
        description=payload.description,
        receipt_date=payload.receipt_date,
        status=ExpenseStatus.pending,
        created_at=now,
        updated_at=now,
    )
    db.add(expense)
    _commit_or_invalid_category(db)

    db.refresh(expense)
    logger.info("expense %s submitted by user %s", expense.id, user.id)
    return expense


def get_expense(db: Session, user: User, expense_id: int) -> Expense:
    expense = _get_expense(db, expense_id)
    policies.view_expense(user, expense).enforce()
    return expense


def list_expenses(db: Session, user: User, filters: ExpenseFilters) -> dict:
    query = db.query(Expense)

    # employees only ever see their own expenses
    owner_id = user.id if user.role == ROLE_EMPLOYEE else filters.user_id
    if owner_id is not None:
        query = query.filter(Expense.user_id == owner_id)
    if filters.status is not None:
        query = query.filter(Expense.status == filters.status)
    if filters.category_id is not None:
        query = query.filter(Expense.category_id == filters.category_id)
    if filters.from_date is not None:
        query = query.filter(Expense.receipt_date >= filters.from_date)
    if filters.to_date is not None:
        query = query.filter(Expense.receipt_date <= filters.to_date)

    total = query.count()
    limit = min(filters.limit, MAX_PAGE_SIZE)

    items = (
        query.options(
            joinedload(Expense.category),
            joinedload(Expense.user),
            joinedload(Expense.reviewer),
        )
        .order_by(Expense.receipt_date.desc(), Expense.created_at.desc())
        .offset(filters.offset)
        .limit(limit)
        .all()
    )

    return {"items": items, "total": total, "limit": limit, "offset": filters.offset}


def list_pending(db: Session, user: User, limit: int = 20, offset: int = 0) -> dict:
    policies.list_pending(user).enforce()
    filters = ExpenseFilters(status=ExpenseStatus.pending, limit=limit, offset=offset)
    return list_expenses(db, user, filters)


def update_expense(
    db: Session,
    user: User,
    expense_id: int,
    payload: ExpenseUpdate,
) -> Expense:
    expense = _get_expense(db, expense_id)
    category = _get_category(db, payload.category_id)
    policies.update_expense(user, expense, category).enforce()
    _check_values(payload.amount, payload.description, payload.receipt_date)

    _apply_if_pending(
        db,
        expense.id,
        {
            Expense.category_id: category.id,
            Expense.amount: payload.amount,
            Expense.description: payload.description,
            Expense.receipt_date: payload.receipt_date,
            Expense.updated_at: datetime.utcnow(),
        },
        "Cannot modify approved or rejected expenses",
    )
    _commit_or_invalid_category(db)

    db.refresh(expense)
    logger.info("expense %s updated by user %s", expense.id, user.id)
    return expense


def delete_expense(db: Session, user: User, expense_id: int) -> None:
    expense = _get_expense(db, expense_id)
    policies.delete_expense(user, expense).enforce()

    deleted = (
        db.query(Expense)
        .filter(Expense.id == expense.id, Expense.status == ExpenseStatus.pending)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        db.rollback()
        raise InvalidOperation("Cannot delete approved or rejected expenses")

    db.commit()
    db.expire_all()
    logger.info("expense %s deleted by user %s", expense_id, user.id)


# --------------------------------------------------
# REVIEW
# --------------------------------------------------
def approve_expense(db: Session, user: User, expense_id: int) -> Expense:
    expense = _get_expense(db, expense_id)
    policies.review_expense(user, expense, "approve").enforce()

    now = datetime.utcnow()
    _apply_if_pending(
        db,
        expense.id,
        {
            Expense.status: ExpenseStatus.approved,
            Expense.reviewed_by: user.id,
            Expense.reviewed_at: now,
            Expense.updated_at: now,
        },
        "Expense is not pending",
    )
    db.commit()

    db.refresh(expense)
    logger.info("expense %s approved by user %s", expense.id, user.id)
    return expense


def reject_expense(db: Session, user: User, expense_id: int, reason: str) -> Expense:
    expense = _get_expense(db, expense_id)
    policies.review_expense(user, expense, "reject").enforce()

    if not reason or not reason.strip():
        raise InvalidInput("Rejection reason is required")

    now = datetime.utcnow()
    _apply_if_pending(
        db,
        expense.id,
        {
            Expense.status: ExpenseStatus.rejected,
            Expense.reviewed_by: user.id,
            Expense.reviewed_at: now,
            Expense.rejection_reason: reason,
            Expense.updated_at: now,
        },
        "Expense is not pending",
    )
    db.commit()

    db.refresh(expense)
    logger.info("expense %s rejected by user %s", expense.id, user.id)
    return expense

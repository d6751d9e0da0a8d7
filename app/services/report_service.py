from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core import policies
from app.core.roles import ROLE_EMPLOYEE
from app.models.category import Category
from app.models.expense import Expense
from app.models.user import User
from app.utils.calculations import grand_total, resolve_window


def _run(query, user: User, start: date, end: date, restrict_to_owner: bool = True):
    query = query.filter(Expense.receipt_date >= start, Expense.receipt_date <= end)
    if restrict_to_owner and user.role == ROLE_EMPLOYEE:
        query = query.filter(Expense.user_id == user.id)
    return [dict(row._mapping) for row in query.all()]


def _report(items: list[dict], start: date, end: date) -> dict:
    return {
        "items": items,
        "grand_total": grand_total(items),
        "from_date": start,
        "to_date": end,
    }


def summary_by_category(
    db: Session,
    user: User,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    start, end = resolve_window(from_date, to_date)
    total = func.sum(Expense.amount).label("total")

    query = (
        db.query(
            Category.id.label("category_id"),
            Category.name.label("category"),
            total,
            func.count(Expense.id).label("count"),
        )
        .select_from(Expense)
        .join(Category, Expense.category_id == Category.id)
        .group_by(Category.id, Category.name)
        .order_by(total.desc())
    )
    return _report(_run(query, user, start, end), start, end)


def summary_by_user(
    db: Session,
    user: User,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    policies.report_by_user(user).enforce()
    start, end = resolve_window(from_date, to_date)
    total = func.sum(Expense.amount).label("total")

    query = (
        db.query(
            User.id.label("user_id"),
            User.name.label("user"),
            User.email.label("email"),
            total,
            func.count(Expense.id).label("count"),
        )
        .select_from(Expense)
        .join(User, Expense.user_id == User.id)
        .group_by(User.id, User.name, User.email)
        .order_by(total.desc())
    )
    return _report(_run(query, user, start, end, restrict_to_owner=False), start, end)


def summary_by_status(
    db: Session,
    user: User,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    start, end = resolve_window(from_date, to_date)
    total = func.sum(Expense.amount).label("total")

    query = (
        db.query(
            Expense.status.label("status"),
            total,
            func.count(Expense.id).label("count"),
        )
        .group_by(Expense.status)
        .order_by(total.desc())
    )
    return _report(_run(query, user, start, end), start, end)

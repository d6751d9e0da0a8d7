from datetime import date
from typing import List

from pydantic import BaseModel

from app.models.expense import ExpenseStatus


class CategorySummaryItem(BaseModel):
    category_id: int
    category: str
    total: float
    count: int


class UserSummaryItem(BaseModel):
    user_id: int
    user: str
    email: str
    total: float
    count: int


class StatusSummaryItem(BaseModel):
    status: ExpenseStatus
    total: float
    count: int


class CategorySummary(BaseModel):
    items: List[CategorySummaryItem]
    grand_total: float
    from_date: date
    to_date: date


class UserSummary(BaseModel):
    items: List[UserSummaryItem]
    grand_total: float
    from_date: date
    to_date: date


class StatusSummary(BaseModel):
    items: List[StatusSummaryItem]
    grand_total: float
    from_date: date
    to_date: date

# app/schemas/expense.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.models.expense import ExpenseStatus


class ExpenseCreate(BaseModel):
    category_id: Optional[int] = None
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    description: Optional[str] = None
    receipt_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_expense(self):
        if not self.category_id:
            raise ValueError("Category is required")
        if self.amount is None or self.amount <= 0:
            raise ValueError("Amount must be positive")
        if not self.description or not self.description.strip():
            raise ValueError("Description is required")
        if self.receipt_date is None or self.receipt_date > date.today():
            raise ValueError(
                "Valid receipt date is required and cannot be in the future"
            )
        return self


class ExpenseUpdate(ExpenseCreate):
    """PUT replaces every editable field, so it carries the same rules."""


class RejectRequest(BaseModel):
    reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_reason(self):
        if not self.reason or not self.reason.strip():
            raise ValueError("Rejection reason is required")
        return self


class ExpenseFilters(BaseModel):
    status: Optional[ExpenseStatus] = None
    category_id: Optional[int] = None
    user_id: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    limit: int = 20
    offset: int = 0


class ExpenseOut(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str]
    category_id: int
    category_name: Optional[str]
    amount: float
    description: str
    receipt_date: date
    status: ExpenseStatus
    reviewed_by: Optional[int]
    reviewer_name: Optional[str]
    reviewed_at: Optional[datetime]
    rejection_reason: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseListOut(BaseModel):
    items: List[ExpenseOut] = []
    total: int
    limit: int
    offset: int

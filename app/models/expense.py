# app/models/expense.py

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class ExpenseStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )

    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    receipt_date = Column(Date, nullable=False, index=True)

    status = Column(
        Enum(ExpenseStatus, native_enum=False, length=16),
        default=ExpenseStatus.pending,
        nullable=False,
        index=True,
    )

    # review fields: all null while pending
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="expenses", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    category = relationship("Category", back_populates="expenses")

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def reviewer_name(self):
        return self.reviewer.name if self.reviewer else None

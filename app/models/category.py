from sqlalchemy import Boolean, Column, Index, Integer, String, text
from sqlalchemy.orm import relationship

from app.db.base import Base

SYSTEM_CATEGORY_NAME = "Uncategorized"


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (
        # at most one system category
        Index(
            "uq_categories_system",
            "is_system",
            unique=True,
            sqlite_where=text("is_system"),
            postgresql_where=text("is_system"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    is_system = Column(Boolean, nullable=False, default=False)

    expenses = relationship("Expense", back_populates="category")

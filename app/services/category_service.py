import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import policies
from app.core.errors import Conflict
from app.models.category import Category
from app.models.expense import Expense
from app.models.user import User

logger = logging.getLogger(__name__)


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def find_system_category(db: Session) -> Category:
    return db.query(Category).filter(Category.is_system.is_(True)).one()


def create_category(db: Session, user: User, name: str) -> Category:
    policies.manage_categories(user).enforce()

    if db.query(Category).filter(Category.name == name).first():
        raise Conflict("Category already exists")

    category = Category(name=name, is_system=False)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Category already exists")

    db.refresh(category)
    logger.info("category %s (%s) created by user %s", category.id, category.name, user.id)
    return category


def delete_category(db: Session, user: User, category_id: int) -> None:
    """Reassign the category's expenses to the system category, then drop it.

    Both steps run in one transaction with the category row locked, so no
    expense can end up pointing at a category that no longer exists.
    """
    category = (
        db.query(Category)
        .filter(Category.id == category_id)
        .with_for_update()
        .first()
    )
    policies.delete_category(user, category).enforce()

    system_category = find_system_category(db)
    try:
        moved = (
            db.query(Expense)
            .filter(Expense.category_id == category.id)
            .update({Expense.category_id: system_category.id}, synchronize_session=False)
        )
        db.query(Category).filter(Category.id == category.id).delete(
            synchronize_session=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    logger.info(
        "category %s deleted by user %s, %s expense(s) moved to %s",
        category_id,
        user.id,
        moved,
        system_category.name,
    )

# app/db/seed.py

import logging

from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.roles import ROLE_EMPLOYEE, ROLE_MANAGER
from app.core.security import hash_password
from app.db.base import Base
from app.models.category import SYSTEM_CATEGORY_NAME, Category
from app.models.expense import Expense  # noqa: F401  (registers the table)
from app.models.user import User

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = ["Travel", "Meals", "Software"]

DEMO_USERS = [
    ("manager@example.com", "Manager User", ROLE_MANAGER),
    ("employee@example.com", "Employee User", ROLE_EMPLOYEE),
]

DEMO_PASSWORD = "password123"


def ensure_system_category(db: Session) -> Category:
    category = db.query(Category).filter(Category.is_system.is_(True)).first()
    if category:
        return category

    category = Category(name=SYSTEM_CATEGORY_NAME, is_system=True)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("created system category %s", category.name)
    return category


def seed_demo_data(db: Session) -> bool:
    if db.query(User).count() > 0:
        logger.info("database already seeded, skipping")
        return False

    for name in DEMO_CATEGORIES:
        if not db.query(Category).filter(Category.name == name).first():
            db.add(Category(name=name, is_system=False))

    password_hash = hash_password(DEMO_PASSWORD)
    for email, name, role in DEMO_USERS:
        db.add(User(email=email, name=name, role=role, password_hash=password_hash))

    db.commit()
    logger.info("database seeded with demo users and categories")
    return True


def init_db(engine, seed: bool | None = None) -> None:
    Base.metadata.create_all(bind=engine)

    db = sessionmaker(bind=engine, autoflush=False)()
    try:
        ensure_system_category(db)
        if settings.SEED_DEMO_DATA if seed is None else seed:
            seed_demo_data(db)
    finally:
        db.close()

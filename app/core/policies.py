"""Authorization and state guards for categories and expenses.

Each policy is a single predicate per operation. It evaluates its checks in a
fixed order (role gate, existence, ownership, self-action, state, referential
validity) and returns a :class:`Decision`. ``Decision.enforce()`` turns a
denial into the matching :class:`~app.core.errors.ServiceError`.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Type

from app.core.errors import (
    Forbidden,
    InvalidInput,
    InvalidOperation,
    NotFound,
    ServiceError,
)
from app.core.roles import ROLE_EMPLOYEE, ROLE_MANAGER
from app.models.category import Category
from app.models.expense import Expense, ExpenseStatus
from app.models.user import User


@dataclass(frozen=True)
class Decision:
    error: Optional[Type[ServiceError]] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.error is None

    def enforce(self) -> None:
        if self.error is not None:
            raise self.error(self.message)


ALLOW = Decision()

Check = Callable[[], Decision]


def deny(error: Type[ServiceError], message: str) -> Decision:
    return Decision(error, message)


def first_denial(*checks: Check) -> Decision:
    """Run checks lazily in order and stop at the first denial."""
    for check in checks:
        decision = check()
        if not decision.allowed:
            return decision
    return ALLOW


# --------------------------------------------------
# CHECKS
# --------------------------------------------------
def is_manager(user: User) -> Decision:
    if user.role != ROLE_MANAGER:
        return deny(Forbidden, "Manager access required")
    return ALLOW


def exists(entity, label: str) -> Decision:
    if entity is None:
        return deny(NotFound, f"{label} not found")
    return ALLOW


def is_owner(user: User, expense: Expense) -> Decision:
    if expense.user_id != user.id:
        return deny(Forbidden, "Access denied")
    return ALLOW


def can_see(user: User, expense: Expense) -> Decision:
    # managers see everything
    if user.role == ROLE_EMPLOYEE:
        return is_owner(user, expense)
    return ALLOW


def not_own(user: User, expense: Expense, verb: str) -> Decision:
    if expense.user_id == user.id:
        return deny(InvalidOperation, f"Cannot {verb} your own expenses")
    return ALLOW


def is_pending(expense: Expense, message: str) -> Decision:
    if expense.status != ExpenseStatus.pending:
        return deny(InvalidOperation, message)
    return ALLOW


def category_exists(category: Optional[Category]) -> Decision:
    if category is None:
        return deny(InvalidInput, "Invalid category")
    return ALLOW


def not_system(category: Category) -> Decision:
    if category.is_system:
        return deny(InvalidOperation, "Cannot delete system category")
    return ALLOW


# --------------------------------------------------
# POLICIES
# --------------------------------------------------
def manage_categories(user: User) -> Decision:
    return is_manager(user)


def delete_category(user: User, category: Optional[Category]) -> Decision:
    return first_denial(
        lambda: is_manager(user),
        lambda: exists(category, "Category"),
        lambda: not_system(category),
    )


def create_expense(user: User, category: Optional[Category]) -> Decision:
    return category_exists(category)


def view_expense(user: User, expense: Optional[Expense]) -> Decision:
    return first_denial(
        lambda: exists(expense, "Expense"),
        lambda: can_see(user, expense),
    )


def update_expense(
    user: User,
    expense: Optional[Expense],
    category: Optional[Category],
) -> Decision:
    return first_denial(
        lambda: exists(expense, "Expense"),
        lambda: is_owner(user, expense),
        lambda: is_pending(expense, "Cannot modify approved or rejected expenses"),
        lambda: category_exists(category),
    )


def delete_expense(user: User, expense: Optional[Expense]) -> Decision:
    return first_denial(
        lambda: exists(expense, "Expense"),
        lambda: is_owner(user, expense),
        lambda: is_pending(expense, "Cannot delete approved or rejected expenses"),
    )


def review_expense(user: User, expense: Optional[Expense], verb: str) -> Decision:
    """Approve/reject guard: manager, existence, not self, still pending."""
    return first_denial(
        lambda: is_manager(user),
        lambda: exists(expense, "Expense"),
        lambda: not_own(user, expense, verb),
        lambda: is_pending(expense, "Expense is not pending"),
    )


def list_pending(user: User) -> Decision:
    return is_manager(user)


def report_by_user(user: User) -> Decision:
    return is_manager(user)

from fastapi import Depends

from app.api.auth import get_current_user
from app.core.errors import Forbidden
from app.models.user import User


def require_roles(roles: list[str]):
    label = " or ".join(role.capitalize() for role in roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise Forbidden(f"{label} access required")
        return current_user

    return checker

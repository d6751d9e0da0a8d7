# app/schemas/auth.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, model_validator, validate_email
from pydantic_core import PydanticCustomError


def _is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value)
    except PydanticCustomError:
        return False
    return True


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Literal["employee", "manager"] = "employee"

    @model_validator(mode="after")
    def validate_registration(self):
        if not _is_valid_email(self.email):
            raise ValueError("Valid email is required")
        if not self.password or len(self.password) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not self.name or not self.name.strip():
            raise ValueError("Name is required")

        self.email = self.email.lower()
        self.name = self.name.strip()
        return self


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def validate_credentials(self):
        if not self.email or not self.password:
            raise ValueError("Email and password are required")
        self.email = self.email.lower()
        return self


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut

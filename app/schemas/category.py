from typing import Optional

from pydantic import BaseModel, model_validator


class CategoryCreate(BaseModel):
    name: Optional[str] = None

    @model_validator(mode="after")
    def validate_name(self):
        if not self.name or not self.name.strip():
            raise ValueError("Category name is required")
        self.name = self.name.strip()
        return self


class CategoryOut(BaseModel):
    id: int
    name: str
    is_system: bool

    class Config:
        from_attributes = True

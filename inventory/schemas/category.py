# inventory/schemas/category.py
from datetime import datetime
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel

from inventory.core.validation import clean_text, validate_payload


class CategoryCreate(SQLModel):
    """
    Payload for creating a category.

    - name: required, <= 100 chars
    - description: optional, <= 1000 chars
    Both are HTML-escaped.
    """

    name: str
    description: str | None = ""

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str:
        return clean_text(v, "name", 100)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str:
        return clean_text(v, "description", 1000, required=False)


class CategoryUpdate(CategoryCreate):
    """Partial update payload for categories."""

    name: str | None = None
    description: str | None = None


def validate_category(
    data: dict[str, Any], is_update: bool = False
) -> CategoryCreate | CategoryUpdate:
    schema = CategoryUpdate if is_update else CategoryCreate
    return validate_payload(schema, data)


class CategoryRead(SQLModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


class CategoryDetail(CategoryRead):
    """Single-category view, including how many items reference it."""

    product_count: int

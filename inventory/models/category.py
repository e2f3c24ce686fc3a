# inventory/models/category.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Equipment category (Laptop, Monitor, ...).

    Deletion is refused while any equipment still references the row.
    """

    __tablename__ = "categories"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(unique=True, index=True)

    description: str = Field(default="")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

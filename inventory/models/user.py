# inventory/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Application account.

    Role:
      - "admin" | "client"
      - anonymous visitors have no row and no session.

    `password_hash` is a bcrypt hash and never leaves the service layer;
    every response goes through `UserRead`, which does not carry it.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    username: str = Field(
        max_length=64,
        unique=True,
        index=True,
        description="Login name: letters, digits, underscores",
    )

    password_hash: str = Field(description="bcrypt hash")

    role: str = Field(
        default="client",
        index=True,
        description="Application role: admin | client",
    )

    full_name: str = Field(default="", description="Display name")

    email: str | None = Field(default=None, description="Optional contact email")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

# inventory/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry for a client.
    One user cannot have 2 rows for the same product; adding the same
    product again increments quantity instead.
    """

    __tablename__ = "cart"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
    )

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        default=1,
        ge=1,
        description="Must be >= 1",
    )

    added_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

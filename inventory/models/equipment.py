# inventory/models/equipment.py
from datetime import date, datetime, timezone

from sqlmodel import SQLModel, Field

# Single source of truth for the status lifecycle.
EQUIPMENT_STATUSES: tuple[str, ...] = (
    "Available",
    "In Use",
    "Under Maintenance",
    "Retired",
)


class Equipment(SQLModel, table=True):
    """
    A tracked piece of equipment (stored in `products`).

    - serial_number is unique (exact, case-sensitive match).
    - assigned_to links the item to a client account; clients only
      ever see items assigned to them.
    """

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(index=True)

    category_id: int = Field(
        foreign_key="categories.id",
        index=True,
        description="FK to categories.id",
    )

    brand: str

    serial_number: str = Field(
        unique=True,
        index=True,
        description="Manufacturer serial, unique across all equipment",
    )

    status: str = Field(
        default="Available",
        index=True,
        description="Available | In Use | Under Maintenance | Retired",
    )

    purchase_date: date

    assigned_to: int | None = Field(
        default=None,
        foreign_key="users.id",
        index=True,
        description="FK to users.id (client the item is assigned to)",
    )

    notes: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductImage(SQLModel, table=True):
    """
    Uploaded photo of a piece of equipment.

    At most one image per product has is_primary=True.
    """

    __tablename__ = "product_images"

    id: int | None = Field(default=None, primary_key=True)

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_path: str = Field(
        description="Public path, e.g. uploads/products/<file>",
    )

    is_primary: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

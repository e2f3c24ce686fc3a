# inventory/schemas/cart.py
from datetime import datetime

from pydantic import field_validator
from sqlmodel import SQLModel

from inventory.core.validation import validate_payload

# Upper bound for one cart line, per request and after merging.
MAX_CART_QUANTITY = 10_000

# Largest id a 64-bit INTEGER column can hold.
_MAX_ID = 2**63 - 1


def _check_quantity(v: int) -> int:
    if v < 1:
        raise ValueError("quantity must be at least 1.")
    if v > MAX_CART_QUANTITY:
        raise ValueError(f"quantity must be at most {MAX_CART_QUANTITY}.")
    return v


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: int
    quantity: int = 1

    @field_validator("product_id")
    @classmethod
    def check_product_id(cls, v: int) -> int:
        if not 1 <= v <= _MAX_ID:
            raise ValueError("product_id must be a positive integer.")
        return v

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v: int) -> int:
        return _check_quantity(v)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v: int) -> int:
        return _check_quantity(v)


def validate_cart_add(data: dict) -> CartItemCreate:
    return validate_payload(CartItemCreate, data)


def validate_cart_update(data: dict) -> CartItemUpdate:
    return validate_payload(CartItemUpdate, data)


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, joined with its product.
    """

    cart_id: int
    quantity: int
    added_at: datetime
    product_id: int
    name: str
    brand: str
    serial_number: str
    status: str
    category_name: str | None = None
    primary_image: str | None = None


class CartListResponse(SQLModel):
    items: list[CartItemRead]
    count: int


class CartCountResponse(SQLModel):
    count: int


class CartChangedResponse(SQLModel):
    message: str
    cart_count: int

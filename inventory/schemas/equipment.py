# inventory/schemas/equipment.py
import re
from datetime import date, datetime
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel

from inventory.core.validation import blank_to_none, clean_text, validate_payload
from inventory.models.equipment import EQUIPMENT_STATUSES

SERIAL_PATTERN = re.compile(r"^[A-Za-z0-9\-_]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INVALID_DATE = "purchase_date must be a valid date in YYYY-MM-DD format."


def _check_status(v: Any) -> str:
    value = v.strip() if isinstance(v, str) else v
    if value not in EQUIPMENT_STATUSES:
        raise ValueError("status must be one of: " + ", ".join(EQUIPMENT_STATUSES))
    return value


class EquipmentCreate(SQLModel):
    """
    Payload for creating an equipment item.

    Free-text fields (name, brand, notes) are trimmed, length-checked and
    HTML-escaped. serial_number and status are constrained, so they are
    stored verbatim. Category/assignee existence is checked by the service.
    """

    name: str
    category_id: int
    brand: str
    serial_number: str
    status: str = "Available"
    purchase_date: date
    assigned_to: int | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str:
        return clean_text(v, "name", 150)

    @field_validator("brand")
    @classmethod
    def check_brand(cls, v: str | None) -> str:
        return clean_text(v, "brand", 80)

    @field_validator("category_id", mode="before")
    @classmethod
    def require_category(cls, v: Any) -> Any:
        if blank_to_none(v) is None:
            raise ValueError("category_id is required.")
        return v

    @field_validator("category_id")
    @classmethod
    def check_category_id(cls, v: int) -> int:
        if v < 1:
            raise ValueError("category_id must be a positive integer.")
        return v

    @field_validator("serial_number")
    @classmethod
    def check_serial(cls, v: str | None) -> str:
        v = clean_text(v, "serial_number", 100, escape=False)
        if not SERIAL_PATTERN.match(v):
            raise ValueError(
                "serial_number may only contain letters, digits, hyphens, underscores."
            )
        return v

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v: Any) -> str:
        # Omitted or null on create means a new item is available
        if v is None:
            return "Available"
        return _check_status(v)

    @field_validator("purchase_date", mode="before")
    @classmethod
    def check_purchase_date(cls, v: Any) -> date:
        text = v.strip() if isinstance(v, str) else ""
        if v is None or (isinstance(v, str) and not text):
            raise ValueError("purchase_date is required (YYYY-MM-DD).")
        if not DATE_PATTERN.match(text):
            raise ValueError(INVALID_DATE)
        # fromisoformat rejects impossible days such as 2024-02-30
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise ValueError(INVALID_DATE) from None

    @field_validator("assigned_to", mode="before")
    @classmethod
    def normalize_assignee(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("assigned_to")
    @classmethod
    def check_assignee(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("assigned_to must be a positive integer.")
        return v

    @field_validator("notes")
    @classmethod
    def check_notes(cls, v: str | None) -> str | None:
        return clean_text(v, "notes", 5000, required=False) or None


class EquipmentUpdate(EquipmentCreate):
    """
    Partial update payload. Every field is optional; only fields present
    in the request body are written. `assigned_to: null` unassigns;
    `status: null` is rejected rather than reset.
    """

    name: str | None = None
    category_id: int | None = None
    brand: str | None = None
    serial_number: str | None = None
    status: str | None = None
    purchase_date: date | None = None

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v: Any) -> str:
        if v is None:
            raise ValueError("status cannot be null.")
        return _check_status(v)


def validate_equipment(
    data: dict[str, Any], is_update: bool = False
) -> EquipmentCreate | EquipmentUpdate:
    schema = EquipmentUpdate if is_update else EquipmentCreate
    return validate_payload(schema, data)


class ProductImageRead(SQLModel):
    """Read model for an uploaded equipment image."""

    id: int
    product_id: int
    image_path: str
    is_primary: bool
    created_at: datetime


class EquipmentRead(SQLModel):
    """Equipment representation for clients, with its images attached."""

    id: int
    name: str
    category_id: int
    category_name: str | None = None
    brand: str
    serial_number: str
    status: str
    purchase_date: date
    assigned_to: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    images: list[ProductImageRead] = []


class CategoryCount(SQLModel):
    id: int
    name: str
    count: int


class EquipmentStatistics(SQLModel):
    """
    Dashboard counters. Every status and every category is present,
    zero-filled when nothing matches.
    """

    total: int
    by_status: dict[str, int]
    by_category: list[CategoryCount]


class UploadResponse(SQLModel):
    message: str
    data: list[ProductImageRead]
    warnings: list[str] | None = None

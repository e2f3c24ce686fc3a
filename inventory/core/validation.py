# inventory/core/validation.py
"""
Shared helpers for the per-entity input schemas.

Every schema's validators raise `ValueError` with a human-readable sentence;
`validate_payload` collects all of them (plus pydantic's own type errors) and
raises one `ValidationError`, which the API returns as 422.
"""

import html
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import SQLModel

from inventory.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=SQLModel)


def escape_html(value: str) -> str:
    """Entity-encode &, <, >, " and ' for safe embedding in HTML."""
    return html.escape(value, quote=True)


def clean_text(
    value: str | None,
    field: str,
    max_length: int,
    *,
    required: bool = True,
    escape: bool = True,
) -> str:
    """
    Trim, presence-check, length-check and (optionally) HTML-escape.

    Length is measured on the trimmed input, before escaping.
    """
    text = (value or "").strip()
    if required and not text:
        raise ValueError(f"{field} is required.")
    if len(text) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters.")
    return escape_html(text) if escape else text


def clean_email(value: str | None, max_length: int = 150) -> str | None:
    """Optional email: blank becomes None, anything else must look like an address."""
    text = (value or "").strip()
    if not text:
        return None
    if len(text) > max_length:
        raise ValueError(f"email must be at most {max_length} characters.")
    try:
        validate_email(text, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("email must be a valid email address.")
    return text


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _describe(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"

    if error["type"] == "missing":
        return f"{field} is required."

    original = error.get("ctx", {}).get("error")
    if error["type"] == "value_error" and original is not None:
        return str(original)

    return f"{field}: {error['msg']}."


def validate_payload(schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    """
    Validate an untrusted JSON object against `schema`.

    Raises:
        ValidationError(422): with every problem joined into one message.
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError([_describe(err) for err in exc.errors()]) from exc


def provided_fields(payload: SQLModel) -> dict[str, Any]:
    """Only the fields the client actually sent (update semantics)."""
    return payload.model_dump(exclude_unset=True)

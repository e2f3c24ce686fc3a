# inventory/schemas/user.py
import re
from datetime import datetime
from typing import Any, Literal

from pydantic import field_validator
from sqlmodel import SQLModel

from inventory.core.validation import clean_email, clean_text, validate_payload

# App-level roles. Anonymous visitors have no session, so they are not listed.
Role = Literal["admin", "client"]
ROLES: tuple[str, ...] = ("admin", "client")

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
MIN_PASSWORD_LENGTH = 6


class UserCreate(SQLModel):
    """
    Payload for creating an account (admin create and self-registration).

    Validation rules:
      - username: required, <= 64 chars, letters/digits/underscores
      - password: required, >= 6 chars (hashed by the service)
      - role: admin | client, defaults to client
      - full_name: optional, <= 150 chars, HTML-escaped
      - email: optional, <= 150 chars, must look like an address
    """

    username: str
    password: str
    role: str = "client"
    full_name: str | None = ""
    email: str | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str:
        v = clean_text(v, "username", 64, escape=False)
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "username may only contain letters, digits, and underscores."
            )
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str:
        if not v:
            raise ValueError("password is required.")
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return v

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v: Any) -> str:
        if v not in ROLES:
            raise ValueError('role must be either "admin" or "client".')
        return v

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str | None) -> str:
        return clean_text(v, "full_name", 150, required=False)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return clean_email(v)


class UserUpdate(UserCreate):
    """
    Partial update (admin edit). Only fields present in the body are written;
    an empty or missing password leaves the stored hash untouched.
    """

    username: str | None = None
    password: str | None = None
    role: str | None = None
    full_name: str | None = None
    email: str | None = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        if not v:
            return None
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return v


def validate_user(data: dict[str, Any], is_update: bool = False) -> UserCreate | UserUpdate:
    schema = UserUpdate if is_update else UserCreate
    return validate_payload(schema, data)


class ProfileUpdate(SQLModel):
    """Self-service profile edit. Username and role are not editable here."""

    full_name: str | None = None
    email: str | None = None

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str | None) -> str:
        return clean_text(v, "full_name", 150, required=False)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return clean_email(v)


class PasswordChange(SQLModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"new_password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return v


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the hash)."""

    id: int
    username: str
    role: Role
    full_name: str
    email: str | None
    created_at: datetime


class ProfileResponse(SQLModel):
    user: UserRead


class ProfileSavedResponse(ProfileResponse):
    message: str

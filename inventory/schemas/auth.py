# inventory/schemas/auth.py
from sqlmodel import SQLModel

from inventory.schemas.user import Role, UserRead


class LoginRequest(SQLModel):
    username: str = ""
    password: str = ""


class SessionUser(SQLModel):
    """What the session cookie remembers about the logged-in account."""

    id: int
    username: str
    role: Role


class LoginResponse(SQLModel):
    message: str
    user: SessionUser


class MeResponse(SQLModel):
    authenticated: bool
    user: SessionUser | None = None


class RegisterResponse(SQLModel):
    message: str
    data: UserRead

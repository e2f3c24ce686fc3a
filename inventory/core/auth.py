# inventory/core/auth.py
import bcrypt
from fastapi import Depends, Request
from sqlmodel import SQLModel

from inventory.core.exceptions import ForbiddenError, UnauthorizedError
from inventory.models.user import User

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


class SessionContext(SQLModel):
    """
    Per-request view of the signed session cookie.

    Built once at request entry by `get_session_context`; guards and
    services receive it explicitly instead of reading global state.
    """

    user_id: int
    username: str
    role: str


def get_session_context(request: Request) -> SessionContext | None:
    """
    Resolve the current session.

    Returns:
        SessionContext if a user is logged in, else None (anonymous).
    """
    data = request.session
    user_id = data.get("user_id")
    if not user_id:
        return None
    return SessionContext(
        user_id=int(user_id),
        username=data.get("username", ""),
        role=data.get("role", ""),
    )


def require_auth(
    ctx: SessionContext | None = Depends(get_session_context),
) -> SessionContext:
    """
    Enforce authentication.

    Raises:
        UnauthorizedError(401): if there is no active session.
    """
    if ctx is None:
        raise UnauthorizedError()
    return ctx


def require_role(role: str, message: str | None = None):
    """
    Build a dependency that enforces `role` on top of `require_auth`.

    Raises:
        ForbiddenError(403): if the session role differs.
    """

    def guard(ctx: SessionContext = Depends(require_auth)) -> SessionContext:
        if ctx.role != role:
            raise ForbiddenError(message or f"Forbidden: {role} access required.")
        return ctx

    return guard


require_admin = require_role("admin", "Forbidden: admin access required.")
require_client = require_role(
    "client", "Forbidden: only clients can access the shopping cart."
)


def current_user_id(ctx: SessionContext | None) -> int | None:
    return ctx.user_id if ctx is not None else None


def start_session(request: Request, user: User) -> SessionContext:
    """
    Replace whatever the cookie held with a fresh login.

    Clearing first means a pre-login session can never be carried over
    (the cookie-session equivalent of regenerating the session id).
    """
    request.session.clear()
    request.session.update(
        {"user_id": user.id, "username": user.username, "role": user.role}
    )
    return SessionContext(user_id=user.id, username=user.username, role=user.role)


def end_session(request: Request) -> None:
    request.session.clear()


def hash_password(plain: str) -> str:
    secret = plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    secret = plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False

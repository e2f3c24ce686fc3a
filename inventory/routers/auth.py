# inventory/routers/auth.py
from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel import Session

from inventory.core.auth import (
    SessionContext,
    end_session,
    get_session_context,
    require_auth,
    start_session,
)
from inventory.core.http import JsonBody, get_json_body, route_not_found
from inventory.core.validation import validate_payload
from inventory.database import get_session
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterResponse,
    SessionUser,
)
from inventory.schemas.common import MessageResponse
from inventory.schemas.user import UserRead, validate_user
from inventory.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = AuthService(repo)


@router.post("")
def auth_action(
    request: Request,
    response: Response,
    action: str = "",
    session: Session = Depends(get_session),
    ctx: SessionContext | None = Depends(get_session_context),
    body: JsonBody = Depends(get_json_body),
):
    """
    POST /auth?action=login|logout|register

    Auth:
      - login, register: anonymous allowed
      - logout: requires a session
    """
    if action == "login":
        payload = validate_payload(LoginRequest, body.parse())
        user = service.authenticate(session, payload)
        start_session(request, user)
        return LoginResponse(
            message="Login successful.",
            user=SessionUser(id=user.id, username=user.username, role=user.role),
        )

    if action == "logout":
        require_auth(ctx)
        end_session(request)
        return MessageResponse(message="Logged out successfully.")

    if action == "register":
        # Self-registration always creates a client account
        payload = validate_user({**body.parse(), "role": "client"})
        user = service.register(session, payload)
        response.status_code = status.HTTP_201_CREATED
        return RegisterResponse(
            message="Registration successful.",
            data=UserRead.model_validate(user),
        )

    raise route_not_found()


@router.get("", response_model=MeResponse, response_model_exclude_none=True)
def auth_me(
    action: str = "",
    ctx: SessionContext | None = Depends(get_session_context),
):
    """
    GET /auth?action=me

    Reports the current session; never fails for anonymous callers.
    """
    if action != "me":
        raise route_not_found()

    if ctx is None:
        return MeResponse(authenticated=False)
    return MeResponse(
        authenticated=True,
        user=SessionUser(id=ctx.user_id, username=ctx.username, role=ctx.role),
    )

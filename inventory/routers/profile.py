# inventory/routers/profile.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_auth
from inventory.core.http import JsonBody, get_json_body, route_not_found
from inventory.core.validation import validate_payload
from inventory.database import get_session
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.common import MessageResponse
from inventory.schemas.user import (
    PasswordChange,
    ProfileResponse,
    ProfileSavedResponse,
    ProfileUpdate,
    UserRead,
)
from inventory.services.user_service import UserService

router = APIRouter(prefix="/profile", tags=["Profile"])

repo = UserRepository()
service = UserService(repo, CartRepository(), EquipmentRepository())


@router.get("", response_model=ProfileResponse)
def read_profile(
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_auth),
):
    """
    Return the logged-in user's own account (any role).
    """
    user = service.get_user(session, ctx.user_id)
    return ProfileResponse(user=UserRead.model_validate(user))


@router.put("")
def update_profile(
    action: str | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_auth),
    body: JsonBody = Depends(get_json_body),
):
    """
    PUT /profile                  edit full_name / email
    PUT /profile?action=password  change password; current_password must match
    """
    if action == "password":
        payload = validate_payload(PasswordChange, body.parse())
        service.change_password(session, ctx.user_id, payload)
        return MessageResponse(message="Password changed successfully.")

    if action:
        raise route_not_found()

    payload = validate_payload(ProfileUpdate, body.parse())
    user = service.update_profile(session, ctx.user_id, payload)
    return ProfileSavedResponse(
        message="Profile updated successfully.", user=UserRead.model_validate(user)
    )

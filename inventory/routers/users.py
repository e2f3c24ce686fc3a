# inventory/routers/users.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_admin
from inventory.core.http import JsonBody, get_json_body, require_query_id
from inventory.database import get_session
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.common import (
    DataResponse,
    ListResponse,
    MessageResponse,
    SavedResponse,
)
from inventory.schemas.user import UserRead, validate_user
from inventory.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo, CartRepository(), EquipmentRepository())


def _read_list(users) -> ListResponse[UserRead]:
    data = [UserRead.model_validate(u) for u in users]
    return ListResponse[UserRead](data=data, count=len(data))


@router.get("")
def read_users(
    user_id: int | None = Query(None, alias="id"),
    clients: str | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    GET /users           all accounts, newest first
    GET /users?clients=1 client accounts only
    GET /users?id=       one account

    Auth:
      - admin only. Password hashes are never returned.
    """
    if user_id is not None:
        user = service.get_user(session, user_id)
        return DataResponse[UserRead](data=UserRead.model_validate(user))

    if clients == "1":
        return _read_list(service.list_clients(session))

    return _read_list(service.list_users(session))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """
    Create an account with any role (admin only).
    """
    payload = validate_user(body.parse())
    user = service.create_user(session, payload)
    return SavedResponse[UserRead](message="User created.", data=UserRead.model_validate(user))


@router.put("")
def update_user(
    user_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """
    Partial update (admin only). Only fields present in the body change.
    """
    user_id = require_query_id(user_id)
    service.get_user(session, user_id)
    payload = validate_user(body.parse(), is_update=True)
    user = service.update_user(session, user_id, payload)
    return SavedResponse[UserRead](message="User updated.", data=UserRead.model_validate(user))


@router.delete("", response_model=MessageResponse)
def delete_user(
    user_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    Delete an account (admin only).

    - 409 when an admin targets their own account.
    - The user's cart lines go with it; their equipment becomes unassigned.
    """
    user_id = require_query_id(user_id)
    service.delete_user(session, user_id, ctx)
    return MessageResponse(message="User deleted.")

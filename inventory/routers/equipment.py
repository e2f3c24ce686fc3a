# inventory/routers/equipment.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_admin, require_auth
from inventory.core.http import (
    JsonBody,
    get_json_body,
    require_query_id,
    route_not_found,
)
from inventory.database import get_session
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.category_repo import CategoryRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.image_repo import ProductImageRepository
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.common import (
    DataResponse,
    ListResponse,
    MessageResponse,
    SavedResponse,
)
from inventory.schemas.equipment import (
    EquipmentRead,
    EquipmentStatistics,
    validate_equipment,
)
from inventory.services.equipment_service import EquipmentService

router = APIRouter(prefix="/equipment", tags=["Equipment"])

repo = EquipmentRepository()
service = EquipmentService(
    repo,
    ProductImageRepository(),
    CategoryRepository(),
    UserRepository(),
    CartRepository(),
)


@router.get("")
def read_equipment(
    equipment_id: int | None = Query(None, alias="id"),
    category_id: int | None = None,
    action: str | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_auth),
):
    """
    GET /equipment                    list (clients: only items assigned to them)
    GET /equipment?id=                one item; 403 for a client it is not assigned to
    GET /equipment?category_id=       list filtered by category
    GET /equipment?action=statistics  dashboard counters (admin only)
    """
    if action == "statistics":
        require_admin(ctx)
        return DataResponse[EquipmentStatistics](data=service.statistics(session))

    if action:
        raise route_not_found()

    if equipment_id is not None:
        return DataResponse[EquipmentRead](
            data=service.get_equipment(session, ctx, equipment_id)
        )

    items = service.list_equipment(session, ctx, category_id=category_id)
    return ListResponse[EquipmentRead](data=items, count=len(items))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_equipment(
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """Create an equipment item (admin only)."""
    payload = validate_equipment(body.parse())
    item = service.create_equipment(session, payload)
    return SavedResponse[EquipmentRead](message="Equipment created.", data=item)


@router.put("")
def update_equipment(
    equipment_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """
    Partial update (admin only).

    Only fields present in the body are written; `"assigned_to": null`
    unassigns the item.
    """
    equipment_id = require_query_id(equipment_id)
    service.get_equipment(session, ctx, equipment_id)
    payload = validate_equipment(body.parse(), is_update=True)
    item = service.update_equipment(session, equipment_id, payload)
    return SavedResponse[EquipmentRead](message="Equipment updated.", data=item)


@router.delete("", response_model=MessageResponse)
def delete_equipment(
    equipment_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    Delete an item with its images (rows and files) and cart lines (admin only).
    """
    equipment_id = require_query_id(equipment_id)
    service.delete_equipment(session, equipment_id)
    return MessageResponse(message="Equipment deleted.")

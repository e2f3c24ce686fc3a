# inventory/routers/cart.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_client
from inventory.core.http import (
    JsonBody,
    get_json_body,
    require_query_id,
    route_not_found,
)
from inventory.database import get_session
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.schemas.cart import (
    CartChangedResponse,
    CartCountResponse,
    validate_cart_add,
    validate_cart_update,
)
from inventory.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
equipment_repo = EquipmentRepository()
service = CartService(cart_repo, equipment_repo)


@router.get("")
def get_my_cart(
    action: str | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_client),
):
    """
    GET /cart               cart lines with product details
    GET /cart?action=count  total units in the cart

    Auth:
      - Only role='client' can access.
      - Admins are forbidden.
    """
    if action == "count":
        return CartCountResponse(count=service.count(session, ctx.user_id))
    if action:
        raise route_not_found()
    return service.get_cart(session, ctx.user_id)


@router.post("", response_model=CartChangedResponse)
def add_to_cart(
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_client),
    body: JsonBody = Depends(get_json_body),
):
    """
    Add a product to the current user's cart.

    Adding a product that is already there increases its quantity.
    """
    payload = validate_cart_add(body.parse())
    return service.add_to_cart(session, ctx.user_id, payload)


@router.put("", response_model=CartChangedResponse)
def update_cart_item(
    cart_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_client),
    body: JsonBody = Depends(get_json_body),
):
    """
    Set the quantity of one of the caller's cart lines.
    """
    cart_id = require_query_id(cart_id)
    payload = validate_cart_update(body.parse())
    return service.update_quantity(session, ctx.user_id, cart_id, payload)


@router.delete("", response_model=CartChangedResponse)
def remove_cart_item(
    cart_id: int | None = Query(None, alias="id"),
    action: str | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_client),
):
    """
    DELETE /cart?id=          remove one line
    DELETE /cart?action=clear empty the cart
    """
    if action == "clear":
        return service.clear_cart(session, ctx.user_id)
    if action:
        raise route_not_found()

    cart_id = require_query_id(cart_id)
    return service.remove_item(session, ctx.user_id, cart_id)

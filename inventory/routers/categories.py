# inventory/routers/categories.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_admin, require_auth
from inventory.core.http import JsonBody, get_json_body, require_query_id
from inventory.database import get_session
from inventory.repositories.category_repo import CategoryRepository
from inventory.schemas.category import CategoryDetail, CategoryRead, validate_category
from inventory.schemas.common import (
    DataResponse,
    ListResponse,
    MessageResponse,
    SavedResponse,
)
from inventory.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)


@router.get("")
def read_categories(
    category_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_auth),
):
    """
    GET /categories      all categories, by name
    GET /categories?id=  one category with its product_count

    Auth:
      - any logged-in user
    """
    if category_id is not None:
        return DataResponse[CategoryDetail](data=service.get_detail(session, category_id))

    items = [CategoryRead.model_validate(c) for c in service.list_categories(session)]
    return ListResponse[CategoryRead](data=items, count=len(items))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """Create a category (admin only)."""
    payload = validate_category(body.parse())
    category = service.create_category(session, payload)
    return SavedResponse[CategoryRead](
        message="Category created.", data=CategoryRead.model_validate(category)
    )


@router.put("")
def update_category(
    category_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
    body: JsonBody = Depends(get_json_body),
):
    """Partial update of a category (admin only)."""
    category_id = require_query_id(category_id)
    service.get_category(session, category_id)
    payload = validate_category(body.parse(), is_update=True)
    category = service.update_category(session, category_id, payload)
    return SavedResponse[CategoryRead](
        message="Category updated.", data=CategoryRead.model_validate(category)
    )


@router.delete("", response_model=MessageResponse)
def delete_category(
    category_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    Delete a category (admin only).

    Refused with 409 while equipment still references it.
    """
    category_id = require_query_id(category_id)
    service.delete_category(session, category_id)
    return MessageResponse(message="Category deleted.")

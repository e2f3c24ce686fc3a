# inventory/routers/images.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlmodel import Session

from inventory.core.auth import SessionContext, require_admin, require_auth
from inventory.core.http import require_query_id, route_not_found
from inventory.database import get_session
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.image_repo import ProductImageRepository
from inventory.schemas.common import (
    ListResponse,
    MessageResponse,
    SavedResponse,
)
from inventory.schemas.equipment import ProductImageRead, UploadResponse
from inventory.services.image_service import ImageService, read_upload

router = APIRouter(prefix="/images", tags=["Images"])

repo = ProductImageRepository()
service = ImageService(repo, EquipmentRepository())


@router.get("")
def read_images(
    product_id: int | None = None,
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_auth),
):
    """
    GET /images?product_id=  images of one product, primary first
    """
    product_id = require_query_id(product_id, "product_id")
    images = [
        ProductImageRead.model_validate(img)
        for img in service.list_for_product(session, product_id)
    ]
    return ListResponse[ProductImageRead](data=images, count=len(images))


@router.post(
    "",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def upload_images(
    action: str = "",
    product_id: int | None = Form(None),
    images: list[UploadFile] | None = File(None),
    is_primary: bool = Form(False),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    POST /images?action=upload (multipart/form-data, admin only)

    Fields:
      - product_id: int
      - images: one or more files (JPG, PNG, WebP; 5MB each)
      - is_primary: make the first file the product's primary image

    Files are accepted by sniffed content, not by the name they arrive
    with. Rejected files are listed under `warnings`.
    """
    if action != "upload":
        raise route_not_found()

    files = [(f.filename or "", read_upload(f.file)) for f in images or []]
    return service.upload(session, product_id, files, is_primary=is_primary)


@router.put("")
def update_image(
    image_id: int | None = Query(None, alias="id"),
    action: str = "",
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """
    PUT /images?id=&action=primary  make this the only primary image (admin only)
    """
    if action != "primary":
        raise route_not_found()

    image_id = require_query_id(image_id)
    image = service.set_primary(session, image_id)
    return SavedResponse[ProductImageRead](
        message="Image set as primary.", data=ProductImageRead.model_validate(image)
    )


@router.delete("", response_model=MessageResponse)
def delete_image(
    image_id: int | None = Query(None, alias="id"),
    session: Session = Depends(get_session),
    ctx: SessionContext = Depends(require_admin),
):
    """Delete one image row and its file (admin only)."""
    image_id = require_query_id(image_id)
    service.delete_image(session, image_id)
    return MessageResponse(message="Image deleted successfully.")

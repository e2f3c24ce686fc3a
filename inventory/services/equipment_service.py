# inventory/services/equipment_service.py
import logging
from typing import Any

from sqlmodel import Session

from inventory.core.auth import SessionContext
from inventory.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from inventory.core.storage_utils import delete_from_storage
from inventory.core.validation import provided_fields
from inventory.models.equipment import Equipment, ProductImage
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.category_repo import CategoryRepository
from inventory.repositories.equipment_repo import EquipmentRepository, EquipmentRow
from inventory.repositories.image_repo import ProductImageRepository
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.equipment import (
    EquipmentCreate,
    EquipmentRead,
    EquipmentStatistics,
    EquipmentUpdate,
    ProductImageRead,
)

logger = logging.getLogger("inventory.equipment")


class EquipmentService:
    """
    Business logic for equipment.

    Responsibilities:
      - role-aware visibility (clients only see items assigned to them)
      - serial_number uniqueness (409)
      - category / assignee existence (422)
      - delete cascade: images (rows + files) and cart lines
    """

    def __init__(
        self,
        repo: EquipmentRepository,
        image_repo: ProductImageRepository,
        category_repo: CategoryRepository,
        user_repo: UserRepository,
        cart_repo: CartRepository,
    ):
        self.repo = repo
        self.image_repo = image_repo
        self.category_repo = category_repo
        self.user_repo = user_repo
        self.cart_repo = cart_repo

    # ----- Helpers -----

    @staticmethod
    def _to_read(
        equipment: Equipment,
        category_name: str | None,
        images: list[ProductImage],
    ) -> EquipmentRead:
        return EquipmentRead(
            **equipment.model_dump(),
            category_name=category_name,
            images=[ProductImageRead.model_validate(img) for img in images],
        )

    def _with_images(self, session: Session, rows: list[EquipmentRow]) -> list[EquipmentRead]:
        images = self.image_repo.find_by_product_ids(session, [eq.id for eq, _ in rows])
        return [self._to_read(eq, cat_name, images.get(eq.id, [])) for eq, cat_name in rows]

    def _check_references(self, session: Session, fields: dict[str, Any]) -> None:
        errors = []
        category_id = fields.get("category_id")
        if category_id is not None and self.category_repo.find_by_id(session, category_id) is None:
            errors.append("category_id does not match an existing category.")
        assigned_to = fields.get("assigned_to")
        if assigned_to is not None and self.user_repo.find_by_id(session, assigned_to) is None:
            errors.append("assigned_to does not match an existing user.")
        if errors:
            raise ValidationError(errors)

    def _get_row(self, session: Session, equipment_id: int) -> EquipmentRow:
        row = self.repo.find_with_category(session, equipment_id)
        if row is None:
            raise NotFoundError("Equipment not found.")
        return row

    # ----- Reads -----

    def list_equipment(
        self,
        session: Session,
        ctx: SessionContext,
        category_id: int | None = None,
    ) -> list[EquipmentRead]:
        """
        Admins see everything; clients only their assigned items.
        """
        if ctx.role == "admin":
            if category_id is None:
                rows = self.repo.find_all(session)
            else:
                rows = self.repo.find_by_category_id(session, category_id)
        else:
            rows = self.repo.find_by_assigned_to(session, ctx.user_id)
            if category_id is not None:
                rows = [row for row in rows if row[0].category_id == category_id]

        return self._with_images(session, rows)

    def get_equipment(
        self, session: Session, ctx: SessionContext, equipment_id: int
    ) -> EquipmentRead:
        """
        Raises:
            NotFoundError(404): unknown id.
            ForbiddenError(403): a client asking for an item not assigned to them.
        """
        equipment, category_name = self._get_row(session, equipment_id)

        if ctx.role != "admin" and equipment.assigned_to != ctx.user_id:
            raise ForbiddenError("Forbidden: you do not have access to this product.")

        images = self.image_repo.find_by_product_id(session, equipment_id)
        return self._to_read(equipment, category_name, images)

    def statistics(self, session: Session) -> EquipmentStatistics:
        return EquipmentStatistics.model_validate(self.repo.get_statistics(session))

    # ----- Writes (admin) -----

    def create_equipment(self, session: Session, payload: EquipmentCreate) -> EquipmentRead:
        self._check_references(session, payload.model_dump())

        if self.repo.serial_exists(session, payload.serial_number):
            raise ConflictError("serial_number already exists.")

        new_id = self.repo.create(session, payload)
        equipment, category_name = self._get_row(session, new_id)
        logger.info("Equipment %s created (id=%s)", equipment.serial_number, new_id)
        return self._to_read(equipment, category_name, [])

    def update_equipment(
        self, session: Session, equipment_id: int, payload: EquipmentUpdate
    ) -> EquipmentRead:
        self._get_row(session, equipment_id)

        fields = provided_fields(payload)
        self._check_references(session, fields)

        if "serial_number" in fields and self.repo.serial_exists(
            session, fields["serial_number"], exclude_id=equipment_id
        ):
            raise ConflictError("serial_number already exists on another item.")

        if fields and not self.repo.update(session, equipment_id, fields):
            raise StorageError("Update failed, no rows affected.")

        equipment, category_name = self._get_row(session, equipment_id)
        images = self.image_repo.find_by_product_id(session, equipment_id)
        return self._to_read(equipment, category_name, images)

    def delete_equipment(self, session: Session, equipment_id: int) -> None:
        """
        Delete the item, its image rows and its cart lines in one commit,
        then remove the image files.
        """
        self._get_row(session, equipment_id)

        image_paths = self.image_repo.delete_by_product_id(session, equipment_id)
        self.cart_repo.remove_for_product(session, equipment_id)
        if not self.repo.delete(session, equipment_id):
            raise StorageError("Delete failed.")

        for path in image_paths:
            delete_from_storage(path)
        logger.info(
            "Equipment id=%s deleted with %d image(s)", equipment_id, len(image_paths)
        )

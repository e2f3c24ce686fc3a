# inventory/services/category_service.py
import logging

from sqlmodel import Session

from inventory.core.exceptions import ConflictError, NotFoundError, StorageError
from inventory.core.validation import provided_fields
from inventory.models.category import Category
from inventory.repositories.category_repo import CategoryRepository
from inventory.schemas.category import CategoryCreate, CategoryDetail, CategoryUpdate

logger = logging.getLogger("inventory.categories")


class CategoryService:
    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.find_all(session)

    def get_category(self, session: Session, category_id: int) -> Category:
        category = self.repo.find_by_id(session, category_id)
        if category is None:
            raise NotFoundError("Category not found.")
        return category

    def get_detail(self, session: Session, category_id: int) -> CategoryDetail:
        """Single category plus the number of equipment items in it."""
        category = self.get_category(session, category_id)
        return CategoryDetail(
            **category.model_dump(),
            product_count=self.repo.count_products(session, category_id),
        )

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        if self.repo.name_exists(session, payload.name):
            raise ConflictError("Category name already exists.")
        new_id = self.repo.create(session, payload)
        return self.get_category(session, new_id)

    def update_category(
        self, session: Session, category_id: int, payload: CategoryUpdate
    ) -> Category:
        self.get_category(session, category_id)

        fields = provided_fields(payload)
        if "name" in fields and self.repo.name_exists(
            session, fields["name"], exclude_id=category_id
        ):
            raise ConflictError("Category name already exists on another category.")

        if fields and not self.repo.update(session, category_id, fields):
            raise StorageError("Update failed, no rows affected.")
        return self.get_category(session, category_id)

    def delete_category(self, session: Session, category_id: int) -> None:
        """
        Refuses (409) while any equipment still points at the category.
        """
        self.get_category(session, category_id)

        product_count = self.repo.count_products(session, category_id)
        if product_count > 0:
            raise ConflictError(
                f"Cannot delete category with {product_count} product(s). "
                "Reassign or delete products first."
            )

        if not self.repo.delete(session, category_id):
            raise StorageError("Delete failed.")
        logger.info("Category id=%s deleted", category_id)

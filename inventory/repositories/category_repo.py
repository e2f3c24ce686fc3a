# inventory/repositories/category_repo.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from inventory.database import commit
from inventory.models.category import Category
from inventory.models.equipment import Equipment
from inventory.schemas.category import CategoryCreate


class CategoryRepository:
    """
    Data access layer for Category.
    """

    def find_all(self, session: Session) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        return list(session.exec(stmt).all())

    def find_by_id(self, session: Session, category_id: int) -> Category | None:
        return session.get(Category, category_id)

    def name_exists(
        self,
        session: Session,
        name: str,
        exclude_id: int | None = None,
    ) -> bool:
        stmt = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return session.exec(stmt).first() is not None

    def count_products(self, session: Session, category_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(Equipment)
            .where(Equipment.category_id == category_id)
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def create(self, session: Session, data: CategoryCreate) -> int:
        category = Category(name=data.name, description=data.description or "")
        session.add(category)
        commit(session)
        session.refresh(category)
        return category.id

    def update(self, session: Session, category_id: int, fields: dict[str, Any]) -> bool:
        category = session.get(Category, category_id)
        if category is None:
            return False
        for key, value in fields.items():
            setattr(category, key, value)
        category.updated_at = datetime.now(timezone.utc)
        session.add(category)
        commit(session)
        return True

    def delete(self, session: Session, category_id: int) -> bool:
        category = session.get(Category, category_id)
        if category is None:
            return False
        session.delete(category)
        commit(session)
        return True

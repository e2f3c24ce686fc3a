# inventory/repositories/equipment_repo.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, update
from sqlmodel import Session, select

from inventory.database import commit
from inventory.models.category import Category
from inventory.models.equipment import EQUIPMENT_STATUSES, Equipment
from inventory.schemas.equipment import EquipmentCreate

# (Equipment, category name) pairs returned by the listing queries
EquipmentRow = tuple[Equipment, str | None]


class EquipmentRepository:
    """
    Data access layer for Equipment (table `products`).

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Queries -----

    @staticmethod
    def _with_category():
        return (
            select(Equipment, Category.name)
            .join(Category, Category.id == Equipment.category_id, isouter=True)
            .order_by(Equipment.created_at.desc(), Equipment.id.desc())
        )

    def find_all(self, session: Session) -> list[EquipmentRow]:
        return list(session.exec(self._with_category()).all())

    def find_by_assigned_to(self, session: Session, user_id: int) -> list[EquipmentRow]:
        stmt = self._with_category().where(Equipment.assigned_to == user_id)
        return list(session.exec(stmt).all())

    def find_by_category_id(
        self, session: Session, category_id: int
    ) -> list[EquipmentRow]:
        stmt = self._with_category().where(Equipment.category_id == category_id)
        return list(session.exec(stmt).all())

    def find_with_category(self, session: Session, equipment_id: int) -> EquipmentRow | None:
        stmt = self._with_category().where(Equipment.id == equipment_id)
        return session.exec(stmt).first()

    def find_by_id(self, session: Session, equipment_id: int) -> Equipment | None:
        return session.get(Equipment, equipment_id)

    def find_for_update(self, session: Session, equipment_id: int) -> Equipment | None:
        """
        Load a row and lock it until the caller's transaction ends
        (no-op on SQLite, which serialises writers anyway).
        """
        stmt = select(Equipment).where(Equipment.id == equipment_id).with_for_update()
        return session.exec(stmt).first()

    def serial_exists(
        self,
        session: Session,
        serial_number: str,
        exclude_id: int | None = None,
    ) -> bool:
        stmt = select(Equipment.id).where(Equipment.serial_number == serial_number)
        if exclude_id is not None:
            stmt = stmt.where(Equipment.id != exclude_id)
        return session.exec(stmt).first() is not None

    def get_statistics(self, session: Session) -> dict[str, Any]:
        """
        Dashboard counters: total, per status, per category.

        Statuses and categories with no equipment are reported as 0.
        """
        total = session.exec(select(func.count()).select_from(Equipment)).one()

        by_status = {name: 0 for name in EQUIPMENT_STATUSES}
        status_rows = session.exec(
            select(Equipment.status, func.count()).group_by(Equipment.status)
        ).all()
        for status_name, count in status_rows:
            by_status[status_name] = int(count or 0)

        category_rows = session.exec(
            select(Category.id, Category.name, func.count(Equipment.id))
            .join(Equipment, Equipment.category_id == Category.id, isouter=True)
            .group_by(Category.id, Category.name)
            .order_by(Category.name)
        ).all()

        return {
            "total": int(total or 0),
            "by_status": by_status,
            "by_category": [
                {"id": cat_id, "name": name, "count": int(count or 0)}
                for cat_id, name, count in category_rows
            ],
        }

    # ----- Writes -----

    def create(self, session: Session, data: EquipmentCreate) -> int:
        equipment = Equipment(**data.model_dump())
        session.add(equipment)
        commit(session)
        session.refresh(equipment)
        return equipment.id

    def update(self, session: Session, equipment_id: int, fields: dict[str, Any]) -> bool:
        equipment = session.get(Equipment, equipment_id)
        if equipment is None:
            return False
        for key, value in fields.items():
            setattr(equipment, key, value)
        equipment.updated_at = datetime.now(timezone.utc)
        session.add(equipment)
        commit(session)
        return True

    def delete(self, session: Session, equipment_id: int) -> bool:
        """
        Delete the row and commit, together with any pending cleanup the
        caller queued in this session (images, cart lines).
        """
        equipment = session.get(Equipment, equipment_id)
        if equipment is None:
            return False
        session.delete(equipment)
        commit(session)
        return True

    def unassign_user(self, session: Session, user_id: int) -> None:
        """Clear assigned_to for a user's items. Does not commit."""
        session.exec(
            update(Equipment)
            .where(Equipment.assigned_to == user_id)
            .values(assigned_to=None)
        )

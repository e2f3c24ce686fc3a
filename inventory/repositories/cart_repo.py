# inventory/repositories/cart_repo.py
from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from inventory.database import commit
from inventory.models.cart import CartItem
from inventory.models.category import Category
from inventory.models.equipment import Equipment, ProductImage


class CartRepository:

    # Get items for a user, joined with product details
    def list_for_user(self, session: Session, user_id: int) -> list[dict]:
        primary_image = (
            select(ProductImage.image_path)
            .where(
                ProductImage.product_id == Equipment.id,
                ProductImage.is_primary == True,  # noqa: E712
            )
            .limit(1)
            .correlate(Equipment)
            .scalar_subquery()
        )
        stmt = (
            select(
                CartItem.id.label("cart_id"),
                CartItem.quantity,
                CartItem.added_at,
                Equipment.id.label("product_id"),
                Equipment.name,
                Equipment.brand,
                Equipment.serial_number,
                Equipment.status,
                Category.name.label("category_name"),
                primary_image.label("primary_image"),
            )
            .select_from(CartItem)
            .join(Equipment, Equipment.id == CartItem.product_id)
            .join(Category, Category.id == Equipment.category_id, isouter=True)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.added_at.desc(), CartItem.id.desc())
        )
        return [dict(row._mapping) for row in session.exec(stmt).all()]

    def count_for_user(self, session: Session, user_id: int) -> int:
        """Total units in the cart (sum of quantities)."""
        stmt = select(func.coalesce(func.sum(CartItem.quantity), 0)).where(
            CartItem.user_id == user_id
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    # Writes

    def increment_or_insert(
        self,
        session: Session,
        user_id: int,
        product_id: int,
        quantity: int,
        max_quantity: int,
    ) -> bool:
        """
        Add `quantity` to the user's line for this product, creating the
        line if there is none, then commit.

        The increment is a single UPDATE (no read-modify-write) guarded by
        `max_quantity`. Returns False, with nothing written, when the merged
        line would exceed it. If a concurrent request inserted the same
        line first, the unique constraint raises IntegrityError after
        rolling back; the caller retries and lands on the UPDATE path.
        """
        line = (CartItem.user_id == user_id, CartItem.product_id == product_id)
        bump = (
            update(CartItem)
            .where(*line, CartItem.quantity <= max_quantity - quantity)
            .values(quantity=CartItem.quantity + quantity)
        )
        if session.exec(bump).rowcount == 0:
            if session.exec(select(CartItem.id).where(*line)).first() is not None:
                session.rollback()
                return False
            session.add(
                CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            )
            try:
                session.flush()
            except IntegrityError:
                session.rollback()
                raise
        commit(session)
        return True

    def update_quantity(
        self, session: Session, cart_id: int, user_id: int, quantity: int
    ) -> bool:
        """Set quantity on the user's own line. False if no such line."""
        result = session.exec(
            update(CartItem)
            .where(CartItem.id == cart_id, CartItem.user_id == user_id)
            .values(quantity=quantity)
        )
        commit(session)
        return result.rowcount > 0

    def remove(self, session: Session, cart_id: int, user_id: int) -> bool:
        result = session.exec(
            delete(CartItem).where(CartItem.id == cart_id, CartItem.user_id == user_id)
        )
        commit(session)
        return result.rowcount > 0

    def clear_user_cart(self, session: Session, user_id: int) -> int:
        result = session.exec(delete(CartItem).where(CartItem.user_id == user_id))
        commit(session)
        return result.rowcount

    # Cleanup used by user/equipment deletion. No commit here.

    def remove_for_user(self, session: Session, user_id: int) -> None:
        session.exec(delete(CartItem).where(CartItem.user_id == user_id))

    def remove_for_product(self, session: Session, product_id: int) -> None:
        session.exec(delete(CartItem).where(CartItem.product_id == product_id))

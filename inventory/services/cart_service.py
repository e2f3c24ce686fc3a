# inventory/services/cart_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from inventory.core.exceptions import ConflictError, NotFoundError, ValidationError
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.schemas.cart import (
    MAX_CART_QUANTITY,
    CartChangedResponse,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartListResponse,
)

logger = logging.getLogger("inventory.cart")

# A lost insert race lands on the increment path the second time.
_ADD_ATTEMPTS = 2


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - only client accounts reach this layer (router dependency)
      - product must exist (404) and be Available (409) to be added
      - adding a product already in the cart increments its quantity,
        up to MAX_CART_QUANTITY per line (422 beyond that)
      - every line operation is scoped to the caller's own cart
    """

    def __init__(self, cart_repo: CartRepository, equipment_repo: EquipmentRepository):
        self.cart_repo = cart_repo
        self.equipment_repo = equipment_repo

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: int) -> CartListResponse:
        items = [
            CartItemRead.model_validate(row)
            for row in self.cart_repo.list_for_user(session, user_id)
        ]
        return CartListResponse(items=items, count=len(items))

    def count(self, session: Session, user_id: int) -> int:
        return self.cart_repo.count_for_user(session, user_id)

    def add_to_cart(
        self, session: Session, user_id: int, payload: CartItemCreate
    ) -> CartChangedResponse:
        """
        Add `quantity` units of a product.

        The availability check and the increment-or-insert share one
        transaction; the product row is locked where the database
        supports it. A lost insert race is retried once as an increment.
        """
        for attempt in range(_ADD_ATTEMPTS):
            product = self.equipment_repo.find_for_update(session, payload.product_id)
            if product is None:
                raise NotFoundError("Product not found.")
            if product.status != "Available":
                raise ConflictError(
                    f"Product is not available (status: {product.status})."
                )

            try:
                added = self.cart_repo.increment_or_insert(
                    session,
                    user_id,
                    payload.product_id,
                    payload.quantity,
                    MAX_CART_QUANTITY,
                )
                break
            except IntegrityError:
                if attempt + 1 == _ADD_ATTEMPTS:
                    raise
                logger.info(
                    "Concurrent cart insert for user=%s product=%s, retrying",
                    user_id,
                    payload.product_id,
                )

        if not added:
            raise ValidationError(
                [f"quantity in cart cannot exceed {MAX_CART_QUANTITY} for one product."]
            )

        return CartChangedResponse(
            message="Product added to cart.",
            cart_count=self.count(session, user_id),
        )

    def update_quantity(
        self,
        session: Session,
        user_id: int,
        cart_id: int,
        payload: CartItemUpdate,
    ) -> CartChangedResponse:
        if not self.cart_repo.update_quantity(session, cart_id, user_id, payload.quantity):
            raise NotFoundError("Cart item not found.")
        return CartChangedResponse(
            message="Cart updated.",
            cart_count=self.count(session, user_id),
        )

    def remove_item(self, session: Session, user_id: int, cart_id: int) -> CartChangedResponse:
        if not self.cart_repo.remove(session, cart_id, user_id):
            raise NotFoundError("Cart item not found.")
        return CartChangedResponse(
            message="Item removed from cart.",
            cart_count=self.count(session, user_id),
        )

    def clear_cart(self, session: Session, user_id: int) -> CartChangedResponse:
        self.cart_repo.clear_user_cart(session, user_id)
        return CartChangedResponse(message="Cart cleared.", cart_count=0)

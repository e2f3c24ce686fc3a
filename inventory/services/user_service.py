# inventory/services/user_service.py
import logging

from sqlmodel import Session

from inventory.core.auth import (
    SessionContext,
    current_user_id,
    hash_password,
    verify_password,
)
from inventory.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    StorageError,
)
from inventory.core.validation import provided_fields
from inventory.models.user import User
from inventory.repositories.cart_repo import CartRepository
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserUpdate

logger = logging.getLogger("inventory.users")


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - username uniqueness (409)
      - password hashing; the hash never leaves this layer
      - self-delete guard and delete cleanup (cart rows, assignments)
      - self-service profile and password changes
    """

    def __init__(
        self,
        repo: UserRepository,
        cart_repo: CartRepository,
        equipment_repo: EquipmentRepository,
    ):
        self.repo = repo
        self.cart_repo = cart_repo
        self.equipment_repo = equipment_repo

    # ----- Admin operations -----

    def list_users(self, session: Session) -> list[User]:
        return self.repo.find_all(session)

    def list_clients(self, session: Session) -> list[User]:
        return self.repo.find_all_clients(session)

    def get_user(self, session: Session, user_id: int) -> User:
        """
        Raises:
            NotFoundError(404): if the user does not exist.
        """
        user = self.repo.find_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def create_user(self, session: Session, payload: UserCreate) -> User:
        if self.repo.username_exists(session, payload.username):
            raise ConflictError("Username already exists.")

        new_id = self.repo.create(session, payload, hash_password(payload.password))
        logger.info("Created %s account %s (id=%s)", payload.role, payload.username, new_id)
        return self.get_user(session, new_id)

    def update_user(self, session: Session, user_id: int, payload: UserUpdate) -> User:
        """
        Partial update. A blank password keeps the current hash.
        """
        self.get_user(session, user_id)

        fields = provided_fields(payload)
        if "username" in fields and self.repo.username_exists(
            session, fields["username"], exclude_id=user_id
        ):
            raise ConflictError("Username already exists on another user.")

        password = fields.pop("password", None)
        if password:
            fields["password_hash"] = hash_password(password)

        if fields and not self.repo.update(session, user_id, fields):
            raise StorageError("Update failed, no rows affected.")
        return self.get_user(session, user_id)

    def delete_user(self, session: Session, user_id: int, ctx: SessionContext) -> None:
        """
        Delete a user, their cart lines and their equipment assignments in
        one transaction.

        Raises:
            NotFoundError(404): unknown user.
            ConflictError(409): an admin deleting their own account.
        """
        self.get_user(session, user_id)

        if user_id == current_user_id(ctx):
            raise ConflictError("Cannot delete your own account.")

        self.cart_repo.remove_for_user(session, user_id)
        self.equipment_repo.unassign_user(session, user_id)
        if not self.repo.delete(session, user_id):
            raise StorageError("Delete failed.")
        logger.info("User id=%s deleted by %s", user_id, ctx.username)

    # ----- Self profile -----

    def update_profile(
        self, session: Session, user_id: int, payload: ProfileUpdate
    ) -> User:
        fields = provided_fields(payload)
        if not fields:
            raise BadRequestError("No valid fields to update.")

        self.get_user(session, user_id)
        self.repo.update(session, user_id, fields)
        return self.get_user(session, user_id)

    def change_password(
        self, session: Session, user_id: int, payload: PasswordChange
    ) -> None:
        """
        Raises:
            BadRequestError(400): the current password does not match.
        """
        user = self.get_user(session, user_id)
        if not verify_password(payload.current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect.")

        self.repo.update(
            session, user_id, {"password_hash": hash_password(payload.new_password)}
        )
        logger.info("User %s changed their password", user.username)

# inventory/services/auth_service.py
import logging

from sqlmodel import Session

from inventory.core.auth import hash_password, verify_password
from inventory.core.exceptions import BadRequestError, ConflictError, UnauthorizedError
from inventory.models.user import User
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.auth import LoginRequest
from inventory.schemas.user import UserCreate

logger = logging.getLogger("inventory.auth")

INVALID_CREDENTIALS = "Invalid username or password."

# Checked against when the username is unknown, so both failure paths
# cost one bcrypt verification.
_DUMMY_HASH = hash_password("not-a-real-password")


class AuthService:
    """
    Login and self-registration.

    Session cookie handling stays in the router; this class only decides
    who the caller is.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def authenticate(self, session: Session, payload: LoginRequest) -> User:
        """
        Resolve credentials to a User.

        Raises:
            BadRequestError(400): username or password missing.
            UnauthorizedError(401): same message for unknown user and bad password.
        """
        username = payload.username.strip()
        if not username or not payload.password:
            raise BadRequestError("username and password are required.")

        user = self.repo.find_by_username(session, username)
        stored_hash = user.password_hash if user is not None else _DUMMY_HASH

        if not verify_password(payload.password, stored_hash) or user is None:
            logger.info("Failed login for username=%r", username)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("User %s (id=%s) logged in", user.username, user.id)
        return user

    def register(self, session: Session, payload: UserCreate) -> User:
        """
        Create a client account. Whatever role the body asked for is ignored.
        """
        if self.repo.username_exists(session, payload.username):
            raise ConflictError("Username already exists.")

        payload = payload.model_copy(update={"role": "client"})
        new_id = self.repo.create(session, payload, hash_password(payload.password))
        logger.info("Registered client %s (id=%s)", payload.username, new_id)
        return self.repo.find_by_id(session, new_id)

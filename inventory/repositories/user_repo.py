# inventory/repositories/user_repo.py
from typing import Any

from sqlmodel import Session, select

from inventory.database import commit
from inventory.models.user import User
from inventory.schemas.user import UserCreate


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Queries -----

    def find_all(self, session: Session) -> list[User]:
        """All users, newest first."""
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        return list(session.exec(stmt).all())

    def find_all_clients(self, session: Session) -> list[User]:
        """Client accounts only, for the equipment assignment picker."""
        stmt = select(User).where(User.role == "client").order_by(User.username)
        return list(session.exec(stmt).all())

    def find_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def find_by_username(self, session: Session, username: str) -> User | None:
        """Return a User by unique username, or None if not found."""
        stmt = select(User).where(User.username == username)
        return session.exec(stmt).first()

    def username_exists(
        self,
        session: Session,
        username: str,
        exclude_id: int | None = None,
    ) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return session.exec(stmt).first() is not None

    # ----- Writes -----

    def create(self, session: Session, data: UserCreate, password_hash: str) -> int:
        """Insert a new User and return its id."""
        user = User(
            username=data.username,
            password_hash=password_hash,
            role=data.role,
            full_name=data.full_name or "",
            email=data.email,
        )
        session.add(user)
        commit(session)
        session.refresh(user)
        return user.id

    def update(self, session: Session, user_id: int, fields: dict[str, Any]) -> bool:
        """
        Write only the given columns.

        Returns:
            False if the user does not exist.
        """
        user = session.get(User, user_id)
        if user is None:
            return False
        for key, value in fields.items():
            setattr(user, key, value)
        session.add(user)
        commit(session)
        return True

    def delete(self, session: Session, user_id: int) -> bool:
        """
        Delete a User. Commits the caller's pending work (cart cleanup,
        unassignment) in the same transaction.
        """
        user = session.get(User, user_id)
        if user is None:
            return False
        session.delete(user)
        commit(session)
        return True

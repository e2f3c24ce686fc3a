# inventory/database.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from inventory.core.config import get_settings
from inventory.core.exceptions import StorageError

settings = get_settings()

# ---------------------------------------------------------
# Engine
#
# - SQLite (default): FastAPI runs sync endpoints in a threadpool,
#   so the connection must be usable from other threads.
# - In-memory SQLite: every connection would get its own empty
#   database, so all sessions share one connection (StaticPool).
# - Anything else: SQLAlchemy's default QueuePool, one connection
#   checked out per request.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

engine_kwargs: dict = {"echo": False, "pool_pre_ping": True}

if db_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(db_url, **engine_kwargs)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


def commit(session: Session) -> None:
    """
    Commit the current transaction.

    On failure the transaction is rolled back and the driver error is
    re-raised as StorageError, so nothing half-applied stays pending.
    """
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageError(str(getattr(exc, "orig", None) or exc)) from exc

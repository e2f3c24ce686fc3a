"""
Pytest fixtures for the inventory API.

Settings are read once at import time, so the environment is prepared
before anything from `inventory` is imported: an in-memory SQLite
database shared through StaticPool, and a throwaway upload root.
"""

import os
import shutil
import tempfile
from datetime import date
from io import BytesIO

_UPLOAD_ROOT = tempfile.mkdtemp(prefix="inventory-uploads-")

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_ROOT"] = _UPLOAD_ROOT
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from inventory.core.auth import hash_password  # noqa: E402
from inventory.database import engine  # noqa: E402
from inventory.main import app  # noqa: E402
from inventory.models.category import Category  # noqa: E402
from inventory.models.equipment import Equipment  # noqa: E402
from inventory.models.user import User  # noqa: E402

ADMIN_PASSWORD = "admin-pass"
CLIENT_PASSWORD = "client-pass"

# bcrypt is deliberately slow; hash once per run.
_ADMIN_HASH = hash_password(ADMIN_PASSWORD)
_CLIENT_HASH = hash_password(CLIENT_PASSWORD)


@pytest.fixture(scope="session", autouse=True)
def _upload_root():
    yield _UPLOAD_ROOT
    shutil.rmtree(_UPLOAD_ROOT, ignore_errors=True)


@pytest.fixture(autouse=True)
def fresh_db():
    """Empty schema for every test."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def db():
    """Open a short-lived session, for seeding and for asserting on rows."""

    def _open() -> Session:
        return Session(engine)

    return _open


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


def _add(obj):
    with Session(engine) as session:
        session.add(obj)
        session.commit()
        session.refresh(obj)
        return obj


@pytest.fixture
def admin_user() -> User:
    return _add(
        User(
            username="admin",
            password_hash=_ADMIN_HASH,
            role="admin",
            full_name="Site Admin",
            email="admin@company.com",
        )
    )


@pytest.fixture
def client_user() -> User:
    return _add(
        User(
            username="alice",
            password_hash=_CLIENT_HASH,
            role="client",
            full_name="Alice Doe",
            email="alice@company.com",
        )
    )


@pytest.fixture
def other_client() -> User:
    return _add(
        User(username="bob", password_hash=_CLIENT_HASH, role="client", full_name="Bob")
    )


@pytest.fixture
def make_category():
    def _make(name: str = "Laptops", description: str = "") -> Category:
        return _add(Category(name=name, description=description))

    return _make


@pytest.fixture
def make_equipment():
    counter = {"n": 0}

    def _make(category_id: int, **overrides) -> Equipment:
        counter["n"] += 1
        fields = {
            "name": f"Item {counter['n']}",
            "category_id": category_id,
            "brand": "Dell",
            "serial_number": f"SN-{counter['n']:04d}",
            "status": "Available",
            "purchase_date": date(2024, 1, 15),
        }
        fields.update(overrides)
        return _add(Equipment(**fields))

    return _make


@pytest.fixture
def make_image():
    """Real image bytes (PNG by default) generated with Pillow."""

    def _make(fmt: str = "PNG") -> bytes:
        buf = BytesIO()
        Image.new("RGB", (8, 8), (200, 30, 30)).save(buf, format=fmt)
        return buf.getvalue()

    return _make


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


def _login(test_client: TestClient, username: str, password: str) -> TestClient:
    resp = test_client.post(
        "/api/auth?action=login", json={"username": username, "password": password}
    )
    assert resp.status_code == 200, resp.text
    return test_client


@pytest.fixture
def anon_api() -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_api(admin_user) -> TestClient:
    return _login(TestClient(app), admin_user.username, ADMIN_PASSWORD)


@pytest.fixture
def client_api(client_user) -> TestClient:
    return _login(TestClient(app), client_user.username, CLIENT_PASSWORD)

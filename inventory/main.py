# inventory/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from inventory.core.config import get_settings
from inventory.core.exceptions import register_exception_handlers
from inventory.core.storage_utils import PUBLIC_PREFIX, ensure_upload_dir
from inventory.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from inventory.models import user as _user_models  # noqa: F401
from inventory.models import category as _category_models  # noqa: F401
from inventory.models import equipment as _equipment_models  # noqa: F401
from inventory.models import cart as _cart_models  # noqa: F401

# Routers
from inventory.routers.auth import router as auth_router
from inventory.routers.categories import router as categories_router
from inventory.routers.equipment import router as equipment_router
from inventory.routers.images import router as images_router
from inventory.routers.cart import router as cart_router
from inventory.routers.users import router as users_router
from inventory.routers.profile import router as profile_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("inventory")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create tables if they do not exist.
      - Make sure the image upload directory exists.
    """
    logger.info("Startup: connecting to %s", settings.DATABASE_URL.split("://", 1)[0])
    try:
        create_db_and_tables()
        ensure_upload_dir()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error("Startup: DB connection FAILED: %s", e)
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)


# --- Middleware ---
# Signed cookie holding {user_id, username, role}
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=settings.SESSION_HTTPS_ONLY,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(categories_router, prefix=settings.API_PREFIX)
app.include_router(equipment_router, prefix=settings.API_PREFIX)
app.include_router(images_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(profile_router, prefix=settings.API_PREFIX)

# Uploaded images: /uploads/products/<file>. Served as static files only,
# nothing under this directory is ever executed.
app.mount(
    f"/{PUBLIC_PREFIX}",
    StaticFiles(directory=settings.UPLOAD_ROOT, check_dir=False),
    name="uploads",
)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "equipment-inventory"}

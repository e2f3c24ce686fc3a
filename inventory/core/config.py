# inventory/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a local-development default, so the app boots with
    a SQLite file and an ./uploads directory. Override in production:
      - DATABASE_URL (any SQLAlchemy URL)
      - SECRET_KEY (signs the session cookie)
      - SESSION_HTTPS_ONLY=true behind TLS
    """

    PROJECT_NAME: str = "Equipment Inventory API"
    API_PREFIX: str = "/api"

    # Persistent store
    DATABASE_URL: str = "sqlite:///./equipment.db"

    # Session cookie
    SECRET_KEY: str = "change-me-in-production"
    SESSION_COOKIE: str = "equipment_session"
    SESSION_MAX_AGE: int = 3600  # 1 hour
    SESSION_HTTPS_ONLY: bool = False

    # Uploaded product images live under <UPLOAD_ROOT>/products
    UPLOAD_ROOT: str = "uploads"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()

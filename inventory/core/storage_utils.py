# inventory/core/storage_utils.py
import logging
import os
import secrets
from datetime import datetime
from pathlib import Path

from inventory.core.config import get_settings

logger = logging.getLogger("inventory.storage")

settings = get_settings()

# Served by the static mount in main.py: /uploads/products/<file>
PUBLIC_PREFIX = "uploads"
PRODUCTS_DIR = "products"

# rw-r--r--: uploaded bytes are never executable
FILE_MODE = 0o644
DIR_MODE = 0o755


def upload_dir() -> Path:
    return Path(settings.UPLOAD_ROOT) / PRODUCTS_DIR


def ensure_upload_dir() -> Path:
    """
    Create the product image directory if it is missing.

    Safe to call before every upload batch.
    """
    path = upload_dir()
    if not path.is_dir():
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    return path


def generate_filename(ext: str) -> str:
    """
    Generate a collision-resistant filename.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "20240131_142500_9f86d081884c7d65.png"
    """
    return f"{datetime.now():%Y%m%d_%H%M%S}_{secrets.token_hex(8)}.{ext}"


def save_to_storage(filename: str, file_bytes: bytes) -> str:
    """
    Write bytes under the upload directory and return the public path.

    Opens with "xb" so an existing file is never overwritten.

    Returns:
        Public path such as "uploads/products/<filename>".

    Raises:
        OSError: if the file cannot be written.
    """
    target = upload_dir() / filename
    with open(target, "xb") as fh:
        fh.write(file_bytes)
    os.chmod(target, FILE_MODE)
    return f"{PUBLIC_PREFIX}/{PRODUCTS_DIR}/{filename}"


def delete_from_storage(image_path: str) -> None:
    """
    Delete a stored image by its public path.

    Only the basename is used, so a crafted path cannot escape the
    upload directory. A file that is already gone is not an error.
    """
    target = upload_dir() / Path(image_path).name
    try:
        target.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not delete image file %s: %s", target, exc)

# inventory/services/image_service.py
import logging
from io import BytesIO
from pathlib import PurePath
from typing import BinaryIO, Iterable

from PIL import Image, UnidentifiedImageError
from sqlmodel import Session

from inventory.core.config import get_settings
from inventory.core.exceptions import (
    BadRequestError,
    NotFoundError,
    StorageError,
    UploadError,
)
from inventory.core.storage_utils import (
    delete_from_storage,
    ensure_upload_dir,
    generate_filename,
    save_to_storage,
)
from inventory.models.equipment import ProductImage
from inventory.repositories.equipment_repo import EquipmentRepository
from inventory.repositories.image_repo import ProductImageRepository
from inventory.schemas.equipment import ProductImageRead, UploadResponse

logger = logging.getLogger("inventory.images")

settings = get_settings()

# --- Image config ---

# Sniffed MIME type -> stored extension
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

ALLOWED_EXTENSIONS: tuple[str, ...] = ("jpg", "jpeg", "png", "webp")


def sniff_image_type(file_bytes: bytes) -> str | None:
    """
    Identify the image format from its content, ignoring the filename.

    Returns:
        A MIME type such as "image/png", or None if Pillow cannot parse it.
    """
    try:
        with Image.open(BytesIO(file_bytes)) as img:
            img.verify()
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def read_upload(stream: BinaryIO) -> bytes:
    """
    Read an uploaded part, stopping one byte past MAX_IMAGE_BYTES so an
    oversized file is never buffered whole.
    """
    return stream.read(settings.MAX_IMAGE_BYTES + 1)


class ImageService:
    """
    Upload, list, delete and promote equipment images.

    Each file in an upload batch is checked independently:
      - size <= MAX_IMAGE_BYTES
      - content sniffed as JPEG/PNG/WebP
      - extension in the allow-list
    Rejected files become warnings; the batch only fails if nothing
    was stored.
    """

    def __init__(self, repo: ProductImageRepository, equipment_repo: EquipmentRepository):
        self.repo = repo
        self.equipment_repo = equipment_repo

    # ----- Helpers -----

    @staticmethod
    def _check_file(filename: str, file_bytes: bytes) -> str:
        """
        Validate one upload.

        Returns:
            The extension to store the file under.

        Raises:
            UploadError(400): describing the first failed check.
        """
        max_bytes = settings.MAX_IMAGE_BYTES
        if not file_bytes:
            raise UploadError(f"{filename}: file is empty.")
        if len(file_bytes) > max_bytes:
            raise UploadError(
                f"{filename}: file too large. Maximum size: {max_bytes // (1024 * 1024)}MB"
            )

        mime_type = sniff_image_type(file_bytes)
        if mime_type not in ALLOWED_IMAGE_TYPES:
            raise UploadError(f"{filename}: invalid file type. Allowed: JPG, PNG, WebP")

        extension = PurePath(filename).suffix.lstrip(".").lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise UploadError(
                f"{filename}: invalid file extension. Allowed: "
                + ", ".join(ALLOWED_EXTENSIONS)
            )

        return ALLOWED_IMAGE_TYPES[mime_type]

    def _store_one(
        self,
        session: Session,
        product_id: int,
        filename: str,
        file_bytes: bytes,
        is_primary: bool,
    ) -> ProductImage:
        ext = self._check_file(filename, file_bytes)

        try:
            image_path = save_to_storage(generate_filename(ext), file_bytes)
        except OSError as exc:
            logger.error("Could not write upload %s: %s", filename, exc)
            raise UploadError(f"{filename}: failed to save uploaded file.", 500) from exc

        try:
            return self.repo.create(session, product_id, image_path, is_primary)
        except StorageError:
            # Row was not recorded, so the file must not stay behind
            delete_from_storage(image_path)
            raise

    # ----- Operations -----

    def list_for_product(self, session: Session, product_id: int) -> list[ProductImage]:
        return self.repo.find_by_product_id(session, product_id)

    def upload(
        self,
        session: Session,
        product_id: int | None,
        files: Iterable[tuple[str, bytes]],
        is_primary: bool = False,
    ) -> UploadResponse:
        """
        Store a batch of images for a product.

        `is_primary` applies to the first file of the batch only.

        Raises:
            BadRequestError(400): bad product_id, no files, or every file rejected.
            NotFoundError(404): the product does not exist.
            UploadError(500): the upload directory cannot be created.
        """
        if product_id is None or product_id <= 0:
            raise BadRequestError("product_id is required and must be a positive integer.")

        if self.equipment_repo.find_by_id(session, product_id) is None:
            raise NotFoundError("Product not found.")

        files = list(files)
        if not files:
            raise BadRequestError("No images uploaded.")

        try:
            ensure_upload_dir()
        except OSError as exc:
            logger.error("Could not create upload directory: %s", exc)
            raise UploadError("Failed to create upload directory.", 500) from exc

        stored: list[ProductImage] = []
        errors: list[str] = []

        for index, (filename, file_bytes) in enumerate(files):
            try:
                image = self._store_one(
                    session,
                    product_id,
                    filename or "upload",
                    file_bytes,
                    is_primary and index == 0,
                )
            except (UploadError, StorageError) as exc:
                logger.warning("Rejected upload for product %s: %s", product_id, exc.message)
                errors.append(exc.message)
                continue
            stored.append(image)

        if not stored:
            raise BadRequestError("All uploads failed: " + "; ".join(errors))

        return UploadResponse(
            message=f"{len(stored)} image(s) uploaded successfully.",
            data=[ProductImageRead.model_validate(img) for img in stored],
            warnings=errors or None,
        )

    def delete_image(self, session: Session, image_id: int) -> None:
        image_path = self.repo.delete(session, image_id)
        if image_path is None:
            raise NotFoundError("Image not found.")
        delete_from_storage(image_path)

    def set_primary(self, session: Session, image_id: int) -> ProductImage:
        image = self.repo.set_primary(session, image_id)
        if image is None:
            raise NotFoundError("Image not found.")
        return image

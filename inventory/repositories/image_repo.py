# inventory/repositories/image_repo.py
from collections import defaultdict

from sqlalchemy import delete, update
from sqlmodel import Session, select

from inventory.database import commit
from inventory.models.equipment import ProductImage


class ProductImageRepository:
    """
    Data access layer for ProductImage.

    The single-primary rule is enforced here: clearing the old primary
    and setting the new one always happen in one commit.
    """

    # ----- Queries -----

    def find_by_product_id(self, session: Session, product_id: int) -> list[ProductImage]:
        """Images for a product, primary first, then oldest first."""
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(
                ProductImage.is_primary.desc(),
                ProductImage.created_at,
                ProductImage.id,
            )
        )
        return list(session.exec(stmt).all())

    def find_by_product_ids(
        self, session: Session, product_ids: list[int]
    ) -> dict[int, list[ProductImage]]:
        """Batch variant for listings: product_id -> images."""
        grouped: dict[int, list[ProductImage]] = defaultdict(list)
        if not product_ids:
            return grouped
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id.in_(product_ids))
            .order_by(
                ProductImage.is_primary.desc(),
                ProductImage.created_at,
                ProductImage.id,
            )
        )
        for image in session.exec(stmt).all():
            grouped[image.product_id].append(image)
        return grouped

    def find_by_id(self, session: Session, image_id: int) -> ProductImage | None:
        return session.get(ProductImage, image_id)

    # ----- Writes -----

    def _clear_primary(self, session: Session, product_id: int) -> None:
        session.exec(
            update(ProductImage)
            .where(ProductImage.product_id == product_id)
            .values(is_primary=False)
        )

    def create(
        self,
        session: Session,
        product_id: int,
        image_path: str,
        is_primary: bool = False,
    ) -> ProductImage:
        """
        Insert an image row. A new primary demotes the previous one
        in the same transaction.
        """
        if is_primary:
            self._clear_primary(session, product_id)
        image = ProductImage(
            product_id=product_id,
            image_path=image_path,
            is_primary=is_primary,
        )
        session.add(image)
        commit(session)
        session.refresh(image)
        return image

    def set_primary(self, session: Session, image_id: int) -> ProductImage | None:
        """
        Make `image_id` the only primary image of its product.

        Returns:
            The updated image, or None if it does not exist.
        """
        image = session.get(ProductImage, image_id)
        if image is None:
            return None
        self._clear_primary(session, image.product_id)
        session.exec(
            update(ProductImage)
            .where(ProductImage.id == image_id)
            .values(is_primary=True)
        )
        commit(session)
        session.refresh(image)
        return image

    def delete(self, session: Session, image_id: int) -> str | None:
        """
        Delete one image row.

        Returns:
            The deleted image's path (the caller removes the file), or None.
        """
        image = session.get(ProductImage, image_id)
        if image is None:
            return None
        path = image.image_path
        session.delete(image)
        commit(session)
        return path

    def delete_by_product_id(self, session: Session, product_id: int) -> list[str]:
        """
        Queue deletion of every image of a product. Does not commit.

        Returns:
            The image paths, for file cleanup after the commit.
        """
        paths = [img.image_path for img in self.find_by_product_id(session, product_id)]
        session.exec(delete(ProductImage).where(ProductImage.product_id == product_id))
        return paths

"""Store repositories: products, cart items and product reviews."""

import logging
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session, joinedload

from plumbprep import models
from plumbprep.utils import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


class ProductRepository:
    """Repository for Product database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def search(
        self,
        category: str | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[models.Product], int]:
        """Active products, featured first, then sort order, then newest."""
        conditions: list[Any] = [models.Product.is_active.is_(True)]
        if category and category != "all":
            conditions.append(models.Product.category == category)
        if search:
            pattern = contains_pattern(search)
            description = func.coalesce(models.Product.description, "")
            brand = func.coalesce(models.Product.brand, "")
            conditions.append(
                or_(
                    func.lower(models.Product.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(description).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(brand).like(pattern, escape=LIKE_ESCAPE),
                )
            )

        total = (
            self.db.execute(select(func.count(models.Product.id)).where(*conditions)).scalar() or 0
        )
        stmt = (
            select(models.Product)
            .where(*conditions)
            .order_by(
                models.Product.is_featured.desc(),
                models.Product.sort_order.asc(),
                models.Product.created_at.desc(),
                models.Product.id.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def get_featured(self, limit: int = 8) -> list[models.Product]:
        stmt = (
            select(models.Product)
            .where(models.Product.is_active.is_(True), models.Product.is_featured.is_(True))
            .order_by(models.Product.sort_order.asc(), models.Product.created_at.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, product_id: int, include_inactive: bool = False) -> models.Product | None:
        stmt = select(models.Product).where(models.Product.id == product_id)
        if not include_inactive:
            stmt = stmt.where(models.Product.is_active.is_(True))
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, **fields: Any) -> models.Product:  # noqa: ANN401
        product = models.Product(**fields)
        self.db.add(product)
        self.db.flush()
        self.db.refresh(product)
        logger.info(f"Created product: {product.name} (id={product.id})")
        return product

    def update(self, product: models.Product, **fields: Any) -> models.Product:  # noqa: ANN401
        for key, value in fields.items():
            setattr(product, key, value)
        self.db.flush()
        self.db.refresh(product)
        return product


class CartRepository:
    """Repository for CartItem database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_items(self, user_id: int) -> list[models.CartItem]:
        stmt = (
            select(models.CartItem)
            .options(joinedload(models.CartItem.product))
            .where(models.CartItem.user_id == user_id)
            .order_by(models.CartItem.added_at.asc(), models.CartItem.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_item(self, user_id: int, product_id: int) -> models.CartItem | None:
        stmt = select(models.CartItem).where(
            models.CartItem.user_id == user_id,
            models.CartItem.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add(self, user_id: int, product_id: int, quantity: int) -> models.CartItem:
        """Add a product, merging with the existing line for that product."""
        item = self.get_item(user_id, product_id)
        if item is not None:
            item.quantity += quantity
        else:
            item = models.CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            self.db.add(item)
        self.db.flush()
        self.db.refresh(item)
        return item

    def set_quantity(self, item: models.CartItem, quantity: int) -> models.CartItem:
        item.quantity = quantity
        self.db.flush()
        self.db.refresh(item)
        return item

    def remove(self, item: models.CartItem) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(delete(models.CartItem).where(models.CartItem.user_id == user_id))
        self.db.flush()
        return result.rowcount or 0


class ProductReviewRepository:
    """Repository for ProductReview database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_approved(self, product_id: int) -> list[models.ProductReview]:
        stmt = (
            select(models.ProductReview)
            .where(
                models.ProductReview.product_id == product_id,
                models.ProductReview.is_approved.is_(True),
            )
            .order_by(models.ProductReview.created_at.desc(), models.ProductReview.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, review_id: int) -> models.ProductReview | None:
        stmt = select(models.ProductReview).where(models.ProductReview.id == review_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, product_id: int, user_id: int) -> models.ProductReview | None:
        stmt = select(models.ProductReview).where(
            models.ProductReview.product_id == product_id,
            models.ProductReview.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, **fields: Any) -> models.ProductReview:  # noqa: ANN401
        review = models.ProductReview(**fields)
        self.db.add(review)
        self.db.flush()
        self.db.refresh(review)
        logger.info(f"Created review for product {review.product_id} (id={review.id})")
        return review

    def approve(self, review: models.ProductReview) -> models.ProductReview:
        review.is_approved = True
        self.db.flush()
        self.db.refresh(review)
        return review

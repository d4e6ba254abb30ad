"""Service layer for the store: products, cart and reviews."""

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import ConflictError, NotFoundError
from plumbprep.services.affiliate_service import generate_affiliate_link

logger = structlog.get_logger(__name__)


class ProductNotFoundError(NotFoundError):
    """Product not found error."""

    def __init__(self, product_id: int) -> None:
        """Initialize with product ID."""
        self.product_id = product_id
        super().__init__(f"Product with id {product_id} not found")


class CartItemNotFoundError(NotFoundError):
    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not in your cart")


class ReviewNotFoundError(NotFoundError):
    def __init__(self, review_id: int) -> None:
        self.review_id = review_id
        super().__init__(f"Review with id {review_id} not found")


def product_to_schema(product: models.Product) -> schemas.Product:
    result = schemas.Product.model_validate(product)
    if product.amazon_asin or product.amazon_url:
        result.affiliate_url = generate_affiliate_link(product.amazon_url, product.amazon_asin)
    return result


class StoreService:
    """Product catalog, shopping cart and product reviews."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.product_repo = repositories.ProductRepository(db)
        self.cart_repo = repositories.CartRepository(db)
        self.review_repo = repositories.ProductReviewRepository(db)

    def _get_active_product(self, product_id: int) -> models.Product:
        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    # Catalog

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> schemas.ProductListResponse:
        products, total = self.product_repo.search(category, search, (page - 1) * limit, limit)
        return schemas.ProductListResponse(
            products=[product_to_schema(p) for p in products],
            total=total,
            page=page,
            limit=limit,
        )

    def get_featured(self, limit: int = 8) -> list[schemas.Product]:
        return [product_to_schema(p) for p in self.product_repo.get_featured(limit)]

    def get_product(self, product_id: int) -> schemas.Product:
        return product_to_schema(self._get_active_product(product_id))

    def create_product(self, data: schemas.ProductCreate) -> schemas.Product:
        product = self.product_repo.create(**data.model_dump())
        self.db.commit()
        logger.info("product_created", product_id=product.id, category=product.category)
        return product_to_schema(product)

    def update_product(self, product_id: int, data: schemas.ProductUpdate) -> schemas.Product:
        product = self.product_repo.get_by_id(product_id, include_inactive=True)
        if product is None:
            raise ProductNotFoundError(product_id)
        product = self.product_repo.update(product, **data.model_dump(exclude_unset=True))
        self.db.commit()
        return product_to_schema(product)

    def deactivate_product(self, product_id: int) -> None:
        """Soft delete: the product disappears from the store but stays in carts' history."""
        product = self.product_repo.get_by_id(product_id, include_inactive=True)
        if product is None:
            raise ProductNotFoundError(product_id)
        self.product_repo.update(product, is_active=False)
        self.db.commit()
        logger.info("product_deactivated", product_id=product_id)

    # Cart

    def get_cart(self, user_id: int) -> schemas.CartResponse:
        items = [
            item for item in self.cart_repo.get_items(user_id) if item.product.is_active
        ]
        cart_items = [
            schemas.CartItem(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                product=product_to_schema(item.product),
                line_total=round(item.product.price * item.quantity, 2),
            )
            for item in items
        ]
        return schemas.CartResponse(
            items=cart_items,
            item_count=sum(item.quantity for item in cart_items),
            subtotal=round(sum(item.line_total for item in cart_items), 2),
        )

    def add_to_cart(self, user_id: int, data: schemas.CartItemAdd) -> schemas.CartResponse:
        product = self._get_active_product(data.product_id)
        self.cart_repo.add(user_id, product.id, data.quantity)
        self.db.commit()
        logger.info("cart_item_added", user_id=user_id, product_id=product.id, quantity=data.quantity)
        return self.get_cart(user_id)

    def update_cart_item(
        self, user_id: int, product_id: int, data: schemas.CartItemUpdate
    ) -> schemas.CartResponse:
        item = self.cart_repo.get_item(user_id, product_id)
        if item is None:
            raise CartItemNotFoundError(product_id)
        self.cart_repo.set_quantity(item, data.quantity)
        self.db.commit()
        return self.get_cart(user_id)

    def remove_from_cart(self, user_id: int, product_id: int) -> schemas.CartResponse:
        item = self.cart_repo.get_item(user_id, product_id)
        if item is None:
            raise CartItemNotFoundError(product_id)
        self.cart_repo.remove(item)
        self.db.commit()
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> schemas.CartResponse:
        removed = self.cart_repo.clear(user_id)
        self.db.commit()
        logger.info("cart_cleared", user_id=user_id, removed=removed)
        return self.get_cart(user_id)

    # Reviews

    def get_reviews(self, product_id: int) -> list[schemas.Review]:
        product = self._get_active_product(product_id)
        return [schemas.Review.model_validate(r) for r in self.review_repo.get_approved(product.id)]

    def create_review(
        self, product_id: int, user_id: int, data: schemas.ReviewCreate
    ) -> schemas.Review:
        """
        Submit a review. Reviews are hidden until an admin approves them.

        Raises:
            ConflictError: If the user already reviewed the product
        """
        product = self._get_active_product(product_id)
        if self.review_repo.get_by_user(product.id, user_id) is not None:
            raise ConflictError("You have already reviewed this product")
        review = self.review_repo.create(
            product_id=product.id, user_id=user_id, is_approved=False, **data.model_dump()
        )
        self.db.commit()
        return schemas.Review.model_validate(review)

    def approve_review(self, review_id: int) -> schemas.Review:
        review = self.review_repo.get_by_id(review_id)
        if review is None:
            raise ReviewNotFoundError(review_id)
        review = self.review_repo.approve(review)
        self.db.commit()
        logger.info("review_approved", review_id=review_id)
        return schemas.Review.model_validate(review)

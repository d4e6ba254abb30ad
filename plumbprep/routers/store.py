"""API routes for the store: products, cart and reviews."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import StoreService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["store"])


@router.get("/products", response_model=schemas.ProductListResponse)
def list_products(
    db: DatabaseSession,
    category: str | None = Query(None, description="Category, or 'all' for every category"),
    search: str | None = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> schemas.ProductListResponse:
    """Active products, featured first. Public."""
    return StoreService(db).list_products(category, search, page, limit)


@router.get("/products/featured", response_model=list[schemas.Product])
def get_featured_products(
    db: DatabaseSession, limit: int = Query(8, ge=1, le=50)
) -> list[schemas.Product]:
    return StoreService(db).get_featured(limit)


@router.get("/products/{product_id}", response_model=schemas.Product)
def get_product(product_id: int, db: DatabaseSession) -> schemas.Product:
    return StoreService(db).get_product(product_id)


@router.get("/products/{product_id}/reviews", response_model=list[schemas.Review])
def get_product_reviews(product_id: int, db: DatabaseSession) -> list[schemas.Review]:
    """Approved reviews only."""
    return StoreService(db).get_reviews(product_id)


@router.post(
    "/products/{product_id}/reviews",
    response_model=schemas.Review,
    status_code=status.HTTP_201_CREATED,
)
def create_product_review(
    product_id: int, review: schemas.ReviewCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.Review:
    """
    Review a product. Reviews are published once an admin approves them.

    Raises:
        HTTPException: 409 if the user already reviewed the product
    """
    try:
        return StoreService(db).create_review(product_id, current_user.id, review)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to create review for product {product_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/cart", response_model=schemas.CartResponse)
def get_cart(db: DatabaseSession, current_user: CurrentUser) -> schemas.CartResponse:
    return StoreService(db).get_cart(current_user.id)


@router.post("/cart", response_model=schemas.CartResponse)
def add_to_cart(
    item: schemas.CartItemAdd, db: DatabaseSession, current_user: CurrentUser
) -> schemas.CartResponse:
    """Add a product to the cart. Adding a product already in the cart increases its quantity."""
    try:
        return StoreService(db).add_to_cart(current_user.id, item)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to add product {item.product_id} to cart: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.put("/cart/{product_id}", response_model=schemas.CartResponse)
def update_cart_item(
    product_id: int, update: schemas.CartItemUpdate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.CartResponse:
    return StoreService(db).update_cart_item(current_user.id, product_id, update)


@router.delete("/cart/{product_id}", response_model=schemas.CartResponse)
def remove_from_cart(
    product_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.CartResponse:
    return StoreService(db).remove_from_cart(current_user.id, product_id)


@router.delete("/cart", response_model=schemas.CartResponse)
def clear_cart(db: DatabaseSession, current_user: CurrentUser) -> schemas.CartResponse:
    return StoreService(db).clear_cart(current_user.id)

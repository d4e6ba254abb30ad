"""Pydantic schemas for the store: products, cart and reviews."""

from datetime import datetime as dt

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(..., min_length=1, max_length=100)
    brand: str | None = Field(None, max_length=100)
    price: float = Field(..., ge=0)
    original_price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    amazon_url: str | None = Field(None, max_length=500)
    amazon_asin: str | None = Field(None, max_length=20)
    stock_quantity: int = Field(0, ge=0)
    is_featured: bool = False
    sort_order: int = 0


class ProductCreate(ProductBase):
    """Schema for creating a product."""


class ProductUpdate(BaseModel):
    """Schema for updating a product. Only provided fields change."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    brand: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    original_price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    amazon_url: str | None = Field(None, max_length=500)
    amazon_asin: str | None = Field(None, max_length=20)
    stock_quantity: int | None = Field(None, ge=0)
    is_featured: bool | None = None
    sort_order: int | None = None


class Product(ProductBase):
    """Schema for Product response."""

    id: int
    is_active: bool
    affiliate_url: str | None = Field(None, description="Amazon link carrying the associate tag")
    created_at: dt

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    products: list[Product]
    total: int
    page: int
    limit: int


class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, le=99)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=99)


class CartItem(BaseModel):
    id: int
    product_id: int
    quantity: int
    product: Product
    line_total: float


class CartResponse(BaseModel):
    items: list[CartItem]
    item_count: int = Field(..., description="Sum of quantities")
    subtotal: float


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    title: str | None = Field(None, max_length=255)
    comment: str | None = Field(None, max_length=5000)


class Review(BaseModel):
    id: int
    product_id: int
    user_id: int
    rating: int
    title: str | None
    comment: str | None
    is_approved: bool
    created_at: dt

    model_config = {"from_attributes": True}


class AffiliateLinkRequest(BaseModel):
    url: str | None = Field(None, max_length=2000, description="Amazon product URL")
    asin: str | None = Field(None, min_length=10, max_length=10, description="Amazon ASIN")


class AffiliateLinkResponse(BaseModel):
    affiliate_url: str
    asin: str | None

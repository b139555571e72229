"""API schemas for the storefront catalog.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.domain.value_objects import Category

# Largest price the products table can store
MAX_PRICE = Decimal("99999999.99")


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Outcome of the operation")


# ============================================================================
# Product Schemas
# ============================================================================


class ReviewSchema(BaseModel):
    """A review as shown on the product page."""

    user_id: str = Field(..., description="Author identifier")
    name: str = Field(..., description="Author display name at submission time")
    rating: int = Field(..., ge=1, le=5, description="Stars, 1 to 5")
    comment: str = Field(..., description="Review text")
    created_at: datetime = Field(..., description="When the review was submitted")


class ProductResponse(BaseModel):
    """Full product representation."""

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    description: str = Field(..., description="Product description")
    price: float = Field(..., ge=0, description="Unit price")
    image: str = Field(..., description="Primary image reference")
    images: list[str] = Field(default_factory=list, description="Additional images")
    category: Category = Field(..., description="Catalog category")
    brand: str | None = Field(default=None, description="Brand name")
    count_in_stock: int = Field(..., ge=0, description="Units available")
    rating: float = Field(..., ge=0, le=5, description="Mean review rating")
    num_reviews: int = Field(..., ge=0, description="Number of reviews")
    reviews: list[ReviewSchema] = Field(default_factory=list, description="Reviews")
    featured: bool = Field(default=False, description="Highlighted on the storefront")
    created_at: datetime = Field(..., description="When the product was created")
    updated_at: datetime = Field(..., description="When the product was last updated")


class ProductPageResponse(BaseModel):
    """One page of a product listing."""

    items: list[ProductResponse] = Field(..., description="Products on this page")
    page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Number of pages for all matches")
    total_matches: int = Field(..., ge=0, description="Products matching the filter")


class CategoryCountSchema(BaseModel):
    """Category with its product count."""

    category: Category = Field(..., description="Catalog category")
    product_count: int = Field(..., ge=0, description="Products in the category")


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str = Field(..., min_length=1, description="Product description")
    price: Decimal = Field(
        default=Decimal("0"), ge=0, le=MAX_PRICE, description="Unit price"
    )
    image: str = Field(..., min_length=1, max_length=1000, description="Primary image")
    images: list[str] = Field(default_factory=list, description="Additional images")
    category: Category = Field(..., description="Catalog category")
    brand: str | None = Field(default=None, max_length=100, description="Brand name")
    count_in_stock: int = Field(default=0, ge=0, description="Units available")
    featured: bool = Field(default=False, description="Highlight on the storefront")


class ProductUpdateRequest(BaseModel):
    """Partial product edit; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, ge=0, le=MAX_PRICE)
    image: str | None = Field(default=None, min_length=1, max_length=1000)
    images: list[str] | None = Field(default=None)
    category: Category | None = Field(default=None)
    brand: str | None = Field(default=None, max_length=100)
    count_in_stock: int | None = Field(default=None, ge=0)
    featured: bool | None = Field(default=None)


class ReviewCreateRequest(BaseModel):
    """Request to review a product."""

    rating: int = Field(..., ge=1, le=5, description="Stars, 1 to 5")
    comment: str = Field(..., min_length=1, max_length=2000, description="Review text")

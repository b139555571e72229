"""Product API endpoints.

Provides endpoints for browsing the catalog, the top-rated shelf,
catalog-owner product edits and shopper reviews.
"""

from collections.abc import AsyncGenerator
from typing import Annotated
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Header, Query, Request, status

from storefront.api.schemas import (
    CategoryCountSchema,
    ErrorResponse,
    MessageResponse,
    ProductCreateRequest,
    ProductPageResponse,
    ProductResponse,
    ProductUpdateRequest,
    ReviewCreateRequest,
    ReviewSchema,
)
from storefront.catalog.filters import FilterCriteria
from storefront.catalog.pagination import Page, parse_page_number
from storefront.catalog.repository import SqlProductRepository
from storefront.catalog.service import CatalogService, get_catalog_service
from storefront.domain.entities import Product
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_session_factory

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


async def get_service(request: Request) -> AsyncGenerator[CatalogService, None]:
    """Get catalog service bound to the configured backend.

    With the database backend, one session spans the request: it is
    committed when the handler succeeds and rolled back otherwise.
    """
    request_id = getattr(request.state, "request_id", None)

    if settings.catalog_backend != "database":
        yield get_catalog_service(request_id=request_id)
        return

    async with get_session_factory()() as session:
        try:
            yield get_catalog_service(SqlProductRepository(session), request_id=request_id)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


ServiceDep = Annotated[CatalogService, Depends(get_service)]


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product entity to response schema."""
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=float(product.price),
        image=product.image,
        images=list(product.images),
        category=product.category,
        brand=product.brand,
        count_in_stock=product.count_in_stock,
        rating=float(product.rating),
        num_reviews=product.num_reviews,
        reviews=[
            ReviewSchema(
                user_id=str(review.user_id),
                name=review.name,
                rating=review.rating,
                comment=review.comment,
                created_at=review.created_at,
            )
            for review in product.reviews
        ],
        featured=product.featured,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def page_to_response(page: Page[Product]) -> ProductPageResponse:
    """Convert a product page to the listing envelope."""
    return ProductPageResponse(
        items=[product_to_response(p) for p in page.items],
        page=page.page,
        total_pages=page.total_pages,
        total_matches=page.total_matches,
    )


# ============================================================================
# Read Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductPageResponse,
    summary="List products",
    description=(
        "Search the catalog by keyword, category, price range and minimum "
        "rating. Results are newest first, twelve per page."
    ),
)
async def list_products(
    service: ServiceDep,
    keyword: Annotated[str | None, Query(description="Substring of the product name")] = None,
    category: Annotated[str | None, Query(description="Category to match exactly")] = None,
    min_price_alias: Annotated[str | None, Query(alias="minPrice")] = None,
    max_price_alias: Annotated[str | None, Query(alias="maxPrice")] = None,
    min_price: Annotated[str | None, Query()] = None,
    max_price: Annotated[str | None, Query()] = None,
    rating: Annotated[str | None, Query(description="Minimum rating")] = None,
    page_number: Annotated[str | None, Query(alias="pageNumber")] = None,
    page: Annotated[str | None, Query()] = None,
) -> ProductPageResponse:
    """List products matching the given filters.

    Query values are parsed leniently: blank or non-numeric bounds are
    ignored and an invalid page number means page 1.

    Args:
        service: Catalog service.
        keyword: Case-insensitive name substring.
        category: Category value.
        min_price_alias: Lower price bound (``minPrice``).
        max_price_alias: Upper price bound (``maxPrice``).
        min_price: Lower price bound.
        max_price: Upper price bound.
        rating: Minimum rating.
        page_number: Page number (``pageNumber``).
        page: Page number.

    Returns:
        Page envelope.
    """
    criteria = FilterCriteria.from_query(
        keyword=keyword,
        category=category,
        min_price=min_price_alias if min_price_alias is not None else min_price,
        max_price=max_price_alias if max_price_alias is not None else max_price,
        rating=rating,
    )
    result = await service.list_products(
        criteria,
        page=parse_page_number(page_number if page_number is not None else page),
    )
    return page_to_response(result)


@router.get(
    "/top",
    response_model=list[ProductResponse],
    summary="Top-rated products",
    description="Get the five highest-rated products.",
)
async def get_top_products(service: ServiceDep) -> list[ProductResponse]:
    """Get the top-rated shelf.

    Returns:
        Products by rating descending, ties broken by ID.
    """
    products = await service.get_top_rated()
    return [product_to_response(p) for p in products]


@router.get(
    "/categories",
    response_model=list[CategoryCountSchema],
    summary="List categories",
    description="Get every catalog category with its product count.",
)
async def list_categories(service: ServiceDep) -> list[CategoryCountSchema]:
    """List categories with product counts."""
    summaries = await service.get_categories()
    return [
        CategoryCountSchema(category=s.category, product_count=s.product_count)
        for s in summaries
    ]


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product details",
)
async def get_product(product_id: str, service: ServiceDep) -> ProductResponse:
    """Get a product by ID.

    Args:
        product_id: Product identifier.
        service: Catalog service.

    Returns:
        Product details including its reviews.
    """
    product = await service.get_product(product_id)
    return product_to_response(product)


# ============================================================================
# Catalog Owner Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    body: ProductCreateRequest,
    service: ServiceDep,
    user_id: Annotated[str | None, Header(alias="X-User-ID", max_length=100)] = None,
) -> ProductResponse:
    """Create a product.

    Args:
        body: Product attributes.
        service: Catalog service.
        user_id: Catalog owner creating the product.

    Returns:
        Created product.
    """
    product = await service.create_product(
        name=body.name,
        description=body.description,
        image=body.image,
        category=body.category,
        price=body.price,
        images=body.images,
        brand=body.brand,
        count_in_stock=body.count_in_stock,
        featured=body.featured,
        created_by=user_id,
    )
    return product_to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update product",
    description="Partially update a product. Omitted fields keep their value.",
)
async def update_product(
    product_id: str,
    body: ProductUpdateRequest,
    service: ServiceDep,
) -> ProductResponse:
    """Update a product.

    Args:
        product_id: Product identifier.
        body: Fields to change.
        service: Catalog service.

    Returns:
        Updated product.
    """
    product = await service.update_product(product_id, body.model_dump(exclude_unset=True))
    return product_to_response(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete product",
)
async def delete_product(product_id: str, service: ServiceDep) -> MessageResponse:
    """Delete a product together with its reviews."""
    await service.delete_product(product_id)
    return MessageResponse(message="Product removed")


# ============================================================================
# Review Endpoints
# ============================================================================


@router.post(
    "/{product_id}/reviews",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Review product",
    description="Add the caller's review. Each shopper may review a product once.",
)
async def create_review(
    product_id: str,
    body: ReviewCreateRequest,
    service: ServiceDep,
    user_id: Annotated[str, Header(alias="X-User-ID", max_length=100)],
    user_name: Annotated[str, Header(alias="X-User-Name", max_length=200)],
) -> MessageResponse:
    """Submit a review.

    Args:
        product_id: Product identifier.
        body: Rating and comment.
        service: Catalog service.
        user_id: Authenticated shopper ID.
        user_name: Authenticated shopper display name as percent-encoded
            UTF-8.

    Returns:
        Confirmation message; the product itself is not returned.
    """
    await service.submit_review(
        product_id,
        user_id=user_id,
        user_name=unquote(user_name),
        rating=body.rating,
        comment=body.comment,
    )
    return MessageResponse(message="Review added")

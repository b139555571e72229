"""Catalog service for product operations.

High-level service that combines the filter builder, the pager and a
product repository with the catalog's business rules: listing, admin
edits, review submission and the top-rated shelf.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import structlog

from storefront.catalog.filters import FilterCriteria, build_predicate
from storefront.catalog.pagination import Page, PageRequest
from storefront.catalog.repository import ProductRepository, get_product_repository
from storefront.domain.entities import Product
from storefront.domain.exceptions import InvalidReviewError, ProductNotFoundError
from storefront.domain.value_objects import Category, ProductId, Review, UserId
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class CategorySummary:
    """Category with the number of products filed under it."""

    category: Category
    product_count: int


class CatalogService:
    """Service for catalog operations.

    Every mutating operation loads a private copy of the product,
    mutates it and saves it in one call. If any step raises, nothing
    reaches the store.

    Example usage:
        service = CatalogService(get_product_repository())

        page = await service.list_products(
            FilterCriteria.from_query(keyword="phone", max_price="500"),
            page=1,
        )
        await service.submit_review(product_id, "user-1", "Ada", 5, "Great")
    """

    def __init__(
        self,
        repository: ProductRepository,
        page_size: int | None = None,
        top_rated_limit: int | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Catalog store.
            page_size: Listing page size (defaults to settings).
            top_rated_limit: Size of the top-rated shelf (defaults to settings).
            request_id: Request ID for correlation.
        """
        self.repository = repository
        self.page_size = page_size or settings.page_size
        self.top_rated_limit = top_rated_limit or settings.top_rated_limit
        self.request_id = request_id

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_products(
        self,
        criteria: FilterCriteria,
        page: int | PageRequest = 1,
    ) -> Page[Product]:
        """Search products with filters and pagination.

        Args:
            criteria: Filter criteria (absent fields impose no constraint).
            page: Page number or page request; numbers below 1 mean page 1.

        Returns:
            Page envelope with the newest-first slice and totals.
        """
        request = (
            page
            if isinstance(page, PageRequest)
            else PageRequest(page=page, page_size=self.page_size)
        )
        predicate = build_predicate(criteria)

        total = await self.repository.count(predicate)
        items: list[Product] = []
        # Pages past the end are empty without querying for them
        if request.offset < total:
            items = await self.repository.find_matching(
                predicate,
                offset=request.offset,
                limit=request.limit,
            )

        logger.debug(
            "Products listed",
            criteria_count=len(predicate.criteria),
            page=request.page,
            total_matches=total,
            request_id=self.request_id,
        )

        return Page(
            items=items,
            page=request.page,
            page_size=request.page_size,
            total_matches=total,
        )

    async def get_product(self, product_id: str) -> Product:
        """Get product by ID.

        Args:
            product_id: Product ID string.

        Returns:
            The product.

        Raises:
            ProductNotFoundError: If no product has that ID.
        """
        product = await self.repository.get_by_id(self._parse_id(product_id))
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def get_top_rated(self) -> list[Product]:
        """Get the highest-rated products.

        Returns:
            Up to ``top_rated_limit`` products, rating descending, ties by ID.
        """
        return await self.repository.find_top_rated(self.top_rated_limit)

    async def get_categories(self) -> list[CategorySummary]:
        """Get every category with its product count.

        Returns:
            One summary per category, in category declaration order.
        """
        counts = await self.repository.count_by_category()
        return [
            CategorySummary(category=category, product_count=counts.get(category.value, 0))
            for category in Category
        ]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def create_product(
        self,
        *,
        name: str,
        description: str,
        image: str,
        category: Category | str,
        price: Decimal | int | str = Decimal("0.00"),
        images: list[str] | None = None,
        brand: str | None = None,
        count_in_stock: int = 0,
        featured: bool = False,
        created_by: str | None = None,
    ) -> Product:
        """Create a product.

        Returns:
            The persisted product.

        Raises:
            InvalidProductError: If any attribute violates catalog rules.
        """
        product = Product.create(
            name=name,
            description=description,
            image=image,
            category=category,
            price=price,
            images=images,
            brand=brand,
            count_in_stock=count_in_stock,
            featured=featured,
            created_by=UserId(created_by) if created_by else None,
        )
        await self.repository.save(product)
        self._publish(product)

        logger.info(
            "Product created",
            product_id=str(product.id),
            category=product.category.value,
            request_id=self.request_id,
        )
        return product

    async def update_product(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        """Apply a partial edit to a product.

        Args:
            product_id: Product ID string.
            changes: Attributes to change; omitted attributes keep their value.

        Returns:
            The persisted product.

        Raises:
            ProductNotFoundError: If no product has that ID.
            InvalidProductError: On an unknown attribute or an invalid value.
            ConcurrentModificationError: If the product changed meanwhile.
        """
        product = await self.get_product(product_id)
        changed = product.update(changes)

        if changed:
            await self.repository.save(product)
            self._publish(product)

        logger.info(
            "Product updated",
            product_id=product_id,
            changed_fields=changed,
            request_id=self.request_id,
        )
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product and its reviews.

        Raises:
            ProductNotFoundError: If no product has that ID.
        """
        product = await self.get_product(product_id)
        product.mark_deleted()

        if not await self.repository.delete(product.id):
            raise ProductNotFoundError(product_id)
        self._publish(product)

        logger.info("Product deleted", product_id=product_id, request_id=self.request_id)

    async def submit_review(
        self,
        product_id: str,
        user_id: str,
        user_name: str,
        rating: int,
        comment: str,
    ) -> None:
        """Attach a shopper's review to a product.

        The rating summary is recomputed before the product is saved, so
        no reader sees a review list that disagrees with it.

        Args:
            product_id: Product being reviewed.
            user_id: Author identifier.
            user_name: Author display name at submission time.
            rating: Whole stars, 1 to 5.
            comment: Review text.

        Raises:
            ProductNotFoundError: If no product has that ID.
            AlreadyReviewedError: If the author already reviewed the product.
            InvalidReviewError: If the rating or text is invalid.
            ConcurrentModificationError: If the product changed meanwhile.
        """
        product = await self.get_product(product_id)

        try:
            author = UserId(user_id)
        except ValueError:
            raise InvalidReviewError("user_id", "Reviewer ID is required") from None

        summary = product.add_review(
            Review(user_id=author, name=user_name, rating=rating, comment=comment)
        )
        await self.repository.save(product)
        self._publish(product)

        logger.info(
            "Review added",
            product_id=product_id,
            user_id=user_id,
            rating=str(summary.rating),
            num_reviews=summary.num_reviews,
            request_id=self.request_id,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _parse_id(self, product_id: str) -> ProductId:
        try:
            return ProductId.from_string(product_id)
        except ValueError:
            raise ProductNotFoundError(product_id) from None

    def _publish(self, product: Product) -> None:
        for event in product.collect_events():
            logger.info(
                "Domain event",
                event_type=event.event_type,
                aggregate_id=event.aggregate_id,
                payload=event.to_dict()["payload"],
                request_id=self.request_id,
            )


# ============================================================================
# Service Factory
# ============================================================================


def get_catalog_service(
    repository: ProductRepository | None = None,
    request_id: str | None = None,
) -> CatalogService:
    """Get catalog service instance.

    Args:
        repository: Store to use; the in-memory singleton when omitted.
        request_id: Request ID for correlation.

    Returns:
        CatalogService instance.
    """
    return CatalogService(repository or get_product_repository(), request_id=request_id)

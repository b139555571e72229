"""Product repositories.

The catalog store boundary and its two backends: an in-memory store for
development and tests, and a SQLAlchemy store for PostgreSQL.

Both backends order listings newest first (ID breaks ties), order the
top-rated shelf by rating (ID breaks ties), and accept a save only if
the stored version is still the one the caller loaded.
"""

from abc import ABC, abstractmethod
from collections import Counter

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from storefront.catalog.filters import MATCH_ALL, ProductPredicate
from storefront.catalog.pagination import highest_rated_first, newest_first
from storefront.domain.entities import Product
from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.value_objects import ProductId
from storefront.infrastructure.models import ProductRow

logger = structlog.get_logger()


class ProductRepository(ABC):
    """Catalog store boundary.

    Products handed out by a repository are private copies: mutating
    one has no effect on the store until it is passed to ``save``.
    """

    @abstractmethod
    async def get_by_id(self, product_id: ProductId) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """

    @abstractmethod
    async def find_matching(
        self,
        predicate: ProductPredicate = MATCH_ALL,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Product]:
        """Find products matching a predicate, newest first.

        Args:
            predicate: Filter to apply.
            offset: Number of matches to skip.
            limit: Maximum number of products, None for all.

        Returns:
            Matching products in listing order.
        """

    @abstractmethod
    async def count(self, predicate: ProductPredicate = MATCH_ALL) -> int:
        """Count products matching a predicate."""

    @abstractmethod
    async def find_top_rated(self, limit: int) -> list[Product]:
        """Get the highest-rated products, ties broken by ID."""

    @abstractmethod
    async def count_by_category(self) -> dict[str, int]:
        """Get product counts keyed by category value.

        Categories with no products may be absent from the result.
        """

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """Insert or update a product.

        Args:
            product: Product to save.

        Returns:
            The saved product, marked as persisted.

        Raises:
            ConcurrentModificationError: If the stored version differs from
                the one the product was loaded at.
        """

    @abstractmethod
    async def delete(self, product_id: ProductId) -> bool:
        """Delete a product and its reviews.

        Returns:
            True if a product was deleted.
        """


# ============================================================================
# In-Memory Repository
# ============================================================================


class InMemoryProductRepository(ProductRepository):
    """In-memory repository for products.

    Stores private copies so that a caller's unsaved mutations are never
    visible to other readers.
    """

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}

    async def get_by_id(self, product_id: ProductId) -> Product | None:
        product = self._products.get(str(product_id))
        return product.clone() if product else None

    async def find_matching(
        self,
        predicate: ProductPredicate = MATCH_ALL,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Product]:
        matches = newest_first(p for p in self._products.values() if predicate.matches(p))
        end = None if limit is None else offset + limit
        return [p.clone() for p in matches[offset:end]]

    async def count(self, predicate: ProductPredicate = MATCH_ALL) -> int:
        return sum(1 for p in self._products.values() if predicate.matches(p))

    async def find_top_rated(self, limit: int) -> list[Product]:
        ranked = highest_rated_first(self._products.values())
        return [p.clone() for p in ranked[:limit]]

    async def count_by_category(self) -> dict[str, int]:
        return dict(Counter(p.category.value for p in self._products.values()))

    async def save(self, product: Product) -> Product:
        key = str(product.id)
        stored = self._products.get(key)
        stored_version = stored.version if stored else None

        if stored_version != product.persisted_version:
            raise ConcurrentModificationError(
                key, product.persisted_version, stored_version
            )

        product.mark_persisted()
        self._products[key] = product.clone()
        return product

    async def delete(self, product_id: ProductId) -> bool:
        return self._products.pop(str(product_id), None) is not None

    def clear(self) -> None:
        """Remove every product."""
        self._products.clear()


# Global repository instance
_product_repo: InMemoryProductRepository | None = None


def get_product_repository() -> InMemoryProductRepository:
    """Get in-memory product repository singleton."""
    global _product_repo
    if _product_repo is None:
        _product_repo = InMemoryProductRepository()
    return _product_repo


# ============================================================================
# SQL Repository
# ============================================================================


def matching_statement(
    predicate: ProductPredicate,
    offset: int = 0,
    limit: int | None = None,
) -> Select[tuple[ProductRow]]:
    """Build the listing query for a predicate."""
    query = (
        select(ProductRow)
        .where(predicate.to_clause())
        .order_by(ProductRow.created_at.desc(), ProductRow.id.asc())
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    return query


def count_statement(predicate: ProductPredicate) -> Select[tuple[int]]:
    """Build the count query for a predicate."""
    return select(func.count(ProductRow.id)).where(predicate.to_clause())


def top_rated_statement(limit: int) -> Select[tuple[ProductRow]]:
    """Build the top-rated query."""
    return (
        select(ProductRow)
        .order_by(ProductRow.rating.desc(), ProductRow.id.asc())
        .limit(limit)
    )


def category_counts_statement() -> Select[tuple[str, int]]:
    """Build the per-category count query."""
    return (
        select(ProductRow.category, func.count(ProductRow.id).label("product_count"))
        .group_by(ProductRow.category)
        .order_by(ProductRow.category)
    )


class SqlProductRepository(ProductRepository):
    """Repository for Product database operations.

    Reviews are loaded eagerly with their product, so rows never trigger
    lazy loads once a query has returned.

    Example usage:
        async with get_session_factory()() as session:
            repo = SqlProductRepository(session)
            products = await repo.find_matching(predicate, offset=0, limit=12)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, product_id: ProductId) -> Product | None:
        row = await self.session.get(ProductRow, str(product_id))
        return row.to_domain() if row else None

    async def find_matching(
        self,
        predicate: ProductPredicate = MATCH_ALL,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Product]:
        result = await self.session.execute(matching_statement(predicate, offset, limit))
        return [row.to_domain() for row in result.scalars().all()]

    async def count(self, predicate: ProductPredicate = MATCH_ALL) -> int:
        result = await self.session.execute(count_statement(predicate))
        return result.scalar_one()

    async def find_top_rated(self, limit: int) -> list[Product]:
        result = await self.session.execute(top_rated_statement(limit))
        return [row.to_domain() for row in result.scalars().all()]

    async def count_by_category(self) -> dict[str, int]:
        result = await self.session.execute(category_counts_statement())
        return {row.category: row.product_count for row in result.all()}

    async def save(self, product: Product) -> Product:
        key = str(product.id)
        expected = product.persisted_version
        row = await self.session.get(ProductRow, key)

        if row is None:
            if expected is not None:
                raise ConcurrentModificationError(key, expected, None)
            self.session.add(ProductRow.from_domain(product))
        else:
            if row.version != expected:
                raise ConcurrentModificationError(key, expected, row.version)
            row.apply(product)

        try:
            await self.session.flush()
        except (StaleDataError, IntegrityError) as e:
            logger.warning(
                "Product save lost a concurrent update",
                product_id=key,
                expected_version=expected,
                error=str(e),
            )
            raise ConcurrentModificationError(key, expected, None) from e

        product.mark_persisted()
        return product

    async def delete(self, product_id: ProductId) -> bool:
        row = await self.session.get(ProductRow, str(product_id))
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

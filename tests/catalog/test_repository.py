"""Tests for product repositories."""

from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from storefront.catalog.filters import FilterCriteria, build_predicate
from storefront.catalog.repository import (
    InMemoryProductRepository,
    category_counts_statement,
    get_product_repository,
    matching_statement,
    top_rated_statement,
)
from storefront.domain import Category, ConcurrentModificationError, ProductId
from storefront.infrastructure.models import ProductRow
from tests.factories import at_hour, build_product, build_review


def render(statement) -> str:
    """Compile a statement for PostgreSQL."""
    return str(statement.compile(dialect=postgresql.dialect()))


class TestInMemoryRepository:
    """Tests for InMemoryProductRepository."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, repository: InMemoryProductRepository) -> None:
        """Saved products can be loaded by ID."""
        product = build_product()
        await repository.save(product)

        loaded = await repository.get_by_id(product.id)
        assert loaded == product
        assert loaded is not product
        assert loaded.persisted_version == 1

    @pytest.mark.asyncio
    async def test_get_missing(self, repository: InMemoryProductRepository) -> None:
        """Unknown IDs return None."""
        assert await repository.get_by_id(ProductId.generate()) is None

    @pytest.mark.asyncio
    async def test_unsaved_mutations_not_visible(
        self, repository: InMemoryProductRepository
    ) -> None:
        """Mutating a loaded copy does not change the store."""
        product = build_product()
        await repository.save(product)

        loaded = await repository.get_by_id(product.id)
        loaded.add_review(build_review("a", 1))
        product.update({"name": "Changed after save"})

        stored = await repository.get_by_id(product.id)
        assert stored.reviews == []
        assert stored.name == "Smartphone X"

    @pytest.mark.asyncio
    async def test_stale_save_rejected(self, repository: InMemoryProductRepository) -> None:
        """Of two copies loaded at the same version, only the first save wins."""
        product = build_product()
        await repository.save(product)

        first = await repository.get_by_id(product.id)
        second = await repository.get_by_id(product.id)
        first.add_review(build_review("a", 5))
        second.add_review(build_review("b", 1))

        await repository.save(first)
        with pytest.raises(ConcurrentModificationError):
            await repository.save(second)

        stored = await repository.get_by_id(product.id)
        assert [str(r.user_id) for r in stored.reviews] == ["a"]
        assert stored.rating == Decimal("5.0")
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_insert_twice_rejected(self, repository: InMemoryProductRepository) -> None:
        """A never-persisted product cannot overwrite a stored one."""
        product = build_product()
        await repository.save(product)
        with pytest.raises(ConcurrentModificationError):
            await repository.save(build_product(id=product.id))

    @pytest.mark.asyncio
    async def test_find_matching_newest_first(
        self, repository: InMemoryProductRepository
    ) -> None:
        """Listing is newest first and honours offset and limit."""
        for hour in range(5):
            await repository.save(build_product(name=f"Item {hour}", created_at=at_hour(hour)))

        names = [p.name for p in await repository.find_matching(offset=1, limit=2)]
        assert names == ["Item 3", "Item 2"]

    @pytest.mark.asyncio
    async def test_find_matching_with_predicate(
        self, repository: InMemoryProductRepository
    ) -> None:
        """Only matching products are returned and counted."""
        await repository.save(build_product(name="Smartphone X"))
        await repository.save(build_product(name="Laptop"))
        predicate = build_predicate(FilterCriteria.from_query(keyword="phone"))

        assert [p.name for p in await repository.find_matching(predicate)] == ["Smartphone X"]
        assert await repository.count(predicate) == 1
        assert await repository.count() == 2

    @pytest.mark.asyncio
    async def test_find_top_rated(self, repository: InMemoryProductRepository) -> None:
        """Top-rated returns at most the limit, highest first."""
        for i, rating in enumerate([1, 5, 3, 4, 2, 5, 3]):
            await repository.save(
                build_product(name=f"P{i}", reviews=[build_review("a", rating)])
            )

        top = await repository.find_top_rated(5)
        assert len(top) == 5
        ratings = [p.rating for p in top]
        assert ratings == sorted(ratings, reverse=True)
        assert ratings[0] == Decimal("5.0")

    @pytest.mark.asyncio
    async def test_count_by_category(self, repository: InMemoryProductRepository) -> None:
        """Counts are keyed by category value."""
        await repository.save(build_product(category=Category.JEWELERY))
        await repository.save(build_product(category=Category.JEWELERY))
        await repository.save(build_product(category=Category.ELECTRONICS))

        assert await repository.count_by_category() == {"jewelery": 2, "electronics": 1}

    @pytest.mark.asyncio
    async def test_delete(self, repository: InMemoryProductRepository) -> None:
        """Deleting removes the product; deleting again reports False."""
        product = build_product()
        await repository.save(product)

        assert await repository.delete(product.id) is True
        assert await repository.get_by_id(product.id) is None
        assert await repository.delete(product.id) is False

    def test_singleton(self) -> None:
        """The factory returns one shared repository."""
        assert get_product_repository() is get_product_repository()


class TestSqlStatements:
    """Tests for the SQL repository's query builders."""

    def test_matching_statement_order_and_paging(self) -> None:
        """Listing query orders newest first with ID tie-break and pages."""
        predicate = build_predicate(FilterCriteria.from_query(category="jewelery"))
        sql = render(matching_statement(predicate, offset=12, limit=12))

        assert "WHERE products.category =" in sql
        assert "ORDER BY products.created_at DESC, products.id ASC" in sql
        assert "LIMIT" in sql
        assert "OFFSET" in sql

    def test_matching_statement_without_limit(self) -> None:
        """A None limit leaves the query unbounded."""
        statement = matching_statement(build_predicate(FilterCriteria()), offset=5)
        assert statement._limit_clause is None
        assert statement._offset_clause is not None

    def test_top_rated_statement(self) -> None:
        """Top-rated query orders by rating then ID."""
        sql = render(top_rated_statement(5))
        assert "ORDER BY products.rating DESC, products.id ASC" in sql
        assert "LIMIT" in sql

    def test_category_counts_statement(self) -> None:
        """Category counts group by category."""
        sql = render(category_counts_statement())
        assert "GROUP BY products.category" in sql


class TestProductRowMapping:
    """Tests for mapping between rows and the aggregate."""

    def test_round_trip_keeps_reviews_and_summary(self) -> None:
        """A product survives conversion to a row and back."""
        product = build_product(
            reviews=[build_review("a", 4, created_at=at_hour(1)), build_review("b", 5, created_at=at_hour(2))],
            images=["/1.jpg"],
        )
        row = ProductRow.from_domain(product)
        assert row.rating == Decimal("4.5")
        assert row.num_reviews == 2
        assert row.category == "electronics"

        loaded = row.to_domain()
        assert loaded == product
        assert loaded.reviews == product.reviews
        assert loaded.rating == Decimal("4.5")
        assert loaded.persisted_version == product.version

    def test_apply_appends_only_new_reviews(self) -> None:
        """Existing review rows are kept and new authors are appended."""
        product = build_product(reviews=[build_review("a", 4)])
        row = ProductRow.from_domain(product)
        existing = row.reviews[0]

        product.add_review(build_review("b", 2))
        row.apply(product)

        assert len(row.reviews) == 2
        assert row.reviews[0] is existing
        assert row.version == product.version == 2
        assert row.rating == Decimal("3.0")

"""Tests for the catalog service."""

from decimal import Decimal

import pytest

from storefront.catalog.filters import FilterCriteria
from storefront.catalog.pagination import PageRequest
from storefront.catalog.repository import InMemoryProductRepository
from storefront.catalog.service import CatalogService, get_catalog_service
from storefront.domain import (
    AlreadyReviewedError,
    Category,
    ConcurrentModificationError,
    InvalidProductError,
    InvalidReviewError,
    ProductNotFoundError,
)
from tests.factories import at_hour, build_product, build_review


@pytest.fixture
def service(repository: InMemoryProductRepository) -> CatalogService:
    """Catalog service over the in-memory repository."""
    return get_catalog_service(request_id="test-request")


async def seed(repository: InMemoryProductRepository, count: int) -> list:
    """Save ``count`` products created one hour apart."""
    products = [
        build_product(name=f"Product {i:02d}", created_at=at_hour(i)) for i in range(count)
    ]
    for product in products:
        await repository.save(product)
    return products


class TestListProducts:
    """Tests for listing and pagination."""

    @pytest.mark.asyncio
    async def test_pages_of_twelve(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """13 products give pages of 12, 1 and 0 with two pages in total."""
        await seed(repository, 13)
        criteria = FilterCriteria()

        first = await service.list_products(criteria, page=1)
        second = await service.list_products(criteria, page=2)
        third = await service.list_products(criteria, page=3)

        assert len(first.items) == 12
        assert len(second.items) == 1
        assert third.items == []
        for page in (first, second, third):
            assert page.total_pages == 2
            assert page.total_matches == 13

    @pytest.mark.asyncio
    async def test_page_far_past_the_end_skips_the_slice_query(
        self,
        service: CatalogService,
        repository: InMemoryProductRepository,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A huge page number is an empty page and never reaches the store's slice query."""
        await seed(repository, 3)

        async def fail_find_matching(*args, **kwargs):
            raise AssertionError("slice queried past the last page")

        monkeypatch.setattr(repository, "find_matching", fail_find_matching)

        page = await service.list_products(FilterCriteria(), page=10**19)
        assert page.items == []
        assert page.page == 10**19
        assert page.total_matches == 3
        assert page.total_pages == 1

    @pytest.mark.asyncio
    async def test_empty_criteria_lists_everything_newest_first(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """No filters returns all products, newest first."""
        await seed(repository, 3)
        page = await service.list_products(FilterCriteria())
        assert [p.name for p in page.items] == ["Product 02", "Product 01", "Product 00"]

    @pytest.mark.asyncio
    async def test_page_below_one_is_first_page(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Page 0 is served as page 1."""
        await seed(repository, 2)
        page = await service.list_products(FilterCriteria(), page=0)
        assert page.page == 1
        assert len(page.items) == 2

    @pytest.mark.asyncio
    async def test_explicit_page_request(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """A PageRequest overrides the default page size."""
        await seed(repository, 5)
        page = await service.list_products(FilterCriteria(), page=PageRequest(page=2, page_size=2))
        assert [p.name for p in page.items] == ["Product 02", "Product 01"]
        assert page.total_pages == 3

    @pytest.mark.asyncio
    async def test_price_filter(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Products priced 5, 15, 25 filtered to 10..20 return the 15 one."""
        for price in (5, 15, 25):
            await repository.save(build_product(price=price))

        page = await service.list_products(
            FilterCriteria.from_query(min_price="10", max_price="20")
        )
        assert [p.price for p in page.items] == [Decimal("15.00")]
        assert page.total_matches == 1

    @pytest.mark.asyncio
    async def test_unknown_category_is_empty_page(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """A category outside the enumeration returns nothing, without error."""
        await seed(repository, 3)
        page = await service.list_products(FilterCriteria.from_query(category="garden"))
        assert page.items == []
        assert page.total_matches == 0
        assert page.total_pages == 0


class TestQueries:
    """Tests for single-product and shelf queries."""

    @pytest.mark.asyncio
    async def test_get_product(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Products are found by ID string."""
        product = build_product()
        await repository.save(product)
        assert (await service.get_product(str(product.id))).name == "Smartphone X"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", ["not-a-uuid", "1b4e28ba-2fa1-11d2-883f-0016d3cca427"])
    async def test_get_missing_product(self, service: CatalogService, product_id: str) -> None:
        """Unknown or malformed IDs raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await service.get_product(product_id)

    @pytest.mark.asyncio
    async def test_top_rated_returns_five(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Of seven products, the five best are returned, best first."""
        for i, rating in enumerate([3, 5, 1, 4, 2, 5, 4]):
            await repository.save(
                build_product(name=f"P{i}", reviews=[build_review("a", rating)])
            )

        top = await service.get_top_rated()
        assert len(top) == 5
        assert [p.rating for p in top] == [
            Decimal("5.0"),
            Decimal("5.0"),
            Decimal("4.0"),
            Decimal("4.0"),
            Decimal("3.0"),
        ]

    @pytest.mark.asyncio
    async def test_categories_zero_filled(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Every category is listed, including empty ones."""
        await repository.save(build_product(category=Category.JEWELERY))

        summaries = await service.get_categories()
        assert [s.category for s in summaries] == list(Category)
        counts = {s.category: s.product_count for s in summaries}
        assert counts[Category.JEWELERY] == 1
        assert counts[Category.ELECTRONICS] == 0


class TestProductCommands:
    """Tests for create, update and delete."""

    @pytest.mark.asyncio
    async def test_create_product(self, service: CatalogService) -> None:
        """Created products are persisted."""
        product = await service.create_product(
            name="Rain Jacket",
            description="Waterproof",
            image="/jacket.jpg",
            category="women's clothing",
            price="59.90",
            count_in_stock=3,
            created_by="owner-1",
        )

        stored = await service.get_product(str(product.id))
        assert stored.category is Category.WOMENS_CLOTHING
        assert stored.price == Decimal("59.90")
        assert str(stored.created_by) == "owner-1"
        assert stored.num_reviews == 0

    @pytest.mark.asyncio
    async def test_create_invalid_product(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Invalid attributes persist nothing."""
        with pytest.raises(InvalidProductError):
            await service.create_product(
                name="Thing", description="x", image="/x.jpg", category="garden"
            )
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_partial_update(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Only supplied fields change, including falsy ones."""
        product = build_product(count_in_stock=8, featured=True)
        await repository.save(product)

        await service.update_product(str(product.id), {"count_in_stock": 0, "featured": False})

        stored = await service.get_product(str(product.id))
        assert stored.count_in_stock == 0
        assert stored.featured is False
        assert stored.name == "Smartphone X"
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_update_missing_product(self, service: CatalogService) -> None:
        """Updating an unknown product raises ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await service.update_product("1b4e28ba-2fa1-11d2-883f-0016d3cca427", {"name": "x"})

    @pytest.mark.asyncio
    async def test_delete_product(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """Deleted products are gone; deleting again raises."""
        product = build_product()
        await repository.save(product)

        await service.delete_product(str(product.id))
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(str(product.id))


class TestSubmitReview:
    """Tests for review submission."""

    @pytest.mark.asyncio
    async def test_review_updates_aggregate(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """After each review, count and rating match the stored reviews."""
        product = build_product()
        await repository.save(product)

        for user, rating in [("a", 5), ("b", 4), ("c", 4)]:
            result = await service.submit_review(str(product.id), user, user.upper(), rating, "ok")
            assert result is None

            stored = await service.get_product(str(product.id))
            assert stored.num_reviews == len(stored.reviews)

        assert stored.rating == Decimal("4.3")
        assert stored.reviews[0].name == "A"

    @pytest.mark.asyncio
    async def test_second_review_rejected(
        self, service: CatalogService, repository: InMemoryProductRepository
    ) -> None:
        """A repeat review raises and leaves the stored reviews unchanged."""
        product = build_product()
        await repository.save(product)
        await service.submit_review(str(product.id), "a", "Ada", 5, "Great")

        with pytest.raises(AlreadyReviewedError):
            await service.submit_review(str(product.id), "a", "Ada", 1, "Changed my mind")

        stored = await service.get_product(str(product.id))
        assert len(stored.reviews) == 1
        assert stored.reviews[0].rating == 5
        assert stored.rating == Decimal("5.0")

    @pytest.mark.asyncio
    async def test_review_missing_product(self, service: CatalogService) -> None:
        """Reviewing an unknown product raises ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await service.submit_review(
                "1b4e28ba-2fa1-11d2-883f-0016d3cca427", "a", "Ada", 5, "Great"
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("user_id", "rating", "comment"),
        [("", 5, "Great"), ("a", 0, "Great"), ("a", 5, " ")],
    )
    async def test_invalid_review(
        self,
        service: CatalogService,
        repository: InMemoryProductRepository,
        user_id: str,
        rating: int,
        comment: str,
    ) -> None:
        """Invalid reviews raise InvalidReviewError and persist nothing."""
        product = build_product()
        await repository.save(product)

        with pytest.raises(InvalidReviewError):
            await service.submit_review(str(product.id), user_id, "Ada", rating, comment)

        stored = await service.get_product(str(product.id))
        assert stored.reviews == []

    @pytest.mark.asyncio
    async def test_concurrent_review_loses(
        self, repository: InMemoryProductRepository
    ) -> None:
        """A review saved over a newer version is rejected."""
        product = build_product()
        await repository.save(product)
        stale = await repository.get_by_id(product.id)

        service = CatalogService(repository)
        await service.submit_review(str(product.id), "a", "Ada", 5, "Great")

        stale.add_review(build_review("b", 1))
        with pytest.raises(ConcurrentModificationError):
            await repository.save(stale)

        stored = await service.get_product(str(product.id))
        assert stored.num_reviews == 1
        assert stored.rating == Decimal("5.0")

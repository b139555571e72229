"""Domain entities for the storefront catalog.

The Product aggregate owns its reviews by composition. Its rating and
review count are a materialized summary of that list, recomputed
synchronously whenever the list changes.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from storefront.domain.base import AggregateRoot
from storefront.domain.events import (
    ProductCreated,
    ProductDeleted,
    ProductUpdated,
    ReviewAdded,
)
from storefront.domain.exceptions import AlreadyReviewedError, InvalidProductError
from storefront.domain.ratings import ZERO_RATING, RatingSummary, summarize_reviews
from storefront.domain.value_objects import Category, ProductId, Review, UserId

PRICE_QUANTUM = Decimal("0.01")


# ============================================================================
# Attribute Normalizers
# ============================================================================


def _required_text(field_name: str) -> Callable[[Any], str]:
    def normalize(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidProductError(field_name, "Value is required")
        return value.strip()

    return normalize


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidProductError("brand", "Brand must be text")
    return value.strip() or None


def _price(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidProductError("price", "Price must be a number")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidProductError("price", "Price must be a number") from None
    if not price.is_finite() or price < 0:
        raise InvalidProductError("price", "Price must be zero or greater")
    return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def _count_in_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidProductError("count_in_stock", "Stock must be a whole number")
    if value < 0:
        raise InvalidProductError("count_in_stock", "Stock cannot be negative")
    return value


def _category(value: Any) -> Category:
    try:
        return Category(value)
    except ValueError:
        raise InvalidProductError(
            "category",
            f"Category must be one of {Category.values()}",
        ) from None


def _images(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not all(isinstance(i, str) for i in value):
        raise InvalidProductError("images", "Images must be a list of references")
    return [image.strip() for image in value if image.strip()]


def _featured(value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidProductError("featured", "Featured must be true or false")
    return value


_NORMALIZERS: dict[str, Callable[[Any], Any]] = {
    "name": _required_text("name"),
    "description": _required_text("description"),
    "image": _required_text("image"),
    "price": _price,
    "images": _images,
    "category": _category,
    "brand": _optional_text,
    "count_in_stock": _count_in_stock,
    "featured": _featured,
}

EDITABLE_FIELDS = frozenset(_NORMALIZERS)


# ============================================================================
# Product Aggregate Root
# ============================================================================


@dataclass(kw_only=True, eq=False)
class Product(AggregateRoot[ProductId]):
    """A sellable catalog item and the reviews written about it.

    ``rating`` and ``num_reviews`` are not constructor arguments: they are
    always derived from ``reviews``, both when a product is built (new or
    loaded from a store) and after every review is appended.

    Attributes:
        id: Product identifier.
        name: Display name (searched by keyword).
        description: Long description.
        image: Primary image reference.
        category: Catalog category.
        price: Unit price, two decimal places.
        images: Additional image references.
        brand: Optional brand name.
        count_in_stock: Units available.
        featured: Whether the storefront highlights the product.
        created_by: Catalog owner that created the product.
        reviews: Reviews in submission order.
        rating: Mean review rating, one decimal place.
        num_reviews: Number of reviews.
    """

    id: ProductId
    name: str
    description: str
    image: str
    category: Category
    price: Decimal = Decimal("0.00")
    images: list[str] = field(default_factory=list)
    brand: str | None = None
    count_in_stock: int = 0
    featured: bool = False
    created_by: UserId | None = None
    reviews: list[Review] = field(default_factory=list)
    rating: Decimal = field(default=ZERO_RATING, init=False)
    num_reviews: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Normalize attributes and derive the rating summary."""
        for name, normalize in _NORMALIZERS.items():
            setattr(self, name, normalize(getattr(self, name)))
        self.reviews = list(self.reviews)
        self._refresh_rating()

    @classmethod
    def create(
        cls,
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
        created_by: UserId | None = None,
        product_id: ProductId | None = None,
    ) -> "Product":
        """Create a new product.

        Factory method that creates a product and records the creation event.

        Returns:
            New Product instance with no reviews.

        Raises:
            InvalidProductError: If any attribute violates catalog rules.
        """
        product = cls(
            id=product_id or ProductId.generate(),
            name=name,
            description=description,
            image=image,
            category=category,  # type: ignore[arg-type]
            price=price,  # type: ignore[arg-type]
            images=images or [],
            brand=brand,
            count_in_stock=count_in_stock,
            featured=featured,
            created_by=created_by,
        )
        product._record_event(
            ProductCreated(
                aggregate_id=str(product.id),
                aggregate_type="Product",
                product_id=str(product.id),
                name=product.name,
                category=product.category.value,
                created_by=str(created_by) if created_by else None,
            )
        )
        return product

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def rating_summary(self) -> RatingSummary:
        """Current rating aggregate."""
        return RatingSummary(rating=self.rating, num_reviews=self.num_reviews)

    @property
    def in_stock(self) -> bool:
        """Check if at least one unit is available."""
        return self.count_in_stock > 0

    def has_reviewed(self, user_id: UserId) -> bool:
        """Check if the user already reviewed this product.

        Args:
            user_id: Author to look for.

        Returns:
            True if a review by this author exists.
        """
        return any(review.user_id == user_id for review in self.reviews)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def update(self, changes: Mapping[str, Any]) -> list[str]:
        """Apply a partial edit.

        Only keys present in ``changes`` are applied, so a supplied ``0``,
        ``False`` or empty list replaces the stored value. All values are
        validated before any attribute is assigned.

        Args:
            changes: Mapping of editable attribute name to new value.

        Returns:
            Names of the attributes whose value actually changed.

        Raises:
            InvalidProductError: On an unknown attribute or an invalid value.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidProductError(
                sorted(unknown)[0],
                "Attribute cannot be edited",
            )

        normalized = {
            name: _NORMALIZERS[name](value) for name, value in changes.items()
        }
        changed = [
            name for name, value in normalized.items() if getattr(self, name) != value
        ]
        if not changed:
            return []

        for name in changed:
            setattr(self, name, normalized[name])

        self._touch()
        self._record_event(
            ProductUpdated(
                aggregate_id=str(self.id),
                aggregate_type="Product",
                product_id=str(self.id),
                changed_fields=tuple(changed),
            )
        )
        return changed

    def add_review(self, review: Review) -> RatingSummary:
        """Append a review and refresh the rating summary.

        Args:
            review: Review to attach.

        Returns:
            The recomputed rating summary.

        Raises:
            AlreadyReviewedError: If the author already reviewed this product.
        """
        if self.has_reviewed(review.user_id):
            raise AlreadyReviewedError(str(self.id), str(review.user_id))

        self.reviews.append(review)
        self._refresh_rating()
        self._touch()

        self._record_event(
            ReviewAdded(
                aggregate_id=str(self.id),
                aggregate_type="Product",
                product_id=str(self.id),
                user_id=str(review.user_id),
                review_rating=review.rating,
                rating=str(self.rating),
                num_reviews=self.num_reviews,
            )
        )
        return self.rating_summary

    def mark_deleted(self) -> None:
        """Record that the product is being removed from the catalog."""
        self._record_event(
            ProductDeleted(
                aggregate_id=str(self.id),
                aggregate_type="Product",
                product_id=str(self.id),
            )
        )

    def _refresh_rating(self) -> None:
        summary = summarize_reviews(self.reviews)
        self.rating = summary.rating
        self.num_reviews = summary.num_reviews

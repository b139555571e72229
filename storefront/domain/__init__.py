"""Domain layer - Product aggregate, reviews, rating aggregation, events.

This module exports the core domain building blocks following DDD patterns:

- **Entities**: Product (aggregate root owning its reviews)
- **Value Objects**: Review, Category, typed IDs, RatingSummary
- **Domain Events**: Product lifecycle and review events
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from storefront.domain import Category, Product, Review, UserId

    product = Product.create(
        name="Smartphone X",
        description="Six-inch OLED phone",
        image="/images/phone.jpg",
        category=Category.ELECTRONICS,
        price="499.99",
    )
    product.add_review(
        Review(user_id=UserId("u-1"), name="Ada", rating=5, comment="Great")
    )
    print(product.rating, product.num_reviews)  # 5.0 1
"""

# Base classes
from storefront.domain.base import AggregateRoot, DomainEvent, Entity, ValueObject

# Entities
from storefront.domain.entities import EDITABLE_FIELDS, Product

# Domain Events
from storefront.domain.events import (
    ProductCreated,
    ProductDeleted,
    ProductUpdated,
    ReviewAdded,
)

# Exceptions
from storefront.domain.exceptions import (
    AlreadyReviewedError,
    ConcurrentModificationError,
    DomainError,
    InvalidProductError,
    InvalidReviewError,
    ProductError,
    ProductNotFoundError,
    ReviewError,
)

# Rating aggregation
from storefront.domain.ratings import RatingSummary, round_rating, summarize_reviews

# Value Objects
from storefront.domain.value_objects import Category, ProductId, Review, UserId

__all__ = [
    # Base
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "EDITABLE_FIELDS",
    "Product",
    # Events
    "ProductCreated",
    "ProductDeleted",
    "ProductUpdated",
    "ReviewAdded",
    # Exceptions
    "AlreadyReviewedError",
    "ConcurrentModificationError",
    "DomainError",
    "InvalidProductError",
    "InvalidReviewError",
    "ProductError",
    "ProductNotFoundError",
    "ReviewError",
    # Ratings
    "RatingSummary",
    "round_rating",
    "summarize_reviews",
    # Value Objects
    "Category",
    "ProductId",
    "Review",
    "UserId",
]

"""Domain events for the storefront catalog.

Events are recorded on the Product aggregate and collected by the
catalog service after a successful save, where they are logged.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from storefront.domain.base import DomainEvent


# ============================================================================
# Product Events
# ============================================================================


@dataclass(frozen=True)
class ProductCreated(DomainEvent):
    """Event raised when a product is added to the catalog."""

    event_type: ClassVar[str] = "product.created"

    product_id: str = ""
    name: str = ""
    category: str = ""
    created_by: str | None = None

    def _payload(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "category": self.category,
            "created_by": self.created_by,
        }


@dataclass(frozen=True)
class ProductUpdated(DomainEvent):
    """Event raised when product attributes are edited."""

    event_type: ClassVar[str] = "product.updated"

    product_id: str = ""
    changed_fields: tuple[str, ...] = field(default_factory=tuple)

    def _payload(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "changed_fields": list(self.changed_fields),
        }


@dataclass(frozen=True)
class ProductDeleted(DomainEvent):
    """Event raised when a product is removed from the catalog."""

    event_type: ClassVar[str] = "product.deleted"

    product_id: str = ""

    def _payload(self) -> dict[str, Any]:
        return {"product_id": self.product_id}


# ============================================================================
# Review Events
# ============================================================================


@dataclass(frozen=True)
class ReviewAdded(DomainEvent):
    """Event raised when a review is appended to a product.

    Carries the recomputed aggregate so consumers never need to
    re-derive it from the review list.
    """

    event_type: ClassVar[str] = "product.review_added"

    product_id: str = ""
    user_id: str = ""
    review_rating: int = 0
    rating: str = "0.0"
    num_reviews: int = 0

    def _payload(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "user_id": self.user_id,
            "review_rating": self.review_rating,
            "rating": self.rating,
            "num_reviews": self.num_reviews,
        }

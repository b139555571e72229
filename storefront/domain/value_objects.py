"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Self
from uuid import UUID, uuid4

from storefront.domain.base import ValueObject, utc_now
from storefront.domain.exceptions import InvalidReviewError

MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5


# ============================================================================
# Typed Identifiers
# ============================================================================


@dataclass(frozen=True)
class ProductId(ValueObject):
    """Strongly-typed product identifier.

    Assigned once when the product is created and never changed.
    """

    value: UUID

    @classmethod
    def generate(cls) -> Self:
        """Generate a new product ID.

        Returns:
            New ProductId with random UUID.
        """
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create ProductId from string representation.

        Args:
            value: String UUID representation.

        Returns:
            ProductId instance.

        Raises:
            ValueError: If value is not a UUID.
        """
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(ValueObject):
    """Identifier of a shopper or catalog owner.

    Users live in the account service; the catalog only keeps their ID.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate user ID format."""
        if not self.value or not self.value.strip():
            raise ValueError("User ID cannot be empty")

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Category
# ============================================================================


class Category(str, Enum):
    """Fixed set of catalog categories."""

    ELECTRONICS = "electronics"
    JEWELERY = "jewelery"
    MENS_CLOTHING = "men's clothing"
    WOMENS_CLOTHING = "women's clothing"

    @classmethod
    def values(cls) -> list[str]:
        """All category values in declaration order."""
        return [member.value for member in cls]


# ============================================================================
# Review
# ============================================================================


@dataclass(frozen=True)
class Review(ValueObject):
    """A shopper's review of one product.

    The author's display name is captured at submission time and is not
    refreshed if the user later renames their account.

    Attributes:
        user_id: Author identifier.
        name: Author display name.
        rating: Whole stars, 1 to 5.
        comment: Review text.
        created_at: Submission timestamp.
    """

    user_id: UserId
    name: str
    rating: int
    comment: str
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate review constraints."""
        # bool is an int subclass; True must not count as a 1-star review
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            raise InvalidReviewError("rating", "Rating must be a whole number")
        if not MIN_REVIEW_RATING <= self.rating <= MAX_REVIEW_RATING:
            raise InvalidReviewError(
                "rating",
                f"Rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}",
            )
        if not self.name or not self.name.strip():
            raise InvalidReviewError("name", "Reviewer name is required")
        if not self.comment or not self.comment.strip():
            raise InvalidReviewError("comment", "Comment is required")

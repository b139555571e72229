"""Domain exceptions.

All domain-level errors that represent business rule violations.
None of them are transient: retrying the same call gives the same
answer, so callers surface them instead of retrying.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class ProductNotFoundError(ProductError):
    """Raised when the referenced product does not exist."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: Identifier that was looked up.
        """
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )


class InvalidProductError(ProductError):
    """Raised when product attributes violate catalog rules."""

    def __init__(self, field: str, reason: str) -> None:
        """Initialize invalid product error.

        Args:
            field: Attribute that failed validation.
            reason: Explanation of the violation.
        """
        super().__init__(
            f"Invalid product {field}: {reason}",
            details={"field": field, "reason": reason},
        )


class ConcurrentModificationError(ProductError):
    """Raised when a product changed in the store after it was loaded."""

    def __init__(
        self,
        product_id: str,
        expected_version: int | None,
        actual_version: int | None,
    ) -> None:
        """Initialize concurrent modification error.

        Args:
            product_id: ID of the product.
            expected_version: Version the caller loaded.
            actual_version: Version currently stored.
        """
        super().__init__(
            f"Product {product_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})",
            details={
                "product_id": product_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


# ============================================================================
# Review Errors
# ============================================================================


class ReviewError(DomainError):
    """Base class for review-related errors."""

    pass


class AlreadyReviewedError(ReviewError):
    """Raised when an author reviews the same product twice."""

    def __init__(self, product_id: str, user_id: str) -> None:
        """Initialize already reviewed error.

        Args:
            product_id: ID of the product.
            user_id: ID of the author.
        """
        super().__init__(
            "Product already reviewed",
            details={"product_id": product_id, "user_id": user_id},
        )


class InvalidReviewError(ReviewError):
    """Raised when a review's rating or text is invalid."""

    def __init__(self, field: str, reason: str) -> None:
        """Initialize invalid review error.

        Args:
            field: Review attribute that failed validation.
            reason: Explanation of the violation.
        """
        super().__init__(
            f"Invalid review {field}: {reason}",
            details={"field": field, "reason": reason},
        )

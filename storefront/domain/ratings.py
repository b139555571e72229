"""Review aggregation.

A product's rating and review count are a cache of its review list.
They are computed here and nowhere else.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.base import ValueObject
from storefront.domain.value_objects import Review

RATING_QUANTUM = Decimal("0.1")
ZERO_RATING = Decimal("0.0")


@dataclass(frozen=True)
class RatingSummary(ValueObject):
    """Mean rating and number of reviews for one product.

    Attributes:
        rating: Mean of review ratings, one decimal place (0.0 when unrated).
        num_reviews: Number of reviews the mean was taken over.
    """

    rating: Decimal
    num_reviews: int

    @classmethod
    def empty(cls) -> "RatingSummary":
        """Summary of a product with no reviews."""
        return cls(rating=ZERO_RATING, num_reviews=0)


def round_rating(value: Decimal) -> Decimal:
    """Round a mean rating to one decimal place, halves away from zero.

    Args:
        value: Exact mean.

    Returns:
        Rounded rating (e.g. 4.25 -> 4.3).
    """
    return value.quantize(RATING_QUANTUM, rounding=ROUND_HALF_UP)


def summarize_reviews(reviews: Sequence[Review]) -> RatingSummary:
    """Compute the rating aggregate for a review list.

    Sums are exact integers and the division is done in Decimal, so
    recomputing over an unchanged list always yields the same value.

    Args:
        reviews: All reviews currently attached to the product.

    Returns:
        RatingSummary for the list.
    """
    if not reviews:
        return RatingSummary.empty()

    total = sum(review.rating for review in reviews)
    mean = Decimal(total) / Decimal(len(reviews))
    return RatingSummary(rating=round_rating(mean), num_reviews=len(reviews))

"""Product filter builder.

Turns optional search criteria into a single predicate. Each criterion
is its own variant; absent criteria are simply not part of the fold, so
a product matches iff every present criterion holds.

Input parsing is permissive: an unparseable or blank value behaves as
if it had not been supplied. Filtering never fails a request.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import ColumnElement, and_, true

from storefront.domain.entities import Product
from storefront.infrastructure.models import ProductRow

LIKE_ESCAPE = "\\"

# Numeric bounds whose decimal exponent exceeds this are ignored
MAX_BOUND_EXPONENT = 15


# ============================================================================
# Input Parsing
# ============================================================================


def clean_text(value: Any) -> str | None:
    """Normalize an optional text criterion.

    Args:
        value: Raw query value.

    Returns:
        Stripped text, or None when missing or blank.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_decimal(value: Any) -> Decimal | None:
    """Parse an optional numeric criterion.

    Args:
        value: Raw query value (string or number).

    Returns:
        Finite Decimal, or None when missing, blank, not a number, or
        too large or too finely scaled to use as a bound.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    if number.is_zero():
        return Decimal(0)
    exponent = number.as_tuple().exponent
    if abs(number.adjusted()) > MAX_BOUND_EXPONENT or -exponent > MAX_BOUND_EXPONENT:
        return None
    return number


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the keyword is matched literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


# ============================================================================
# Criteria
# ============================================================================


class Criterion(ABC):
    """One filter fragment, evaluable in memory and renderable as SQL."""

    @abstractmethod
    def matches(self, product: Product) -> bool:
        """Check whether the product satisfies this fragment."""

    @abstractmethod
    def to_clause(self) -> ColumnElement[bool]:
        """Render this fragment as a WHERE clause over the products table."""


@dataclass(frozen=True)
class KeywordCriterion(Criterion):
    """Case-insensitive substring match against the product name."""

    keyword: str

    def matches(self, product: Product) -> bool:
        return self.keyword.lower() in product.name.lower()

    def to_clause(self) -> ColumnElement[bool]:
        pattern = f"%{escape_like(self.keyword)}%"
        return ProductRow.name.ilike(pattern, escape=LIKE_ESCAPE)


@dataclass(frozen=True)
class CategoryCriterion(Criterion):
    """Exact category match.

    The value is not checked against the category enumeration: an
    unknown category is a valid filter that matches nothing.
    """

    category: str

    def matches(self, product: Product) -> bool:
        return product.category.value == self.category

    def to_clause(self) -> ColumnElement[bool]:
        return ProductRow.category == self.category


@dataclass(frozen=True)
class PriceRangeCriterion(Criterion):
    """Inclusive price bounds; either side may be open."""

    min_price: Decimal | None = None
    max_price: Decimal | None = None

    def matches(self, product: Product) -> bool:
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        return True

    def to_clause(self) -> ColumnElement[bool]:
        clauses = []
        if self.min_price is not None:
            clauses.append(ProductRow.price >= self.min_price)
        if self.max_price is not None:
            clauses.append(ProductRow.price <= self.max_price)
        return and_(true(), *clauses)


@dataclass(frozen=True)
class MinRatingCriterion(Criterion):
    """Rating at or above a threshold."""

    min_rating: Decimal

    def matches(self, product: Product) -> bool:
        return product.rating >= self.min_rating

    def to_clause(self) -> ColumnElement[bool]:
        return ProductRow.rating >= self.min_rating


# ============================================================================
# Filter Criteria and Predicate
# ============================================================================


@dataclass(frozen=True)
class FilterCriteria:
    """Search criteria for product listing.

    Attributes:
        keyword: Substring of the product name.
        category: Category value.
        min_price: Lowest acceptable price.
        max_price: Highest acceptable price.
        min_rating: Lowest acceptable rating.
    """

    keyword: str | None = None
    category: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    min_rating: Decimal | None = None

    @classmethod
    def from_query(
        cls,
        keyword: Any = None,
        category: Any = None,
        min_price: Any = None,
        max_price: Any = None,
        rating: Any = None,
    ) -> "FilterCriteria":
        """Build criteria from raw query-string values.

        Blank and unparseable values become None (no constraint). A
        non-blank category is kept verbatim for exact matching.

        Returns:
            Parsed FilterCriteria.
        """
        return cls(
            keyword=clean_text(keyword),
            category=str(category) if clean_text(category) else None,
            min_price=parse_decimal(min_price),
            max_price=parse_decimal(max_price),
            min_rating=parse_decimal(rating),
        )


@dataclass(frozen=True)
class ProductPredicate:
    """Conjunction of criteria.

    An empty predicate matches every product.
    """

    criteria: tuple[Criterion, ...] = ()

    def matches(self, product: Product) -> bool:
        """Check whether the product satisfies every criterion."""
        return all(criterion.matches(product) for criterion in self.criteria)

    def to_clause(self) -> ColumnElement[bool]:
        """Render the conjunction as a WHERE clause."""
        return and_(true(), *(criterion.to_clause() for criterion in self.criteria))


MATCH_ALL = ProductPredicate()


def _keyword(criteria: FilterCriteria) -> Criterion | None:
    return KeywordCriterion(criteria.keyword) if criteria.keyword else None


def _category(criteria: FilterCriteria) -> Criterion | None:
    return CategoryCriterion(criteria.category) if criteria.category else None


def _price(criteria: FilterCriteria) -> Criterion | None:
    if criteria.min_price is None and criteria.max_price is None:
        return None
    return PriceRangeCriterion(criteria.min_price, criteria.max_price)


def _rating(criteria: FilterCriteria) -> Criterion | None:
    if criteria.min_rating is None:
        return None
    return MinRatingCriterion(criteria.min_rating)


def fold_criteria(fragments: Sequence[Criterion | None]) -> ProductPredicate:
    """AND together the present fragments, skipping absent ones.

    Args:
        fragments: Optional criteria.

    Returns:
        Predicate over the present criteria.
    """
    return ProductPredicate(tuple(f for f in fragments if f is not None))


def build_predicate(criteria: FilterCriteria) -> ProductPredicate:
    """Translate filter criteria into a product predicate.

    Args:
        criteria: Parsed filter criteria.

    Returns:
        Predicate matching products that satisfy all supplied criteria.
    """
    return fold_criteria(
        [
            _keyword(criteria),
            _category(criteria),
            _price(criteria),
            _rating(criteria),
        ]
    )

"""Pagination for catalog listings.

Listings are ordered newest first. Products created at the same instant
are ordered by ID so that repeated reads of an unchanged catalog return
identical pages.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from storefront.domain.entities import Product

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 12


def parse_page_number(value: Any) -> int:
    """Parse a page number leniently.

    Args:
        value: Raw page value.

    Returns:
        The page number, or 1 when missing, not an integer, or below 1.
    """
    if value is None or isinstance(value, bool):
        return 1
    try:
        page = int(str(value).strip())
    except ValueError:
        return 1
    return max(page, 1)


@dataclass(frozen=True)
class PageRequest:
    """Requested page of a listing.

    Attributes:
        page: Page number (1-indexed); values below 1 are treated as 1.
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("Page size must be positive")
        if self.page < 1:
            object.__setattr__(self, "page", 1)

    @classmethod
    def from_query(cls, page: Any, page_size: int = DEFAULT_PAGE_SIZE) -> "PageRequest":
        """Build a page request from a raw query value."""
        return cls(page=parse_page_number(page), page_size=page_size)

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class Page(Generic[T]):
    """One page of a listing plus totals.

    Attributes:
        items: Items on this page.
        page: Page number that was requested.
        page_size: Items per page.
        total_matches: Items matching the filter across all pages.
    """

    items: list[T]
    page: int
    page_size: int
    total_matches: int

    @property
    def total_pages(self) -> int:
        """Number of pages needed for all matches."""
        return math.ceil(self.total_matches / self.page_size)


def newest_first(products: Iterable[Product]) -> list[Product]:
    """Sort products by creation time descending, then ID ascending."""
    # Two stable sorts: secondary key first
    by_id = sorted(products, key=lambda p: str(p.id))
    return sorted(by_id, key=lambda p: p.created_at, reverse=True)


def highest_rated_first(products: Iterable[Product]) -> list[Product]:
    """Sort products by rating descending, then ID ascending."""
    by_id = sorted(products, key=lambda p: str(p.id))
    return sorted(by_id, key=lambda p: p.rating, reverse=True)

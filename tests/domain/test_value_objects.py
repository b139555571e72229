"""Tests for domain value objects."""

from datetime import datetime
from uuid import UUID

import pytest

from storefront.domain import Category, ProductId, Review, UserId
from storefront.domain.exceptions import InvalidReviewError


class TestProductId:
    """Tests for ProductId value object."""

    def test_generate_creates_uuid(self) -> None:
        """Generated IDs wrap a UUID."""
        product_id = ProductId.generate()
        assert isinstance(product_id.value, UUID)

    def test_generate_is_unique(self) -> None:
        """Two generated IDs differ."""
        assert ProductId.generate() != ProductId.generate()

    def test_from_string_round_trips(self) -> None:
        """String form parses back to an equal ID."""
        product_id = ProductId.generate()
        assert ProductId.from_string(str(product_id)) == product_id

    def test_from_string_rejects_garbage(self) -> None:
        """Non-UUID strings raise ValueError."""
        with pytest.raises(ValueError):
            ProductId.from_string("not-a-uuid")


class TestUserId:
    """Tests for UserId value object."""

    def test_str(self) -> None:
        """String form is the raw value."""
        assert str(UserId("user-42")) == "user-42"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_rejected(self, value: str) -> None:
        """Blank IDs raise ValueError."""
        with pytest.raises(ValueError):
            UserId(value)


class TestCategory:
    """Tests for Category enumeration."""

    def test_values_in_declaration_order(self) -> None:
        """All four categories are listed."""
        assert Category.values() == [
            "electronics",
            "jewelery",
            "men's clothing",
            "women's clothing",
        ]

    def test_lookup_by_value(self) -> None:
        """Categories are looked up by their stored value."""
        assert Category("men's clothing") is Category.MENS_CLOTHING


class TestReview:
    """Tests for Review value object."""

    def test_create_review(self) -> None:
        """Valid review keeps its attributes and gets a timestamp."""
        review = Review(user_id=UserId("u-1"), name="Ada", rating=4, comment="Nice")
        assert review.rating == 4
        assert review.name == "Ada"
        assert isinstance(review.created_at, datetime)
        assert review.created_at.tzinfo is not None

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range(self, rating: int) -> None:
        """Ratings outside 1..5 are rejected."""
        with pytest.raises(InvalidReviewError):
            Review(user_id=UserId("u-1"), name="Ada", rating=rating, comment="Nice")

    @pytest.mark.parametrize("rating", [True, 4.5, "5"])
    def test_rating_must_be_whole_number(self, rating: object) -> None:
        """Booleans, floats and strings are not ratings."""
        with pytest.raises(InvalidReviewError):
            Review(user_id=UserId("u-1"), name="Ada", rating=rating, comment="Nice")  # type: ignore[arg-type]

    def test_comment_required(self) -> None:
        """Blank comments are rejected."""
        with pytest.raises(InvalidReviewError) as exc_info:
            Review(user_id=UserId("u-1"), name="Ada", rating=3, comment="  ")
        assert exc_info.value.details["field"] == "comment"

    def test_name_required(self) -> None:
        """Blank author names are rejected."""
        with pytest.raises(InvalidReviewError):
            Review(user_id=UserId("u-1"), name="", rating=3, comment="Fine")

    def test_immutable(self) -> None:
        """Reviews cannot be edited."""
        review = Review(user_id=UserId("u-1"), name="Ada", rating=3, comment="Fine")
        with pytest.raises(AttributeError):
            review.rating = 5  # type: ignore[misc]

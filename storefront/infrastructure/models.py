"""SQLAlchemy models for the product catalog.

Defines the products and product_reviews tables and the mapping
between rows and the Product aggregate.
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain.base import utc_now
from storefront.domain.entities import Product
from storefront.domain.value_objects import Category, ProductId, Review, UserId
from storefront.infrastructure.database import Base


class ProductRow(Base):
    """Product table.

    ``rating`` and ``num_reviews`` are stored so that filtering and the
    top-rated query can use indexes; they are always written from the
    aggregate, never computed in SQL.

    ``version`` is the optimistic locking column: every UPDATE carries
    ``WHERE version = <loaded version>`` and fails if another writer got
    there first.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"), index=True
    )
    image: Mapped[str] = mapped_column(String(1000), nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    count_in_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[Decimal] = mapped_column(
        Numeric(2, 1), nullable=False, default=Decimal("0.0"), index=True
    )
    num_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    reviews: Mapped[list["ReviewRow"]] = relationship(
        "ReviewRow",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by=lambda: [ReviewRow.created_at, ReviewRow.id],
        lazy="selectin",
    )

    # The aggregate bumps version itself, so SQLAlchemy only checks it
    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": False,
    }

    def __repr__(self) -> str:
        return f"<ProductRow(id={self.id}, name={self.name[:30]}, version={self.version})>"

    @classmethod
    def from_domain(cls, product: Product) -> "ProductRow":
        """Build a new row for a product that has never been stored.

        Args:
            product: Product aggregate.

        Returns:
            Unsaved row carrying all product state.
        """
        row = cls(id=str(product.id))
        row.apply(product)
        return row

    def apply(self, product: Product) -> None:
        """Copy aggregate state onto this row.

        Reviews are append-only, so rows are added for authors not yet
        present and existing review rows are left untouched.

        Args:
            product: Product aggregate with the same identity.
        """
        self.name = product.name
        self.description = product.description
        self.price = product.price
        self.image = product.image
        self.images = list(product.images)
        self.category = product.category.value
        self.brand = product.brand
        self.count_in_stock = product.count_in_stock
        self.rating = product.rating
        self.num_reviews = product.num_reviews
        self.featured = product.featured
        self.created_by = str(product.created_by) if product.created_by else None
        self.version = product.version
        self.created_at = product.created_at
        self.updated_at = product.updated_at

        stored_authors = {review.user_id for review in self.reviews}
        for review in product.reviews:
            if str(review.user_id) not in stored_authors:
                self.reviews.append(ReviewRow.from_domain(review))

    def to_domain(self) -> Product:
        """Rebuild the Product aggregate from this row.

        Returns:
            Product marked as persisted at this row's version.
        """
        product = Product(
            id=ProductId.from_string(str(self.id)),
            name=self.name,
            description=self.description,
            image=self.image,
            category=Category(self.category),
            price=self.price,
            images=list(self.images or []),
            brand=self.brand,
            count_in_stock=self.count_in_stock,
            featured=self.featured,
            created_by=UserId(self.created_by) if self.created_by else None,
            reviews=[review.to_domain() for review in self.reviews],
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        product.mark_persisted()
        return product


class ReviewRow(Base):
    """Review table, owned by products.

    The unique constraint backs the one-review-per-author rule even
    when two submissions race past the in-memory check.
    """

    __tablename__ = "product_reviews"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_reviews_product_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    product: Mapped["ProductRow"] = relationship("ProductRow", back_populates="reviews")

    def __repr__(self) -> str:
        return f"<ReviewRow(product_id={self.product_id}, user_id={self.user_id})>"

    @classmethod
    def from_domain(cls, review: Review) -> "ReviewRow":
        """Build a row for a review value object."""
        return cls(
            id=str(uuid4()),
            user_id=str(review.user_id),
            name=review.name,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )

    def to_domain(self) -> Review:
        """Rebuild the review value object."""
        return Review(
            user_id=UserId(self.user_id),
            name=self.name,
            rating=self.rating,
            comment=self.comment,
            created_at=self.created_at,
        )

"""Builders for valid catalog objects used across tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from storefront.domain import Category, Product, ProductId, Review, UserId

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def at_hour(n: int) -> datetime:
    """Timestamp ``n`` hours after the base time."""
    return BASE_TIME + timedelta(hours=n)


def build_product(**overrides: Any) -> Product:
    """Build a valid product, overriding any attribute."""
    attrs: dict[str, Any] = {
        "id": ProductId.generate(),
        "name": "Smartphone X",
        "description": "Six-inch OLED phone",
        "image": "/images/phone.jpg",
        "category": Category.ELECTRONICS,
        "price": Decimal("499.99"),
        "brand": "Acme",
        "count_in_stock": 10,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    attrs.update(overrides)
    return Product(**attrs)


def build_review(user: str = "user-1", rating: int = 5, **overrides: Any) -> Review:
    """Build a valid review by the given author."""
    attrs: dict[str, Any] = {
        "user_id": UserId(user),
        "name": user.title(),
        "rating": rating,
        "comment": "Solid product",
    }
    attrs.update(overrides)
    return Review(**attrs)

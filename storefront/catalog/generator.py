"""Product catalog generator with deterministic seeding.

Generates a demo storefront catalog for the four catalog categories.
Uses seeded random for reproducibility: the same config always yields
the same products, IDs, timestamps and reviews.
"""

import hashlib
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator
from uuid import UUID

from storefront.catalog.repository import ProductRepository
from storefront.domain.entities import Product
from storefront.domain.value_objects import Category, ProductId, Review, UserId


# ============================================================================
# Constants
# ============================================================================

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
    "Umbrella",
]

# Price ranges by category (in cents)
PRICE_RANGES: dict[Category, tuple[int, int]] = {
    Category.ELECTRONICS: (1999, 149999),
    Category.JEWELERY: (2999, 89999),
    Category.MENS_CLOTHING: (999, 19999),
    Category.WOMENS_CLOTHING: (999, 24999),
}

# Product name templates by category
PRODUCT_TEMPLATES: dict[Category, list[str]] = {
    Category.ELECTRONICS: [
        "{brand} Smartphone {adj}",
        "{brand} {adj} Wireless Headphones",
        "{brand} {adj} Laptop 15\"",
        "{brand} Portable {adj} Speaker",
    ],
    Category.JEWELERY: [
        "{brand} {adj} Silver Ring",
        "{brand} Gold {adj} Necklace",
        "{brand} {adj} Bracelet",
    ],
    Category.MENS_CLOTHING: [
        "{brand} {adj} Cotton T-Shirt",
        "{brand} Slim {adj} Jacket",
        "{brand} {adj} Chinos",
    ],
    Category.WOMENS_CLOTHING: [
        "{brand} {adj} Summer Dress",
        "{brand} {adj} Rain Jacket",
        "{brand} Knit {adj} Sweater",
    ],
}

# Adjectives for product names
ADJECTIVES = [
    "Premium", "Classic", "Essential", "Elite", "Urban",
    "Nova", "Prime", "Apex", "Core", "Titan",
]

REVIEWER_NAMES = [
    "Alex", "Sam", "Jordan", "Taylor", "Casey",
    "Riley", "Morgan", "Jamie", "Avery", "Quinn",
]

REVIEW_COMMENTS = {
    1: "Not what I expected.",
    2: "Below average quality.",
    3: "Does the job.",
    4: "Very good, would buy again.",
    5: "Excellent, highly recommended!",
}

# Fixed epoch so generated timestamps are reproducible
CATALOG_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for product generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of products per category.
        max_reviews_per_product: Upper bound on seeded reviews per product.
        featured_ratio: Share of products flagged as featured.
    """

    seed: int = 42
    products_per_category: int = 10
    max_reviews_per_product: int = 6
    featured_ratio: float = 0.1

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for small catalog (~20 products)."""
        return cls(seed=42, products_per_category=5, max_reviews_per_product=4)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for full catalog (~100 products)."""
        return cls(seed=42, products_per_category=25, max_reviews_per_product=10)


# ============================================================================
# Product Generator
# ============================================================================


class ProductGenerator:
    """Generates product catalogs with deterministic seeding.

    Seeded reviews go through ``Product.add_review`` so every generated
    product carries a rating consistent with its reviews.

    Example usage:
        generator = ProductGenerator(GeneratorConfig.small())
        for product in generator.generate():
            print(product.name, product.rating)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config

    def _deterministic_seed(self, *args: str | int) -> int:
        """Create deterministic seed from arguments."""
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _product_id(self, category: Category, index: int) -> ProductId:
        """Derive a stable UUID for a generated product."""
        digest = hashlib.md5(f"{self.config.seed}:{category.value}:{index}".encode()).digest()
        return ProductId(UUID(bytes=digest, version=4))

    def _image_url(self, product_id: ProductId) -> str:
        """Generate placeholder image URL."""
        seed = self._deterministic_seed(str(product_id))
        return f"https://picsum.photos/seed/{seed}/400/400"

    def _generate_reviews(
        self,
        created_at: datetime,
        rng: random.Random,
    ) -> Iterator[Review]:
        """Generate reviews from distinct reviewers."""
        count = rng.randint(0, self.config.max_reviews_per_product)
        reviewers = rng.sample(range(len(REVIEWER_NAMES) * 10), count)
        for offset, reviewer in enumerate(reviewers):
            rating = rng.choices([1, 2, 3, 4, 5], weights=[1, 1, 3, 5, 5])[0]
            yield Review(
                user_id=UserId(f"seed-user-{reviewer:03d}"),
                name=REVIEWER_NAMES[reviewer % len(REVIEWER_NAMES)],
                rating=rating,
                comment=REVIEW_COMMENTS[rating],
                created_at=created_at + timedelta(days=offset + 1),
            )

    def _generate_product(self, category: Category, index: int, position: int) -> Product:
        """Generate a single product.

        Args:
            category: Product category.
            index: Product index within category.
            position: Product index within the whole catalog.

        Returns:
            Generated Product.
        """
        rng = random.Random(self._deterministic_seed(self.config.seed, category.value, index))

        brand = rng.choice(BRANDS)
        adj = rng.choice(ADJECTIVES)
        name = rng.choice(PRODUCT_TEMPLATES[category]).format(brand=brand, adj=adj)

        # Round to .99
        min_price, max_price = PRICE_RANGES[category]
        cents = (rng.randint(min_price, max_price) // 100) * 100 + 99

        in_stock = rng.random() > 0.1  # 90% in stock
        created_at = CATALOG_EPOCH + timedelta(hours=position)
        product_id = self._product_id(category, index)

        product = Product(
            id=product_id,
            name=name,
            description=f"{adj} {category.value} from {brand}.",
            image=self._image_url(product_id),
            category=category,
            price=Decimal(cents) / 100,
            brand=brand,
            count_in_stock=rng.randint(5, 200) if in_stock else 0,
            featured=rng.random() < self.config.featured_ratio,
            created_at=created_at,
            updated_at=created_at,
        )
        for review in self._generate_reviews(created_at, rng):
            product.add_review(review)
        if product.reviews:
            product.updated_at = product.reviews[-1].created_at
        product.collect_events()
        return product

    def generate(self) -> Iterator[Product]:
        """Generate all products.

        Yields:
            Generated Product instances.
        """
        position = 0
        for category in Category:
            for i in range(self.config.products_per_category):
                yield self._generate_product(category, i, position)
                position += 1

    def generate_list(self) -> list[Product]:
        """Generate all products as a list."""
        return list(self.generate())

    @property
    def expected_count(self) -> int:
        """Get expected number of products."""
        return len(Category) * self.config.products_per_category


async def seed_catalog(repository: ProductRepository, config: GeneratorConfig) -> int:
    """Save a generated catalog into a repository.

    Args:
        repository: Store to fill; it should not already hold the products.
        config: Generator configuration.

    Returns:
        Number of products saved.
    """
    count = 0
    for product in ProductGenerator(config).generate():
        await repository.save(product)
        count += 1
    return count

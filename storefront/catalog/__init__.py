"""Product catalog.

Filter builder, pager, product repositories, the catalog service and
the deterministic demo catalog generator.
"""

from storefront.catalog.filters import FilterCriteria, ProductPredicate, build_predicate
from storefront.catalog.generator import GeneratorConfig, ProductGenerator, seed_catalog
from storefront.catalog.pagination import Page, PageRequest
from storefront.catalog.repository import (
    InMemoryProductRepository,
    ProductRepository,
    SqlProductRepository,
)
from storefront.catalog.service import CatalogService, CategorySummary, get_catalog_service

__all__ = [
    # Filtering
    "FilterCriteria",
    "ProductPredicate",
    "build_predicate",
    # Pagination
    "Page",
    "PageRequest",
    # Repository
    "ProductRepository",
    "InMemoryProductRepository",
    "SqlProductRepository",
    # Service
    "CatalogService",
    "CategorySummary",
    "get_catalog_service",
    # Generator
    "GeneratorConfig",
    "ProductGenerator",
    "seed_catalog",
]

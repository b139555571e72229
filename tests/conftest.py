"""Shared fixtures for catalog tests."""

import pytest

import storefront.catalog.repository as repository_module
from storefront.catalog.repository import InMemoryProductRepository


@pytest.fixture(autouse=True)
def reset_product_repository() -> None:
    """Give every test an empty in-memory catalog."""
    repository_module._product_repo = None


@pytest.fixture
def repository() -> InMemoryProductRepository:
    """In-memory repository shared with the service factory."""
    return repository_module.get_product_repository()

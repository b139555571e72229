"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.config import settings
from storefront.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def auth_client() -> TestClient:
    """Create test client with the catalog owner's API key."""
    return TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.catalog_api_key}"},
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {settings.catalog_api_key}"}


@pytest.fixture
def shopper_headers() -> dict[str, str]:
    """Identity headers set by the auth gateway for a shopper."""
    return {"X-User-ID": "shopper-1", "X-User-Name": "Ada"}

"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Catalog store backend: "memory" keeps products in process, "database" uses SQL
    catalog_backend: Literal["memory", "database"] = "memory"

    # Authentication (catalog owner key for write operations)
    catalog_api_key: str = "dev-catalog-key-change-in-production"

    # Catalog
    page_size: int = 12
    top_rated_limit: int = 5

    # Fill the in-memory store with the generated demo catalog on startup
    seed_demo_catalog: bool = False
    demo_catalog_size: Literal["small", "full"] = "small"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_engine

router = APIRouter()

logger = structlog.get_logger()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="storefront-api",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Check if service is ready to accept requests.

    The in-memory backend is always ready; the database backend is
    ready once the database answers a trivial query.

    Returns:
        Readiness status and the active catalog backend.
    """
    if settings.catalog_backend == "database":
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database not reachable", error=str(e))
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable", "backend": settings.catalog_backend},
            )

    return JSONResponse(content={"status": "ready", "backend": settings.catalog_backend})

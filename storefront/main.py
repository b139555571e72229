"""Storefront catalog API main application module.

This module initializes the FastAPI application and configures
logging, middleware, routers, exception handlers and startup/shutdown
events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.products import router as products_router
from storefront.catalog.generator import GeneratorConfig, seed_catalog
from storefront.catalog.repository import get_product_repository
from storefront.domain.exceptions import (
    AlreadyReviewedError,
    ConcurrentModificationError,
    DomainError,
    InvalidProductError,
    InvalidReviewError,
    ProductNotFoundError,
)
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging_config import configure_logging

configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting storefront API",
        version=settings.api_version,
        debug=settings.debug,
        catalog_backend=settings.catalog_backend,
    )

    if settings.catalog_backend == "memory" and settings.seed_demo_catalog:
        config = (
            GeneratorConfig.full()
            if settings.demo_catalog_size == "full"
            else GeneratorConfig.small()
        )
        repository = get_product_repository()
        repository.clear()
        count = await seed_catalog(repository, config)
        logger.info("Demo catalog seeded", product_count=count, seed=config.seed)

    yield

    logger.info("Shutting down storefront API")


app = FastAPI(
    title="Storefront Catalog API",
    description="Product catalog, search and reviews for the storefront",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, API key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


# Most specific class first
DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND"),
    (AlreadyReviewedError, status.HTTP_400_BAD_REQUEST, "ALREADY_REVIEWED"),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT, "CONCURRENT_MODIFICATION"),
    (InvalidProductError, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR"),
    (InvalidReviewError, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR"),
]


def error_body(
    request: Request,
    error_code: str,
    message: str,
    details: list | None = None,
) -> dict:
    """Build the common error body."""
    return {
        "error_code": error_code,
        "message": message,
        "details": details or [],
        "request_id": getattr(request.state, "request_id", None),
    }


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map business-rule violations to HTTP errors."""
    status_code, error_code = status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR"
    for error_type, mapped_status, mapped_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code, error_code = mapped_status, mapped_code
            break

    logger.info(
        "Domain error",
        error_code=error_code,
        path=request.url.path,
        method=request.method,
        error=exc.message,
    )

    details = [{"field": key, "message": str(value)} for key, value in exc.details.items()]
    return JSONResponse(
        status_code=status_code,
        content=error_body(request, error_code, exc.message, details),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with consistent format."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(request, "VALIDATION_ERROR", "Request validation failed", details),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, error_code, message, details),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, "INTERNAL_ERROR", "An internal error occurred"),
    )

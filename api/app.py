"""FastAPI application setup with security middleware."""

import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import balance as balance_routes
from api.routes import health as health_routes
from api.routes import pages as page_routes
from api.routes import subscription as subscription_routes
from core.config import settings
from core.exceptions import (
    BusinessRuleError,
    ConfigurationError,
    ExternalAPIError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)
from schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[StorefrontError], int, str]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (BusinessRuleError, status.HTTP_409_CONFLICT, "business_rule_violation"),
    (ExternalAPIError, status.HTTP_502_BAD_GATEWAY, "payment_provider_error"),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE, "not_configured"),
]

# Error bodies documented on every JSON API router
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for _, code, _ in ERROR_STATUS
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan context manager."""
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY is not set, payment actions will fail")

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.app_name,
        description="Storefront driving Stripe checkout, billing portal and balances",
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Security Headers Middleware
    @app.middleware("http")
    async def security_headers_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Add security headers to responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

    # Request ID and timing middleware
    @app.middleware("http")
    async def request_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Add request ID and timing."""
        start_time = time.time()

        request_id = f"{int(start_time * 1000000)}"
        request.state.request_id = request_id

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        return response

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    # Global exception handlers
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(
        request: Request, exc: StorefrontError
    ) -> Response:
        """Map storefront errors to HTTP responses."""
        status_code, error = status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"
        for exc_type, code, name in ERROR_STATUS:
            if isinstance(exc, exc_type):
                status_code, error = code, name
                break

        # Pages render the playground with a banner instead of a JSON body
        if not request.url.path.startswith(API_PREFIX):
            return page_routes.render_error(request, exc.message, status_code)

        body = ErrorResponse(
            error=error,
            description=exc.message,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle internal server errors."""
        logger.error(f"Unhandled error: {exc}", exc_info=exc)
        body = ErrorResponse(
            error="internal_server_error",
            description="An internal server error occurred",
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    # Include routers
    app.include_router(health_routes.router, prefix=API_PREFIX, tags=["Health"])
    app.include_router(
        balance_routes.router,
        prefix=f"{API_PREFIX}/balance",
        tags=["Balance"],
        responses=ERROR_RESPONSES,
    )
    app.include_router(
        subscription_routes.router,
        prefix=f"{API_PREFIX}/subscription",
        tags=["Subscription"],
        responses=ERROR_RESPONSES,
    )
    app.include_router(page_routes.router, tags=["Pages"])

    return app


# Create the app instance
app = create_app()

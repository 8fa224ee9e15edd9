"""Storefront FastAPI application.

Usage:
    uvicorn storefront.infrastructure.web.app:create_app --factory --port 8000

Every response, success or failure, uses the envelope from
``storefront.infrastructure.web.envelope``.  Domain exceptions raised by
the handlers are mapped to HTTP status codes here and nowhere else.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainException,
    EmptyCartError,
    EntityNotFoundError,
    InsufficientStockError,
    PermissionDeniedError,
    StatusUnchangedError,
    ValidationError,
)
from storefront.infrastructure import bootstrap
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.web import envelope
from storefront.infrastructure.web.auth_routes import router as auth_router
from storefront.infrastructure.web.cart_routes import router as cart_router
from storefront.infrastructure.web.order_routes import router as order_router
from storefront.infrastructure.web.product_routes import router as product_router

logger = structlog.get_logger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_EXCEPTION: list[tuple[type[DomainException], int]] = [
    (AuthenticationError, 401),
    (PermissionDeniedError, 403),
    (EntityNotFoundError, 404),
    (ConflictError, 409),
    (EmptyCartError, 400),
    (InsufficientStockError, 400),
    (StatusUnchangedError, 400),
    (ValidationError, 400),
]


def status_for(exc: DomainException) -> int:
    for exc_type, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return 400


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------
async def _domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    return envelope.error(request, exc.message, exc.errors, status_code=status_for(exc))


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "request"] = err.get("msg", "Invalid value.")
    return envelope.error(request, "Validation failed.", errors, status_code=422)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return envelope.error(request, str(exc.detail), status_code=exc.status_code)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception", method=request.method, path=request.url.path
    )
    settings: Settings = request.app.state.settings
    errors = {"error": f"{type(exc).__name__}: {exc}"} if settings.debug else {}
    return envelope.error(
        request, "An unexpected error occurred. Please try again later.", errors, status_code=500
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        version=settings.app_version,
        description="E-commerce backend: catalog, cart, checkout and orders",
    )

    engine = bootstrap.engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = bootstrap.session_factory(engine)
    app.state.password_hasher = bootstrap.password_hasher(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health", tags=["health"])
    def health(request: Request) -> JSONResponse:
        return envelope.success(request, "OK", {"status": "ok"})

    return app

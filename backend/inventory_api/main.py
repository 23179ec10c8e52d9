"""FastAPI application bootstrap and wiring."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from inventory_api.api.dependencies.auth import access_guard
from inventory_api.api.routers import auth, health, products
from inventory_api.core.config import Settings, get_settings
from inventory_api.core.errors import InventoryError, Unauthorized
from inventory_api.core.logging_config import ACCESS_LOGGER, configure_logging
from inventory_api.core.security import AuthService, CredentialStore, TokenService
from inventory_api.db.session import build_engine
from inventory_api.services.product_catalog import ProductCatalogService
from inventory_api.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(ACCESS_LOGGER)

API_DESCRIPTION = """
Endpoints for managing inventory products.

All endpoints except login and the health probes require a JWT. Obtain one
from `POST /auth/login` and send it as `Authorization: Bearer <token>`.
"""


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and latency."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        method, path = request.method, request.url.path
        client = request.client.host if request.client else "-"
        logger.debug(f"Request started: {method} {path} - {client}")

        response = await call_next(request)

        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        operation = getattr(request.scope.get("route"), "name", None) or path
        outcome = "success" if response.status_code < 400 else "failure"
        user_agent = request.headers.get("user-agent", "")
        access_logger.info(
            f"{method} {path} {response.status_code} {latency_ms}ms - {client} - {user_agent}",
            extra={
                "operation": operation,
                "outcome": outcome,
                "latency_ms": latency_ms,
            },
        )
        return response


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
    **extra,
) -> JSONResponse:
    body = {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
        **extra,
    }
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    prefix = f"[{request.method}] {request.url.path} - {exc.status_code}"
    if exc.status_code >= 500:
        logger.error(f"{prefix} - {exc.message}", exc_info=exc)
        return _error_response(request, exc.status_code, "Internal server error")

    logger.warning(f"{prefix} - {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return _error_response(request, exc.status_code, exc.message, headers=headers)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        f"[{request.method}] {request.url.path} - 400 - {len(exc.errors())} validation error(s)"
    )
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        errors=jsonable_encoder(exc.errors()),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"[{request.method}] {request.url.path} - 500 - Unexpected error: {exc}",
        exc_info=exc,
    )
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app and its collaborators from ``settings``.

    Without an explicit value the environment is read through ``get_settings``.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = build_engine(settings.database_url)
    store = DocumentStore(engine)
    credentials = CredentialStore(settings.admin_credentials)
    tokens = TokenService(
        settings.jwt_secret,
        settings.token_lifetime,
        algorithm=settings.jwt_algorithm,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.create_schema()
        logger.info(f"{settings.app_name} started")
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description=API_DESCRIPTION,
        version="1.0.0",
        lifespan=lifespan,
        dependencies=[Depends(access_guard)],
        swagger_ui_parameters={"persistAuthorization": True, "docExpansion": "none"},
    )

    app.state.settings = settings
    app.state.document_store = store
    app.state.token_service = tokens
    app.state.auth_service = AuthService(credentials, tokens)
    app.state.product_service = ProductCatalogService(store)

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(health.router)
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(products.router, prefix="/products", tags=["products"])

    return app

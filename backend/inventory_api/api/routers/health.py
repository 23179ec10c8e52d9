"""Simple health and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_api.api.dependencies.services import get_document_store
from inventory_api.core.errors import StoreUnavailable
from inventory_api.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", name="health_live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates API process is running."""
    return {"status": "ok", "service": "inventory-api"}


@router.get("/ready", name="health_ready", summary="Readiness probe")
def ready(store: DocumentStore = Depends(get_document_store)) -> dict[str, Any]:
    """Check that the document store answers.

    Used by load balancers to determine if traffic should be routed to this instance.
    """
    checks: dict[str, Any] = {
        "status": "ok",
        "service": "inventory-api",
        "checks": {},
    }

    try:
        store.ping()
        checks["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except StoreUnavailable as e:
        logger.error(f"Database health check failed: {e.message}")
        checks["status"] = "unhealthy"
        checks["checks"]["database"] = {
            "status": "unhealthy",
            "message": "Database connection failed",
        }
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        ) from e

    return checks

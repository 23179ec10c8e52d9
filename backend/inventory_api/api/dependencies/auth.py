"""Access guard applied to every API operation.

Whether an operation needs a bearer token is looked up in
``OPERATION_ACCESS`` by route name. Operations missing from the table are
protected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from inventory_api.api.dependencies.services import get_token_service
from inventory_api.core.errors import Unauthorized
from inventory_api.core.security import Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationAccess:
    operation: str
    requires_auth: bool


OPERATION_ACCESS: dict[str, OperationAccess] = {
    entry.operation: entry
    for entry in (
        OperationAccess("login", requires_auth=False),
        OperationAccess("health_live", requires_auth=False),
        OperationAccess("health_ready", requires_auth=False),
        OperationAccess("create_product", requires_auth=True),
        OperationAccess("list_products", requires_auth=True),
        OperationAccess("get_product", requires_auth=True),
        OperationAccess("update_product", requires_auth=True),
        OperationAccess("delete_product", requires_auth=True),
    )
}

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="JWT obtained from POST /auth/login",
)


def requires_auth(operation: str | None) -> bool:
    entry = OPERATION_ACCESS.get(operation) if operation else None
    return True if entry is None else entry.requires_auth


async def access_guard(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity | None:
    """Reject protected operations that lack a valid bearer token.

    On success the decoded identity is stored on ``request.state.identity``.
    """
    operation = getattr(request.scope.get("route"), "name", None)
    if not requires_auth(operation):
        return None

    if credentials is None:
        logger.info(f"Missing bearer token for operation: {operation}")
        raise Unauthorized("Unauthorized")

    identity = get_token_service(request).verify(credentials.credentials)
    request.state.identity = identity
    return identity


def current_identity(request: Request) -> Identity:
    """Identity attached by ``access_guard`` on protected operations."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise Unauthorized("Unauthorized")
    return identity

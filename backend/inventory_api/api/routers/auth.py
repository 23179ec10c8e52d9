"""Admin login endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from inventory_api.api.dependencies.services import get_auth_service
from inventory_api.api.schemas.auth import LoginRequest, LoginResponse
from inventory_api.core.security import AuthService

router = APIRouter()


@router.post(
    "/login",
    name="login",
    summary="Authenticate admin user",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange admin credentials for a JWT.

    Send the token as ``Authorization: Bearer <token>`` on every other
    request.
    """
    issued = auth.login(payload.username, payload.password)
    return LoginResponse(access_token=issued.access_token, username=issued.username)

"""Accessors for the per-app collaborators built in ``create_app``."""

from fastapi import Request

from inventory_api.core.security import AuthService, TokenService
from inventory_api.services.product_catalog import ProductCatalogService
from inventory_api.storage.document_store import DocumentStore


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_product_service(request: Request) -> ProductCatalogService:
    """FastAPI dependency returning the app's product catalog service."""
    return request.app.state.product_service

"""Shared fixtures: in-memory SQLite store, settings and an API client."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from inventory_api.core.config import Settings
from inventory_api.db.session import build_engine
from inventory_api.main import create_app
from inventory_api.services.product_catalog import ProductCatalogService
from inventory_api.storage.document_store import DocumentStore

JWT_SECRET = "test-signing-secret"
ADMIN1_PASSWORD = "first-admin-pass"
ADMIN2_PASSWORD = "second-admin-pass"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=JWT_SECRET,
        jwt_expiration="1h",
        database_url="sqlite://",
        admin1_username="admin1",
        admin1_password=ADMIN1_PASSWORD,
        admin2_username="admin2",
        admin2_password=ADMIN2_PASSWORD,
        log_dir="",
        log_level="WARNING",
    )


@pytest.fixture
def store() -> Iterator[DocumentStore]:
    engine = build_engine("sqlite://")
    document_store = DocumentStore(engine)
    document_store.create_schema()
    yield document_store
    engine.dispose()


@pytest.fixture
def catalog(store: DocumentStore) -> ProductCatalogService:
    return ProductCatalogService(store)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/auth/login", json={"username": "admin1", "password": ADMIN1_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def product_payload(**overrides) -> dict:
    payload = {
        "name": "Wireless Headphones",
        "description": "High-quality wireless headphones with noise cancellation",
        "price": 9999,
        "stock": 100,
        "category": "Electronics",
    }
    payload.update(overrides)
    return payload

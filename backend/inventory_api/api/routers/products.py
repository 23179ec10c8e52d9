"""CRUD + filtering endpoints for inventory products."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from inventory_api.api.dependencies.auth import current_identity
from inventory_api.api.dependencies.services import get_product_service
from inventory_api.api.schemas.product import (
    Category,
    DeletedProduct,
    Product,
    ProductCreate,
    ProductPage,
    ProductQuery,
    ProductUpdate,
    SortField,
    SortOrder,
)
from inventory_api.core.security import Identity
from inventory_api.services.product_catalog import ProductCatalogService

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    401: {"description": "Invalid or missing token"},
    500: {"description": "Database operation failed"},
}
_NOT_FOUND = {404: {"description": "No product exists with the specified ID"}}


@router.post(
    "",
    name="create_product",
    summary="Create a new product",
    status_code=status.HTTP_201_CREATED,
    response_model=Product,
    responses={400: {"description": "Invalid input data"}, **_ERRORS},
)
def create_product(
    payload: ProductCreate,
    service: ProductCatalogService = Depends(get_product_service),
    identity: Identity = Depends(current_identity),
) -> Product:
    """Add a product with name, description, price, stock and category."""
    product = service.create(payload)
    logger.info(f"Product {product.id} created by {identity.username}")
    return product


@router.get(
    "",
    name="list_products",
    summary="Get products with pagination and filtering",
    response_model=ProductPage,
    responses={400: {"description": "Invalid query parameters"}, **_ERRORS},
)
def list_products(
    page: int = Query(1, description="Page number (starts from 1)"),
    limit: int = Query(10, description="Items per page (1-100)"),
    name: str | None = Query(
        None, description="Case-insensitive match on the start of the product name"
    ),
    category: Category | None = Query(None, description="Exact category match"),
    min_price: int | None = Query(
        None, alias="minPrice", ge=0, description="Minimum price (inclusive)"
    ),
    max_price: int | None = Query(
        None, alias="maxPrice", ge=0, description="Maximum price (inclusive)"
    ),
    sort_by: SortField = Query(SortField.NAME, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
    service: ProductCatalogService = Depends(get_product_service),
) -> ProductPage:
    """Return one page of products.

    Filters are combined with AND logic. Examples:

    - ``/products?page=2&limit=20``
    - ``/products?name=head`` (names starting with "head", any case)
    - ``/products?category=Electronics&minPrice=1000&maxPrice=5000``
    - ``/products?sortBy=price&sortOrder=desc``
    """
    query = ProductQuery(
        page=page,
        limit=limit,
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return service.list(query)


@router.get(
    "/{product_id}",
    name="get_product",
    summary="Get a product by ID",
    response_model=Product,
    responses={**_NOT_FOUND, **_ERRORS},
)
def get_product(
    product_id: str,
    service: ProductCatalogService = Depends(get_product_service),
) -> Product:
    return service.get(product_id)


@router.patch(
    "/{product_id}",
    name="update_product",
    summary="Update a product",
    response_model=Product,
    responses={400: {"description": "Invalid input data"}, **_NOT_FOUND, **_ERRORS},
)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductCatalogService = Depends(get_product_service),
    identity: Identity = Depends(current_identity),
) -> Product:
    """Update an existing product. Only the provided fields are changed."""
    product = service.update(product_id, payload)
    logger.info(f"Product {product_id} updated by {identity.username}")
    return product


@router.delete(
    "/{product_id}",
    name="delete_product",
    summary="Delete a product",
    response_model=DeletedProduct,
    responses={**_NOT_FOUND, **_ERRORS},
)
def delete_product(
    product_id: str,
    service: ProductCatalogService = Depends(get_product_service),
    identity: Identity = Depends(current_identity),
) -> DeletedProduct:
    """Remove a product from the inventory (hard delete)."""
    result = service.remove(product_id)
    logger.info(f"Product {product_id} deleted by {identity.username}")
    return result

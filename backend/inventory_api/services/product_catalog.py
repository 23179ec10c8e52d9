"""Product domain operations on top of the document store."""

from __future__ import annotations

import logging
from typing import Any

from inventory_api.api.schemas.product import (
    DeletedProduct,
    Product,
    ProductCreate,
    ProductPage,
    ProductQuery,
    ProductUpdate,
    SortField,
    SortOrder,
)
from inventory_api.core.errors import NotFound
from inventory_api.storage.document_store import (
    DocumentStore,
    FieldFilter,
    QueryOptions,
    SortSpec,
    prefix_range,
)
from inventory_api.utils.pagination import page_meta

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"
# Lowercase shadow of ``name``; stored for prefix search, never returned.
SEARCH_FIELD = "nameSearch"

SORT_VALUE_TYPES = {
    SortField.NAME: str,
    SortField.PRICE: int,
    SortField.STOCK: int,
    SortField.CATEGORY: str,
}


def search_fields(name: str) -> dict[str, str]:
    return {SEARCH_FIELD: name.lower()}


class ProductCatalogService:
    def __init__(
        self, store: DocumentStore, collection: str = PRODUCTS_COLLECTION
    ) -> None:
        self._store = store
        self._collection = collection

    def create(self, payload: ProductCreate) -> Product:
        """Store a new product and return it with its assigned id.

        The result is built from ``payload``; the stored document is not
        read back.
        """
        logger.info(f"Creating new product: {payload.name}")
        data = payload.model_dump(mode="json")
        product_id = self._store.add(
            self._collection, {**data, **search_fields(payload.name)}
        )
        logger.info(f"Product created with ID: {product_id}")
        return Product(id=product_id, **data)

    def list(self, query: ProductQuery) -> ProductPage:
        """Return one page of products plus pagination metadata.

        ``name`` matches case-insensitively on the start of the product name
        ("wire" finds "Wireless Mouse", "mouse" does not).
        """
        logger.info(
            f"Retrieving products with pagination and filters: "
            f"{query.model_dump(by_alias=True, exclude_none=True, mode='json')}"
        )
        options = QueryOptions(
            filters=self._filters(query),
            sort=SortSpec(
                field=query.sort_by.value,
                descending=query.sort_order is SortOrder.DESC,
                value_type=SORT_VALUE_TYPES[query.sort_by],
            ),
            page=query.page,
            page_size=query.limit,
        )
        result = self._store.query_page(self._collection, options)
        meta = page_meta(result.total, query.page, query.limit)

        logger.info(
            f"Retrieved {len(result.items)} products "
            f"(page {query.page} of {meta.total_pages})"
        )
        return ProductPage(
            items=[Product.model_validate(item) for item in result.items],
            total=result.total,
            page=query.page,
            limit=query.limit,
            total_pages=meta.total_pages,
            has_next_page=meta.has_next_page,
            has_previous_page=meta.has_previous_page,
        )

    def get(self, product_id: str) -> Product:
        logger.info(f"Retrieving product with ID: {product_id}")
        product = self._fetch(product_id)
        logger.info(f"Retrieved product: {product['name']}")
        return Product.model_validate(product)

    def update(self, product_id: str, payload: ProductUpdate) -> Product:
        """Apply a partial update and return the merged view.

        Existence is checked before writing. The returned product is the
        fetched document overlaid with the changes, not a fresh read.
        """
        logger.info(f"Updating product with ID: {product_id}")
        existing = self._fetch(product_id, action="update")

        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        to_write = dict(changes)
        if "name" in changes:
            to_write.update(search_fields(changes["name"]))

        self._store.update(self._collection, product_id, to_write)
        logger.info(f"Product {product_id} updated successfully")
        return Product.model_validate({**existing, **changes, "id": product_id})

    def remove(self, product_id: str) -> DeletedProduct:
        logger.info(f"Deleting product with ID: {product_id}")
        self._fetch(product_id, action="deletion")
        self._store.delete(self._collection, product_id)
        logger.info(f"Product {product_id} deleted successfully")
        return DeletedProduct(id=product_id, deleted=True)

    def _fetch(self, product_id: str, action: str | None = None) -> dict[str, Any]:
        product = self._store.get(self._collection, product_id)
        if product is None:
            suffix = f" for {action}" if action else ""
            logger.warning(f"Product with ID {product_id} not found{suffix}")
            raise NotFound(f"Product with ID {product_id} not found")
        return product

    @staticmethod
    def _filters(query: ProductQuery) -> tuple[FieldFilter, ...]:
        filters: list[FieldFilter] = []
        if query.name:
            filters.extend(prefix_range(SEARCH_FIELD, query.name.lower()))
        if query.category is not None:
            filters.append(FieldFilter("category", "==", query.category.value))
        if query.min_price is not None:
            filters.append(FieldFilter("price", ">=", query.min_price))
        if query.max_price is not None:
            filters.append(FieldFilter("price", "<=", query.max_price))
        return tuple(filters)

"""Schema-less document collections on top of SQLAlchemy.

Each collection holds flat field maps keyed by a store-assigned string id.
Filtering, sorting and pagination are pushed down to the database through
JSON path accessors, so ``query_page`` issues exactly one count query and
one page query.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from inventory_api.core.errors import InvalidArgument, NotFound, StoreUnavailable
from inventory_api.db.base import Base
from inventory_api.db.models.document import Document
from inventory_api.db.session import build_session_factory, session_scope

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
# Sorts after any realistic input, so [p, p + sentinel) covers every string starting with p.
PREFIX_SENTINEL = "\uf8ff"

_OPERATORS = {"==", ">=", "<=", ">", "<"}


@dataclass(frozen=True)
class FieldFilter:
    """Single ``field <op> value`` predicate on a document field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False
    value_type: type = str


@dataclass(frozen=True)
class QueryOptions:
    filters: tuple[FieldFilter, ...] = ()
    sort: SortSpec | None = None
    page: int = 1
    page_size: int = 10


@dataclass
class QueryPage:
    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


def prefix_range(field_name: str, prefix: str) -> tuple[FieldFilter, FieldFilter]:
    """Emulate ``startswith(prefix)`` with a half-open range on a sorted field."""
    return (
        FieldFilter(field_name, ">=", prefix),
        FieldFilter(field_name, "<", prefix + PREFIX_SENTINEL),
    )


def validate_pagination(page: int, page_size: int) -> None:
    if page < 1 or page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise InvalidArgument(
            "Invalid pagination parameters. Page must be >= 1 and limit must be "
            f"between 1 and {MAX_PAGE_SIZE}."
        )


class DocumentStore:
    """Generic get/add/update/delete/query over named collections."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = build_session_factory(engine)

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create document tables: {e}", exc_info=True)
            raise StoreUnavailable(f"Database error: {e}") from e

    def ping(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}", exc_info=True)
            raise StoreUnavailable(f"Database error: {e}") from e

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document with its ``id``, or None when absent."""
        logger.info(f"Retrieving document {doc_id} from collection: {collection}")
        try:
            with session_scope(self._session_factory) as db:
                doc = db.get(Document, (collection, doc_id))
                if doc is None:
                    logger.warning(
                        f"Document {doc_id} not found in collection {collection}"
                    )
                    return None
                return self._to_dict(doc)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to retrieve document {doc_id} from collection {collection}: {e}",
                exc_info=True,
            )
            raise StoreUnavailable(f"Database error: {e}") from e

    def add(self, collection: str, data: dict[str, Any]) -> str:
        logger.info(f"Adding document to collection: {collection}")
        doc_id = uuid.uuid4().hex
        try:
            with session_scope(self._session_factory) as db:
                db.add(
                    Document(
                        collection=collection,
                        id=doc_id,
                        data=self._without_id(data),
                    )
                )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to add document to collection {collection}: {e}",
                exc_info=True,
            )
            raise StoreUnavailable(f"Database error: {e}") from e
        logger.info(f"Document added with ID: {doc_id}")
        return doc_id

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        """Overwrite the fields present in ``partial``; others stay untouched."""
        logger.info(f"Updating document {doc_id} in collection: {collection}")
        try:
            with session_scope(self._session_factory) as db:
                doc = db.get(Document, (collection, doc_id))
                if doc is None:
                    logger.warning(
                        f"Document {doc_id} not found in collection {collection} for update"
                    )
                    raise NotFound(
                        f"Document with ID {doc_id} not found in collection {collection}"
                    )
                # Reassign so SQLAlchemy sees the JSON column change.
                doc.data = {**doc.data, **self._without_id(partial)}
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to update document {doc_id} in collection {collection}: {e}",
                exc_info=True,
            )
            raise StoreUnavailable(f"Database error: {e}") from e
        logger.info(f"Document {doc_id} updated successfully")

    def delete(self, collection: str, doc_id: str) -> None:
        logger.info(f"Deleting document {doc_id} from collection: {collection}")
        try:
            with session_scope(self._session_factory) as db:
                doc = db.get(Document, (collection, doc_id))
                if doc is None:
                    logger.warning(
                        f"Document {doc_id} not found in collection {collection} for deletion"
                    )
                    raise NotFound(
                        f"Document with ID {doc_id} not found in collection {collection}"
                    )
                db.delete(doc)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to delete document {doc_id} from collection {collection}: {e}",
                exc_info=True,
            )
            raise StoreUnavailable(f"Database error: {e}") from e
        logger.info(f"Document {doc_id} deleted successfully")

    def query_page(self, collection: str, options: QueryOptions) -> QueryPage:
        """Filter, count, sort and paginate one collection.

        ``total`` counts every document matching the filters, independent of
        the requested page. A page past the end yields no items.
        """
        validate_pagination(options.page, options.page_size)
        logger.info(
            f"Retrieving documents from {collection} with options: "
            f"page={options.page} limit={options.page_size} "
            f"filters={[(f.field, f.op, f.value) for f in options.filters]} "
            f"sort={options.sort}"
        )

        conditions = [Document.collection == collection]
        conditions += [self._predicate(f) for f in options.filters]

        try:
            with session_scope(self._session_factory) as db:
                count_query = (
                    select(func.count()).select_from(Document).where(*conditions)
                )
                total = db.scalar(count_query) or 0

                query = select(Document).where(*conditions)
                if options.sort is not None:
                    key = self._typed(options.sort.field, options.sort.value_type)
                    query = query.order_by(
                        key.desc() if options.sort.descending else key.asc()
                    )
                offset = (options.page - 1) * options.page_size
                query = query.offset(offset).limit(options.page_size)

                items = [self._to_dict(doc) for doc in db.scalars(query).all()]
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to retrieve documents from {collection} with options: {e}",
                exc_info=True,
            )
            raise StoreUnavailable(f"Database query error: {e}") from e

        logger.info(
            f"Retrieved {len(items)} documents from {collection} "
            f"(page {options.page}, total: {total})"
        )
        return QueryPage(items=items, total=total)

    def _typed(self, field_name: str, value_type: type):
        """Typed accessor for a JSON field, usable in comparisons and ORDER BY."""
        element = Document.data[field_name]
        if issubclass(value_type, bool):
            return element.as_boolean()
        if issubclass(value_type, int):
            return element.as_integer()
        if issubclass(value_type, float):
            return element.as_float()
        expr = element.as_string()
        if self._engine.dialect.name == "postgresql":
            # Byte order, so the prefix sentinel sorts after every other character.
            expr = expr.collate("C")
        return expr

    def _predicate(self, f: FieldFilter):
        column = self._typed(f.field, type(f.value))
        if f.op == "==":
            return column == f.value
        if f.op == ">=":
            return column >= f.value
        if f.op == "<=":
            return column <= f.value
        if f.op == ">":
            return column > f.value
        return column < f.value

    @staticmethod
    def _without_id(data: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if k != "id"}

    @staticmethod
    def _to_dict(doc: Document) -> dict[str, Any]:
        return {"id": doc.id, **doc.data}

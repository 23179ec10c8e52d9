"""SQLAlchemy model backing the schema-less document collections."""

from sqlalchemy import JSON, Column, String, func
from sqlalchemy.types import DateTime

from inventory_api.db.base import Base


class Document(Base):
    """One field map in a named collection, keyed by a store-assigned id."""

    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    id = Column(String(32), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Document(collection='{self.collection}', id='{self.id}')>"

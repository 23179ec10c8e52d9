"""Database models package."""
from inventory_api.db.models.document import Document

__all__ = ["Document"]

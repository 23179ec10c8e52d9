"""Inventory product API: JWT-gated CRUD over a document collection."""

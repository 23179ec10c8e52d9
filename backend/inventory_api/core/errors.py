"""Domain failures raised by the core and translated at the HTTP boundary."""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for failures the API knows how to report."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(InventoryError):
    """Bad pagination or query parameters, caught before store access."""

    status_code = 400


class Unauthorized(InventoryError):
    """Bad credentials or a missing, invalid or expired token."""

    status_code = 401


class NotFound(InventoryError):
    status_code = 404


class StoreUnavailable(InventoryError):
    """Transport or driver failure from the document store.

    The original exception is chained as ``__cause__`` for logging.
    """

    status_code = 500

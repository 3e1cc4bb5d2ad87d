"""
Error types raised by the catalog layers.

Each error carries the HTTP status the API answers with; main.py turns
them into ``{"message": ...}`` bodies.
"""


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Missing or invalid required input."""
    status_code = 400


class NotFoundError(CatalogError):
    """Referenced document does not exist."""
    status_code = 404


class UpstreamError(CatalogError):
    """The external file host failed."""
    status_code = 500


class StoreError(CatalogError):
    """The database is unavailable or a query failed."""
    status_code = 500

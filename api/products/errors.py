"""
Product errors.

The repository raises these; `service.py` turns them into HTTP responses.
"""

from __future__ import annotations


class ProductError(RuntimeError):
    pass


class ProductValidationError(ProductError):
    """Request input could not be parsed. Client error, never retried."""


class InvalidProductId(ProductValidationError):
    def __init__(self, raw: object) -> None:
        super().__init__(f"Invalid product id: {raw!r}.")
        self.raw = raw


class ProductNotFound(ProductError):
    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found.")
        self.product_id = product_id


class StorageError(ProductError):
    """A database round trip failed. Carries the operation name, not the parameters."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or f"Storage failure during {operation}.")
        self.operation = operation


class ProductDecodeError(ProductError):
    def __init__(self, row_id: object, fields: list[str]) -> None:
        super().__init__(f"Product row {row_id!r} could not be decoded (fields: {', '.join(fields) or '?'}).")
        self.row_id = row_id
        self.fields = fields

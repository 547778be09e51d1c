"""
Domain exceptions for the ArtStock application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ArtStockError(Exception):
    """Base exception for all ArtStock errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Not Found Exceptions
class NotFoundError(ArtStockError):
    """Referenced entity does not exist."""

    pass


class MaterialNotFoundError(NotFoundError):
    """Material not found in the catalog."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
            details={"order_id": order_id},
        )


class PictureNotFoundError(NotFoundError):
    """Picture not found."""

    def __init__(self, picture_id: str):
        super().__init__(
            f"Picture not found: {picture_id}",
            code="PICTURE_NOT_FOUND",
            details={"picture_id": picture_id},
        )


class PictureSizeNotFoundError(NotFoundError):
    """Picture size not found."""

    def __init__(self, picture_size_id: str):
        super().__init__(
            f"Picture size not found: {picture_size_id}",
            code="PICTURE_SIZE_NOT_FOUND",
            details={"picture_size_id": picture_size_id},
        )


# Validation Exceptions
class ValidationError(ArtStockError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidStatusTransitionError(ValidationError):
    """Order status change not permitted by the transition table."""

    def __init__(self, order_id: str, current: str, requested: str):
        super().__init__(
            field="status",
            message=f"Cannot move order from {current} to {requested}",
            value=requested,
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details.update(
            {
                "order_id": order_id,
                "current_status": current,
                "requested_status": requested,
            }
        )


# Concurrency Exceptions
class ConcurrencyConflict(ArtStockError):
    """A concurrent writer won the race for the same row or number."""

    def __init__(self, resource: str, reason: str, attempts: int | None = None):
        super().__init__(
            f"Concurrency conflict on {resource}: {reason}",
            code="CONCURRENCY_CONFLICT",
            details={"resource": resource, "reason": reason, "attempts": attempts},
        )


# Cascade Warnings
class CascadeWarning(ArtStockError):
    """
    Non-fatal failure of one side effect.

    Raised only inside the per-picture loop of a status transition or a bulk
    recalculation; callers collect it and return it beside the primary result.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        order_id: str | None = None,
        picture_id: str | None = None,
        material_id: str | None = None,
        quantity: float | None = None,
    ):
        super().__init__(
            message,
            code="CASCADE_WARNING",
            details={
                "operation": operation,
                "order_id": order_id,
                "picture_id": picture_id,
                "material_id": material_id,
                "quantity": quantity,
            },
        )
        self.operation = operation
        self.order_id = order_id
        self.picture_id = picture_id
        self.material_id = material_id
        self.quantity = quantity


# Storage Exceptions
class StorageError(ArtStockError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(ArtStockError):
    """Configuration error."""

    pass

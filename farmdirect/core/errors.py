"""Domain exceptions raised by the order service and the auth layer."""

from typing import Any, Dict, Optional


class FarmDirectError(Exception):
    """Base exception for all farmdirect domain errors."""

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.message = message
        self.extra = extra or {}
        super().__init__(message)


class ValidationError(FarmDirectError):
    """Raised when input is well-formed but violates a business rule."""

    pass


class InsufficientStockError(ValidationError):
    """Raised when a requested quantity exceeds a product's current stock."""

    def __init__(self, product_id: int, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product: {product_name}",
            extra={"product_id": product_id, "available": available, "requested": requested},
        )


class InvalidTransitionError(FarmDirectError):
    """Raised when an order status change is not allowed from its current status."""

    def __init__(self, current: str, requested: str, message: Optional[str] = None):
        self.current = current
        self.requested = requested
        super().__init__(
            message or f"Cannot change order status from {current} to {requested}",
            extra={"current_status": current, "requested_status": requested},
        )


class NotFoundError(FarmDirectError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ForbiddenError(FarmDirectError):
    """Raised when the caller is authenticated but may not touch the resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ConflictError(FarmDirectError):
    """Raised when a write collides with existing data, e.g. a taken email."""

    pass


class UnauthenticatedError(FarmDirectError):
    """Raised when the request carries no usable identity."""

    pass


class InvalidTokenError(UnauthenticatedError):
    """Raised when a bearer token is malformed, badly signed or expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class UnknownSubjectError(UnauthenticatedError):
    """Raised when a valid token names a user that no longer exists."""

    def __init__(self, subject: Any):
        self.subject = subject
        super().__init__("Token subject is not a known user")


class InternalError(FarmDirectError):
    """Raised for unexpected failures; the client only sees a generic message."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)

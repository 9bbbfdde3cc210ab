"""Typed failures raised by the inventory services.

Every error carries a stable ``code`` so the HTTP layer can map it to a
status without inspecting message text.
"""


class MovementError(Exception):
    """Base class for inventory movement failures."""

    code = "movement_error"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__
        self.context = context

    def as_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, **self.context}


class ProductNotFound(MovementError):
    """Product not found."""

    code = "not_found"


class MovementNotFound(MovementError):
    """Movement not found."""

    code = "not_found"


class MovementForbidden(MovementError):
    """Actor may not create this movement type."""

    code = "forbidden"


class InsufficientStock(MovementError):
    """Insufficient stock."""

    code = "insufficient_stock"

    def __init__(self, *, product_id, requested: int, available: int):
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}",
            product_id=str(product_id),
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class SaleAlreadyCancelled(MovementError):
    """Sale already cancelled."""

    code = "already_cancelled"


class InvalidInput(MovementError):
    """Invalid movement input."""

    code = "invalid_input"

    def __init__(self, message: str = "", errors: dict | None = None):
        super().__init__(message, errors=errors or {})
        self.errors = errors or {}


class StockConflict(MovementError):
    """Concurrent stock update detected; please retry."""

    code = "store_conflict"


class BulkMovementFailed(MovementError):
    """Raised when one movement of a bulk request fails.

    Movements before ``failed_index`` are committed and stay committed;
    they are exposed on ``created`` so callers can reconcile.
    """

    def __init__(self, *, failed_index: int, cause: MovementError, created: list | None = None):
        self.failed_index = failed_index
        self.cause = cause
        self.created = list(created or [])
        self.succeeded = len(self.created)
        self.code = cause.code
        super().__init__(
            f"Movement {failed_index} failed: {cause.message}",
            failed_index=failed_index,
            succeeded=self.succeeded,
            committed_ids=[str(m.id) for m in self.created],
            cause=cause.as_dict(),
        )


# EOF

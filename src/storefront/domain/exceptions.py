"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and the result envelope can catch them uniformly and display
user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ProductDeletedError(EntityNotFoundError):
    """The product exists in the catalog but has been soft-deleted."""


class OptionMismatchError(ValidationError):
    """Selected option values do not match the product's option types."""


class InsufficientStockError(ValidationError):
    """Fewer units are available than were requested."""

    def __init__(self, available: int, requested: int, item: str | None = None) -> None:
        self.available = available
        self.requested = requested
        self.item = item
        prefix = f"Insufficient stock for {item}" if item else "Insufficient stock"
        super().__init__(f"{prefix}. Available: {available}, Requested: {requested}")


class EmptyCartError(ValidationError):
    """An order cannot be created from an empty cart."""


class InvalidTransitionError(DomainException):
    """The order cannot move from its current status to the requested one."""

    def __init__(self, current: str, attempted: str, reason: str | None = None) -> None:
        self.current = current
        self.attempted = attempted
        message = f"Cannot change order status from {current} to {attempted}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnauthorizedError(DomainException):
    """The actor is not allowed to perform the operation."""


class PaymentFailedError(DomainException):
    """The payment gateway rejected a capture."""


class RefundFailedError(DomainException):
    """The refund failed or its outcome is unknown; the order is unchanged."""


class StockLedgerError(DomainException):
    """A stock counter write failed and needs operator attention."""


class ConcurrentUpdateError(DomainException):
    """The order changed after it was loaded; the write was refused."""

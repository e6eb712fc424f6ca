"""Error taxonomy shared by the booking, ledger and refund modules."""


class ServiceError(Exception):
    """Base class for errors surfaced by core operations."""

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NotFoundError(ServiceError):
    """Raised when an item, booking, refund or transaction does not exist."""

    default_message = "Resource not found"


class UnauthenticatedError(ServiceError):
    default_message = "Not logged in"


class ForbiddenError(ServiceError):
    """Raised when a resource belongs to another account."""

    default_message = "Access denied"


class ConflictError(ServiceError):
    default_message = "Conflicting state"


class InsufficientFundsError(ServiceError):
    default_message = "Insufficient wallet balance"


class CapacityExceededError(ServiceError):
    default_message = "This item is fully booked"


class InvalidStateError(ServiceError):
    """Raised when resolving a refund or transaction that is no longer pending."""

    default_message = "Resource is not in a valid state for this operation"


class AlreadyCancelledError(ServiceError):
    default_message = "This booking has already been cancelled"


class InvalidReferralError(ServiceError):
    default_message = "Invalid referral code provided"


class StoreUnavailableError(ServiceError):
    """Raised when the database fails mid-unit; nothing from the unit was kept."""

    default_message = "Store temporarily unavailable, please retry"


__all__ = [
    "ServiceError",
    "NotFoundError",
    "UnauthenticatedError",
    "ForbiddenError",
    "ConflictError",
    "InsufficientFundsError",
    "CapacityExceededError",
    "InvalidStateError",
    "AlreadyCancelledError",
    "InvalidReferralError",
    "StoreUnavailableError",
]

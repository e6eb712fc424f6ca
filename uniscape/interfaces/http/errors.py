"""Translation of core errors into HTTP responses."""

from fastapi import HTTPException, status

from uniscape.modules.common.exceptions import (
    AlreadyCancelledError,
    CapacityExceededError,
    ConflictError,
    ForbiddenError,
    InsufficientFundsError,
    InvalidReferralError,
    InvalidStateError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
    UnauthenticatedError,
)

_STATUS_BY_ERROR: list[tuple[type[ServiceError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InsufficientFundsError, status.HTTP_402_PAYMENT_REQUIRED),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (AlreadyCancelledError, status.HTTP_409_CONFLICT),
    (InvalidReferralError, status.HTTP_400_BAD_REQUEST),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def to_http_exception(exc: ServiceError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


__all__ = ["to_http_exception"]

"""Booking transaction and cancellation engine."""

from .models import BookingOutcome, BookingRecord, BookingStatus, CancellationOutcome
from .refund_policy import RefundQuote, quote_refund
from .service import BookingService

__all__ = [
    "BookingOutcome",
    "BookingRecord",
    "BookingStatus",
    "BookingService",
    "CancellationOutcome",
    "RefundQuote",
    "quote_refund",
]

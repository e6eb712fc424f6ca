"""Refund request queue and its administrative resolution."""

from .models import RefundRequestRecord, RefundResolution, RefundStatus
from .service import RefundService

__all__ = ["RefundRequestRecord", "RefundResolution", "RefundStatus", "RefundService"]

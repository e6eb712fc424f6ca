"""Domain models for the refund request queue."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class RefundStatus:
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    ALL = (PENDING, APPROVED, DENIED)


@dataclass(slots=True)
class RefundRequestRecord:
    id: str
    account_id: str
    booking_id: str
    item_name: str
    amount_cents: int
    percentage: int
    status: str
    requested_at: Optional[datetime]
    resolved_at: Optional[datetime]
    username: Optional[str] = None
    account_name: Optional[str] = None


@dataclass(slots=True)
class RefundResolution:
    refund: RefundRequestRecord
    new_wallet_balance_cents: Optional[int] = None
    booking_reactivated: bool = False

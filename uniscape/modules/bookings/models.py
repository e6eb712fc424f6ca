"""Domain models for booking records and engine outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class BookingStatus:
    ACTIVE = "active"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class BookingRecord:
    id: str
    account_id: str
    item_id: str
    item_kind: str
    item_name: str
    amount_cents: int
    status: str
    booking_date: datetime

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.ACTIVE


@dataclass(slots=True)
class BookingOutcome:
    booking: BookingRecord
    new_wallet_balance_cents: int
    reactivated: bool = False
    replayed: bool = False


@dataclass(slots=True)
class CancellationOutcome:
    booking: BookingRecord
    refund_percentage: int
    refund_amount_cents: int
    refund_id: Optional[str] = None
    hours_until_event: Optional[float] = None

"""Domain models for wallet balances and the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class EntryType:
    CREDIT = "credit"
    DEBIT = "debit"
    REFUND = "refund"


class EntryStatus:
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(slots=True)
class WalletSnapshot:
    account_id: str
    balance_cents: int
    currency: str
    updated_at: Optional[datetime]


@dataclass(slots=True)
class LedgerEntryRecord:
    id: str
    account_id: str
    amount_cents: int
    currency: str
    type: str
    details: str
    status: str
    booking_id: Optional[str]
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

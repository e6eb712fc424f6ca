"""Repository protocol for wallet balances and ledger entries."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from uniscape.db.models import LedgerEntry as LedgerEntryModel, Wallet as WalletModel


class LedgerRepository(Protocol):
    async def get_wallet(self, account_id: str) -> WalletModel | None:
        ...

    async def create_wallet(self, account_id: str, currency: str) -> WalletModel:
        ...

    async def get_balance(self, account_id: str) -> int | None:
        ...

    async def debit_balance(self, account_id: str, amount_cents: int) -> bool:
        ...

    async def credit_balance(self, account_id: str, amount_cents: int) -> bool:
        ...

    async def add_entry(
        self,
        *,
        account_id: str,
        amount_cents: int,
        currency: str,
        type: str,
        details: str,
        status: str,
        booking_id: str | None = None,
        idempotency_key: str | None = None,
        completed_at: datetime | None = None,
    ) -> LedgerEntryModel:
        ...

    async def get_entry(self, entry_id: str) -> LedgerEntryModel | None:
        ...

    async def find_by_idempotency_key(self, account_id: str, key: str) -> LedgerEntryModel | None:
        ...

    async def complete_pending_entry(self, entry_id: str, completed_at: datetime) -> bool:
        ...

    async def delete_pending_entry(self, entry_id: str) -> bool:
        ...

    async def list_entries(self, account_id: str, limit: int, offset: int) -> Sequence[LedgerEntryModel]:
        ...

    async def list_pending(self, limit: int, offset: int) -> Sequence[LedgerEntryModel]:
        ...

    async def delete_for_account(self, account_id: str) -> None:
        ...

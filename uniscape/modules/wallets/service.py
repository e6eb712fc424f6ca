"""Wallet domain service"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import LedgerEntry as LedgerEntryModel, Wallet as WalletModel
from uniscape.infrastructure.database.repositories.ledger_repository import SqlLedgerRepository
from uniscape.modules.common import (
    ForbiddenError,
    InvalidStateError,
    KeyedLockRegistry,
    NotFoundError,
    account_key,
    atomic,
    ensure_utc,
    utcnow,
)

from .models import EntryStatus, EntryType, LedgerEntryRecord, WalletSnapshot
from .repository import LedgerRepository

if TYPE_CHECKING:
    from uniscape.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    session: AsyncSession
    repository: LedgerRepository
    locks: KeyedLockRegistry
    currency: str = "INR"

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "WalletService":
        return cls(
            session,
            SqlLedgerRepository(session),
            container.locks,
            container.settings.wallet.currency,
        )

    async def ensure_wallet(self, account_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(account_id, self.currency)
        return self._to_snapshot(wallet)

    async def get_wallet(self, account_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_wallet(account_id)
        if wallet is None:
            return WalletSnapshot(account_id=account_id, balance_cents=0, currency=self.currency, updated_at=None)
        return self._to_snapshot(wallet)

    async def list_ledger(self, account_id: str, limit: int = 50, offset: int = 0) -> list[LedgerEntryRecord]:
        rows = await self.repository.list_entries(account_id, limit, offset)
        return [self._to_entry(row) for row in rows]

    async def initiate_transaction(
        self,
        account_id: str,
        amount_cents: int,
        method: str,
    ) -> LedgerEntryRecord:
        """Record an out-of-band payment (cash, QR) awaiting admin confirmation."""
        if amount_cents <= 0:
            raise ValueError("Amount must be positive")
        async with atomic(self.session):
            entry = await self.repository.add_entry(
                account_id=account_id,
                amount_cents=amount_cents,
                currency=self.currency,
                type=EntryType.CREDIT,
                details=f"Pending payment via {method}",
                status=EntryStatus.PENDING,
            )
        logger.info("Account %s initiated %s payment %s for %s", account_id, method, entry.id, amount_cents)
        return self._to_entry(entry)

    async def get_transaction_status(self, account_id: str, transaction_id: str) -> LedgerEntryRecord:
        entry = await self.repository.get_entry(transaction_id)
        if entry is None:
            raise NotFoundError("Transaction not found")
        if entry.account_id != account_id:
            raise ForbiddenError("This transaction belongs to another account.")
        return self._to_entry(entry)

    async def list_pending_transactions(self, limit: int = 100, offset: int = 0) -> list[LedgerEntryRecord]:
        rows = await self.repository.list_pending(limit, offset)
        return [self._to_entry(row) for row in rows]

    async def confirm_transaction(self, transaction_id: str) -> tuple[LedgerEntryRecord, int]:
        """Complete a pending credit and add its amount to the wallet."""
        entry = await self.repository.get_entry(transaction_id)
        if entry is None:
            raise NotFoundError("Transaction not found")
        async with self.locks.hold(account_key(entry.account_id)):
            async with atomic(self.session):
                if entry.type != EntryType.CREDIT or not await self.repository.complete_pending_entry(
                    transaction_id, utcnow()
                ):
                    raise InvalidStateError("Transaction not found or already processed")
                if not await self.repository.credit_balance(entry.account_id, entry.amount_cents):
                    await self.repository.create_wallet(entry.account_id, self.currency)
                    await self.repository.credit_balance(entry.account_id, entry.amount_cents)
                balance = await self.repository.get_balance(entry.account_id)
                entry = await self.repository.get_entry(transaction_id)
        logger.info("Confirmed transaction %s: credited %s to %s", transaction_id, entry.amount_cents, entry.account_id)
        return self._to_entry(entry), balance

    async def reject_transaction(self, transaction_id: str) -> None:
        """Drop a pending credit that never arrived; completed entries stay."""
        async with atomic(self.session):
            if not await self.repository.delete_pending_entry(transaction_id):
                raise InvalidStateError("Transaction not found or not in pending state.")
        logger.info("Rejected pending transaction %s", transaction_id)

    async def grant_credit(
        self,
        account_id: str,
        amount_cents: int,
        details: str,
        *,
        booking_id: Optional[str] = None,
    ) -> None:
        """Add a completed credit inside the caller's unit of work."""
        if not await self.repository.credit_balance(account_id, amount_cents):
            await self.repository.create_wallet(account_id, self.currency)
            await self.repository.credit_balance(account_id, amount_cents)
        await self.repository.add_entry(
            account_id=account_id,
            amount_cents=amount_cents,
            currency=self.currency,
            type=EntryType.CREDIT,
            details=details,
            status=EntryStatus.COMPLETED,
            booking_id=booking_id,
            completed_at=utcnow(),
        )

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            account_id=model.account_id,
            balance_cents=model.balance_cents,
            currency=model.currency,
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def _to_entry(model: LedgerEntryModel) -> LedgerEntryRecord:
        return LedgerEntryRecord(
            id=model.id,
            account_id=model.account_id,
            amount_cents=model.amount_cents,
            currency=model.currency,
            type=model.type,
            details=model.details,
            status=model.status,
            booking_id=model.booking_id,
            created_at=ensure_utc(model.created_at),
            completed_at=ensure_utc(model.completed_at),
        )

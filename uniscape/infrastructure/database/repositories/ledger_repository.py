"""SQLAlchemy implementation for wallet balances and ledger entries"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import LedgerEntry, Wallet


class SqlLedgerRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, account_id: str) -> Wallet | None:
        stmt = (
            select(Wallet)
            .where(Wallet.account_id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_wallet(self, account_id: str, currency: str) -> Wallet:
        wallet = Wallet(account_id=account_id, currency=currency, balance_cents=0)
        self.session.add(wallet)
        await self.session.flush()
        await self.session.refresh(wallet)
        return wallet

    async def get_balance(self, account_id: str) -> int | None:
        stmt = select(Wallet.balance_cents).where(Wallet.account_id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def debit_balance(self, account_id: str, amount_cents: int) -> bool:
        """Subtract from the balance only if it covers the amount."""
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id, Wallet.balance_cents >= amount_cents)
            .values(balance_cents=Wallet.balance_cents - amount_cents)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def credit_balance(self, account_id: str, amount_cents: int) -> bool:
        stmt = (
            update(Wallet)
            .where(Wallet.account_id == account_id)
            .values(balance_cents=Wallet.balance_cents + amount_cents)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

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
    ) -> LedgerEntry:
        entry = LedgerEntry(
            account_id=account_id,
            amount_cents=amount_cents,
            currency=currency,
            type=type,
            details=details,
            status=status,
            booking_id=booking_id,
            idempotency_key=idempotency_key,
            completed_at=completed_at,
        )
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_entry(self, entry_id: str) -> LedgerEntry | None:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.id == entry_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by_idempotency_key(self, account_id: str, key: str) -> LedgerEntry | None:
        stmt = select(LedgerEntry).where(
            LedgerEntry.account_id == account_id,
            LedgerEntry.idempotency_key == key,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def complete_pending_entry(self, entry_id: str, completed_at: datetime) -> bool:
        stmt = (
            update(LedgerEntry)
            .where(LedgerEntry.id == entry_id, LedgerEntry.status == "pending")
            .values(status="completed", completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def delete_pending_entry(self, entry_id: str) -> bool:
        stmt = (
            delete(LedgerEntry)
            .where(LedgerEntry.id == entry_id, LedgerEntry.status == "pending")
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_entries(self, account_id: str, limit: int, offset: int) -> Sequence[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account_id)
            .order_by(desc(LedgerEntry.created_at), desc(LedgerEntry.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_pending(self, limit: int, offset: int) -> Sequence[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.status == "pending")
            .order_by(LedgerEntry.created_at)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def delete_for_account(self, account_id: str) -> None:
        await self.session.execute(delete(LedgerEntry).where(LedgerEntry.account_id == account_id))
        await self.session.execute(delete(Wallet).where(Wallet.account_id == account_id))

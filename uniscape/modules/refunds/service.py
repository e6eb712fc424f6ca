"""Administrative resolution of queued refund requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import Account as AccountModel, RefundRequest as RefundRequestModel
from uniscape.infrastructure.database.repositories.account_repository import SqlAccountRepository
from uniscape.infrastructure.database.repositories.booking_repository import SqlBookingRepository
from uniscape.infrastructure.database.repositories.inventory_repository import SqlInventoryRepository
from uniscape.infrastructure.database.repositories.ledger_repository import SqlLedgerRepository
from uniscape.infrastructure.database.repositories.refund_repository import SqlRefundRepository
from uniscape.modules.accounts.repository import AccountRepository
from uniscape.modules.bookings.models import BookingStatus
from uniscape.modules.bookings.repository import BookingRepository
from uniscape.modules.common import (
    CapacityExceededError,
    InvalidStateError,
    KeyedLockRegistry,
    NotFoundError,
    account_key,
    atomic,
    ensure_utc,
    item_key,
    utcnow,
)
from uniscape.modules.inventory.repository import InventoryRepository
from uniscape.modules.notifications import NotificationDispatcher, NotificationKind
from uniscape.modules.wallets.models import EntryStatus, EntryType
from uniscape.modules.wallets.repository import LedgerRepository

from .models import RefundRequestRecord, RefundResolution, RefundStatus
from .repository import RefundRepository

if TYPE_CHECKING:
    from uniscape.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefundService:
    session: AsyncSession
    refunds: RefundRepository
    accounts: AccountRepository
    bookings: BookingRepository
    items: InventoryRepository
    ledger: LedgerRepository
    locks: KeyedLockRegistry
    notifier: NotificationDispatcher
    currency: str

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "RefundService":
        return cls(
            session=session,
            refunds=SqlRefundRepository(session),
            accounts=SqlAccountRepository(session),
            bookings=SqlBookingRepository(session),
            items=SqlInventoryRepository(session),
            ledger=SqlLedgerRepository(session),
            locks=container.locks,
            notifier=container.notifier,
            currency=container.settings.wallet.currency,
        )

    async def list_refunds(
        self,
        status: str | None = RefundStatus.PENDING,
        limit: int = 100,
        offset: int = 0,
    ) -> list[RefundRequestRecord]:
        rows = await self.refunds.list_requests(status=status, limit=limit, offset=offset)
        return [self._to_record(refund, account) for refund, account in rows]

    async def approve(self, refund_id: str) -> RefundResolution:
        """Credit the refund to the wallet and record it in the ledger, once."""
        refund = await self._require(refund_id)
        async with self.locks.hold(account_key(refund.account_id)):
            async with atomic(self.session):
                now = utcnow()
                if not await self.refunds.resolve(refund_id, status=RefundStatus.APPROVED, resolved_at=now):
                    raise InvalidStateError("Refund request not found or already processed.")
                if not await self.ledger.credit_balance(refund.account_id, refund.amount_cents):
                    await self.ledger.create_wallet(refund.account_id, self.currency)
                    await self.ledger.credit_balance(refund.account_id, refund.amount_cents)
                await self.ledger.add_entry(
                    account_id=refund.account_id,
                    amount_cents=refund.amount_cents,
                    currency=self.currency,
                    type=EntryType.REFUND,
                    details=f"Refund for {refund.item_name}",
                    status=EntryStatus.COMPLETED,
                    booking_id=refund.booking_id,
                    completed_at=now,
                )
                balance = await self.ledger.get_balance(refund.account_id)
                refund = await self.refunds.get(refund_id)
                account = await self.accounts.get_by_id(refund.account_id)

        logger.info("Approved refund %s: credited %s to %s", refund_id, refund.amount_cents, refund.account_id)
        self.notifier.dispatch(
            NotificationKind.REFUND_APPROVED,
            account.email if account else None,
            {
                "name": account.name if account else None,
                "item_name": refund.item_name,
                "amount_cents": refund.amount_cents,
                "new_wallet_balance_cents": balance,
            },
        )
        return RefundResolution(refund=self._to_record(refund, account), new_wallet_balance_cents=balance)

    async def deny(self, refund_id: str) -> RefundResolution:
        """Reject the request and restore the cancelled booking.

        The restored booking takes its slot back; when the item has no free
        slot left the denial is refused and the request stays pending. A
        booking that is already active again (re-booked by its owner) is left
        as it is.
        """
        refund = await self._require(refund_id)
        booking = await self.bookings.get(refund.booking_id)
        keys = [account_key(refund.account_id)]
        if booking is not None:
            keys.append(item_key(booking.item_id))

        async with self.locks.hold(*keys):
            async with atomic(self.session):
                refund = await self.refunds.get(refund_id)
                if refund is None or refund.status != RefundStatus.PENDING:
                    raise InvalidStateError("Refund request not found or already processed.")
                booking = await self.bookings.get(refund.booking_id)
                reactivated = False
                if booking is not None and booking.status == BookingStatus.CANCELLED:
                    if not await self.items.occupy_slot(booking.item_id):
                        raise CapacityExceededError(
                            "No free slot left to restore this booking; approve the refund instead."
                        )
                    reactivated = await self.bookings.reactivate(booking.id)
                if not await self.refunds.resolve(refund_id, status=RefundStatus.DENIED, resolved_at=utcnow()):
                    raise InvalidStateError("Refund request not found or already processed.")
                refund = await self.refunds.get(refund_id)
                account = await self.accounts.get_by_id(refund.account_id)

        logger.info("Denied refund %s (booking %s reactivated=%s)", refund_id, refund.booking_id, reactivated)
        self.notifier.dispatch(
            NotificationKind.REFUND_DENIED,
            account.email if account else None,
            {
                "name": account.name if account else None,
                "item_name": refund.item_name,
                "amount_cents": refund.amount_cents,
            },
        )
        return RefundResolution(refund=self._to_record(refund, account), booking_reactivated=reactivated)

    async def _require(self, refund_id: str) -> RefundRequestModel:
        refund = await self.refunds.get(refund_id)
        if refund is None:
            raise NotFoundError("Refund request not found.")
        return refund

    @staticmethod
    def _to_record(model: RefundRequestModel, account: AccountModel | None = None) -> RefundRequestRecord:
        return RefundRequestRecord(
            id=model.id,
            account_id=model.account_id,
            booking_id=model.booking_id,
            item_name=model.item_name,
            amount_cents=model.amount_cents,
            percentage=model.percentage,
            status=model.status,
            requested_at=ensure_utc(model.requested_at),
            resolved_at=ensure_utc(model.resolved_at),
            username=account.username if account else None,
            account_name=account.name if account else None,
        )

"""Booking transaction engine: wallet debit, occupancy and ledger in one unit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.config import RefundPolicySettings
from uniscape.db.models import Booking as BookingModel, InventoryItem as InventoryItemModel
from uniscape.infrastructure.database.repositories.account_repository import SqlAccountRepository
from uniscape.infrastructure.database.repositories.booking_repository import SqlBookingRepository
from uniscape.infrastructure.database.repositories.inventory_repository import SqlInventoryRepository
from uniscape.infrastructure.database.repositories.ledger_repository import SqlLedgerRepository
from uniscape.infrastructure.database.repositories.refund_repository import SqlRefundRepository
from uniscape.modules.accounts.repository import AccountRepository
from uniscape.modules.common import (
    AlreadyCancelledError,
    CapacityExceededError,
    ConflictError,
    ForbiddenError,
    InsufficientFundsError,
    KeyedLockRegistry,
    NotFoundError,
    account_key,
    atomic,
    ensure_utc,
    item_key,
    utcnow,
)
from uniscape.modules.inventory.models import ItemKind
from uniscape.modules.inventory.repository import InventoryRepository
from uniscape.modules.notifications import NotificationDispatcher, NotificationKind
from uniscape.modules.refunds.repository import RefundRepository
from uniscape.modules.wallets.models import EntryStatus, EntryType
from uniscape.modules.wallets.repository import LedgerRepository

from .models import BookingOutcome, BookingRecord, BookingStatus, CancellationOutcome
from .refund_policy import quote_refund
from .repository import BookingRepository

if TYPE_CHECKING:
    from uniscape.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookingService:
    session: AsyncSession
    accounts: AccountRepository
    items: InventoryRepository
    bookings: BookingRepository
    ledger: LedgerRepository
    refunds: RefundRepository
    locks: KeyedLockRegistry
    notifier: NotificationDispatcher
    refund_policy: RefundPolicySettings
    currency: str
    admin_email: str

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "BookingService":
        settings = container.settings
        return cls(
            session=session,
            accounts=SqlAccountRepository(session),
            items=SqlInventoryRepository(session),
            bookings=SqlBookingRepository(session),
            ledger=SqlLedgerRepository(session),
            refunds=SqlRefundRepository(session),
            locks=container.locks,
            notifier=container.notifier,
            refund_policy=settings.refunds,
            currency=settings.wallet.currency,
            admin_email=settings.notifications.admin_email,
        )

    async def book_item(
        self,
        account_id: str,
        item_id: str,
        *,
        idempotency_key: str | None = None,
    ) -> BookingOutcome:
        """Debit the wallet and take a slot on ``item_id`` for ``account_id``.

        Validation and every write happen inside one unit of work, so a
        failure at any step leaves wallet, occupancy, bookings and ledger
        untouched. A cancelled booking for the same pair is reactivated
        rather than duplicated. Replaying an ``idempotency_key`` that already
        produced a debit returns that booking without charging again; a key
        reused for another item, or whose booking was cancelled since, is a
        conflict.
        """
        async with self.locks.hold(account_key(account_id), item_key(item_id)):
            async with atomic(self.session):
                if idempotency_key:
                    replay = await self._replay(account_id, item_id, idempotency_key)
                    if replay is not None:
                        return replay

                item = await self.items.get(item_id)
                if item is None:
                    raise NotFoundError("Item not found.")
                existing = await self.bookings.find_for(account_id, item_id)
                if existing is not None and existing.status == BookingStatus.ACTIVE:
                    raise ConflictError(f"You have already booked this {_label(item.kind).lower()}.")
                balance = await self.ledger.get_balance(account_id)
                if balance is None or balance < item.price_cents:
                    raise InsufficientFundsError()
                if item.capacity is not None and item.current_bookings >= item.capacity:
                    raise CapacityExceededError(f"This {_label(item.kind).lower()} is fully booked.")

                if not await self.ledger.debit_balance(account_id, item.price_cents):
                    raise InsufficientFundsError()
                if not await self.items.occupy_slot(item_id):
                    raise CapacityExceededError(f"This {_label(item.kind).lower()} is fully booked.")

                now = utcnow()
                booking = await self._activate_booking(account_id, item, existing, now)
                await self.ledger.add_entry(
                    account_id=account_id,
                    amount_cents=item.price_cents,
                    currency=self.currency,
                    type=EntryType.DEBIT,
                    details=f"Booked {_label(item.kind)}: {item.name}",
                    status=EntryStatus.COMPLETED,
                    booking_id=booking.id,
                    idempotency_key=idempotency_key,
                    completed_at=now,
                )
                new_balance = await self.ledger.get_balance(account_id)
                account = await self.accounts.get_by_id(account_id)

        outcome = BookingOutcome(
            booking=self._to_record(booking),
            new_wallet_balance_cents=new_balance,
            reactivated=existing is not None,
        )
        logger.info(
            "Account %s booked %s %s for %s (booking=%s, reactivated=%s)",
            account_id,
            item.kind,
            item_id,
            item.price_cents,
            booking.id,
            outcome.reactivated,
        )
        self.notifier.dispatch(
            NotificationKind.BOOKING_CONFIRMED,
            account.email if account else None,
            {
                "name": account.name if account else None,
                "item_kind": item.kind,
                "item_name": item.name,
                "amount_cents": item.price_cents,
                "event_date": ensure_utc(item.event_date),
                "departure_time": item.departure_time,
                "new_wallet_balance_cents": new_balance,
            },
        )
        return outcome

    async def cancel_booking(self, account_id: str, booking_id: str) -> CancellationOutcome:
        """Cancel an active booking, free its slot and queue any refund due.

        No money moves here; the refund request waits for an administrator.
        """
        snapshot = await self.bookings.get(booking_id)
        if snapshot is None:
            raise NotFoundError("Booking not found.")
        if snapshot.account_id != account_id:
            raise ForbiddenError("This booking belongs to another account.")

        async with self.locks.hold(account_key(account_id), item_key(snapshot.item_id)):
            async with atomic(self.session):
                booking = await self.bookings.get(booking_id)
                if booking is None:
                    raise NotFoundError("Booking not found.")
                if booking.status != BookingStatus.ACTIVE:
                    raise AlreadyCancelledError()
                if not await self.bookings.mark_cancelled(booking_id):
                    raise AlreadyCancelledError()
                item = await self.items.get(booking.item_id)
                await self.items.release_slot(booking.item_id)

                now = utcnow()
                quote = quote_refund(
                    kind=booking.item_kind,
                    amount_cents=booking.amount_cents,
                    event_date=ensure_utc(item.event_date) if item is not None else None,
                    now=now,
                    policy=self.refund_policy,
                )
                refund = None
                if quote.amount_cents > 0:
                    refund = await self.refunds.create(
                        account_id=account_id,
                        booking_id=booking_id,
                        item_name=booking.item_name,
                        amount_cents=quote.amount_cents,
                        percentage=quote.percentage,
                    )
                account = await self.accounts.get_by_id(account_id)
                booking = await self.bookings.get(booking_id)

        logger.info(
            "Account %s cancelled booking %s: refund %s%% (%s), request=%s",
            account_id,
            booking_id,
            quote.percentage,
            quote.amount_cents,
            refund.id if refund else None,
        )
        if refund is not None:
            self.notifier.dispatch(
                NotificationKind.REFUND_REQUESTED,
                self.admin_email,
                {
                    "refund_id": refund.id,
                    "username": account.username if account else None,
                    "name": account.name if account else None,
                    "item_name": booking.item_name,
                    "amount_cents": quote.amount_cents,
                    "percentage": quote.percentage,
                },
            )
        return CancellationOutcome(
            booking=self._to_record(booking),
            refund_percentage=quote.percentage,
            refund_amount_cents=quote.amount_cents,
            refund_id=refund.id if refund else None,
            hours_until_event=quote.hours_until_event,
        )

    async def get_booking(self, account_id: str, booking_id: str) -> BookingRecord:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.")
        if booking.account_id != account_id:
            raise ForbiddenError("This booking belongs to another account.")
        return self._to_record(booking)

    async def list_bookings(
        self,
        account_id: str,
        *,
        kind: str | None = None,
        include_cancelled: bool = False,
    ) -> list[BookingRecord]:
        rows = await self.bookings.list_for_account(account_id, kind=kind, include_cancelled=include_cancelled)
        return [self._to_record(row) for row in rows]

    async def _activate_booking(
        self,
        account_id: str,
        item: InventoryItemModel,
        existing: BookingModel | None,
        now,
    ) -> BookingModel:
        if existing is not None:
            if not await self.bookings.reactivate(existing.id, amount_cents=item.price_cents, booking_date=now):
                raise ConflictError(f"You have already booked this {_label(item.kind).lower()}.")
            return await self.bookings.get(existing.id)
        try:
            return await self.bookings.create(
                account_id=account_id,
                item_id=item.id,
                item_kind=item.kind,
                item_name=item.name,
                amount_cents=item.price_cents,
                booking_date=now,
            )
        except IntegrityError as exc:
            raise ConflictError(f"You have already booked this {_label(item.kind).lower()}.") from exc

    async def _replay(self, account_id: str, item_id: str, idempotency_key: str) -> BookingOutcome | None:
        entry = await self.ledger.find_by_idempotency_key(account_id, idempotency_key)
        if entry is None:
            return None
        booking = await self.bookings.get(entry.booking_id) if entry.booking_id else None
        if booking is None or booking.item_id != item_id:
            raise ConflictError("Idempotency key was already used for a different request.")
        if booking.status != BookingStatus.ACTIVE:
            raise ConflictError("Idempotency key belongs to a booking that has since been cancelled.")
        balance = await self.ledger.get_balance(account_id)
        logger.info("Replaying booking %s for idempotency key %s", booking.id, idempotency_key)
        return BookingOutcome(
            booking=self._to_record(booking),
            new_wallet_balance_cents=balance or 0,
            replayed=True,
        )

    @staticmethod
    def _to_record(model: BookingModel) -> BookingRecord:
        return BookingRecord(
            id=model.id,
            account_id=model.account_id,
            item_id=model.item_id,
            item_kind=model.item_kind,
            item_name=model.item_name,
            amount_cents=model.amount_cents,
            status=model.status,
            booking_date=ensure_utc(model.booking_date),
        )


def _label(kind: str | None) -> str:
    return "Shuttle" if kind == ItemKind.TRANSPORT else "Trip"

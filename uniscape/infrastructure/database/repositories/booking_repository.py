"""SQLAlchemy implementation for booking records."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import Booking, RefundRequest


class SqlBookingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, booking_id: str) -> Booking | None:
        stmt = (
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_for(self, account_id: str, item_id: str) -> Booking | None:
        stmt = (
            select(Booking)
            .where(Booking.account_id == account_id, Booking.item_id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(
        self,
        *,
        account_id: str,
        item_id: str,
        item_kind: str,
        item_name: str,
        amount_cents: int,
        booking_date: datetime,
    ) -> Booking:
        booking = Booking(
            account_id=account_id,
            item_id=item_id,
            item_kind=item_kind,
            item_name=item_name,
            amount_cents=amount_cents,
            status="active",
            booking_date=booking_date,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def reactivate(
        self,
        booking_id: str,
        *,
        amount_cents: int | None = None,
        booking_date: datetime | None = None,
    ) -> bool:
        """Flip a cancelled booking back to active; False if it was not cancelled."""
        values: dict[str, Any] = {"status": "active"}
        if amount_cents is not None:
            values["amount_cents"] = amount_cents
        if booking_date is not None:
            values["booking_date"] = booking_date
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == "cancelled")
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def mark_cancelled(self, booking_id: str) -> bool:
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == "active")
            .values(status="cancelled")
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_for_account(
        self,
        account_id: str,
        *,
        kind: str | None,
        include_cancelled: bool,
    ) -> Sequence[Booking]:
        stmt = select(Booking).where(Booking.account_id == account_id)
        if kind:
            stmt = stmt.where(Booking.item_kind == kind)
        if not include_cancelled:
            stmt = stmt.where(Booking.status == "active")
        stmt = stmt.order_by(desc(Booking.booking_date))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_active_item_ids(self, account_id: str) -> Sequence[str]:
        stmt = select(Booking.item_id).where(
            Booking.account_id == account_id,
            Booking.status == "active",
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def delete_for_account(self, account_id: str) -> None:
        booking_ids = select(Booking.id).where(Booking.account_id == account_id).scalar_subquery()
        await self.session.execute(
            delete(RefundRequest)
            .where(RefundRequest.booking_id.in_(booking_ids))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(RefundRequest)
            .where(RefundRequest.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(Booking).where(Booking.account_id == account_id).execution_options(synchronize_session=False)
        )

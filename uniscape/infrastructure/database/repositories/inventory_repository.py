"""SQLAlchemy implementation for inventory items."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import Account, Booking, InventoryItem, RefundRequest


class SqlInventoryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, **fields: Any) -> InventoryItem:
        item = InventoryItem(current_bookings=0, **fields)
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def get(self, item_id: str) -> InventoryItem | None:
        stmt = (
            select(InventoryItem)
            .where(InventoryItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_items(self, *, kind: str | None, status: str | None) -> Sequence[InventoryItem]:
        stmt = select(InventoryItem)
        if kind:
            stmt = stmt.where(InventoryItem.kind == kind)
        if status:
            stmt = stmt.where(InventoryItem.status == status)
        stmt = stmt.order_by(InventoryItem.event_date.is_(None), InventoryItem.event_date, InventoryItem.name)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_fields(self, item_id: str, values: dict[str, Any]) -> InventoryItem | None:
        if values:
            stmt = (
                update(InventoryItem)
                .where(InventoryItem.id == item_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(stmt)
        return await self.get(item_id)

    async def occupy_slot(self, item_id: str) -> bool:
        """Take one slot, refusing when the item is already at capacity."""
        stmt = (
            update(InventoryItem)
            .where(
                InventoryItem.id == item_id,
                or_(
                    InventoryItem.capacity.is_(None),
                    InventoryItem.current_bookings < InventoryItem.capacity,
                ),
            )
            .values(current_bookings=InventoryItem.current_bookings + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_slot(self, item_id: str) -> bool:
        stmt = (
            update(InventoryItem)
            .where(InventoryItem.id == item_id, InventoryItem.current_bookings > 0)
            .values(current_bookings=InventoryItem.current_bookings - 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def count_active_bookings(self, item_id: str) -> int:
        stmt = select(func.count(Booking.id)).where(
            Booking.item_id == item_id,
            Booking.status == "active",
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_pending_refunds(self, item_id: str) -> int:
        stmt = (
            select(func.count(RefundRequest.id))
            .join(Booking, Booking.id == RefundRequest.booking_id)
            .where(Booking.item_id == item_id, RefundRequest.status == "pending")
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_active_bookers(self, item_id: str) -> Sequence[tuple[Booking, Account]]:
        stmt = (
            select(Booking, Account)
            .join(Account, Account.id == Booking.account_id)
            .where(Booking.item_id == item_id, Booking.status == "active")
            .order_by(Booking.booking_date)
        )
        result = await self.session.execute(stmt)
        return [(booking, account) for booking, account in result.all()]

    async def delete(self, item_id: str) -> None:
        booking_ids = select(Booking.id).where(Booking.item_id == item_id).scalar_subquery()
        await self.session.execute(
            delete(RefundRequest)
            .where(RefundRequest.booking_id.in_(booking_ids))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(Booking).where(Booking.item_id == item_id).execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(InventoryItem).where(InventoryItem.id == item_id).execution_options(synchronize_session=False)
        )

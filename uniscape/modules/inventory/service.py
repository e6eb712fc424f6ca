"""Inventory management: admin CRUD and public catalogue reads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import InventoryItem as InventoryItemModel
from uniscape.infrastructure.database.repositories.inventory_repository import SqlInventoryRepository
from uniscape.modules.common import (
    ConflictError,
    KeyedLockRegistry,
    NotFoundError,
    atomic,
    ensure_utc,
    item_key,
)

from .models import InventoryItem, ItemBooker, ItemCreateInput, ItemKind, ItemStatus, ItemUpdateInput
from .repository import InventoryRepository

if TYPE_CHECKING:
    from uniscape.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InventoryService:
    session: AsyncSession
    repository: InventoryRepository
    locks: KeyedLockRegistry

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "InventoryService":
        return cls(session, SqlInventoryRepository(session), container.locks)

    async def create_item(self, payload: ItemCreateInput) -> InventoryItem:
        _validate_kind_fields(payload.kind, payload.event_date, payload.capacity)
        async with atomic(self.session):
            model = await self.repository.create(
                kind=payload.kind,
                name=payload.name,
                price_cents=payload.price_cents,
                capacity=payload.capacity,
                status=payload.status,
                description=payload.description,
                category=payload.category,
                original_price_cents=payload.original_price_cents,
                event_date=payload.event_date,
                departure_time=payload.departure_time,
                transport_type=payload.transport_type,
            )
        logger.info("Created %s item %s (%s)", model.kind, model.id, model.name)
        return self._to_domain(model)

    async def get_item(self, item_id: str) -> InventoryItem:
        model = await self.repository.get(item_id)
        if model is None:
            raise NotFoundError("Item not found")
        return self._to_domain(model)

    async def list_items(self, *, kind: str | None = None, active_only: bool = True) -> list[InventoryItem]:
        status = ItemStatus.ACTIVE if active_only else None
        rows = await self.repository.list_items(kind=kind, status=status)
        return [self._to_domain(row) for row in rows]

    async def update_item(self, item_id: str, payload: ItemUpdateInput) -> InventoryItem:
        changes = payload.changes()
        async with self.locks.hold(item_key(item_id)):
            async with atomic(self.session):
                current = await self.repository.get(item_id)
                if current is None:
                    raise NotFoundError("Item not found")
                capacity = changes.get("capacity", current.capacity)
                event_date = changes.get("event_date", current.event_date)
                _validate_kind_fields(current.kind, event_date, capacity)
                if capacity is not None and capacity < current.current_bookings:
                    raise ConflictError(
                        f"Capacity cannot be lower than the {current.current_bookings} seats already booked"
                    )
                model = await self.repository.update_fields(item_id, changes)
        logger.info("Updated item %s fields=%s", item_id, sorted(changes))
        return self._to_domain(model)

    async def set_status(self, item_id: str, status: str) -> InventoryItem:
        if status not in ItemStatus.ALL:
            raise ValueError(f"Unknown item status: {status}")
        async with atomic(self.session):
            model = await self.repository.update_fields(item_id, {"status": status})
            if model is None:
                raise NotFoundError("Item not found")
        return self._to_domain(model)

    async def delete_item(self, item_id: str) -> None:
        async with self.locks.hold(item_key(item_id)):
            async with atomic(self.session):
                if await self.repository.get(item_id) is None:
                    raise NotFoundError("Item not found")
                if await self.repository.count_active_bookings(item_id):
                    raise ConflictError("Item still has active bookings")
                if await self.repository.count_pending_refunds(item_id):
                    raise ConflictError("Item still has pending refund requests")
                await self.repository.delete(item_id)
        logger.info("Deleted item %s", item_id)

    async def list_bookers(self, item_id: str) -> list[ItemBooker]:
        if await self.repository.get(item_id) is None:
            raise NotFoundError("Item not found")
        rows = await self.repository.list_active_bookers(item_id)
        return [
            ItemBooker(
                booking_id=booking.id,
                account_id=account.id,
                username=account.username,
                name=account.name,
                email=account.email,
                phone=account.phone,
                amount_cents=booking.amount_cents,
                booking_date=ensure_utc(booking.booking_date),
            )
            for booking, account in rows
        ]

    @staticmethod
    def _to_domain(model: InventoryItemModel) -> InventoryItem:
        return InventoryItem(
            id=model.id,
            kind=model.kind,
            name=model.name,
            price_cents=model.price_cents,
            capacity=model.capacity,
            current_bookings=model.current_bookings,
            status=model.status,
            description=model.description,
            category=model.category,
            original_price_cents=model.original_price_cents,
            event_date=ensure_utc(model.event_date),
            departure_time=model.departure_time,
            transport_type=model.transport_type,
            created_at=model.created_at,
        )


def _validate_kind_fields(kind: str, event_date, capacity) -> None:
    if kind not in ItemKind.ALL:
        raise ValueError(f"Unknown item kind: {kind}")
    if kind == ItemKind.TRIP and event_date is None:
        raise ValueError("Trips require an event date")
    if kind == ItemKind.TRANSPORT and capacity is None:
        raise ValueError("Transport routes require a capacity")

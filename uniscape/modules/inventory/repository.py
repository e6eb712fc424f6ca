"""Repository protocol for inventory items."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from uniscape.db.models import InventoryItem as InventoryItemModel


class InventoryRepository(Protocol):
    async def create(self, **fields: Any) -> InventoryItemModel:
        ...

    async def get(self, item_id: str) -> InventoryItemModel | None:
        ...

    async def list_items(self, *, kind: str | None, status: str | None) -> Sequence[InventoryItemModel]:
        ...

    async def update_fields(self, item_id: str, values: dict[str, Any]) -> InventoryItemModel | None:
        ...

    async def occupy_slot(self, item_id: str) -> bool:
        ...

    async def release_slot(self, item_id: str) -> bool:
        ...

    async def count_active_bookings(self, item_id: str) -> int:
        ...

    async def count_pending_refunds(self, item_id: str) -> int:
        ...

    async def list_active_bookers(self, item_id: str) -> Sequence[Any]:
        ...

    async def delete(self, item_id: str) -> None:
        ...

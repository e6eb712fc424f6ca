"""Repository protocol for booking records."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from uniscape.db.models import Booking as BookingModel


class BookingRepository(Protocol):
    async def get(self, booking_id: str) -> BookingModel | None:
        ...

    async def find_for(self, account_id: str, item_id: str) -> BookingModel | None:
        ...

    async def create(
        self,
        *,
        account_id: str,
        item_id: str,
        item_kind: str,
        item_name: str,
        amount_cents: int,
        booking_date: datetime,
    ) -> BookingModel:
        ...

    async def reactivate(
        self,
        booking_id: str,
        *,
        amount_cents: int | None = None,
        booking_date: datetime | None = None,
    ) -> bool:
        ...

    async def mark_cancelled(self, booking_id: str) -> bool:
        ...

    async def list_for_account(
        self,
        account_id: str,
        *,
        kind: str | None,
        include_cancelled: bool,
    ) -> Sequence[BookingModel]:
        ...

    async def list_active_item_ids(self, account_id: str) -> Sequence[str]:
        ...

    async def delete_for_account(self, account_id: str) -> None:
        ...

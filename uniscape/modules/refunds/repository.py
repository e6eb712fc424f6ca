"""Repository protocol for refund requests."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from uniscape.db.models import RefundRequest as RefundRequestModel


class RefundRepository(Protocol):
    async def create(
        self,
        *,
        account_id: str,
        booking_id: str,
        item_name: str,
        amount_cents: int,
        percentage: int,
    ) -> RefundRequestModel:
        ...

    async def get(self, refund_id: str) -> RefundRequestModel | None:
        ...

    async def resolve(self, refund_id: str, *, status: str, resolved_at: datetime) -> bool:
        ...

    async def list_requests(self, *, status: str | None, limit: int, offset: int) -> Sequence[Any]:
        ...

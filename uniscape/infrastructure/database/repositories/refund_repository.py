"""SQLAlchemy implementation for the refund request queue."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import Account, RefundRequest


class SqlRefundRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        account_id: str,
        booking_id: str,
        item_name: str,
        amount_cents: int,
        percentage: int,
    ) -> RefundRequest:
        refund = RefundRequest(
            account_id=account_id,
            booking_id=booking_id,
            item_name=item_name,
            amount_cents=amount_cents,
            percentage=percentage,
            status="pending",
        )
        self.session.add(refund)
        await self.session.flush()
        await self.session.refresh(refund)
        return refund

    async def get(self, refund_id: str) -> RefundRequest | None:
        stmt = (
            select(RefundRequest)
            .where(RefundRequest.id == refund_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def resolve(self, refund_id: str, *, status: str, resolved_at: datetime) -> bool:
        """Move a pending request to a terminal status exactly once."""
        stmt = (
            update(RefundRequest)
            .where(RefundRequest.id == refund_id, RefundRequest.status == "pending")
            .values(status=status, resolved_at=resolved_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_requests(
        self,
        *,
        status: str | None,
        limit: int,
        offset: int,
    ) -> Sequence[tuple[RefundRequest, Account]]:
        stmt = select(RefundRequest, Account).join(Account, Account.id == RefundRequest.account_id)
        if status and status != "all":
            stmt = stmt.where(RefundRequest.status == status)
        stmt = stmt.order_by(RefundRequest.requested_at).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [(refund, account) for refund, account in result.all()]

"""Tiered refund calculation applied when a booking is cancelled."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from uniscape.core.config import RefundPolicySettings
from uniscape.modules.inventory.models import ItemKind


@dataclass(slots=True, frozen=True)
class RefundQuote:
    percentage: int
    amount_cents: int
    hours_until_event: Optional[float]


def hours_until(event_date: datetime, now: datetime) -> float:
    return (event_date - now).total_seconds() / 3600


def quote_refund(
    *,
    kind: str,
    amount_cents: int,
    event_date: Optional[datetime],
    now: datetime,
    policy: RefundPolicySettings,
) -> RefundQuote:
    """Work out how much of ``amount_cents`` goes back to the booker.

    Shuttle seats are always refunded in full. Trips are refunded in full
    at ``full_refund_hours`` or more before departure, partially from
    ``partial_refund_hours`` up to that, and not at all inside that window.
    Partial amounts round down to the minor unit.
    """
    if kind == ItemKind.TRANSPORT or event_date is None:
        return RefundQuote(100, amount_cents, None)

    hours = hours_until(event_date, now)
    if hours >= policy.full_refund_hours:
        percentage = 100
    elif hours >= policy.partial_refund_hours:
        percentage = policy.partial_refund_percentage
    else:
        percentage = 0
    return RefundQuote(percentage, amount_cents * percentage // 100, hours)

from datetime import datetime, timedelta, timezone

import pytest

from uniscape.core.config import RefundPolicySettings
from uniscape.modules.bookings import quote_refund

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
POLICY = RefundPolicySettings()


def _quote(hours: float, *, kind: str = "trip", amount: int = 10_000):
    return quote_refund(
        kind=kind,
        amount_cents=amount,
        event_date=NOW + timedelta(hours=hours),
        now=NOW,
        policy=POLICY,
    )


@pytest.mark.parametrize(
    ("hours", "percentage", "amount"),
    [
        (72, 100, 10_000),
        (48, 100, 10_000),
        (47.99, 50, 5_000),
        (24, 50, 5_000),
        (23.99, 0, 0),
        (1, 0, 0),
        (-5, 0, 0),
    ],
)
def test_trip_tiers(hours, percentage, amount):
    quote = _quote(hours)
    assert quote.percentage == percentage
    assert quote.amount_cents == amount
    assert quote.hours_until_event == pytest.approx(hours)


def test_partial_refund_rounds_down():
    quote = _quote(30, amount=999)
    assert quote.percentage == 50
    assert quote.amount_cents == 499


def test_transport_is_always_refunded_in_full():
    quote = _quote(0.5, kind="transport", amount=4_500)
    assert quote.percentage == 100
    assert quote.amount_cents == 4_500
    assert quote.hours_until_event is None


def test_custom_thresholds():
    policy = RefundPolicySettings(full_refund_hours=72, partial_refund_hours=12, partial_refund_percentage=25)
    quote = quote_refund(
        kind="trip",
        amount_cents=8_000,
        event_date=NOW + timedelta(hours=48),
        now=NOW,
        policy=policy,
    )
    assert (quote.percentage, quote.amount_cents) == (25, 2_000)

import pytest

from uniscape.modules.bookings import BookingService
from uniscape.modules.common import CapacityExceededError, InvalidStateError, NotFoundError
from uniscape.modules.notifications import NotificationKind
from uniscape.modules.refunds import RefundService
from uniscape.modules.wallets import WalletService


async def _cancelled_booking(session, container, seed, *, capacity=5, hours_ahead=36):
    student = await seed.account("asha", balance_cents=10_000)
    trip = await seed.item(name="Hampi Heritage Walk", price_cents=10_000, capacity=capacity, hours_ahead=hours_ahead)
    bookings = BookingService.with_session(session, container)
    booked = await bookings.book_item(student.id, trip.id)
    cancelled = await bookings.cancel_booking(student.id, booked.booking.id)
    return student, trip, booked.booking, cancelled


async def _top_up(session, container, account_id, amount_cents):
    wallets = WalletService.with_session(session, container)
    entry = await wallets.initiate_transaction(account_id, amount_cents, "cash")
    await wallets.confirm_transaction(entry.id)


async def test_approve_credits_wallet_once(session, container, seed, sender):
    student, _, booking, cancelled = await _cancelled_booking(session, container, seed)
    refunds = RefundService.with_session(session, container)

    resolution = await refunds.approve(cancelled.refund_id)

    assert resolution.refund.status == "approved"
    assert resolution.refund.resolved_at is not None
    assert resolution.new_wallet_balance_cents == 5_000
    assert await seed.balance(student.id) == 5_000

    entry = (await seed.ledger(student.id))[0]
    assert entry.type == "refund"
    assert entry.amount_cents == 5_000
    assert entry.details == "Refund for Hampi Heritage Walk"
    assert entry.booking_id == booking.id

    with pytest.raises(InvalidStateError):
        await refunds.approve(cancelled.refund_id)
    assert await seed.balance(student.id) == 5_000

    await container.notifier.drain()
    approved = sender.of_kind(NotificationKind.REFUND_APPROVED)
    assert [message[1] for message in approved] == ["asha@uni.test"]


async def test_approved_refund_cannot_be_denied(session, container, seed):
    _, _, _, cancelled = await _cancelled_booking(session, container, seed)
    refunds = RefundService.with_session(session, container)
    await refunds.approve(cancelled.refund_id)

    with pytest.raises(InvalidStateError):
        await refunds.deny(cancelled.refund_id)


async def test_unknown_refund(session, container):
    refunds = RefundService.with_session(session, container)

    with pytest.raises(NotFoundError):
        await refunds.approve("missing")
    with pytest.raises(NotFoundError):
        await refunds.deny("missing")


async def test_deny_restores_booking_and_seat(session, container, seed, sender):
    student, trip, booking, cancelled = await _cancelled_booking(session, container, seed)
    refunds = RefundService.with_session(session, container)

    resolution = await refunds.deny(cancelled.refund_id)

    assert resolution.refund.status == "denied"
    assert resolution.booking_reactivated is True
    assert resolution.new_wallet_balance_cents is None
    assert await seed.balance(student.id) == 0
    assert (await seed.reload_item(trip.id)).current_bookings == 1
    restored = await BookingService.with_session(session, container).get_booking(student.id, booking.id)
    assert restored.status == "active"

    with pytest.raises(InvalidStateError):
        await refunds.deny(cancelled.refund_id)

    await container.notifier.drain()
    assert len(sender.of_kind(NotificationKind.REFUND_DENIED)) == 1


async def test_deny_refused_when_item_filled_up(session, container, seed):
    student, trip, _, cancelled = await _cancelled_booking(session, container, seed, capacity=1)
    newcomer = await seed.account("bilal", balance_cents=10_000)
    await BookingService.with_session(session, container).book_item(newcomer.id, trip.id)
    refunds = RefundService.with_session(session, container)

    with pytest.raises(CapacityExceededError):
        await refunds.deny(cancelled.refund_id)

    assert (await seed.reload_item(trip.id)).current_bookings == 1
    pending = await refunds.list_refunds()
    assert [refund.id for refund in pending] == [cancelled.refund_id]
    # Approving is still possible.
    resolution = await refunds.approve(cancelled.refund_id)
    assert resolution.new_wallet_balance_cents == 5_000


async def test_deny_after_rebooking_leaves_occupancy(session, container, seed):
    student, trip, _, cancelled = await _cancelled_booking(session, container, seed)
    await _top_up(session, container, student.id, 10_000)
    await BookingService.with_session(session, container).book_item(student.id, trip.id)

    resolution = await RefundService.with_session(session, container).deny(cancelled.refund_id)

    assert resolution.booking_reactivated is False
    assert (await seed.reload_item(trip.id)).current_bookings == 1


async def test_list_refunds_by_status(session, container, seed):
    _, _, _, cancelled = await _cancelled_booking(session, container, seed)
    refunds = RefundService.with_session(session, container)
    await refunds.approve(cancelled.refund_id)

    assert await refunds.list_refunds() == []
    assert [refund.id for refund in await refunds.list_refunds(status="approved")] == [cancelled.refund_id]
    assert len(await refunds.list_refunds(status=None)) == 1


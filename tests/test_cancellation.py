import pytest

from uniscape.modules.bookings import BookingService
from uniscape.modules.common import AlreadyCancelledError, ForbiddenError, NotFoundError
from uniscape.modules.notifications import NotificationKind
from uniscape.modules.refunds import RefundService

from .conftest import ADMIN_EMAIL


async def _book(session, container, seed, *, hours_ahead=96, kind="trip", price_cents=10_000):
    student = await seed.account("asha", balance_cents=price_cents)
    item = await seed.item(kind=kind, price_cents=price_cents, capacity=10, hours_ahead=hours_ahead)
    service = BookingService.with_session(session, container)
    outcome = await service.book_item(student.id, item.id)
    return service, student, item, outcome.booking


async def test_cancel_well_ahead_queues_full_refund(session, container, seed, sender):
    service, student, trip, booking = await _book(session, container, seed, hours_ahead=96)

    outcome = await service.cancel_booking(student.id, booking.id)

    assert outcome.booking.status == "cancelled"
    assert outcome.refund_percentage == 100
    assert outcome.refund_amount_cents == 10_000
    assert outcome.refund_id is not None
    assert (await seed.reload_item(trip.id)).current_bookings == 0
    # Cancelling moves no money; the refund waits for approval.
    assert await seed.balance(student.id) == 0

    pending = await RefundService.with_session(session, container).list_refunds()
    assert [(refund.id, refund.amount_cents, refund.percentage) for refund in pending] == [
        (outcome.refund_id, 10_000, 100)
    ]
    assert pending[0].username == "asha"

    await container.notifier.drain()
    requested = sender.of_kind(NotificationKind.REFUND_REQUESTED)
    assert len(requested) == 1
    assert requested[0][1] == ADMIN_EMAIL


async def test_cancel_between_one_and_two_days_is_half(session, container, seed):
    service, student, _, booking = await _book(session, container, seed, hours_ahead=36)

    outcome = await service.cancel_booking(student.id, booking.id)

    assert outcome.refund_percentage == 50
    assert outcome.refund_amount_cents == 5_000
    assert outcome.hours_until_event == pytest.approx(36, abs=0.1)


async def test_cancel_inside_a_day_creates_no_request(session, container, seed, sender):
    service, student, trip, booking = await _book(session, container, seed, hours_ahead=12)

    outcome = await service.cancel_booking(student.id, booking.id)

    assert outcome.refund_percentage == 0
    assert outcome.refund_amount_cents == 0
    assert outcome.refund_id is None
    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert await RefundService.with_session(session, container).list_refunds() == []
    await container.notifier.drain()
    assert sender.of_kind(NotificationKind.REFUND_REQUESTED) == []


async def test_cancel_shuttle_is_always_full(session, container, seed):
    service, student, _, booking = await _book(session, container, seed, kind="transport", hours_ahead=1, price_cents=600)

    outcome = await service.cancel_booking(student.id, booking.id)

    assert outcome.refund_percentage == 100
    assert outcome.refund_amount_cents == 600


async def test_cancel_twice(session, container, seed):
    service, student, trip, booking = await _book(session, container, seed)
    await service.cancel_booking(student.id, booking.id)

    with pytest.raises(AlreadyCancelledError):
        await service.cancel_booking(student.id, booking.id)

    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert len(await RefundService.with_session(session, container).list_refunds()) == 1


async def test_cancel_someone_elses_booking(session, container, seed):
    service, _, trip, booking = await _book(session, container, seed)
    intruder = await seed.account("mallory")

    with pytest.raises(ForbiddenError):
        await service.cancel_booking(intruder.id, booking.id)

    assert (await seed.reload_item(trip.id)).current_bookings == 1


async def test_cancel_unknown_booking(session, container, seed):
    student = await seed.account("ghost")

    with pytest.raises(NotFoundError):
        await BookingService.with_session(session, container).cancel_booking(student.id, "no-such-booking")

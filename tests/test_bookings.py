import asyncio

import pytest

from uniscape.core.container import ApplicationContainer
from uniscape.modules.bookings import BookingOutcome, BookingService
from uniscape.modules.common import (
    CapacityExceededError,
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
)
from uniscape.modules.notifications import NotificationKind


async def test_book_trip_debits_wallet_and_records_ledger(session, container, seed, sender):
    student = await seed.account("asha", balance_cents=15_000)
    trip = await seed.item(name="Goa Beach Trip", price_cents=10_000, capacity=30)

    outcome = await BookingService.with_session(session, container).book_item(student.id, trip.id)

    assert outcome.new_wallet_balance_cents == 5_000
    assert outcome.reactivated is False
    assert outcome.booking.status == "active"
    assert outcome.booking.amount_cents == 10_000
    assert outcome.booking.item_name == "Goa Beach Trip"
    assert await seed.balance(student.id) == 5_000
    assert (await seed.reload_item(trip.id)).current_bookings == 1

    latest = (await seed.ledger(student.id))[0]
    assert latest.type == "debit"
    assert latest.status == "completed"
    assert latest.amount_cents == 10_000
    assert latest.details == "Booked Trip: Goa Beach Trip"
    assert latest.booking_id == outcome.booking.id

    await container.notifier.drain()
    confirmations = sender.of_kind(NotificationKind.BOOKING_CONFIRMED)
    assert len(confirmations) == 1
    assert confirmations[0][1] == "asha@uni.test"


async def test_transport_ledger_label(session, container, seed):
    student = await seed.account("ravi", balance_cents=5_000)
    shuttle = await seed.item(kind="transport", name="Campus Loop", price_cents=500, capacity=2)

    await BookingService.with_session(session, container).book_item(student.id, shuttle.id)

    assert (await seed.ledger(student.id))[0].details == "Booked Shuttle: Campus Loop"


async def test_exact_balance_is_enough(session, container, seed):
    student = await seed.account("meera", balance_cents=10_000)
    trip = await seed.item(price_cents=10_000)

    outcome = await BookingService.with_session(session, container).book_item(student.id, trip.id)

    assert outcome.new_wallet_balance_cents == 0


async def test_insufficient_funds_changes_nothing(session, container, seed):
    student = await seed.account("kiran", balance_cents=9_999)
    trip = await seed.item(price_cents=10_000, capacity=5)

    with pytest.raises(InsufficientFundsError):
        await BookingService.with_session(session, container).book_item(student.id, trip.id)

    assert await seed.balance(student.id) == 9_999
    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert [entry.type for entry in await seed.ledger(student.id)] == ["credit"]


async def test_unknown_item(session, container, seed):
    student = await seed.account("nina", balance_cents=10_000)

    with pytest.raises(NotFoundError):
        await BookingService.with_session(session, container).book_item(student.id, "missing-item")


async def test_second_active_booking_is_a_conflict(session, container, seed):
    student = await seed.account("arjun", balance_cents=50_000)
    trip = await seed.item(price_cents=10_000)
    service = BookingService.with_session(session, container)
    await service.book_item(student.id, trip.id)

    with pytest.raises(ConflictError):
        await service.book_item(student.id, trip.id)

    assert await seed.balance(student.id) == 40_000
    assert (await seed.reload_item(trip.id)).current_bookings == 1


async def test_conflict_is_reported_before_funds(session, container, seed):
    student = await seed.account("dev", balance_cents=10_000)
    trip = await seed.item(price_cents=10_000)
    service = BookingService.with_session(session, container)
    await service.book_item(student.id, trip.id)

    # Balance is now zero, but the duplicate takes precedence.
    with pytest.raises(ConflictError):
        await service.book_item(student.id, trip.id)


async def test_full_item_rejects_booking(session, container, seed):
    first = await seed.account("priya", balance_cents=1_000)
    second = await seed.account("sam", balance_cents=1_000)
    shuttle = await seed.item(kind="transport", price_cents=500, capacity=1)
    service = BookingService.with_session(session, container)
    await service.book_item(first.id, shuttle.id)

    with pytest.raises(CapacityExceededError):
        await service.book_item(second.id, shuttle.id)

    assert await seed.balance(second.id) == 1_000
    assert (await seed.reload_item(shuttle.id)).current_bookings == 1


async def test_rebooking_after_cancellation_reactivates(session, container, seed):
    student = await seed.account("tara", balance_cents=30_000)
    trip = await seed.item(price_cents=10_000, capacity=3)
    service = BookingService.with_session(session, container)
    first = await service.book_item(student.id, trip.id)
    await service.cancel_booking(student.id, first.booking.id)

    again = await service.book_item(student.id, trip.id)

    assert again.reactivated is True
    assert again.booking.id == first.booking.id
    assert again.booking.status == "active"
    assert again.new_wallet_balance_cents == 10_000
    assert (await seed.reload_item(trip.id)).current_bookings == 1
    bookings = await service.list_bookings(student.id, include_cancelled=True)
    assert len(bookings) == 1


async def test_idempotency_key_replays_without_second_charge(session, container, seed):
    student = await seed.account("lena", balance_cents=30_000)
    trip = await seed.item(price_cents=10_000)
    service = BookingService.with_session(session, container)

    first = await service.book_item(student.id, trip.id, idempotency_key="req-1")
    replay = await service.book_item(student.id, trip.id, idempotency_key="req-1")

    assert replay.replayed is True
    assert replay.booking.id == first.booking.id
    assert replay.new_wallet_balance_cents == 20_000
    assert await seed.balance(student.id) == 20_000
    assert len([entry for entry in await seed.ledger(student.id) if entry.type == "debit"]) == 1


async def test_idempotency_key_reused_for_another_item_is_a_conflict(session, container, seed):
    student = await seed.account("lena", balance_cents=30_000)
    goa = await seed.item(name="Goa Beach Trip", price_cents=10_000)
    manali = await seed.item(name="Manali Trek", price_cents=12_000)
    service = BookingService.with_session(session, container)
    await service.book_item(student.id, goa.id, idempotency_key="req-1")

    with pytest.raises(ConflictError, match="different request"):
        await service.book_item(student.id, manali.id, idempotency_key="req-1")

    assert await seed.balance(student.id) == 20_000
    assert (await seed.reload_item(manali.id)).current_bookings == 0
    assert [booking.item_name for booking in await service.list_bookings(student.id)] == ["Goa Beach Trip"]


async def test_idempotency_key_of_cancelled_booking_is_a_conflict(session, container, seed):
    student = await seed.account("lena", balance_cents=30_000)
    trip = await seed.item(price_cents=10_000)
    service = BookingService.with_session(session, container)
    first = await service.book_item(student.id, trip.id, idempotency_key="req-1")
    await service.cancel_booking(student.id, first.booking.id)

    with pytest.raises(ConflictError, match="cancelled"):
        await service.book_item(student.id, trip.id, idempotency_key="req-1")

    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert await seed.balance(student.id) == 20_000


async def test_list_bookings_filters_by_kind(session, container, seed):
    student = await seed.account("omar", balance_cents=50_000)
    trip = await seed.item(price_cents=10_000)
    shuttle = await seed.item(kind="transport", name="Airport Run", price_cents=800)
    service = BookingService.with_session(session, container)
    await service.book_item(student.id, trip.id)
    await service.book_item(student.id, shuttle.id)

    transports = await service.list_bookings(student.id, kind="transport")

    assert [booking.item_name for booking in transports] == ["Airport Run"]
    assert len(await service.list_bookings(student.id)) == 2


async def test_last_seat_race_has_one_winner(session_factory, container, seed):
    students = [await seed.account(f"racer{index}", balance_cents=1_000) for index in range(2)]
    shuttle = await seed.item(kind="transport", price_cents=1_000, capacity=1)

    async def attempt(account_id: str):
        async with session_factory() as session:
            return await BookingService.with_session(session, container).book_item(account_id, shuttle.id)

    results = await asyncio.gather(*(attempt(student.id) for student in students), return_exceptions=True)

    successes = [result for result in results if not isinstance(result, Exception)]
    failures = [result for result in results if isinstance(result, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], CapacityExceededError)
    assert (await seed.reload_item(shuttle.id)).current_bookings == 1
    balances = sorted([await seed.balance(student.id) for student in students])
    assert balances == [0, 1_000]


async def test_double_submit_books_once(session_factory, container, seed):
    student = await seed.account("hasty", balance_cents=50_000)
    trip = await seed.item(price_cents=10_000)

    async def attempt():
        async with session_factory() as session:
            return await BookingService.with_session(session, container).book_item(student.id, trip.id)

    results = await asyncio.gather(attempt(), attempt(), return_exceptions=True)

    assert sum(1 for result in results if isinstance(result, ConflictError)) == 1
    assert await seed.balance(student.id) == 40_000
    assert (await seed.reload_item(trip.id)).current_bookings == 1


async def test_last_seat_race_across_processes_has_one_winner(session_factory, settings, sender, seed):
    students = [await seed.account(f"worker{index}", balance_cents=1_000) for index in range(2)]
    shuttle = await seed.item(kind="transport", price_cents=1_000, capacity=1)
    # Separate containers mean separate lock registries, as with two server processes.
    containers = [ApplicationContainer.build(settings, sender=sender) for _ in students]

    async def attempt(account_id: str, worker: ApplicationContainer):
        async with session_factory() as session:
            return await BookingService.with_session(session, worker).book_item(account_id, shuttle.id)

    results = await asyncio.gather(
        *(attempt(student.id, worker) for student, worker in zip(students, containers)),
        return_exceptions=True,
    )

    assert sum(1 for result in results if isinstance(result, BookingOutcome)) == 1
    assert sum(1 for result in results if isinstance(result, CapacityExceededError)) == 1
    assert (await seed.reload_item(shuttle.id)).current_bookings == 1
    assert sorted([await seed.balance(student.id) for student in students]) == [0, 1_000]

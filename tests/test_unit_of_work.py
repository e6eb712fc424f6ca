import pytest
from sqlalchemy.exc import DBAPIError, OperationalError

from uniscape.modules.bookings import BookingService
from uniscape.modules.common import StoreUnavailableError, atomic


def _locked() -> OperationalError:
    return OperationalError("INSERT INTO ledger_entries", {}, Exception("database is locked"))


async def test_failed_write_rolls_back_the_whole_booking(session, container, seed):
    student = await seed.account("asha", balance_cents=15_000)
    trip = await seed.item(price_cents=10_000, capacity=5)
    service = BookingService.with_session(session, container)

    async def failing_add_entry(**_kwargs):
        raise _locked()

    service.ledger.add_entry = failing_add_entry

    with pytest.raises(StoreUnavailableError):
        await service.book_item(student.id, trip.id)

    assert await seed.balance(student.id) == 15_000
    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert await service.list_bookings(student.id, include_cancelled=True) == []
    assert [entry.type for entry in await seed.ledger(student.id)] == ["credit"]


async def test_booking_succeeds_on_retry_after_outage(session, container, seed):
    student = await seed.account("ravi", balance_cents=15_000)
    trip = await seed.item(price_cents=10_000)
    flaky = BookingService.with_session(session, container)

    async def failing_add_entry(**_kwargs):
        raise _locked()

    flaky.ledger.add_entry = failing_add_entry
    with pytest.raises(StoreUnavailableError):
        await flaky.book_item(student.id, trip.id, idempotency_key="retry-1")

    outcome = await BookingService.with_session(session, container).book_item(
        student.id, trip.id, idempotency_key="retry-1"
    )

    assert outcome.replayed is False
    assert outcome.new_wallet_balance_cents == 5_000


async def test_invalidated_connection_is_store_unavailable(session):
    with pytest.raises(StoreUnavailableError):
        async with atomic(session):
            raise DBAPIError("SELECT 1", {}, Exception("server closed"), connection_invalidated=True)


async def test_other_driver_errors_propagate_unchanged(session):
    with pytest.raises(DBAPIError) as excinfo:
        async with atomic(session):
            raise DBAPIError("SELECT 1", {}, Exception("bad value"))

    assert "bad value" in str(excinfo.value)

import pytest

from uniscape.modules.accounts import AccountAlreadyExistsError, AccountCreateInput, AccountService
from uniscape.modules.bookings import BookingService
from uniscape.modules.common import InvalidReferralError
from uniscape.modules.notifications import NotificationKind
from uniscape.modules.wallets import WalletService

from .conftest import ADMIN_EMAIL, PASSWORD


async def test_register_creates_empty_wallet_and_code(session, container, seed, sender):
    account = await seed.account("asha")

    assert account.role == "user"
    assert account.referral_code[:3] == "ASH"
    assert account.referral_code[3:].isdigit() and len(account.referral_code) == 7
    snapshot = await WalletService.with_session(session, container).get_wallet(account.id)
    assert snapshot.balance_cents == 0
    assert snapshot.currency == "INR"

    await container.notifier.drain()
    assert [message[1] for message in sender.of_kind(NotificationKind.WELCOME)] == ["asha@uni.test"]
    assert [message[1] for message in sender.of_kind(NotificationKind.NEW_USER)] == [ADMIN_EMAIL]


async def test_referral_bonus_goes_to_new_account(session, container, seed):
    referrer = await seed.account("asha")
    newcomer = await seed.account("bilal", referral_code=referrer.referral_code)

    assert await seed.balance(newcomer.id) == container.settings.wallet.referral_bonus_cents
    assert await seed.balance(referrer.id) == 0
    entry = (await seed.ledger(newcomer.id))[0]
    assert entry.type == "credit"
    assert entry.details == "Referral bonus (asha)"


async def test_unknown_referral_code_rejects_registration(session, container, seed):
    with pytest.raises(InvalidReferralError):
        await seed.account("bilal", referral_code="NOPE0000")

    assert await AccountService.with_session(session, container).get_by_username("bilal") is None


async def test_duplicate_username_or_email(session, container, seed):
    await seed.account("asha")
    service = AccountService.with_session(session, container)

    with pytest.raises(AccountAlreadyExistsError, match="Username"):
        await service.register(AccountCreateInput(username="asha", password=PASSWORD))
    with pytest.raises(AccountAlreadyExistsError, match="email"):
        await service.register(AccountCreateInput(username="asha2", password=PASSWORD, email="asha@uni.test"))


async def test_authenticate(session, container, seed):
    await seed.account("asha")
    service = AccountService.with_session(session, container)

    assert (await service.authenticate("asha", PASSWORD)).username == "asha"
    assert await service.authenticate("asha", "wrong-password") is None
    assert await service.authenticate("nobody", PASSWORD) is None


async def test_profile_includes_balance(session, container, seed):
    account = await seed.account("asha", balance_cents=4_200)

    profile = await AccountService.with_session(session, container).get_profile(account.id)

    assert profile.account.id == account.id
    assert profile.balance_cents == 4_200


async def test_delete_account_releases_seats(session, container, seed):
    student = await seed.account("asha", balance_cents=20_000)
    trip = await seed.item(price_cents=5_000, capacity=10)
    shuttle = await seed.item(kind="transport", price_cents=500, capacity=10, hours_ahead=36)
    bookings = BookingService.with_session(session, container)
    await bookings.book_item(student.id, trip.id)
    kept = await bookings.book_item(student.id, shuttle.id)
    await bookings.cancel_booking(student.id, kept.booking.id)

    await AccountService.with_session(session, container).delete_account(student.id)

    assert (await seed.reload_item(trip.id)).current_bookings == 0
    assert (await seed.reload_item(shuttle.id)).current_bookings == 0
    service = AccountService.with_session(session, container)
    assert await service.get_by_id(student.id) is None
    assert await seed.ledger(student.id) == []

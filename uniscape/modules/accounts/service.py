"""Domain services for account management."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.security import hash_password, verify_password
from uniscape.db.models import Account as AccountModel
from uniscape.infrastructure.database.repositories.account_repository import SqlAccountRepository
from uniscape.infrastructure.database.repositories.booking_repository import SqlBookingRepository
from uniscape.infrastructure.database.repositories.inventory_repository import SqlInventoryRepository
from uniscape.modules.bookings.repository import BookingRepository
from uniscape.modules.common import (
    InvalidReferralError,
    KeyedLockRegistry,
    account_key,
    atomic,
    utcnow,
)
from uniscape.modules.inventory.repository import InventoryRepository
from uniscape.modules.notifications import NotificationDispatcher, NotificationKind
from uniscape.modules.wallets.service import WalletService

from .exceptions import AccountAlreadyExistsError, AccountNotFoundError
from .models import Account, AccountCreateInput, AccountProfile
from .repository import AccountRepository

if TYPE_CHECKING:
    from uniscape.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(
        self,
        session: AsyncSession,
        repository: AccountRepository,
        wallets: WalletService,
        bookings: BookingRepository,
        items: InventoryRepository,
        locks: KeyedLockRegistry,
        notifier: NotificationDispatcher,
        *,
        referral_bonus_cents: int = 0,
        admin_email: str | None = None,
    ) -> None:
        self._session = session
        self._repository = repository
        self._wallets = wallets
        self._bookings = bookings
        self._items = items
        self._locks = locks
        self._notifier = notifier
        self._referral_bonus_cents = referral_bonus_cents
        self._admin_email = admin_email

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "AccountService":
        settings = container.settings
        return cls(
            session,
            SqlAccountRepository(session),
            WalletService.with_session(session, container),
            SqlBookingRepository(session),
            SqlInventoryRepository(session),
            container.locks,
            container.notifier,
            referral_bonus_cents=settings.wallet.referral_bonus_cents,
            admin_email=settings.notifications.admin_email,
        )

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_id(account_id))

    async def get_by_username(self, username: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_username(username))

    async def list_accounts(self) -> Sequence[Account]:
        return [self._to_domain(model) for model in await self._repository.list_accounts()]

    async def authenticate(self, username: str, password: str) -> Account | None:
        account = await self.get_by_username(username)
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def register(self, payload: AccountCreateInput) -> Account:
        """Create the account with an empty wallet, applying any referral bonus."""
        async with atomic(self._session):
            existing = await self._repository.find_duplicate(
                username=payload.username,
                email=payload.email,
                student_id=payload.student_id,
            )
            if existing is not None:
                raise AccountAlreadyExistsError(_duplicate_message(existing, payload))

            referrer = None
            if payload.referral_code:
                referrer = await self._repository.get_by_referral_code(payload.referral_code)
                if referrer is None:
                    raise InvalidReferralError()

            model = await self._repository.create_account(
                username=payload.username,
                password_hash=hash_password(payload.password),
                role=payload.role,
                is_active=payload.is_active,
                name=payload.name,
                gender=payload.gender,
                student_id=payload.student_id,
                email=payload.email,
                phone=payload.phone,
                referral_code=await self._new_referral_code(payload.username),
            )
            await self._wallets.ensure_wallet(model.id)
            if referrer is not None and self._referral_bonus_cents:
                await self._wallets.grant_credit(
                    model.id,
                    self._referral_bonus_cents,
                    f"Referral bonus ({referrer.username})",
                )
            account = self._to_domain(model)

        logger.info("Registered account %s (%s)", account.id, account.username)
        details = {"name": account.name, "username": account.username, "student_id": account.student_id}
        self._notifier.dispatch(NotificationKind.WELCOME, account.email, details)
        self._notifier.dispatch(
            NotificationKind.NEW_USER,
            self._admin_email,
            {**details, "email": account.email, "phone": account.phone},
        )
        return account

    async def get_profile(self, account_id: str) -> AccountProfile:
        account = await self.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        wallet = await self._wallets.get_wallet(account_id)
        return AccountProfile(account=account, balance_cents=wallet.balance_cents, currency=wallet.currency)

    async def set_last_login(self, account_id: str) -> None:
        async with atomic(self._session):
            await self._repository.set_last_login(account_id, utcnow())

    async def delete_account(self, account_id: str) -> None:
        """Remove an account and everything referencing it in one unit.

        Seats held by its active bookings go back to their items first, so
        occupancy counters stay truthful.
        """
        async with self._locks.hold(account_key(account_id)):
            async with atomic(self._session):
                if await self._repository.get_by_id(account_id) is None:
                    raise AccountNotFoundError()
                released = 0
                for item_id in await self._bookings.list_active_item_ids(account_id):
                    if await self._items.release_slot(item_id):
                        released += 1
                await self._bookings.delete_for_account(account_id)
                await self._wallets.repository.delete_for_account(account_id)
                await self._repository.delete_account(account_id)
        logger.info("Deleted account %s (released %s seats)", account_id, released)

    async def _new_referral_code(self, username: str) -> str:
        prefix = (username[:3] or "UNI").upper()
        while True:
            code = f"{prefix}{1000 + secrets.randbelow(9000)}"
            if not await self._repository.referral_code_exists(code):
                return code

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            role=model.role or "user",
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            name=model.name,
            gender=model.gender,
            student_id=model.student_id,
            email=model.email,
            phone=model.phone,
            referral_code=model.referral_code,
            created_at=model.created_at,
            last_login_at=model.last_login_at,
        )


def _duplicate_message(existing: AccountModel, payload: AccountCreateInput) -> str:
    if existing.username == payload.username:
        return "Username is already taken."
    if payload.email and existing.email == payload.email:
        return "An account with this email already exists."
    if payload.student_id and existing.student_id == payload.student_id:
        return "An account with this student ID already exists."
    return "User already exists."

"""Shared fixtures: a throwaway SQLite file per test and a recording notifier."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping

import pytest
from httpx import ASGITransport, AsyncClient

from uniscape.core.config import Settings
from uniscape.core.container import ApplicationContainer
from uniscape.infrastructure.database import build_engine, build_session_factory, init_db
from uniscape.modules.accounts import Account, AccountCreateInput, AccountService
from uniscape.modules.common import atomic, utcnow
from uniscape.modules.inventory import InventoryItem, InventoryService, ItemCreateInput
from uniscape.modules.wallets import WalletService

ADMIN_EMAIL = "ops@uniscape.test"
PASSWORD = "secret123"


class RecordingSender:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    async def send(self, kind: str, recipient: str, payload: Mapping[str, Any]) -> None:
        self.sent.append((kind, recipient, dict(payload)))

    def of_kind(self, kind: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [message for message in self.sent if message[0] == kind]


class Seed:
    """Creates accounts, balances and items through the real services."""

    def __init__(self, session_factory, container: ApplicationContainer) -> None:
        self._session_factory = session_factory
        self._container = container

    async def account(
        self,
        username: str,
        *,
        balance_cents: int = 0,
        role: str = "user",
        referral_code: str | None = None,
    ) -> Account:
        async with self._session_factory() as session:
            account = await AccountService.with_session(session, self._container).register(
                AccountCreateInput(
                    username=username,
                    password=PASSWORD,
                    name=username.title(),
                    email=f"{username}@uni.test",
                    student_id=f"S-{username}",
                    role=role,
                    referral_code=referral_code,
                )
            )
            if balance_cents:
                wallets = WalletService.with_session(session, self._container)
                async with atomic(session):
                    await wallets.grant_credit(account.id, balance_cents, "Opening balance")
        return account

    async def item(
        self,
        *,
        kind: str = "trip",
        name: str = "Goa Beach Trip",
        price_cents: int = 10_000,
        capacity: int | None = None,
        hours_ahead: float | None = 96,
        status: str = "active",
    ) -> InventoryItem:
        if kind == "transport" and capacity is None:
            capacity = 40
        event_date = utcnow() + timedelta(hours=hours_ahead) if hours_ahead is not None else None
        async with self._session_factory() as session:
            return await InventoryService.with_session(session, self._container).create_item(
                ItemCreateInput(
                    kind=kind,
                    name=name,
                    price_cents=price_cents,
                    capacity=capacity,
                    status=status,
                    event_date=event_date,
                    departure_time="08:30" if kind == "transport" else None,
                    transport_type="shuttle" if kind == "transport" else None,
                )
            )

    async def balance(self, account_id: str) -> int:
        async with self._session_factory() as session:
            snapshot = await WalletService.with_session(session, self._container).get_wallet(account_id)
        return snapshot.balance_cents

    async def reload_item(self, item_id: str) -> InventoryItem:
        async with self._session_factory() as session:
            return await InventoryService.with_session(session, self._container).get_item(item_id)

    async def ledger(self, account_id: str):
        async with self._session_factory() as session:
            return await WalletService.with_session(session, self._container).list_ledger(account_id)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'uniscape-test.db'}"},
        security={"secret_key": "test-secret-key-0123456789"},
        notifications={"enabled": True, "admin_email": ADMIN_EMAIL},
    )


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def container(settings, sender) -> ApplicationContainer:
    return ApplicationContainer.build(settings, sender=sender)


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings.database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory, container) -> Seed:
    return Seed(session_factory, container)


@pytest.fixture
async def client(session_factory, container):
    from uniscape.interfaces.http.deps import get_app_container, get_db_session
    from uniscape.main import create_app

    app = create_app()

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_app_container] = lambda: container

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

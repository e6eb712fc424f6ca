"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from uniscape.db.models import Account as AccountModel


class AccountRepository(Protocol):
    async def get_by_id(self, account_id: str) -> AccountModel | None:
        ...

    async def get_by_username(self, username: str) -> AccountModel | None:
        ...

    async def get_by_referral_code(self, referral_code: str) -> AccountModel | None:
        ...

    async def find_duplicate(
        self,
        *,
        username: str,
        email: str | None,
        student_id: str | None,
    ) -> AccountModel | None:
        ...

    async def referral_code_exists(self, referral_code: str) -> bool:
        ...

    async def list_accounts(self) -> Sequence[AccountModel]:
        ...

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        role: str,
        is_active: bool,
        name: str | None,
        gender: str | None,
        student_id: str | None,
        email: str | None,
        phone: str | None,
        referral_code: str,
    ) -> AccountModel:
        ...

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...

    async def delete_account(self, account_id: str) -> None:
        ...

"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.db.models import Account as AccountModel


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.username == username)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, referral_code: str) -> AccountModel | None:
        stmt = select(AccountModel).where(AccountModel.referral_code == referral_code)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_duplicate(
        self,
        *,
        username: str,
        email: str | None,
        student_id: str | None,
    ) -> AccountModel | None:
        clauses = [AccountModel.username == username]
        if email:
            clauses.append(AccountModel.email == email)
        if student_id:
            clauses.append(AccountModel.student_id == student_id)
        stmt = select(AccountModel).where(or_(*clauses)).limit(1)
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def referral_code_exists(self, referral_code: str) -> bool:
        stmt = select(AccountModel.id).where(AccountModel.referral_code == referral_code)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def list_accounts(self) -> Sequence[AccountModel]:
        stmt = select(AccountModel).order_by(AccountModel.created_at.desc())
        result = await self._session.execute(stmt)
        return result.scalars().all()

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
        model = AccountModel(
            username=username,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
            name=name,
            gender=gender,
            student_id=student_id,
            email=email,
            phone=phone,
            referral_code=referral_code,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return model

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(last_login_at=timestamp)
        )
        await self._session.execute(stmt)

    async def delete_account(self, account_id: str) -> None:
        await self._session.execute(
            delete(AccountModel).where(AccountModel.id == account_id).execution_options(synchronize_session=False)
        )


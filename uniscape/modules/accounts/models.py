"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Account:
    id: str
    username: str
    role: str
    is_active: bool
    password_hash: str = field(repr=False)
    name: Optional[str] = None
    gender: Optional[str] = None
    student_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    referral_code: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role in {"admin", "super_admin"}


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    name: Optional[str] = None
    gender: Optional[str] = None
    student_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    referral_code: Optional[str] = None
    role: str = "user"
    is_active: bool = True


@dataclass(slots=True)
class AccountProfile:
    account: Account
    balance_cents: int
    currency: str

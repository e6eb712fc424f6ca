"""Password hashing and JWT helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from uniscape.core.config import Settings, get_settings
from uniscape.modules.common.exceptions import UnauthenticatedError


@dataclass(slots=True, frozen=True)
class TokenClaims:
    account_id: str
    username: str
    role: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    account_id: str,
    username: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "username": username,
        "role": role,
        "exp": datetime.now(timezone.utc) + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> TokenClaims:
    """Decode a bearer token, raising ``UnauthenticatedError`` on any defect."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise UnauthenticatedError("Could not validate credentials") from exc

    account_id = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not all([account_id, username, role]):
        raise UnauthenticatedError("Could not validate credentials")
    return TokenClaims(account_id=account_id, username=username, role=role)


__all__ = [
    "TokenClaims",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]

"""Identity and role dependencies handing an explicit account to every handler."""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.container import ApplicationContainer
from uniscape.core.security import decode_access_token
from uniscape.modules.accounts import Account, AccountService
from uniscape.modules.common import UnauthenticatedError

from .container import get_app_container
from .database import get_db_session

security = HTTPBearer(auto_error=False)


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> Account:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in")
    try:
        claims = decode_access_token(credentials.credentials, container.settings)
    except UnauthenticatedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc

    account = await AccountService.with_session(db, container).get_by_id(claims.account_id)
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account missing or disabled")
    return account


async def get_current_admin(account: Account = Depends(get_current_account)) -> Account:
    if not account.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return account


__all__ = ["get_current_account", "get_current_admin"]

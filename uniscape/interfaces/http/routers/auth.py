"""Registration, login and self-service account endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.container import ApplicationContainer
from uniscape.core.security import create_access_token
from uniscape.interfaces.http.deps import get_app_container, get_current_account, get_db_session
from uniscape.interfaces.http.errors import to_http_exception
from uniscape.modules.accounts import Account, AccountCreateInput, AccountService
from uniscape.modules.common import ServiceError
from uniscape.schemas import (
    AccountLoginResponse,
    AccountResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    SuccessResponse,
)

router = APIRouter()


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED, summary="Register a student account")
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountResponse:
    service = AccountService.with_session(db, container)
    try:
        account = await service.register(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                name=payload.name,
                gender=payload.gender,
                student_id=payload.student_id,
                email=payload.email,
                phone=payload.phone,
                referral_code=payload.referral_code,
            )
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return AccountResponse.model_validate(account)


@router.post("/login", response_model=AccountLoginResponse, summary="Exchange credentials for a bearer token")
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountLoginResponse:
    service = AccountService.with_session(db, container)
    account = await service.authenticate(payload.username, payload.password)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    await service.set_last_login(account.id)
    token = create_access_token(account.id, account.username, account.role, settings=container.settings)
    return AccountLoginResponse(
        access_token=token,
        account_id=account.id,
        username=account.username,
        role=account.role,
    )


@router.get("/me", response_model=ProfileResponse, summary="Current account with wallet balance")
async def profile(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> ProfileResponse:
    try:
        result = await AccountService.with_session(db, container).get_profile(account.id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return ProfileResponse(
        account=AccountResponse.model_validate(result.account),
        wallet_balance_cents=result.balance_cents,
        currency=result.currency,
    )


@router.delete("/me", response_model=SuccessResponse, summary="Delete own account")
async def delete_own_account(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SuccessResponse:
    try:
        await AccountService.with_session(db, container).delete_account(account.id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Account deleted successfully")

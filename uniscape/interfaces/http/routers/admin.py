"""Administrator endpoints: inventory, refund queue, top-up review and users."""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.container import ApplicationContainer
from uniscape.interfaces.http.deps import get_app_container, get_current_admin, get_db_session
from uniscape.interfaces.http.errors import to_http_exception
from uniscape.modules.accounts import Account, AccountService
from uniscape.modules.common import ServiceError
from uniscape.modules.inventory import InventoryService, ItemCreateInput, ItemUpdateInput
from uniscape.modules.refunds import RefundResolution, RefundService
from uniscape.modules.wallets import WalletService
from uniscape.schemas import (
    AccountResponse,
    ConfirmTransactionResponse,
    InventoryItemCreate,
    InventoryItemListResponse,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventoryStatusUpdate,
    ItemBookerListResponse,
    ItemBookerResponse,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    RefundRequestListResponse,
    RefundRequestResponse,
    RefundResolutionResponse,
    SuccessResponse,
)

router = APIRouter()


def _resolution_to_response(resolution: RefundResolution, message: str) -> RefundResolutionResponse:
    return RefundResolutionResponse(
        message=message,
        refund=RefundRequestResponse.model_validate(resolution.refund),
        new_wallet_balance_cents=resolution.new_wallet_balance_cents,
        booking_reactivated=resolution.booking_reactivated,
    )


# --- Inventory ------------------------------------------------------------


@router.get("/items", response_model=InventoryItemListResponse)
async def admin_list_items(
    kind: Optional[Literal["trip", "transport"]] = None,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemListResponse:
    items = await InventoryService.with_session(db, container).list_items(kind=kind, active_only=False)
    return InventoryItemListResponse(items=[InventoryItemResponse.model_validate(item) for item in items])


@router.post("/items", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_item(
    payload: InventoryItemCreate,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemResponse:
    service = InventoryService.with_session(db, container)
    try:
        item = await service.create_item(ItemCreateInput(**payload.model_dump()))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return InventoryItemResponse.model_validate(item)


@router.put("/items/{item_id}", response_model=InventoryItemResponse)
async def admin_update_item(
    item_id: str,
    payload: InventoryItemUpdate,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemResponse:
    service = InventoryService.with_session(db, container)
    try:
        item = await service.update_item(item_id, ItemUpdateInput(**payload.model_dump(exclude_unset=True)))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return InventoryItemResponse.model_validate(item)


@router.put("/items/{item_id}/status", response_model=InventoryItemResponse)
async def admin_set_item_status(
    item_id: str,
    payload: InventoryStatusUpdate,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemResponse:
    try:
        item = await InventoryService.with_session(db, container).set_status(item_id, payload.status)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return InventoryItemResponse.model_validate(item)


@router.delete("/items/{item_id}", response_model=SuccessResponse)
async def admin_delete_item(
    item_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SuccessResponse:
    try:
        await InventoryService.with_session(db, container).delete_item(item_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Item deleted successfully")


@router.get("/items/{item_id}/bookings", response_model=ItemBookerListResponse)
async def admin_item_bookers(
    item_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> ItemBookerListResponse:
    try:
        bookers = await InventoryService.with_session(db, container).list_bookers(item_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return ItemBookerListResponse(bookings=[ItemBookerResponse.model_validate(row) for row in bookers])


# --- Refund queue ---------------------------------------------------------


@router.get("/refunds", response_model=RefundRequestListResponse)
async def admin_list_refunds(
    status_filter: Optional[Literal["pending", "approved", "denied", "all"]] = "pending",
    limit: int = 100,
    offset: int = 0,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> RefundRequestListResponse:
    status_value = None if status_filter == "all" else status_filter
    rows = await RefundService.with_session(db, container).list_refunds(status=status_value, limit=limit, offset=offset)
    return RefundRequestListResponse(refunds=[RefundRequestResponse.model_validate(row) for row in rows])


@router.post("/refunds/{refund_id}/approve", response_model=RefundResolutionResponse)
async def admin_approve_refund(
    refund_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> RefundResolutionResponse:
    try:
        resolution = await RefundService.with_session(db, container).approve(refund_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return _resolution_to_response(resolution, "Refund approved and credited to the wallet")


@router.post("/refunds/{refund_id}/deny", response_model=RefundResolutionResponse)
async def admin_deny_refund(
    refund_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> RefundResolutionResponse:
    try:
        resolution = await RefundService.with_session(db, container).deny(refund_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return _resolution_to_response(resolution, "Refund denied and booking restored")


# --- Top-up review --------------------------------------------------------


@router.get("/transactions/pending", response_model=LedgerEntryListResponse)
async def admin_pending_transactions(
    limit: int = 100,
    offset: int = 0,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> LedgerEntryListResponse:
    rows = await WalletService.with_session(db, container).list_pending_transactions(limit, offset)
    return LedgerEntryListResponse(transactions=[LedgerEntryResponse.model_validate(row) for row in rows])


@router.post("/transactions/{transaction_id}/confirm", response_model=ConfirmTransactionResponse)
async def admin_confirm_transaction(
    transaction_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> ConfirmTransactionResponse:
    try:
        entry, balance = await WalletService.with_session(db, container).confirm_transaction(transaction_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return ConfirmTransactionResponse(
        message="Transaction confirmed",
        transaction=LedgerEntryResponse.model_validate(entry),
        new_wallet_balance_cents=balance,
    )


@router.delete("/transactions/{transaction_id}", response_model=SuccessResponse)
async def admin_reject_transaction(
    transaction_id: str,
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SuccessResponse:
    try:
        await WalletService.with_session(db, container).reject_transaction(transaction_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Transaction rejected")


# --- Users ----------------------------------------------------------------


@router.get("/users", response_model=List[AccountResponse])
async def admin_list_users(
    _: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> List[AccountResponse]:
    accounts = await AccountService.with_session(db, container).list_accounts()
    return [AccountResponse.model_validate(account) for account in accounts]


@router.delete("/users/{account_id}", response_model=SuccessResponse)
async def admin_delete_user(
    account_id: str,
    current: Account = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SuccessResponse:
    if account_id == current.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Administrators cannot delete themselves")
    try:
        await AccountService.with_session(db, container).delete_account(account_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="User deleted successfully")

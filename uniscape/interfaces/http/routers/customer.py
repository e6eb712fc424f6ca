"""Student-facing endpoints: wallet, top-up requests and bookings."""
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.container import ApplicationContainer
from uniscape.interfaces.http.deps import get_app_container, get_current_account, get_db_session
from uniscape.interfaces.http.errors import to_http_exception
from uniscape.modules.accounts import Account
from uniscape.modules.bookings import BookingService
from uniscape.modules.common import ServiceError
from uniscape.modules.wallets import WalletService
from uniscape.schemas import (
    BookingListResponse,
    BookingResponse,
    BookItemRequest,
    BookItemResponse,
    CancellationResponse,
    InitiateTransactionRequest,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    TransactionStatusResponse,
    WalletSnapshotResponse,
)

router = APIRouter()


@router.get("/wallet", response_model=WalletSnapshotResponse, summary="Current wallet balance")
async def wallet_balance(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> WalletSnapshotResponse:
    snapshot = await WalletService.with_session(db, container).get_wallet(account.id)
    return WalletSnapshotResponse(balance_cents=snapshot.balance_cents, currency=snapshot.currency)


@router.get("/wallet/transactions", response_model=LedgerEntryListResponse, summary="Ledger history, newest first")
async def wallet_transactions(
    limit: int = 50,
    offset: int = 0,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> LedgerEntryListResponse:
    rows = await WalletService.with_session(db, container).list_ledger(account.id, limit, offset)
    return LedgerEntryListResponse(transactions=[LedgerEntryResponse.model_validate(row) for row in rows])


@router.post(
    "/wallet/transactions",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a wallet top-up",
)
async def initiate_transaction(
    payload: InitiateTransactionRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> LedgerEntryResponse:
    service = WalletService.with_session(db, container)
    try:
        entry = await service.initiate_transaction(account.id, payload.amount_cents, payload.method)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return LedgerEntryResponse.model_validate(entry)


@router.get(
    "/wallet/transactions/{transaction_id}/status",
    response_model=TransactionStatusResponse,
    summary="Status of an own ledger entry",
)
async def transaction_status(
    transaction_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> TransactionStatusResponse:
    try:
        entry = await WalletService.with_session(db, container).get_transaction_status(account.id, transaction_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return TransactionStatusResponse(id=entry.id, status=entry.status)


@router.get("/bookings", response_model=BookingListResponse, summary="Own bookings")
async def list_bookings(
    kind: Optional[Literal["trip", "transport"]] = None,
    include_cancelled: bool = False,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> BookingListResponse:
    rows = await BookingService.with_session(db, container).list_bookings(
        account.id, kind=kind, include_cancelled=include_cancelled
    )
    return BookingListResponse(bookings=[BookingResponse.model_validate(row) for row in rows])


@router.post("/bookings", response_model=BookItemResponse, summary="Book a trip or shuttle seat")
async def book_item(
    payload: BookItemRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> BookItemResponse:
    service = BookingService.with_session(db, container)
    try:
        outcome = await service.book_item(account.id, payload.item_id, idempotency_key=payload.idempotency_key)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    label = "Shuttle" if outcome.booking.item_kind == "transport" else "Trip"
    return BookItemResponse(
        message=f"{label} booked successfully!",
        booking=BookingResponse.model_validate(outcome.booking),
        new_wallet_balance_cents=outcome.new_wallet_balance_cents,
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse, summary="One own booking")
async def get_booking(
    booking_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> BookingResponse:
    try:
        booking = await BookingService.with_session(db, container).get_booking(account.id, booking_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=CancellationResponse, summary="Cancel an own booking")
async def cancel_booking(
    booking_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> CancellationResponse:
    service = BookingService.with_session(db, container)
    try:
        outcome = await service.cancel_booking(account.id, booking_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

    if outcome.refund_id is None:
        message = "Booking cancelled. No refund is due."
    else:
        message = f"Booking cancelled. A {outcome.refund_percentage}% refund is awaiting approval."
    return CancellationResponse(
        message=message,
        booking=BookingResponse.model_validate(outcome.booking),
        refund_percentage=outcome.refund_percentage,
        refund_amount_cents=outcome.refund_amount_cents,
        refund_id=outcome.refund_id,
    )

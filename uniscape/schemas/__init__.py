"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


# --- Auth -----------------------------------------------------------------


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    gender: Optional[str] = Field(default=None, max_length=20)
    student_id: Optional[str] = Field(default=None, max_length=50)
    referral_code: Optional[str] = Field(default=None, max_length=20)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)


class AccountLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    username: str
    role: str


class AccountResponse(BaseModel):
    id: str
    username: str
    role: str
    is_active: bool
    name: Optional[str] = None
    gender: Optional[str] = None
    student_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    referral_code: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    account: AccountResponse
    wallet_balance_cents: int
    currency: str


# --- Inventory ------------------------------------------------------------

ItemKindLiteral = Literal["trip", "transport"]
ItemStatusLiteral = Literal["active", "coming_soon"]


class InventoryItemCreate(BaseModel):
    kind: ItemKindLiteral
    name: str = Field(..., min_length=1, max_length=200)
    price_cents: int = Field(..., ge=0)
    original_price_cents: Optional[int] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=0)
    status: ItemStatusLiteral = "active"
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=50)
    event_date: Optional[datetime] = None
    departure_time: Optional[str] = Field(default=None, max_length=50)
    transport_type: Optional[Literal["shuttle", "carpool"]] = None

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "InventoryItemCreate":
        if self.kind == "trip" and self.event_date is None:
            raise ValueError("Trips require an event_date")
        if self.kind == "transport" and self.capacity is None:
            raise ValueError("Transport routes require a capacity")
        return self


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    price_cents: Optional[int] = Field(default=None, ge=0)
    original_price_cents: Optional[int] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=50)
    event_date: Optional[datetime] = None
    departure_time: Optional[str] = Field(default=None, max_length=50)
    transport_type: Optional[Literal["shuttle", "carpool"]] = None


class InventoryStatusUpdate(BaseModel):
    status: ItemStatusLiteral


class InventoryItemResponse(BaseModel):
    id: str
    kind: str
    name: str
    price_cents: int
    original_price_cents: Optional[int] = None
    capacity: Optional[int] = None
    current_bookings: int
    status: str
    is_full: bool = False
    description: Optional[str] = None
    category: Optional[str] = None
    event_date: Optional[datetime] = None
    departure_time: Optional[str] = None
    transport_type: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InventoryItemListResponse(BaseModel):
    items: list[InventoryItemResponse] = Field(default_factory=list)


class ItemBookerResponse(BaseModel):
    booking_id: str
    account_id: str
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    amount_cents: int
    booking_date: datetime

    model_config = ConfigDict(from_attributes=True)


class ItemBookerListResponse(BaseModel):
    bookings: list[ItemBookerResponse] = Field(default_factory=list)


# --- Bookings -------------------------------------------------------------


class BookItemRequest(BaseModel):
    item_id: str = Field(..., min_length=1, max_length=36)
    idempotency_key: Optional[str] = Field(default=None, min_length=1, max_length=100)


class BookingResponse(BaseModel):
    id: str
    item_id: str
    item_kind: str
    item_name: str
    amount_cents: int
    status: str
    booking_date: datetime

    model_config = ConfigDict(from_attributes=True)


class BookItemResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingResponse
    new_wallet_balance_cents: int


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse] = Field(default_factory=list)


class CancellationResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingResponse
    refund_percentage: int
    refund_amount_cents: int
    refund_id: Optional[str] = None


# --- Wallet ---------------------------------------------------------------


class WalletSnapshotResponse(BaseModel):
    balance_cents: int
    currency: str


class LedgerEntryResponse(BaseModel):
    id: str
    account_id: str
    amount_cents: int
    currency: str
    type: str
    details: str
    status: str
    booking_id: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LedgerEntryListResponse(BaseModel):
    transactions: list[LedgerEntryResponse] = Field(default_factory=list)


class InitiateTransactionRequest(BaseModel):
    amount_cents: int = Field(..., gt=0)
    method: str = Field(..., min_length=1, max_length=50)


class TransactionStatusResponse(BaseModel):
    id: str
    status: str


class ConfirmTransactionResponse(BaseModel):
    success: bool = True
    message: str
    transaction: LedgerEntryResponse
    new_wallet_balance_cents: int


# --- Refunds --------------------------------------------------------------


class RefundRequestResponse(BaseModel):
    id: str
    account_id: str
    booking_id: str
    item_name: str
    amount_cents: int
    percentage: int
    status: str
    requested_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    username: Optional[str] = None
    account_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RefundRequestListResponse(BaseModel):
    refunds: list[RefundRequestResponse] = Field(default_factory=list)


class RefundResolutionResponse(BaseModel):
    success: bool = True
    message: str
    refund: RefundRequestResponse
    new_wallet_balance_cents: Optional[int] = None
    booking_reactivated: bool = False

"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from uniscape.infrastructure.database.base import Base
from uniscape.modules.common.clock import utcnow


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    name = Column(String(100))
    gender = Column(String(20))
    student_id = Column(String(50), unique=True)
    email = Column(String(100), unique=True)
    phone = Column(String(30))
    referral_code = Column(String(20), unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True))


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (CheckConstraint("balance_cents >= 0", name="ck_wallets_balance_non_negative"),)

    account_id = Column(String(36), ForeignKey("accounts.id"), primary_key=True)
    balance_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="INR")
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    account = relationship("Account")


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("current_bookings >= 0", name="ck_inventory_items_occupancy_non_negative"),
        CheckConstraint(
            "capacity IS NULL OR current_bookings <= capacity",
            name="ck_inventory_items_occupancy_within_capacity",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    kind = Column(String(20), nullable=False, index=True)  # trip, transport
    name = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(50))
    original_price_cents = Column(Integer)
    price_cents = Column(Integer, nullable=False)
    capacity = Column(Integer)
    current_bookings = Column(Integer, nullable=False, default=0)
    event_date = Column(DateTime(timezone=True))
    departure_time = Column(String(50))
    transport_type = Column(String(20))  # shuttle, carpool
    status = Column(String(20), nullable=False, default="active")  # active, coming_soon
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="item", cascade="all, delete-orphan")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (UniqueConstraint("account_id", "item_id", name="uq_bookings_account_item"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    item_id = Column(String(36), ForeignKey("inventory_items.id"), nullable=False, index=True)
    item_kind = Column(String(20), nullable=False)
    item_name = Column(String(200), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active, cancelled
    booking_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    account = relationship("Account")
    item = relationship("InventoryItem", back_populates="bookings")
    refunds = relationship("RefundRequest", back_populates="booking", cascade="all, delete-orphan")


class LedgerEntry(Base):
    __tablename__ = "ledger_entries"
    __table_args__ = (
        UniqueConstraint("account_id", "idempotency_key", name="uq_ledger_entries_idempotency"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="INR")
    type = Column(String(20), nullable=False)  # credit, debit, refund
    details = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="completed")  # pending, completed
    booking_id = Column(String(36), nullable=True)
    idempotency_key = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    completed_at = Column(DateTime(timezone=True))

    account = relationship("Account")


class RefundRequest(Base):
    __tablename__ = "refund_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    item_name = Column(String(200), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    percentage = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, denied
    requested_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    resolved_at = Column(DateTime(timezone=True))

    account = relationship("Account")
    booking = relationship("Booking", back_populates="refunds")

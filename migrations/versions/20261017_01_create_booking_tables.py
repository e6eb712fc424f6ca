"""create accounts, wallets, inventory, bookings, ledger and refund tables

Revision ID: 5c1e7a9d3b20
Revises: 
Create Date: 2026-10-17 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e7a9d3b20"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("name", sa.String(length=100)),
        sa.Column("gender", sa.String(length=20)),
        sa.Column("student_id", sa.String(length=50), unique=True),
        sa.Column("email", sa.String(length=100), unique=True),
        sa.Column("phone", sa.String(length=30)),
        sa.Column("referral_code", sa.String(length=20), unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"])
    op.create_index("ix_accounts_referral_code", "accounts", ["referral_code"])

    op.create_table(
        "wallets",
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), primary_key=True),
        sa.Column("balance_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="INR"),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("balance_cents >= 0", name="ck_wallets_balance_non_negative"),
    )

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("category", sa.String(length=50)),
        sa.Column("original_price_cents", sa.Integer()),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer()),
        sa.Column("current_bookings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("event_date", sa.DateTime(timezone=True)),
        sa.Column("departure_time", sa.String(length=50)),
        sa.Column("transport_type", sa.String(length=20)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("current_bookings >= 0", name="ck_inventory_items_occupancy_non_negative"),
        sa.CheckConstraint(
            "capacity IS NULL OR current_bookings <= capacity",
            name="ck_inventory_items_occupancy_within_capacity",
        ),
    )
    op.create_index("ix_inventory_items_kind", "inventory_items", ["kind"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("item_id", sa.String(length=36), sa.ForeignKey("inventory_items.id"), nullable=False),
        sa.Column("item_kind", sa.String(length=20), nullable=False),
        sa.Column("item_name", sa.String(length=200), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("account_id", "item_id", name="uq_bookings_account_item"),
    )
    op.create_index("ix_bookings_account_id", "bookings", ["account_id"])
    op.create_index("ix_bookings_item_id", "bookings", ["item_id"])

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="INR"),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("details", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="completed"),
        sa.Column("booking_id", sa.String(length=36)),
        sa.Column("idempotency_key", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("account_id", "idempotency_key", name="uq_ledger_entries_idempotency"),
    )
    op.create_index("ix_ledger_entries_account_id", "ledger_entries", ["account_id"])
    op.create_index("ix_ledger_entries_created_at", "ledger_entries", ["created_at"])

    op.create_table(
        "refund_requests",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("booking_id", sa.String(length=36), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("item_name", sa.String(length=200), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("percentage", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("requested_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_refund_requests_account_id", "refund_requests", ["account_id"])
    op.create_index("ix_refund_requests_booking_id", "refund_requests", ["booking_id"])
    op.create_index("ix_refund_requests_requested_at", "refund_requests", ["requested_at"])


def downgrade() -> None:
    op.drop_index("ix_refund_requests_requested_at", table_name="refund_requests")
    op.drop_index("ix_refund_requests_booking_id", table_name="refund_requests")
    op.drop_index("ix_refund_requests_account_id", table_name="refund_requests")
    op.drop_table("refund_requests")

    op.drop_index("ix_ledger_entries_created_at", table_name="ledger_entries")
    op.drop_index("ix_ledger_entries_account_id", table_name="ledger_entries")
    op.drop_table("ledger_entries")

    op.drop_index("ix_bookings_item_id", table_name="bookings")
    op.drop_index("ix_bookings_account_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_inventory_items_kind", table_name="inventory_items")
    op.drop_table("inventory_items")

    op.drop_table("wallets")

    op.drop_index("ix_accounts_referral_code", table_name="accounts")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")

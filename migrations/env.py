"""Alembic environment for the booking schema."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

import uniscape.db.models  # noqa: F401
from uniscape.core.config import get_settings
from uniscape.infrastructure.database.base import Base
from uniscape.infrastructure.database.session import build_engine, get_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configured_url() -> str | None:
    # An explicit sqlalchemy.url (alembic.ini or -x) wins over application settings.
    return config.get_main_option("sqlalchemy.url") or None


def _offline_url() -> str:
    url = _configured_url() or get_settings().database_url
    if url.startswith("sqlite+aiosqlite"):
        return url.replace("sqlite+aiosqlite", "sqlite")
    return url


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without connecting."""

    context.configure(
        url=_offline_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_migrations_online(connection: Connection) -> None:
    # Batch mode lets later revisions alter constraints on SQLite.
    context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations against the application's async engine."""

    url = _configured_url()
    connectable: AsyncEngine = build_engine(url) if url else get_engine()

    async with connectable.connect() as connection:
        await connection.run_sync(_run_migrations_online)

    if url:
        await connectable.dispose()


def run_migrations() -> None:
    if context.is_offline_mode():
        run_migrations_offline()
    else:
        asyncio.run(run_migrations_online())


run_migrations()

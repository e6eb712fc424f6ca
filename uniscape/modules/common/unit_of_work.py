"""All-or-nothing execution of a core operation against one session."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything done inside the block, or roll all of it back.

    Driver level failures (lost connection, locked database) are reported as
    ``StoreUnavailableError`` so callers can decide whether to retry.
    """
    try:
        yield session
        await session.commit()
    except OperationalError as exc:
        await session.rollback()
        logger.error("Aborting unit of work, store unavailable: %s", exc)
        raise StoreUnavailableError() from exc
    except DBAPIError as exc:
        await session.rollback()
        if exc.connection_invalidated:
            logger.error("Aborting unit of work, connection lost: %s", exc)
            raise StoreUnavailableError() from exc
        raise
    except BaseException:
        await session.rollback()
        raise

"""Fire-and-forget delivery of notifications after a unit of work commits."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from .sender import NotificationSender

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Schedules sends as background tasks; failures are logged, never raised."""

    def __init__(self, sender: NotificationSender, *, enabled: bool = True) -> None:
        self._sender = sender
        self._enabled = enabled
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, kind: str, recipient: str | None, payload: Mapping[str, Any]) -> None:
        if not self._enabled:
            return
        if not recipient:
            logger.warning("Skipping %s notification without recipient", kind)
            return
        task = asyncio.create_task(self._deliver(kind, recipient, dict(payload)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, kind: str, recipient: str, payload: dict[str, Any]) -> None:
        try:
            await self._sender.send(kind, recipient, payload)
        except Exception:
            logger.exception("Failed to send %s notification to %s", kind, recipient)

    async def drain(self) -> None:
        """Wait for in-flight notifications, e.g. on shutdown."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

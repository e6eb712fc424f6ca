"""Notification sender that records outbound messages in the application log.

Mail rendering and delivery live outside this service; deployments that need
real email swap this sender for one backed by their mail gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

logger = logging.getLogger("uniscape.notifications")


class LoggingNotificationSender:
    async def send(self, kind: str, recipient: str, payload: Mapping[str, Any]) -> None:
        logger.info("Notification %s -> %s: %s", kind, recipient, dict(payload))

"""Notification sender capability consumed by the core."""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class NotificationKind:
    WELCOME = "welcome"
    NEW_USER = "new_user"
    BOOKING_CONFIRMED = "booking_confirmed"
    REFUND_REQUESTED = "refund_requested"
    REFUND_APPROVED = "refund_approved"
    REFUND_DENIED = "refund_denied"


class NotificationSender(Protocol):
    async def send(self, kind: str, recipient: str, payload: Mapping[str, Any]) -> None:
        ...

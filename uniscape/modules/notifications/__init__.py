"""Notification capability and dispatcher."""

from .dispatcher import NotificationDispatcher
from .sender import NotificationKind, NotificationSender

__all__ = ["NotificationDispatcher", "NotificationKind", "NotificationSender"]

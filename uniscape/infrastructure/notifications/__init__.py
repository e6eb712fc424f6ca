"""Concrete notification senders."""

from .logging_sender import LoggingNotificationSender

__all__ = ["LoggingNotificationSender"]

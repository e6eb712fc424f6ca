"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from uniscape.core.config import Settings, get_settings
from uniscape.infrastructure.database.session import get_engine
from uniscape.infrastructure.notifications import LoggingNotificationSender
from uniscape.modules.common.locks import KeyedLockRegistry
from uniscape.modules.notifications import NotificationDispatcher, NotificationSender


@dataclass(slots=True)
class ApplicationContainer:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    notifier: NotificationDispatcher
    locks: KeyedLockRegistry = field(default_factory=KeyedLockRegistry)

    @classmethod
    def build(cls, settings: Settings, sender: NotificationSender | None = None) -> "ApplicationContainer":
        dispatcher = NotificationDispatcher(
            sender or LoggingNotificationSender(),
            enabled=settings.notifications.enabled,
        )
        return cls(settings=settings, notifier=dispatcher)

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine()


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer.build(get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]

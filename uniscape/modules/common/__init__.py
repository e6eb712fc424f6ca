"""Shared building blocks for the core modules."""

from .clock import ensure_utc, utcnow
from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__ as _exception_names
from .locks import KeyedLockRegistry, account_key, item_key
from .unit_of_work import atomic

__all__ = [
    *_exception_names,
    "KeyedLockRegistry",
    "account_key",
    "item_key",
    "atomic",
    "ensure_utc",
    "utcnow",
]

"""Inventory domain services and models."""

from .models import (
    InventoryItem,
    ItemBooker,
    ItemCreateInput,
    ItemKind,
    ItemStatus,
    ItemUpdateInput,
    UNSET,
)
from .service import InventoryService

__all__ = [
    "InventoryItem",
    "ItemBooker",
    "ItemCreateInput",
    "ItemKind",
    "ItemStatus",
    "ItemUpdateInput",
    "InventoryService",
    "UNSET",
]

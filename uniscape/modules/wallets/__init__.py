"""Wallet domain exports"""

from .models import EntryStatus, EntryType, LedgerEntryRecord, WalletSnapshot
from .service import WalletService

__all__ = [
    "EntryStatus",
    "EntryType",
    "LedgerEntryRecord",
    "WalletSnapshot",
    "WalletService",
]
